"""
Utility functions and helpers.
"""

from repomirror.utils.logging_config import setup_logging
from repomirror.utils.validation import validate_name, validate_ref

__all__ = [
    "setup_logging",
    "validate_name",
    "validate_ref",
]
