"""
Input validation utilities.

Owner and repository names end up as directory names under the mirror
root, so they are restricted to a path-safe character set. Refs are
passed to git as arguments and must not look like options.
"""

import re
from typing import Optional, Tuple

SAFE_NAME_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


def validate_name(value: str) -> Tuple[bool, Optional[str]]:
    """
    Validate an owner or repository name.

    Args:
        value: Name to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not value:
        return False, "Name cannot be empty"

    if value in (".", ".."):
        return False, f"Name cannot be a relative path component: {value}"

    if not SAFE_NAME_PATTERN.match(value):
        return False, f"Name contains unsupported characters: {value}"

    return True, None


def validate_ref(value: str) -> Tuple[bool, Optional[str]]:
    """
    Validate a tag or branch name passed to git on the command line.

    Args:
        value: Ref to validate.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not value:
        return False, "Ref cannot be empty"

    if value.startswith("-"):
        return False, f"Ref cannot start with '-': {value}"

    return True, None
