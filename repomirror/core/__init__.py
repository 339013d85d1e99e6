"""
Core module containing configuration, the step pipeline and exceptions.
"""

from repomirror.core.config import Config, AppConfig, MirrorConfig, BitbucketConfig
from repomirror.core.pipeline import Pipeline, PipelineState, StepStatus
from repomirror.core.exceptions import (
    MirrorError,
    MirrorFilesystemError,
    GitCommandError,
    GitOutputError,
    RepositoryValidationError,
    ServiceNotFoundError,
)

__all__ = [
    "Config",
    "AppConfig",
    "MirrorConfig",
    "BitbucketConfig",
    "Pipeline",
    "PipelineState",
    "StepStatus",
    "MirrorError",
    "MirrorFilesystemError",
    "GitCommandError",
    "GitOutputError",
    "RepositoryValidationError",
    "ServiceNotFoundError",
]
