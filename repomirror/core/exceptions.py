"""
Custom exceptions for repomirror.

Provides a hierarchy of exceptions for the mirroring stages,
enabling precise error handling and clear failure reporting.
"""


class MirrorError(Exception):
    """Base exception for all mirror-related errors."""

    def __init__(self, message: str, stage: str = None, details: dict = None):
        super().__init__(message)
        self.stage = stage
        self.details = details or {}

    def __str__(self):
        base_msg = super().__str__()
        if self.stage:
            return f"[{self.stage}] {base_msg}"
        return base_msg


class MirrorFilesystemError(MirrorError):
    """Raised when the mirror directory cannot be prepared or inspected."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Sync", details=details)


class GitCommandError(MirrorError):
    """Raised when a git subprocess fails to run or exits non-zero."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Git", details=details)

    @property
    def stderr(self) -> str:
        return self.details.get("stderr", "")

    @property
    def returncode(self):
        return self.details.get("returncode")


class GitOutputError(MirrorError):
    """Raised when git output cannot be interpreted."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message, stage="Git", details=details)


class RepositoryValidationError(MirrorError):
    """Raised when an owner or repository name is not usable as a path."""

    def __init__(self, value: str, reason: str):
        super().__init__(
            f"Repository validation failed: {reason}",
            stage="Validation",
            details={"value": value, "reason": reason},
        )


class ServiceNotFoundError(MirrorError):
    """Raised when no repository service is registered under a name."""

    def __init__(self, name: str):
        super().__init__(
            f"No repository service registered as: {name}",
            stage="Registry",
            details={"service": name},
        )
