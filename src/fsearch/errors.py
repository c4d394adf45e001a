"""Custom exception classes and error messages."""

from __future__ import annotations

ERROR_MSG_INVALID_TYPE = "Invalid file type"
ERROR_MSG_INVALID_PERMISSION = "Invalid permission"
ERROR_MSG_NEGATIVE_INDENT = "Indentation must not be negative"


class ConfigLoadError(Exception):
    """Raised when a configuration file cannot be loaded or holds bad values."""


class CriteriaError(ValueError):
    """Raised when a search criterion cannot be parsed."""

    def __init__(self, value: str, reason: str) -> None:
        super().__init__(f"'{value}': {reason}")
        self.value = value
        self.reason = reason


class DirectoryOpenError(OSError):
    """Raised when the root directory of a search cannot be opened."""

    def __init__(self, path: str, cause: OSError) -> None:
        super().__init__(cause.errno, cause.strerror, path)
        self.path = path
        self.cause = cause
