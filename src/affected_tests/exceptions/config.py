"""Input and configuration exceptions: entry files, paths, settings.

Everything here is fatal and raised before any traversal begins.
"""

from pathlib import Path
from typing import Any, Union

from .base import AffectedTestsError
from .taxonomy import ErrorCode


class InvalidInputError(AffectedTestsError):
    """Raised when the top-level arguments cannot be used at all."""

    code = ErrorCode.AT200


class InvalidPathError(InvalidInputError):
    """Raised when a provided path is missing or of the wrong kind."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(InvalidInputError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value!r}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason
