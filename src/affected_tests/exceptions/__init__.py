"""Exception hierarchy for affected-tests."""

from .analysis import (
    AnalysisError,
    ComputationCancelled,
    FileAccessError,
    UnresolvedImportError,
)
from .base import AffectedTestsError
from .config import InvalidConfigError, InvalidInputError, InvalidPathError
from .taxonomy import ErrorCode

__all__ = [
    "AffectedTestsError",
    "AnalysisError",
    "ComputationCancelled",
    "FileAccessError",
    "UnresolvedImportError",
    "InvalidInputError",
    "InvalidPathError",
    "InvalidConfigError",
    "ErrorCode",
]
