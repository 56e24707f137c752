"""Traversal-time exceptions: file access, resolution, cancellation.

FileAccessError and UnresolvedImportError never escape get_affected();
the graph builder turns them into collected records.
"""

from pathlib import Path
from typing import Sequence, Union

from .base import AffectedTestsError
from .taxonomy import ErrorCode


class AnalysisError(AffectedTestsError):
    """Base class for errors raised while walking the import graph."""

    pass


class FileAccessError(AnalysisError):
    """Raised when a file cannot be accessed or read."""

    code = ErrorCode.AT101

    def __init__(self, filepath: Union[str, Path], reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class UnresolvedImportError(AnalysisError):
    """Raised when a specifier does not map to any file."""

    code = ErrorCode.AT100

    def __init__(self, specifier: str, importer_dir: str, tried: Sequence[str] = ()):
        super().__init__(
            f"Cannot find module '{specifier}'",
            details={"from": importer_dir, "candidates": str(len(tried))},
        )
        self.specifier = specifier
        self.importer_dir = importer_dir
        self.tried = list(tried)


class ComputationCancelled(AnalysisError):
    """Raised when the caller's cancel flag is set between module visits."""

    code = ErrorCode.AT201

    def __init__(self, visited: int):
        super().__init__(
            "Affected-test computation cancelled", details={"modules_visited": str(visited)}
        )
        self.visited = visited
