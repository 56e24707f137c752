"""Path canonicalization for graph keys.

``PathNormalizer.normalize`` is a pure function of its input, the declared
case-sensitivity mode and the working directory captured at construction.
Symlink resolution is I/O and lives in the resolver, which hands real paths
to the normalizer.
"""

from __future__ import annotations

import os
import tempfile
from typing import Optional

from .logging_config import get_logger
from .models import ModuleId

logger = get_logger(__name__)


class PathNormalizer:
    """Turns any path spelling into a canonical ModuleId.

    Attributes:
        case_sensitive: When False, ids are case-folded so ``A.js`` and
            ``a.js`` collapse to one node.
        cwd: Base for relative inputs.
    """

    def __init__(self, case_sensitive: bool = True, cwd: Optional[str] = None):
        self.case_sensitive = case_sensitive
        self.cwd = os.path.normpath(cwd or os.getcwd())

    def absolute(self, path: str) -> str:
        """Absolute, separator- and dot-segment-normalized spelling (case kept)."""
        path = os.fspath(path)
        if os.sep != "/":
            path = path.replace("/", os.sep)
        if not os.path.isabs(path):
            path = os.path.join(self.cwd, path)
        path = os.path.normpath(path)
        # POSIX normpath keeps a leading "//"
        if os.sep == "/" and path.startswith("//"):
            path = "/" + path.lstrip("/")
        return path

    def normalize(self, path: str) -> ModuleId:
        absolute = self.absolute(path)
        if not self.case_sensitive:
            absolute = absolute.casefold()
        return ModuleId(absolute)

    def __repr__(self) -> str:
        return f"PathNormalizer(case_sensitive={self.case_sensitive}, cwd={self.cwd!r})"


def detect_case_sensitivity(directory: str) -> bool:
    """Check whether the file system holding ``directory`` is case-sensitive.

    Creates a temporary file with an upper-case name and checks whether the
    lower-case spelling exists. Falls back to True when the check cannot run.
    """
    try:
        with tempfile.NamedTemporaryFile(prefix="AffectedCase", dir=directory) as marker:
            head, tail = os.path.split(marker.name)
            sensitive = not os.path.exists(os.path.join(head, tail.lower()))
    except OSError as e:
        logger.debug(f"Case-sensitivity check failed in {directory}: {e}")
        return True
    logger.debug(f"File system at {directory} is case-{'sensitive' if sensitive else 'insensitive'}")
    return sensitive


def is_within(path: str, directory: str) -> bool:
    """True if ``path`` equals ``directory`` or lies beneath it."""
    try:
        return os.path.commonpath([path, directory]) == directory
    except ValueError:
        # Different drives on Windows
        return False
