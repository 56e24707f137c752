"""Base formatter interface for affected-tests output rendering."""

import os
from abc import ABC, abstractmethod
from typing import Optional

from ..models import AffectedResult


class BaseFormatter(ABC):
    """Abstract base class for output formatters."""

    @abstractmethod
    def render(self, result: AffectedResult, root: Optional[str] = None) -> None:
        """Write the result to stdout."""

    @abstractmethod
    def format(self, result: AffectedResult, root: Optional[str] = None) -> str:
        """Return formatted string representation of the result."""


def display_path(path: str, root: Optional[str]) -> str:
    """``path`` relative to ``root`` when it lies beneath it, else unchanged."""
    if root is None:
        return path
    relative = os.path.relpath(path, root)
    return path if relative.startswith("..") else relative
