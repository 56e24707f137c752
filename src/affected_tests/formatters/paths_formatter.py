"""Paths formatter: affected test files only, one per line."""

from typing import Optional

from ..models import AffectedResult
from .base import BaseFormatter, display_path


class PathsFormatter(BaseFormatter):
    """Render just file paths, suitable for piping into a test runner."""

    def render(self, result: AffectedResult, root: Optional[str] = None) -> None:
        text = self.format(result, root)
        if text:
            print(text)

    def format(self, result: AffectedResult, root: Optional[str] = None) -> str:
        return "\n".join(sorted(display_path(f, root) for f in result.files))
