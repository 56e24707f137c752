"""JSON formatter for affected-tests."""

import json
from typing import Optional

from ..models import AffectedResult
from .base import BaseFormatter


class JsonFormatter(BaseFormatter):
    """Render ``{"files": [...], "errors": [...]}`` with absolute paths."""

    def render(self, result: AffectedResult, root: Optional[str] = None) -> None:
        print(self.format(result, root))

    def format(self, result: AffectedResult, root: Optional[str] = None) -> str:
        data = result.to_dict()
        data["files"] = sorted(data["files"])
        return json.dumps(data, indent=2)
