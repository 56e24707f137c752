"""Scan result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from ..models import (
    DynamicSpecifier,
    MalformedSource,
    ModuleId,
    ResolutionError,
    UnreadableFile,
)


@dataclass(frozen=True)
class Specifier:
    """A static import specifier as written in the source.

    Attributes:
        value: Raw specifier text (``./util``, ``react``)
        line: 1-indexed line of the import statement
        kind: import | export | dynamic-import | require
    """

    value: str
    line: int
    kind: str = "import"


@dataclass(frozen=True)
class ComputedImport:
    """An import()/require() whose argument is not a plain string."""

    line: int
    kind: str
    expression: str

    def to_error(self, importer: str) -> DynamicSpecifier:
        return DynamicSpecifier(importer=importer, line=self.line, expression=self.expression)


@dataclass(frozen=True)
class SyntaxIssue:
    """First syntax error in a file and how many the parser recovered from."""

    line: int
    detail: str

    def to_error(self, path: str) -> MalformedSource:
        return MalformedSource(path=path, line=self.line, detail=self.detail)


Outcome = Union[ModuleId, ResolutionError, None]


@dataclass
class ScanResult:
    """Specifiers found in one file, in order of first appearance.

    Duplicates are kept; they resolve to the same ModuleId and the graph
    stores a single edge. ``outcomes`` is filled by the graph builder,
    parallel to ``specifiers``: a ModuleId, a ResolutionError, or None for
    skipped built-ins.
    """

    path: str
    specifiers: list[Specifier] = field(default_factory=list)
    computed: list[ComputedImport] = field(default_factory=list)
    issues: list[SyntaxIssue] = field(default_factory=list)
    error: Optional[UnreadableFile] = None
    outcomes: list[Outcome] = field(default_factory=list)

    @property
    def readable(self) -> bool:
        return self.error is None

    @property
    def values(self) -> list[str]:
        return [s.value for s in self.specifiers]

    def annotate(self, index: int, outcome: Outcome) -> None:
        if len(self.outcomes) < len(self.specifiers):
            self.outcomes.extend([None] * (len(self.specifiers) - len(self.outcomes)))
        self.outcomes[index] = outcome

    def resolved(self) -> Iterator[tuple[Specifier, ModuleId]]:
        for spec, outcome in zip(self.specifiers, self.outcomes):
            if isinstance(outcome, str):
                yield spec, outcome

    def to_cache(self) -> dict:
        return {
            "specifiers": [(s.value, s.line, s.kind) for s in self.specifiers],
            "computed": [(c.line, c.kind, c.expression) for c in self.computed],
            "issues": [(i.line, i.detail) for i in self.issues],
        }

    @classmethod
    def from_cache(cls, path: str, data: dict) -> ScanResult:
        return cls(
            path=path,
            specifiers=[Specifier(v, line, kind) for v, line, kind in data["specifiers"]],
            computed=[ComputedImport(line, kind, expr) for line, kind, expr in data["computed"]],
            issues=[SyntaxIssue(line, detail) for line, detail in data["issues"]],
        )
