"""Data models for affected-tests.

ModuleId is the graph key; ResolutionError records are what traversal
collects instead of raising; AffectedResult is what callers receive.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar, Dict, List, NewType, Tuple

from .exceptions.taxonomy import ErrorCode

# Canonical absolute file path (see paths.PathNormalizer)
ModuleId = NewType("ModuleId", str)


@dataclass(frozen=True)
class ResolutionError:
    """Base for non-fatal problems collected while building the graph."""

    kind: ClassVar[str] = "resolution_error"
    code: ClassVar[ErrorCode] = ErrorCode.AT100

    @property
    def message(self) -> str:
        return self.kind

    def to_json(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"kind": self.kind, "code": self.code.value, "message": self.message}
        for key, value in asdict(self).items():
            data[key] = list(value) if isinstance(value, tuple) else value
        return data

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


@dataclass(frozen=True)
class UnresolvedSpecifier(ResolutionError):
    """A static import that could not be mapped to a file."""

    kind: ClassVar[str] = "unresolved_specifier"
    code: ClassVar[ErrorCode] = ErrorCode.AT100

    specifier: str
    importer: str
    reason: str = ""

    @property
    def message(self) -> str:
        return f"Cannot find module '{self.specifier}' imported from {self.importer}"


@dataclass(frozen=True)
class UnreadableFile(ResolutionError):
    """A module in the graph whose contents could not be read or scanned."""

    kind: ClassVar[str] = "unreadable_file"
    code: ClassVar[ErrorCode] = ErrorCode.AT101

    path: str
    cause: str

    @property
    def message(self) -> str:
        return f"Cannot read file: {self.path} ({self.cause})"


@dataclass(frozen=True)
class DynamicSpecifier(ResolutionError):
    """An import()/require() whose argument is computed at runtime.

    Never adds an edge; reported so callers know the closure may be incomplete.
    """

    kind: ClassVar[str] = "dynamic_specifier"
    code: ClassVar[ErrorCode] = ErrorCode.AT102

    importer: str
    line: int
    expression: str

    @property
    def message(self) -> str:
        return f"Computed import at {self.importer}:{self.line} cannot be resolved statically"


@dataclass(frozen=True)
class MalformedSource(ResolutionError):
    """A scanned file the parser could only partly understand.

    Imports after the broken region may be missing from the graph.
    """

    kind: ClassVar[str] = "malformed_source"
    code: ClassVar[ErrorCode] = ErrorCode.AT104

    path: str
    line: int
    detail: str

    @property
    def message(self) -> str:
        return f"Syntax error in {self.path}:{self.line} ({self.detail}); imports may be incomplete"


@dataclass(frozen=True)
class CyclicButHandled(ResolutionError):
    """Informational: an import cycle was traversed. Not a failure."""

    kind: ClassVar[str] = "cyclic_but_handled"
    code: ClassVar[ErrorCode] = ErrorCode.AT103

    modules: Tuple[str, ...]

    @property
    def message(self) -> str:
        return f"Import cycle through {len(self.modules)} module(s): {' -> '.join(self.modules)}"


@dataclass
class AffectedResult:
    """Affected subset of the test entries plus every collected error.

    ``files`` holds canonical paths and is unordered; ``errors`` is in
    traversal order.
    """

    files: List[str] = field(default_factory=list)
    errors: List[ResolutionError] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "files": list(self.files),
            "errors": [e.to_json() for e in self.errors],
        }

    def errors_of(self, kind: str) -> List[ResolutionError]:
        return [e for e in self.errors if e.kind == kind]
