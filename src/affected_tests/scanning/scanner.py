"""Syntactic import scanner for JavaScript and TypeScript sources.

Each file is parsed with tree-sitter and the import queries in ``queries/``
are matched over the tree, so comments, strings, regular expressions and
method names can never be mistaken for imports, while calls nested anywhere
in code (template substitutions included) are found.

Recognised static forms:
    import x from 's'          import 's'
    import {a} from 's'        import * as x from 's'
    import type {T} from 's'   import x = require('s')
    export {a} from 's'        export * from 's'
    import('s')                import(`s`)
    require('s')

``import(expr)`` / ``require(expr)`` with any other argument is recorded as
a ComputedImport and never becomes an edge. A file with syntax errors still
yields every import the parser recovered, plus a SyntaxIssue.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from ..exceptions import FileAccessError
from ..file_ops import safe_read_file
from ..logging_config import get_logger
from ..models import UnreadableFile
from .models import ComputedImport, ScanResult, Specifier, SyntaxIssue
from .treesitter_parser import TreeSitterParser, detect_language

logger = get_logger(__name__)

SOURCE_EXTENSIONS = frozenset({".js", ".jsx", ".mjs", ".cjs", ".ts", ".tsx", ".mts", ".cts"})

# Bumped whenever extraction output can change for the same input
SCANNER_VERSION = "2"

_MAX_EXPRESSION_CHARS = 80

# query capture prefix -> Specifier.kind
_STATIC_KINDS = {"import": "import", "export": "export", "import_require": "require"}
_CALL_KINDS = {"dynamic": "dynamic-import", "require": "require"}


def is_scannable(path: str) -> bool:
    """True for JavaScript/TypeScript sources; anything else is a graph leaf."""
    return os.path.splitext(path)[1].lower() in SOURCE_EXTENSIONS


def _text(node: Any) -> str:
    return node.text.decode("utf-8", errors="replace")


def _line(node: Any) -> int:
    return node.start_point[0] + 1


def _literal(node: Any) -> Optional[str]:
    """Value of a string or substitution-free template literal, else None."""
    if node.type == "string":
        return _text(node)[1:-1]
    if node.type == "template_string" and not any(
        child.type == "template_substitution" for child in node.named_children
    ):
        return _text(node)[1:-1]
    return None


def _syntax_issue(root: Any) -> Optional[SyntaxIssue]:
    if not root.has_error:
        return None
    broken = []
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            broken.append(node)
            continue
        stack.extend(child for child in node.children if child.has_error or child.is_missing)
    if not broken:
        broken.append(root)

    first = min(broken, key=lambda node: node.start_byte)
    detail = f"missing {first.type!r}" if first.is_missing else "unexpected syntax"
    if len(broken) > 1:
        detail += f" and {len(broken) - 1} more"
    return SyntaxIssue(line=_line(first), detail=detail)


class SourceScanner:
    """Extracts import specifiers from JavaScript/TypeScript files.

    Attributes:
        max_file_size: Files larger than this (bytes) are unreadable
        read_timeout: Per-file read timeout in seconds
        parser: Tree-sitter wrapper; safe to share between threads
    """

    def __init__(
        self,
        max_file_size: Optional[int] = None,
        read_timeout: Optional[int] = 10,
        parser: Optional[TreeSitterParser] = None,
    ):
        self.max_file_size = max_file_size
        self.read_timeout = read_timeout
        self.parser = parser or TreeSitterParser()

    def scan(self, path: str) -> ScanResult:
        """Read and scan one file. Never raises for I/O problems.

        Unreadable files come back with ``error`` set and no specifiers.
        """
        try:
            text = safe_read_file(
                path, max_size=self.max_file_size, timeout_seconds=self.read_timeout
            )
        except FileAccessError as e:
            logger.debug(f"Unreadable {path}: {e.reason}")
            return ScanResult(path=path, error=UnreadableFile(path=path, cause=e.reason))
        return self.scan_text(text, path)

    def scan_text(
        self, text: str, path: str = "<string>", language: Optional[str] = None
    ) -> ScanResult:
        """Scan source text; the grammar follows ``path``'s suffix unless given."""
        language = language or detect_language(path)
        tree = self.parser.parse(text.encode("utf-8"), language)
        result = ScanResult(path=path)

        issue = _syntax_issue(tree.root_node)
        if issue is not None:
            logger.debug(f"Syntax errors in {path} from line {issue.line}")
            result.issues.append(issue)

        found: list[tuple[int, Specifier]] = []
        computed: list[tuple[int, ComputedImport]] = []
        for _pattern, captures in self.parser.matches(tree, language):
            for prefix, kind in _STATIC_KINDS.items():
                sources = captures.get(f"{prefix}.source")
                if sources:
                    statement = captures[prefix][0]
                    value = _literal(sources[0]) or ""
                    found.append((statement.start_byte, Specifier(value, _line(statement), kind)))
            for prefix, kind in _CALL_KINDS.items():
                arguments = captures.get(f"{prefix}.arguments")
                if not arguments:
                    continue
                callee = captures.get(f"{prefix}.callee")
                if callee and _text(callee[0]) != "require":
                    continue
                self._call(captures[prefix][0], arguments[0], kind, found, computed, result)

        result.specifiers = [spec for _, spec in sorted(found, key=lambda item: item[0])]
        result.computed = [c for _, c in sorted(computed, key=lambda item: item[0])]
        return result

    def _call(
        self,
        call: Any,
        arguments: Any,
        kind: str,
        found: list[tuple[int, Specifier]],
        computed: list[tuple[int, ComputedImport]],
        result: ScanResult,
    ) -> None:
        """Handle one ``import(...)`` / ``require(...)`` call node."""
        line = _line(call)
        args = [child for child in arguments.named_children if child.type != "comment"]
        if not args:
            callee = _text(call.child_by_field_name("function"))
            result.issues.append(SyntaxIssue(line=line, detail=f"{callee}() without an argument"))
            return

        value = _literal(args[0])
        if value is not None:
            found.append((call.start_byte, Specifier(value, line, kind)))
            return

        expression = _text(arguments)[1:-1].strip()
        if len(expression) > _MAX_EXPRESSION_CHARS:
            expression = expression[: _MAX_EXPRESSION_CHARS - 3] + "..."
        computed.append((call.start_byte, ComputedImport(line=line, kind=kind, expression=expression)))
