"""Tree-sitter parser wrapper for the JavaScript-family grammars.

Usage:
    parser = TreeSitterParser()
    tree = parser.parse(code_bytes, "typescript")
    matches = parser.matches(tree, "typescript")
"""

from __future__ import annotations

import os
import threading
from functools import lru_cache
from typing import Any

import tree_sitter
import tree_sitter_javascript
import tree_sitter_typescript

from .queries import get_query

# Grammar per source suffix; anything else parses as tsx, the widest dialect
LANGUAGE_BY_EXTENSION = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".mts": "typescript",
    ".cts": "typescript",
    ".tsx": "tsx",
}
DEFAULT_LANGUAGE = "tsx"

_GRAMMARS = {
    "javascript": tree_sitter_javascript.language,
    "typescript": tree_sitter_typescript.language_typescript,
    "tsx": tree_sitter_typescript.language_tsx,
}

Match = tuple[int, dict[str, list[Any]]]


def detect_language(path: str) -> str:
    return LANGUAGE_BY_EXTENSION.get(os.path.splitext(path)[1].lower(), DEFAULT_LANGUAGE)


@lru_cache(maxsize=None)
def _language(name: str) -> tree_sitter.Language:
    # tree-sitter >= 0.23 grammars hand back a PyCapsule; wrap in Language()
    return tree_sitter.Language(_GRAMMARS[name]())


@lru_cache(maxsize=None)
def _query(name: str) -> tree_sitter.Query:
    return tree_sitter.Query(_language(name), get_query(name))


class TreeSitterParser:
    """Parses sources and runs the import query over the tree.

    Parser objects hold per-parse state, so each thread gets its own.
    Languages and compiled queries are immutable and shared.
    """

    def __init__(self) -> None:
        self._local = threading.local()

    def _parser(self, language: str) -> tree_sitter.Parser:
        parsers = getattr(self._local, "parsers", None)
        if parsers is None:
            parsers = self._local.parsers = {}
        parser = parsers.get(language)
        if parser is None:
            parser = parsers[language] = tree_sitter.Parser(_language(language))
        return parser

    def parse(self, code: bytes, language: str) -> tree_sitter.Tree:
        """Parse ``code``; tree-sitter always returns a tree, with ERROR nodes if needed."""
        if language not in _GRAMMARS:
            raise ValueError(f"Unsupported language {language!r}")
        return self._parser(language).parse(code)

    def matches(self, tree: tree_sitter.Tree, language: str) -> list[Match]:
        """Run the import query; returns ``(pattern_index, {capture: [nodes]})``."""
        # tree-sitter 0.25+: queries execute through a QueryCursor
        cursor = tree_sitter.QueryCursor(_query(language))
        return cursor.matches(tree.root_node)
