"""Tree-sitter query registry.

Maps grammar names to their import queries.
"""

from __future__ import annotations

from . import javascript, typescript

QUERIES: dict[str, str] = {
    "javascript": javascript.IMPORT_QUERY,
    "typescript": typescript.IMPORT_QUERY,
    "tsx": typescript.IMPORT_QUERY,
}


def get_query(language: str) -> str:
    """Import query for ``language``.

    Raises:
        KeyError: If no grammar of that name is known
    """
    return QUERIES[language]


__all__ = ["QUERIES", "get_query"]
