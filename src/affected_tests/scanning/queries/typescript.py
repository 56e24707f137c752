"""Tree-sitter queries for TypeScript and TSX.

Same forms as JavaScript plus ``import x = require('s')``.
"""

from .javascript import CALL_QUERY, STATIC_QUERY

IMPORT_REQUIRE_QUERY = """
(import_require_clause
    (string) @import_require.source
) @import_require
"""

IMPORT_QUERY = STATIC_QUERY + IMPORT_REQUIRE_QUERY + CALL_QUERY
