"""Tree-sitter queries for JavaScript.

Extracts import sources:
    - ES module imports and re-exports (``import ... from``, ``export ... from``)
    - Dynamic ``import(...)`` calls
    - CommonJS ``require(...)`` calls
"""

# Static sources are captured directly; call arguments are captured whole
# so the scanner can tell plain strings from computed expressions.
STATIC_QUERY = """
(import_statement
    source: (string) @import.source
) @import

(export_statement
    source: (string) @export.source
) @export
"""

CALL_QUERY = """
(call_expression
    function: (import)
    arguments: (arguments) @dynamic.arguments
) @dynamic

(call_expression
    function: (identifier) @require.callee
    arguments: (arguments) @require.arguments
    (#eq? @require.callee "require")
) @require
"""

IMPORT_QUERY = STATIC_QUERY + CALL_QUERY
