"""Node.js built-in module names.

Built-ins resolve to nothing on disk. With ``builtin_modules`` enabled the
resolver reports them as built-ins and the graph builder skips them silently.
"""

NODE_BUILTINS = frozenset(
    {
        "assert",
        "assert/strict",
        "async_hooks",
        "buffer",
        "child_process",
        "cluster",
        "console",
        "constants",
        "crypto",
        "dgram",
        "diagnostics_channel",
        "dns",
        "dns/promises",
        "domain",
        "events",
        "fs",
        "fs/promises",
        "http",
        "http2",
        "https",
        "inspector",
        "inspector/promises",
        "module",
        "net",
        "os",
        "path",
        "path/posix",
        "path/win32",
        "perf_hooks",
        "process",
        "punycode",
        "querystring",
        "readline",
        "readline/promises",
        "repl",
        "stream",
        "stream/consumers",
        "stream/promises",
        "stream/web",
        "string_decoder",
        "sys",
        "timers",
        "timers/promises",
        "tls",
        "trace_events",
        "tty",
        "url",
        "util",
        "util/types",
        "v8",
        "vm",
        "wasi",
        "worker_threads",
        "zlib",
    }
)

# Only reachable through the "node:" scheme
_SCHEME_ONLY = frozenset({"sea", "sqlite", "test", "test/reporters"})


def is_builtin(specifier: str) -> bool:
    """True for ``fs``, ``fs/promises``, ``node:path``, ``node:test`` and friends."""
    if specifier.startswith("node:"):
        name = specifier[len("node:") :]
        return name in NODE_BUILTINS or name in _SCHEME_ONLY
    return specifier in NODE_BUILTINS
