"""tsconfig.json ``compilerOptions.paths`` support.

tsconfig files are JSON with comments and trailing commas. ``extends`` is
followed for relative paths; package-style ``extends`` is ignored.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional

from ..exceptions import InvalidConfigError
from ..logging_config import get_logger

logger = get_logger(__name__)

_MAX_EXTENDS_DEPTH = 16


@dataclass(frozen=True)
class PathMapping:
    """One ``paths`` entry: ``"@app/*": ["src/app/*"]``."""

    pattern: str
    targets: tuple[str, ...]

    @property
    def prefix(self) -> str:
        return self.pattern.split("*", 1)[0]

    @property
    def suffix(self) -> str:
        return self.pattern.split("*", 1)[1] if "*" in self.pattern else ""

    def match(self, specifier: str) -> Optional[str]:
        """Text captured by ``*``, ``""`` for exact patterns, None on mismatch."""
        if "*" not in self.pattern:
            return "" if specifier == self.pattern else None
        prefix, suffix = self.prefix, self.suffix
        if (
            len(specifier) >= len(prefix) + len(suffix)
            and specifier.startswith(prefix)
            and specifier.endswith(suffix)
        ):
            return specifier[len(prefix) : len(specifier) - len(suffix)]
        return None


@dataclass
class TsconfigPaths:
    """Resolved ``baseUrl`` plus ordered path mappings."""

    base_url: Optional[str] = None
    paths_base: Optional[str] = None
    mappings: list[PathMapping] = field(default_factory=list)

    def candidates(self, specifier: str) -> Iterator[str]:
        """Absolute candidate bases for a bare specifier.

        Mappings are tried longest-prefix first, like the TypeScript compiler;
        ``baseUrl`` itself is tried last.
        """
        matched: list[tuple[PathMapping, str]] = []
        for mapping in self.mappings:
            star = mapping.match(specifier)
            if star is not None:
                matched.append((mapping, star))
        matched.sort(key=lambda item: len(item[0].prefix), reverse=True)

        base = self.paths_base or self.base_url or ""
        for mapping, star in matched:
            for target in mapping.targets:
                yield os.path.normpath(os.path.join(base, target.replace("*", star, 1)))
        if self.base_url is not None:
            yield os.path.normpath(os.path.join(self.base_url, specifier))


def _drop_trailing_comma(out: list[str]) -> None:
    # a closing quote would come last if the comma were inside a string
    j = len(out) - 1
    while j >= 0 and out[j].isspace():
        j -= 1
    if j >= 0 and out[j] == ",":
        del out[j]


def strip_json_comments(text: str) -> str:
    """Remove comments and trailing commas, leaving string contents alone."""
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
        elif ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            i = n if end == -1 else end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
        else:
            if ch in "}]":
                _drop_trailing_comma(out)
            out.append(ch)
            i += 1
    return "".join(out)


def _read_tsconfig(path: str) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.loads(strip_json_comments(f.read()))
    except (OSError, ValueError) as e:
        raise InvalidConfigError("tsconfig", path, str(e))
    if not isinstance(data, dict):
        raise InvalidConfigError("tsconfig", path, "top level must be an object")
    return data


def load_tsconfig_paths(path: str) -> TsconfigPaths:
    """Load ``baseUrl``/``paths`` from a tsconfig file, following ``extends``.

    Options in the extending file override the base. ``paths`` without
    ``baseUrl`` are relative to the tsconfig that declares them.

    Raises:
        InvalidConfigError: If a tsconfig in the chain cannot be read
    """
    chain: list[tuple[str, dict[str, Any]]] = []
    current: Optional[str] = os.path.abspath(path)
    while current is not None and len(chain) < _MAX_EXTENDS_DEPTH:
        data = _read_tsconfig(current)
        chain.append((current, data))
        extends = data.get("extends")
        current = None
        if isinstance(extends, str) and extends.startswith("."):
            parent = os.path.normpath(os.path.join(os.path.dirname(chain[-1][0]), extends))
            if not parent.endswith(".json") and not os.path.isfile(parent):
                parent += ".json"
            current = parent
        elif extends:
            logger.debug(f"Not following package tsconfig extends {extends!r}")

    base_url: Optional[str] = None
    paths: Optional[dict[str, Any]] = None
    paths_dir: Optional[str] = None
    # Base first so the extending file wins
    for config_path, data in reversed(chain):
        options = data.get("compilerOptions") or {}
        config_dir = os.path.dirname(config_path)
        if "baseUrl" in options:
            base_url = os.path.normpath(os.path.join(config_dir, options["baseUrl"]))
        if "paths" in options:
            paths = options["paths"]
            paths_dir = config_dir

    mappings: list[PathMapping] = []
    for pattern, targets in (paths or {}).items():
        if isinstance(targets, str):
            targets = [targets]
        mappings.append(PathMapping(pattern=pattern, targets=tuple(targets)))

    result = TsconfigPaths(
        base_url=base_url, paths_base=base_url or paths_dir, mappings=mappings
    )
    logger.debug(f"tsconfig {path}: baseUrl={result.base_url} paths={len(mappings)}")
    return result
