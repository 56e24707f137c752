"""Configuration loading and management for affected-tests.

Configuration sources are merged in priority order:
    1. Defaults (defined in AffectedConfig / ResolverConfig)
    2. Global config (~/.affected-tests.toml)
    3. Project config (./affected-tests.toml)
    4. Explicit config file
    5. Environment variables (AFFECTED_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(workers=4)
    >>> config.workers
    4
    >>> config.resolver.extensions
    ('.js', '.jsx', '.ts', '.tsx', '.mjs', '.cjs', '.json')
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Literal, Mapping, Optional, Tuple, get_type_hints

from .exceptions import InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs", ".json")

# camelCase spellings accepted by ResolverConfig.from_mapping()
_CAMEL_KEYS = {
    "moduleDirectories": "module_directories",
    "rootDir": "root_dir",
    "mainFields": "main_fields",
    "builtinModules": "builtin_modules",
    "caseSensitive": "case_sensitive",
    "traverseModuleDirectories": "traverse_module_directories",
    "modules": "module_directories",
}


def _as_tuple(value: Any, key: str) -> Tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    try:
        return tuple(value)
    except TypeError:
        raise InvalidConfigError(key, value, "expected a string or a list of strings")


@dataclass(frozen=True)
class ResolverConfig:
    """How import specifiers map to files.

    Constructed once per invocation and read-only thereafter.

    Attributes:
        extensions: Suffixes tried in order when the literal path is not a
            file. Empty disables probing (only literal and index matches).
        module_directories: Directory names searched, walking upward from the
            importer, for bare specifiers (e.g. ``node_modules``). Absolute
            entries are searched as-is after the upward walk.
        root_dir: Project root. Upward searches stop here.
        main_fields: package.json fields naming a directory module's entry.
        alias: ``(prefix, (target, ...))`` pairs; targets are relative to
            ``root_dir``. ``prefix`` matches exactly or as ``prefix/...``.
        tsconfig: Optional tsconfig.json whose ``baseUrl``/``paths`` apply.
        builtin_modules: Skip Node built-ins (``fs``, ``node:path``) silently.
        symlinks: Resolve found files to their real path.
        case_sensitive: None means detect from the file system at root_dir.
        traverse_module_directories: Scan files inside module directories
            instead of treating them as graph leaves.
    """

    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    module_directories: Tuple[str, ...] = ("node_modules",)
    root_dir: str = "."
    main_fields: Tuple[str, ...] = ("main",)
    alias: Tuple[Tuple[str, Tuple[str, ...]], ...] = ()
    tsconfig: Optional[str] = None
    builtin_modules: bool = True
    symlinks: bool = True
    case_sensitive: Optional[bool] = None
    traverse_module_directories: bool = False

    def __post_init__(self) -> None:
        """Coerce list inputs to tuples and validate."""
        object.__setattr__(self, "extensions", _as_tuple(self.extensions, "extensions"))
        object.__setattr__(
            self, "module_directories", _as_tuple(self.module_directories, "module_directories")
        )
        object.__setattr__(self, "main_fields", _as_tuple(self.main_fields, "main_fields"))
        if isinstance(self.alias, Mapping):
            object.__setattr__(self, "alias", _alias_pairs(self.alias))

        for ext in self.extensions:
            if not isinstance(ext, str) or not ext.startswith(".") or len(ext) < 2:
                raise ValueError(f"extensions must look like '.js', got {ext!r}")
        for name in self.module_directories:
            if not isinstance(name, str) or not name:
                raise ValueError("module_directories entries must be non-empty strings")
        if not self.root_dir:
            raise ValueError("root_dir must not be empty")

    @property
    def alias_map(self) -> dict[str, Tuple[str, ...]]:
        return dict(self.alias)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> ResolverConfig:
        """Build from a plain mapping, accepting camelCase keys.

        Raises:
            InvalidConfigError: On unknown keys or invalid values
        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _CAMEL_KEYS.get(key, key)
            if name not in known:
                raise InvalidConfigError(key, value, "unknown resolver option")
            if value is None and name != "case_sensitive" and name != "tsconfig":
                continue
            kwargs[name] = value
        try:
            return cls(**kwargs)
        except (TypeError, ValueError) as e:
            raise InvalidConfigError("resolver", dict(options), str(e))


def _alias_pairs(alias: Mapping[str, Any]) -> Tuple[Tuple[str, Tuple[str, ...]], ...]:
    return tuple((str(k), _as_tuple(v, f"alias.{k}")) for k, v in alias.items())


@dataclass(frozen=True)
class AffectedConfig:
    """Configuration for one affected-test computation.

    Attributes:
        Resolution:
            resolver: Module resolution rules (``[resolver]`` TOML table)

        Performance tuning:
            workers: Parallel scan workers (None or 1 = sequential)
            read_timeout_seconds: Per-file read timeout where supported
            max_file_size_mb: Larger files are reported unreadable

        Diagnostics:
            report_cycles: Emit CyclicButHandled records for import cycles
            verbosity: Logging verbosity level

        Caching (cross-call, optional):
            cache_enabled: Reuse per-file scan results between runs
            cache_dir: Directory for cache storage
            cache_ttl_hours: Cache time-to-live in hours
    """

    resolver: ResolverConfig = field(default_factory=ResolverConfig)

    workers: Optional[int] = None
    read_timeout_seconds: int = 10
    max_file_size_mb: float = 5.0

    report_cycles: bool = False
    verbosity: Verbosity = "normal"

    cache_enabled: bool = False
    cache_dir: str = ".affected-cache"
    cache_ttl_hours: int = 24

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.read_timeout_seconds < 1:
            raise ValueError("read_timeout_seconds must be at least 1")
        if self.max_file_size_mb <= 0:
            raise ValueError("max_file_size_mb must be positive")
        if self.cache_ttl_hours < 0:
            raise ValueError("cache_ttl_hours must be non-negative")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError(f"verbosity must be quiet, normal or verbose, got {self.verbosity!r}")

    @property
    def max_file_size_bytes(self) -> int:
        return int(self.max_file_size_mb * 1024 * 1024)


def load_config(config_file: Optional[Path] = None, **overrides) -> AffectedConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). Resolver
            fields may be passed at top level (``extensions=[...]``) or as
            ``resolver={...}``.

    Returns:
        Validated AffectedConfig instance

    Raises:
        InvalidConfigError: If a config file or value is invalid

    Example:
        >>> config = load_config(config_file=Path("ci.toml"), report_cycles=True)
    """
    merged: dict = {}
    resolver_options: dict = {}

    def _merge(data: Mapping[str, Any]) -> None:
        data = dict(data)
        resolver_table = data.pop("resolver", None)
        if isinstance(resolver_table, ResolverConfig):
            merged["resolver"] = resolver_table
        elif resolver_table is not None:
            if not isinstance(resolver_table, Mapping):
                raise InvalidConfigError("resolver", resolver_table, "expected a table")
            resolver_options.update(resolver_table)
        merged.update(data)

    global_config = Path.home() / ".affected-tests.toml"
    if global_config.exists():
        _merge(_load_toml_file(global_config))

    project_config = Path.cwd() / "affected-tests.toml"
    if project_config.exists():
        _merge(_load_toml_file(project_config))

    if config_file is not None:
        if not Path(config_file).exists():
            raise InvalidConfigError("config_file", str(config_file), "file not found")
        _merge(_load_toml_file(Path(config_file)))

    _merge(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    resolver_fields = {f.name for f in fields(ResolverConfig)}
    for key in list(overrides):
        if _CAMEL_KEYS.get(key, key) in resolver_fields:
            resolver_options[key] = overrides.pop(key)
    _merge({k: v for k, v in overrides.items() if v is not None})

    resolver = merged.pop("resolver", None)
    if isinstance(resolver, ResolverConfig):
        merged["resolver"] = resolver
    else:
        merged["resolver"] = ResolverConfig.from_mapping(resolver_options)

    try:
        return AffectedConfig(**merged)
    except (TypeError, ValueError) as e:
        raise InvalidConfigError("config", ", ".join(sorted(merged)), str(e))


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from AFFECTED_* environment variables.

    Engine fields use ``AFFECTED_<FIELD>`` (e.g. AFFECTED_WORKERS). Resolver
    fields use ``AFFECTED_RESOLVER_<FIELD>``; list fields are comma-separated
    (AFFECTED_RESOLVER_EXTENSIONS=.ts,.js).

    Returns:
        Dict of field_name -> parsed_value, resolver values under "resolver".
    """
    result: dict[str, Any] = {}

    engine_hints = get_type_hints(AffectedConfig)
    for f in fields(AffectedConfig):
        if f.name == "resolver":
            continue
        env_key = f"AFFECTED_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            parsed = _parse_env_value(env_value, engine_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[f.name] = parsed

    resolver_hints = get_type_hints(ResolverConfig)
    resolver: dict[str, Any] = {}
    for f in fields(ResolverConfig):
        env_key = f"AFFECTED_RESOLVER_{f.name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None or f.name == "alias":
            continue
        try:
            parsed = _parse_env_value(env_value, resolver_hints[f.name])
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            resolver[f.name] = parsed
    if resolver:
        result["resolver"] = resolver

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)
    args = getattr(type_hint, "__args__", ())

    # Optional[X] is Union[X, None]
    if type(None) in args:
        non_none = [t for t in args if t is not type(None)]
        if non_none:
            type_hint = non_none[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return tuple(part.strip() for part in value.split(",") if part.strip())

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        InvalidConfigError: If TOML parsing fails
    """
    try:
        import tomllib
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise InvalidConfigError("config_file", str(path), str(e))
