"""Public entry point: which test entries does a change set affect?

Example:
    >>> result = get_affected(
    ...     ["src/a.spec.js", "src/b.spec.js"],
    ...     ["src/util.js"],
    ...     {"extensions": [".js", ".ts"], "moduleDirectories": ["node_modules"], "rootDir": "."},
    ... )
    >>> sorted(result.files)
    ['/abs/src/a.spec.js']
"""

from __future__ import annotations

import os
import threading
from typing import Any, Mapping, Optional, Sequence, Union

from .cache import ScanCache
from .config import AffectedConfig, ResolverConfig
from .exceptions import InvalidConfigError, InvalidInputError, InvalidPathError
from .graph import build_dependency_graph, compute_affected
from .graph.affected import Strategy
from .graph.builder import ScanStore
from .logging_config import get_logger
from .models import AffectedResult
from .resolution import ModuleResolver, ResolutionCache
from .scanning import SourceScanner

logger = get_logger(__name__)

ResolverOptions = Union[ResolverConfig, Mapping[str, Any], None]


def _resolver_config(options: ResolverOptions, config: AffectedConfig) -> ResolverConfig:
    if options is None:
        return config.resolver
    if isinstance(options, ResolverConfig):
        return options
    if isinstance(options, Mapping):
        return ResolverConfig.from_mapping(options)
    raise InvalidConfigError("resolver_options", options, "expected ResolverConfig or a mapping")


def _validate(test_entry_files: Sequence[str], resolver_config: ResolverConfig) -> None:
    """Fatal checks on the top-level arguments, before any traversal."""
    if isinstance(test_entry_files, (str, bytes)):
        raise InvalidInputError(
            "test_entry_files must be a sequence of paths, not a single string",
            details={"value": str(test_entry_files)},
        )
    if not test_entry_files:
        raise InvalidInputError("No test entry files given")
    for path in test_entry_files:
        if not os.path.exists(path):
            raise InvalidPathError(path, "entry file does not exist")
        if not os.path.isfile(path):
            raise InvalidPathError(path, "entry is not a regular file")
    if not os.path.isdir(resolver_config.root_dir):
        raise InvalidPathError(resolver_config.root_dir, "root_dir is not an existing directory")


def get_affected(
    test_entry_files: Sequence[str],
    changed_files: Sequence[str],
    resolver_options: ResolverOptions = None,
    *,
    config: Optional[AffectedConfig] = None,
    workers: Optional[int] = None,
    cancel_event: Optional[threading.Event] = None,
    scan_cache: Optional[ScanStore] = None,
    resolution_cache: Optional[ResolutionCache] = None,
    report_cycles: Optional[bool] = None,
    strategy: Strategy = "reverse",
) -> AffectedResult:
    """Return the test entries whose static import closure contains a changed file.

    Args:
        test_entry_files: Non-empty sequence of existing test files
        changed_files: Changed paths; they need not exist any more
        resolver_options: ResolverConfig or a mapping of its fields
            (camelCase accepted). Defaults to ``config.resolver``.
        config: Engine settings; defaults to AffectedConfig()
        workers: Parallel scan workers, overrides ``config.workers``
        cancel_event: Set it from another thread to abort the walk
        scan_cache: Cross-call store of scan results; when omitted and
            ``config.cache_enabled`` is set a ScanCache is opened
        resolution_cache: Caller-owned resolution memo to reuse across calls
        report_cycles: Overrides ``config.report_cycles``
        strategy: Affected-set strategy, "reverse" or "forward"

    Returns:
        AffectedResult; ``files`` are canonical paths of affected entries,
        ``errors`` every record collected while building the graph

    Raises:
        InvalidInputError: Empty entry list, missing entry file, missing
            root directory or malformed options. Nothing has been scanned.
        ComputationCancelled: ``cancel_event`` was set mid-walk
    """
    config = config or AffectedConfig()
    resolver_config = _resolver_config(resolver_options, config)
    _validate(test_entry_files, resolver_config)

    resolver = ModuleResolver(resolver_config, cache=resolution_cache)
    scanner = SourceScanner(
        max_file_size=config.max_file_size_bytes, read_timeout=config.read_timeout_seconds
    )

    owned_cache: Optional[ScanCache] = None
    if scan_cache is None and config.cache_enabled:
        owned_cache = ScanCache(config.cache_dir, config.cache_ttl_hours)
        scan_cache = owned_cache

    logger.info(
        f"Computing affected tests for {len(test_entry_files)} entries, "
        f"{len(changed_files)} changed files (root {resolver.root})"
    )
    try:
        build = build_dependency_graph(
            test_entry_files,
            resolver,
            scanner=scanner,
            workers=workers or config.workers or 1,
            cancel_event=cancel_event,
            scan_store=scan_cache,
            report_cycles=config.report_cycles if report_cycles is None else report_cycles,
        )
    finally:
        if owned_cache is not None:
            owned_cache.close()

    changed = {resolver.canonicalize(path) for path in changed_files}
    return compute_affected(build.graph, build.entries, changed, build.errors, strategy)
