"""File-system-aware module resolution with Node-style semantics.

Resolution is two ordered rule tables evaluated top to bottom:

    base rules    where a specifier may live
                  (alias -> tsconfig paths -> relative/absolute path
                   -> module directories walking up to root_dir)
    file rules    what to try at each base
                  (literal file -> base + extension -> package.json main
                   -> index + extension)

The first existing regular file wins. Found files are turned into real
paths (when ``symlinks`` is on) and then into ModuleIds, so two import
routes to one physical file collapse to one graph node.
"""

from __future__ import annotations

import os
from typing import Callable, Iterator, Optional

from ..config import ResolverConfig
from ..exceptions import UnresolvedImportError
from ..logging_config import get_logger
from ..models import ModuleId
from ..paths import PathNormalizer, detect_case_sensitivity, is_within
from .builtins import is_builtin
from .cache import ResolutionCache
from .tsconfig import TsconfigPaths, load_tsconfig_paths

logger = get_logger(__name__)


def is_relative(specifier: str) -> bool:
    return specifier in (".", "..") or specifier.startswith(("./", "../"))


def is_path_like(specifier: str) -> bool:
    return is_relative(specifier) or os.path.isabs(specifier)


class ModuleResolver:
    """Maps ``(importer_dir, specifier)`` to a ModuleId.

    Attributes:
        config: Resolution rules
        normalizer: Path canonicalizer shared with the graph builder
        cache: Memo of file-system facts; caller-owned, defaults to a fresh one
        root: Canonical project root bounding upward searches
    """

    def __init__(
        self,
        config: ResolverConfig,
        normalizer: Optional[PathNormalizer] = None,
        cache: Optional[ResolutionCache] = None,
    ):
        self.config = config
        root = os.path.realpath(os.path.abspath(config.root_dir))
        if normalizer is None:
            case_sensitive = config.case_sensitive
            if case_sensitive is None:
                case_sensitive = detect_case_sensitivity(root)
            normalizer = PathNormalizer(case_sensitive=case_sensitive)
        self.normalizer = normalizer
        self.cache = cache if cache is not None else ResolutionCache()
        self.root = self.normalizer.normalize(root)
        # memo key: one shared cache may serve resolvers with different rules
        self._scope = (config, self.root, self.normalizer.case_sensitive, self.normalizer.cwd)

        self._alias = [
            (prefix, tuple(t for t in targets if t))
            for prefix, targets in sorted(config.alias, key=lambda a: len(a[0]), reverse=True)
        ]
        self._tsconfig: Optional[TsconfigPaths] = None
        if config.tsconfig:
            self._tsconfig = load_tsconfig_paths(
                os.path.join(self.normalizer.cwd, config.tsconfig)
            )

        self._named_module_dirs = tuple(
            d for d in config.module_directories if not os.path.isabs(d)
        )
        self._absolute_module_dirs = tuple(
            self.normalizer.normalize(d) for d in config.module_directories if os.path.isabs(d)
        )

        self._base_rules: tuple[Callable[[str, str], Iterator[str]], ...] = (
            self._alias_bases,
            self._tsconfig_bases,
            self._path_bases,
            self._module_directory_bases,
        )
        self._file_rules: tuple[Callable[[str], Iterator[str]], ...] = (
            self._literal,
            self._with_extensions,
            self._package_main,
            self._index,
        )

    # ── Public API ─────────────────────────────────────────────────

    def is_builtin(self, specifier: str) -> bool:
        return self.config.builtin_modules and is_builtin(specifier)

    def resolve(self, importer_dir: str, specifier: str) -> ModuleId:
        """Resolve ``specifier`` as written in a file living in ``importer_dir``.

        Returns:
            Canonical ModuleId of the first existing regular file

        Raises:
            UnresolvedImportError: If no candidate exists
        """
        cached = self.cache.lookup(importer_dir, specifier, self._scope)
        if isinstance(cached, UnresolvedImportError):
            raise UnresolvedImportError(specifier, importer_dir, cached.tried)
        if cached is not None:
            return ModuleId(cached)

        tried: list[str] = []
        for base in self._candidate_bases(importer_dir, specifier):
            found = self._find_file(base, directory_only=specifier.endswith("/"), tried=tried)
            if found is not None:
                module_id = self.canonicalize(found)
                self.cache.store(importer_dir, specifier, module_id, self._scope)
                return module_id

        error = UnresolvedImportError(specifier, importer_dir, tried)
        self.cache.store(importer_dir, specifier, error, self._scope)
        logger.debug(f"Unresolved '{specifier}' from {importer_dir} ({len(tried)} candidates)")
        raise error

    def canonicalize(self, path: str) -> ModuleId:
        """ModuleId for a path on disk: real path when symlinks are followed."""
        absolute = self.normalizer.absolute(path)
        if self.config.symlinks:
            absolute = self.cache.realpath(absolute)
        return self.normalizer.normalize(absolute)

    def in_module_directory(self, module_id: str) -> bool:
        """True if the module lives inside a module directory such as node_modules."""
        parts = module_id.split(os.sep)
        for name in self._named_module_dirs:
            wanted = name if self.normalizer.case_sensitive else name.casefold()
            if wanted in parts:
                return True
        return any(is_within(module_id, d) for d in self._absolute_module_dirs)

    # ── Base rules ─────────────────────────────────────────────────

    def _candidate_bases(self, importer_dir: str, specifier: str) -> Iterator[str]:
        for rule in self._base_rules:
            yield from rule(importer_dir, specifier)

    def _alias_bases(self, importer_dir: str, specifier: str) -> Iterator[str]:
        for prefix, targets in self._alias:
            if specifier == prefix:
                rest = ""
            elif specifier.startswith(prefix.rstrip("/") + "/"):
                rest = specifier[len(prefix.rstrip("/")) + 1 :]
            else:
                continue
            for target in targets:
                base = os.path.join(self.root, target)
                yield os.path.normpath(os.path.join(base, rest) if rest else base)
            return

    def _tsconfig_bases(self, importer_dir: str, specifier: str) -> Iterator[str]:
        if self._tsconfig is None or is_path_like(specifier):
            return
        yield from self._tsconfig.candidates(specifier)

    def _path_bases(self, importer_dir: str, specifier: str) -> Iterator[str]:
        if is_path_like(specifier):
            yield os.path.normpath(os.path.join(importer_dir, specifier))

    def _module_directory_bases(self, importer_dir: str, specifier: str) -> Iterator[str]:
        """``<dir>/<module_dir>/<specifier>`` for each dir from importer_dir up to root.

        Importers outside the project root get no upward search.
        """
        if is_path_like(specifier):
            return
        if is_within(importer_dir, self.root):
            directory = importer_dir
            while True:
                tail = os.path.basename(directory)
                for name in self._named_module_dirs:
                    if tail == name:
                        continue
                    yield os.path.join(directory, name, specifier)
                if directory == self.root:
                    break
                parent = os.path.dirname(directory)
                if parent == directory:
                    break
                directory = parent
        for absolute_dir in self._absolute_module_dirs:
            yield os.path.join(absolute_dir, specifier)

    # ── File rules ─────────────────────────────────────────────────

    def _find_file(self, base: str, directory_only: bool, tried: list[str]) -> Optional[str]:
        for rule in self._file_rules:
            if directory_only and rule in (self._literal, self._with_extensions):
                continue
            for candidate in rule(base):
                tried.append(candidate)
                if self.cache.is_file(candidate):
                    return candidate
        return None

    def _literal(self, base: str) -> Iterator[str]:
        yield base

    def _with_extensions(self, base: str) -> Iterator[str]:
        for ext in self.config.extensions:
            yield base + ext

    def _package_main(self, base: str) -> Iterator[str]:
        if not self.config.main_fields or not self.cache.is_dir(base):
            return
        manifest = self.cache.package_manifest(base)
        if not manifest:
            return
        for field_name in self.config.main_fields:
            entry = manifest.get(field_name)
            if not isinstance(entry, str) or not entry:
                continue
            entry_path = os.path.normpath(os.path.join(base, entry))
            yield entry_path
            yield from self._with_extensions(entry_path)
            yield from self._index(entry_path)

    def _index(self, base: str) -> Iterator[str]:
        if not self.cache.is_dir(base):
            return
        for ext in self.config.extensions:
            yield os.path.join(base, "index" + ext)
