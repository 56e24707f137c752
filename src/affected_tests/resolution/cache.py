"""Caller-owned memo for file-system facts used during resolution.

One instance normally lives for one get_affected() call. Callers that know
the tree has not changed may pass the same instance to several calls, even
with different resolver settings: resolution outcomes are keyed by the
resolver's scope (its config and root), file-system facts are shared.
Entries are plain dict writes; under concurrent scans two threads may compute
the same fact twice, which is harmless because facts are idempotent.
"""

from __future__ import annotations

import json
import os
import stat
from typing import Any, Hashable, Optional, Union

from ..logging_config import get_logger

logger = get_logger(__name__)

_FILE = 1
_DIR = 2
_MISSING = 0


class ResolutionCache:
    """Memoizes stat kinds, real paths, package.json reads and resolutions."""

    def __init__(self) -> None:
        self._kinds: dict[str, int] = {}
        self._realpaths: dict[str, str] = {}
        self._manifests: dict[str, Optional[dict[str, Any]]] = {}
        self._resolutions: dict[tuple[Hashable, str, str], Union[str, Exception]] = {}
        self.hits = 0
        self.misses = 0

    def _kind(self, path: str) -> int:
        kind = self._kinds.get(path)
        if kind is None:
            try:
                mode = os.stat(path).st_mode
            except (OSError, ValueError):
                kind = _MISSING
            else:
                if stat.S_ISREG(mode):
                    kind = _FILE
                elif stat.S_ISDIR(mode):
                    kind = _DIR
                else:
                    kind = _MISSING
            self._kinds[path] = kind
        return kind

    def is_file(self, path: str) -> bool:
        return self._kind(path) == _FILE

    def is_dir(self, path: str) -> bool:
        return self._kind(path) == _DIR

    def realpath(self, path: str) -> str:
        real = self._realpaths.get(path)
        if real is None:
            real = os.path.realpath(path)
            self._realpaths[path] = real
        return real

    def package_manifest(self, directory: str) -> Optional[dict[str, Any]]:
        """Parsed ``package.json`` in ``directory``, or None if absent/broken."""
        if directory in self._manifests:
            return self._manifests[directory]
        manifest_path = os.path.join(directory, "package.json")
        manifest: Optional[dict[str, Any]] = None
        if self.is_file(manifest_path):
            try:
                with open(manifest_path, encoding="utf-8") as f:
                    data = json.load(f)
                if isinstance(data, dict):
                    manifest = data
            except (OSError, ValueError) as e:
                logger.debug(f"Ignoring unreadable {manifest_path}: {e}")
        self._manifests[directory] = manifest
        return manifest

    def lookup(
        self, directory: str, specifier: str, scope: Hashable = None
    ) -> Union[str, Exception, None]:
        """Previously stored outcome under ``scope``, or None when never resolved."""
        outcome = self._resolutions.get((scope, directory, specifier))
        if outcome is None:
            self.misses += 1
        else:
            self.hits += 1
        return outcome

    def store(
        self,
        directory: str,
        specifier: str,
        outcome: Union[str, Exception],
        scope: Hashable = None,
    ) -> None:
        self._resolutions[(scope, directory, specifier)] = outcome

    def clear(self) -> None:
        self._kinds.clear()
        self._realpaths.clear()
        self._manifests.clear()
        self._resolutions.clear()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._resolutions)
