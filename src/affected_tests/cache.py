"""
Persistent scan cache for affected-tests.

Uses diskcache for SQLite-based storage of per-file import specifiers, so
repeated runs over an unchanged tree skip reading and lexing sources.
Only scan output is stored; resolution always runs against the live file
system.
"""

import hashlib
import os
from typing import Any, Optional

from diskcache import Cache

from .logging_config import get_logger
from .scanning import SCANNER_VERSION, ScanResult

logger = get_logger(__name__)


class ScanCache:
    """
    Disk-backed store of ScanResult keyed by file metadata.

    Features:
    - Key derived from path, modification time, size and scanner version
    - TTL-based expiration
    - Thread-safe operations (diskcache handles locking)

    Failures talking to the cache are logged and treated as misses; a
    broken cache never fails a computation.
    """

    def __init__(self, cache_dir: str = ".affected-cache", ttl_hours: int = 24, enabled: bool = True):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage
            ttl_hours: Time-to-live in hours (0 keeps entries forever)
            enabled: Whether caching is enabled
        """
        self.enabled = enabled
        self.ttl_seconds: Optional[int] = ttl_hours * 3600 if ttl_hours else None
        self.hits = 0
        self.misses = 0

        if self.enabled:
            self.cache: Optional[Cache] = Cache(cache_dir)
            logger.debug(f"Scan cache at {cache_dir} with TTL={ttl_hours}h")
        else:
            self.cache = None
            logger.debug("Scan cache disabled")

    def _file_key(self, path: str) -> Optional[str]:
        """
        Cache key for ``path``, or None if the file cannot be stat'ed.

        Any edit changes mtime or size and so lands on a fresh key.
        """
        try:
            st = os.stat(path)
        except OSError:
            return None
        key_data = f"{path}:{st.st_mtime_ns}:{st.st_size}:{SCANNER_VERSION}"
        return hashlib.sha256(key_data.encode()).hexdigest()

    def get(self, path: str) -> Optional[ScanResult]:
        """Cached scan of ``path`` if the file is unchanged, else None."""
        if self.cache is None:
            return None
        key = self._file_key(path)
        if key is None:
            return None

        try:
            data = self.cache.get(key)
        except Exception as e:
            logger.warning(f"Cache get failed: {e}")
            return None

        if data is None:
            self.misses += 1
            return None
        self.hits += 1
        logger.debug(f"Cache hit: {path}")
        return ScanResult.from_cache(path, data)

    def set(self, path: str, result: ScanResult) -> None:
        """Store a readable scan. Unreadable results are never cached."""
        if self.cache is None or not result.readable:
            return
        key = self._file_key(path)
        if key is None:
            return

        try:
            self.cache.set(key, result.to_cache(), expire=self.ttl_seconds)
        except Exception as e:
            logger.warning(f"Cache set failed: {e}")

    def clear(self) -> None:
        """Clear all cache entries."""
        if self.cache is None:
            return

        try:
            self.cache.clear()
            logger.info("Cache cleared")
        except Exception as e:
            logger.warning(f"Cache clear failed: {e}")

    def stats(self) -> dict[str, Any]:
        """
        Get cache statistics.

        Returns:
            Dictionary with cache stats
        """
        if self.cache is None:
            return {"enabled": False}

        try:
            return {
                "enabled": True,
                "size": len(self.cache),
                "directory": self.cache.directory,
                "volume": self.cache.volume(),
                "hits": self.hits,
                "misses": self.misses,
            }
        except Exception as e:
            logger.warning(f"Cache stats failed: {e}")
            return {"enabled": True, "error": str(e)}

    def close(self) -> None:
        """Close cache (cleanup)."""
        if self.cache is not None:
            self.cache.close()

    def __enter__(self) -> "ScanCache":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
