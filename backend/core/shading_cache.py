"""
In-memory LRU cache of shaded tiles.

Results are keyed by tile, algorithm and padding; the algorithm's
equality (bit-identical light height) decides whether a cached raster
can be reused for a different algorithm instance.
"""

import logging
import threading
from collections.abc import Hashable

from cachetools import LRUCache

from core.config import get_settings
from core.hgt_source import ElevationSource
from core.shading import DiffuseLightShading
from core.shading_result import ShadingResult

logger = logging.getLogger(__name__)


def _tile_key(source: ElevationSource) -> Hashable:
    """
    Cache key for a tile: the source object itself.

    The cache entry keeps a reference to the source, so the key stays
    valid for as long as the raster is cached.

    Raises
    ------
    TypeError
        If the source is not hashable
    """
    if not isinstance(source, Hashable):
        raise TypeError(
            f"Elevation source {type(source).__name__} is not hashable "
            "and cannot be used as a cache key"
        )
    return source


class ShadingCache:
    """
    Least-recently-used cache of ShadingResult objects.

    Shading runs outside the lock, so two threads missing on the same key
    may both compute it; the later result replaces the earlier one.
    Failed transforms (None) are not cached.
    """

    def __init__(self, maxsize: int = 16):
        if maxsize < 1:
            raise ValueError(f"Cache size must be at least 1, got {maxsize}")
        self._entries: LRUCache = LRUCache(maxsize=maxsize)
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    @property
    def maxsize(self) -> int:
        return int(self._entries.maxsize)

    @property
    def hits(self) -> int:
        """Lookups answered from the cache."""
        return self._hits

    @property
    def misses(self) -> int:
        """Lookups that had to shade the tile."""
        return self._misses

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def get(
        self,
        source: ElevationSource,
        algorithm: DiffuseLightShading,
        padding: int,
    ) -> ShadingResult | None:
        """
        Return the shaded raster for a tile, computing it on a miss.

        Parameters
        ----------
        source : ElevationSource
            Tile to shade; must be hashable
        algorithm : DiffuseLightShading
            Configured shading algorithm
        padding : int
            Border width [px]

        Returns
        -------
        ShadingResult or None
            Cached or freshly computed raster; None if shading failed

        Raises
        ------
        TypeError
            If the source is not hashable
        """
        key = (_tile_key(source), algorithm, padding)

        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._hits += 1
                return cached
            self._misses += 1

        result = algorithm.transform_to_result(source, padding)
        if result is None:
            return None

        with self._lock:
            self._entries[key] = result
        logger.debug(f"Cached shading result for {source} (padding {padding})")
        return result

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0


_shading_cache: ShadingCache | None = None


def get_shading_cache() -> ShadingCache:
    """
    Get or create the process-wide shading cache.

    Returns
    -------
    ShadingCache
        Cache sized from ``Settings.shading_cache_size``
    """
    global _shading_cache
    if _shading_cache is None:
        _shading_cache = ShadingCache(get_settings().shading_cache_size)
    return _shading_cache
