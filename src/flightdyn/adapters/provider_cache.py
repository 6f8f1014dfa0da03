# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Least-recently-used cache in front of a provider function.

Ephemeris files are expensive to read, so a resolver that serves many NAIF
ids keeps only the most recently used ones in memory. The cache is owned by
a single resolver and is not synchronised; share it across threads only
behind a lock.
"""
import logging
from collections import OrderedDict
from typing import Callable, Generic, Optional, TypeVar

from flightdyn.domain.errors import ArgumentError

_log = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

DEFAULT_CACHE_SIZE = 50


class LRUCachedProvider(Generic[K, V]):
    """Caching decorator for a ``key -> value | None`` provider.

    Values are fetched from ``provider`` on a miss and kept until evicted.
    None results are passed through without being cached. A cache size of
    0 turns the cache into a pass-through.

    Args:
        provider: The underlying provider.
        cache_size: Maximum number of cached values.
        on_evict: Called with ``(key, value)`` for every evicted entry.
    """

    def __init__(
        self,
        provider: Callable[[K], Optional[V]],
        cache_size: int = DEFAULT_CACHE_SIZE,
        on_evict: Optional[Callable[[K, V], None]] = None,
    ) -> None:
        self._provider = provider
        self._on_evict = on_evict
        self._cache: "OrderedDict[K, V]" = OrderedDict()
        self._cache_size = 0
        self.set_cache_size(cache_size)

    @property
    def cache_size(self) -> int:
        return self._cache_size

    def set_cache_size(self, cache_size: int) -> None:
        """Change the capacity, evicting least recently used entries at once."""
        if cache_size < 0:
            raise ArgumentError(f"Cache size must not be negative, got {cache_size}")
        self._cache_size = cache_size
        self._shrink()

    def _shrink(self) -> None:
        while len(self._cache) > self._cache_size:
            key, value = self._cache.popitem(last=False)
            _log.debug("Evicted %r from provider cache", key)
            if self._on_evict is not None:
                self._on_evict(key, value)

    def get(self, key: K) -> Optional[V]:
        if key in self._cache:
            self._cache.move_to_end(key)
            _log.debug("Provider cache hit for %r", key)
            return self._cache[key]
        _log.debug("Provider cache miss for %r", key)
        value = self._provider(key)
        if value is not None and self._cache_size > 0:
            self._cache[key] = value
            self._shrink()
        return value

    __call__ = get

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key: object) -> bool:
        return key in self._cache
