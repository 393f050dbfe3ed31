# ============================================================================
# DERIVED-ARTIFACT CACHE
# ============================================================================
# STATUS: Infrastructure - Bounded in-memory cache
# PURPOSE: LRU cache of converted layer data keyed by entity identifier
# CREATED: 18 OCT 2026
# ============================================================================
"""
Derived-Artifact Cache

Holds converted data (feature collections decoded from topojson, or raw
geojson bodies) keyed by layer id. Bounded by capacity with least-recently
used eviction. Process memory only.

get_or_load() adds first-caller-wins semantics: concurrent loads of the same
key share one in-flight task. clear() starts a new generation; loads that
were started before it still answer their own callers but never write into
the cleared cache.
"""

import asyncio
from collections import OrderedDict
from typing import Any, Awaitable, Callable, Dict, Generic, Hashable, Optional, TypeVar

from emsclient.core.logging import get_logger, ComponentType

logger = get_logger(__name__, ComponentType.CACHE)

V = TypeVar("V")


class ArtifactCache(Generic[V]):
    """LRU cache with shared in-flight loads."""

    def __init__(self, max_size: int):
        if max_size <= 0:
            raise ValueError(f"max_size must be positive, got {max_size}")
        self.max_size = max_size
        self._entries: "OrderedDict[Hashable, V]" = OrderedDict()
        self._pending: Dict[Hashable, asyncio.Future] = {}
        self._generation = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    @property
    def generation(self) -> int:
        return self._generation

    def get(self, key: Hashable) -> Optional[V]:
        """Return the cached value and mark it most recently used."""
        if key not in self._entries:
            return None
        self._entries.move_to_end(key)
        return self._entries[key]

    def set(self, key: Hashable, value: V) -> None:
        """Store ``value``, evicting the least recently used entry when full."""
        self._entries[key] = value
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted {evicted} from artifact cache")

    def clear(self) -> None:
        """Drop every entry and detach in-flight loads."""
        self._entries.clear()
        self._pending.clear()
        self._generation += 1

    async def get_or_load(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Optional[V]]],
    ) -> Optional[V]:
        """
        Return the cached value for ``key`` or load it once.

        A None result is returned to the callers but not cached.
        """
        cached = self.get(key)
        if cached is not None:
            logger.debug(f"Artifact cache hit: {key}")
            return cached

        pending = self._pending.get(key)
        if pending is None:
            logger.debug(f"Artifact cache miss: {key}")
            pending = asyncio.ensure_future(self._load(key, loader, self._generation))
            self._pending[key] = pending
        return await asyncio.shield(pending)

    async def _load(
        self,
        key: Hashable,
        loader: Callable[[], Awaitable[Optional[V]]],
        generation: int,
    ) -> Optional[V]:
        try:
            value = await loader()
        finally:
            if generation == self._generation:
                self._pending.pop(key, None)
        if value is not None and generation == self._generation:
            self.set(key, value)
        return value


__all__ = ["ArtifactCache"]
