# ============================================================================
# ARTIFACT CACHE TESTS
# ============================================================================
# STATUS: Tests - LRU derived-artifact cache
# PURPOSE: Eviction order, shared in-flight loads, invalidation
# CREATED: 18 OCT 2026
# ============================================================================
"""
Artifact Cache Tests

Run with:
    pytest tests/test_cache.py -v
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from emsclient.infrastructure.cache import ArtifactCache


class TestLru:
    """Bounded storage with least-recently-used eviction."""

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            ArtifactCache(0)

    def test_capacity_one_keeps_latest(self):
        cache = ArtifactCache(1)
        cache.set("a", {"layer": "a"})
        cache.set("b", {"layer": "b"})

        assert cache.get("a") is None
        assert cache.get("b") == {"layer": "b"}
        assert len(cache) == 1

    def test_get_refreshes_recency(self):
        cache = ArtifactCache(2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.get("a")
        cache.set("c", 3)

        assert "a" in cache
        assert "b" not in cache
        assert "c" in cache

    def test_set_existing_key_does_not_grow(self):
        cache = ArtifactCache(2)
        cache.set("a", 1)
        cache.set("a", 2)
        assert len(cache) == 1
        assert cache.get("a") == 2

    def test_clear(self):
        cache = ArtifactCache(3)
        cache.set("a", 1)
        generation = cache.generation
        cache.clear()

        assert len(cache) == 0
        assert cache.generation == generation + 1


class TestGetOrLoad:
    """First caller wins; concurrent callers share the pending load."""

    def test_hit_skips_loader(self):
        cache = ArtifactCache(2)
        cache.set("a", {"cached": True})
        loader = AsyncMock(return_value={"cached": False})

        assert asyncio.run(cache.get_or_load("a", loader)) == {"cached": True}
        loader.assert_not_called()

    def test_miss_loads_and_stores(self):
        cache = ArtifactCache(2)
        loader = AsyncMock(return_value={"loaded": True})

        assert asyncio.run(cache.get_or_load("a", loader)) == {"loaded": True}
        assert cache.get("a") == {"loaded": True}

    def test_concurrent_misses_share_one_load(self):
        cache = ArtifactCache(2)
        calls = []

        async def loader():
            calls.append(1)
            await asyncio.sleep(0.01)
            return {"features": []}

        async def run():
            return await asyncio.gather(*(cache.get_or_load("a", loader) for _ in range(4)))

        results = asyncio.run(run())
        assert len(calls) == 1
        assert all(result is results[0] for result in results)

    def test_none_not_cached(self):
        cache = ArtifactCache(2)
        loader = AsyncMock(return_value=None)

        async def run():
            await cache.get_or_load("a", loader)
            await cache.get_or_load("a", loader)

        asyncio.run(run())
        assert loader.await_count == 2
        assert "a" not in cache

    def test_failure_not_cached(self):
        cache = ArtifactCache(2)
        loader = AsyncMock(side_effect=[RuntimeError("boom"), {"ok": 1}])

        async def run():
            with pytest.raises(RuntimeError):
                await cache.get_or_load("a", loader)
            return await cache.get_or_load("a", loader)

        assert asyncio.run(run()) == {"ok": 1}

    def test_clear_during_load_discards_result(self):
        cache = ArtifactCache(2)

        async def loader():
            await asyncio.sleep(0.01)
            return {"stale": True}

        async def run():
            pending = asyncio.ensure_future(cache.get_or_load("a", loader))
            await asyncio.sleep(0)
            cache.clear()
            return await pending

        assert asyncio.run(run()) == {"stale": True}
        assert "a" not in cache
