"""Tests for the in-process tier: LRU bound, TTL expiry, patterns, sweep."""

from __future__ import annotations

import time

import pytest

from ragcore.cache.memory import MemoryCache
from ragcore.cache.models import CacheEntry


class TestCacheEntry:
    """CacheEntry should track TTL expiry correctly."""

    def test_not_expired_when_no_ttl(self) -> None:
        entry = CacheEntry(key="k", value="v", ttl_seconds=0)
        assert entry.is_expired is False
        assert entry.expires_at is None

    def test_not_expired_within_ttl(self) -> None:
        entry = CacheEntry(key="k", value="v", ttl_seconds=3600)
        assert entry.is_expired is False
        assert entry.expires_at == pytest.approx(entry.created_at + 3600)

    def test_expired_after_ttl(self) -> None:
        entry = CacheEntry(key="k", value="v", created_at=time.time() - 10, ttl_seconds=5)
        assert entry.is_expired is True


class TestMemoryCache:
    """MemoryCache should implement LRU eviction and TTL expiry."""

    def test_rejects_non_positive_capacity(self) -> None:
        with pytest.raises(ValueError, match="max_entries"):
            MemoryCache(max_entries=0)

    async def test_put_and_get(self) -> None:
        cache = MemoryCache()
        await cache.put("key1", {"answer": "42"})
        assert await cache.get("key1") == {"answer": "42"}

    async def test_get_miss_returns_none(self) -> None:
        cache = MemoryCache()
        assert await cache.get("nonexistent") is None

    async def test_lru_eviction(self) -> None:
        cache = MemoryCache(max_entries=2)
        await cache.put("a", 1)
        await cache.put("b", 2)
        await cache.put("c", 3)  # Should evict "a"
        assert await cache.get("a") is None
        assert await cache.get("b") == 2
        assert await cache.get("c") == 3

    async def test_lru_access_refreshes_position(self) -> None:
        cache = MemoryCache(max_entries=2)
        await cache.put("a", 1)
        await cache.put("b", 2)
        await cache.get("a")
        await cache.put("c", 3)  # Should evict "b"
        assert await cache.get("a") == 1
        assert await cache.get("b") is None

    async def test_size_never_exceeds_capacity(self) -> None:
        cache = MemoryCache(max_entries=5)
        for i in range(50):
            await cache.put(f"k{i}", i)
            assert len(cache) <= 5
        assert len(cache) == 5

    async def test_ttl_expiry(self) -> None:
        cache = MemoryCache()
        await cache.put("key1", "value1", ttl_seconds=1)
        entry = cache._store["key1"]
        entry.created_at = time.time() - 2
        assert await cache.get("key1") is None
        assert len(cache) == 0

    async def test_hit_count_increments(self) -> None:
        cache = MemoryCache()
        await cache.put("k", "v")
        await cache.get("k")
        entry = await cache.get_entry("k")
        assert entry is not None
        assert entry.hit_count == 2

    async def test_overwrite_resets_entry(self) -> None:
        cache = MemoryCache()
        await cache.put("key1", "v1")
        await cache.get("key1")
        await cache.put("key1", "v2")
        entry = await cache.get_entry("key1")
        assert entry is not None
        assert entry.value == "v2"
        assert entry.hit_count == 1

    async def test_invalidate_reports_presence(self) -> None:
        cache = MemoryCache()
        await cache.put("key1", "value1")
        assert await cache.invalidate("key1") is True
        assert await cache.invalidate("key1") is False

    async def test_invalidate_pattern(self) -> None:
        cache = MemoryCache()
        await cache.put("emb:1", 1)
        await cache.put("emb:2", 2)
        await cache.put("search:x", 3)
        assert await cache.invalidate_pattern("emb:*") == 2
        assert await cache.get("search:x") == 3

    async def test_sweep_drops_only_expired(self) -> None:
        cache = MemoryCache()
        await cache.put("old", 1, ttl_seconds=1)
        await cache.put("fresh", 2, ttl_seconds=3600)
        await cache.put("forever", 3)
        cache._store["old"].created_at = time.time() - 5
        assert await cache.sweep() == 1
        assert len(cache) == 2

    async def test_clear(self) -> None:
        cache = MemoryCache()
        await cache.put("a", 1)
        await cache.put("b", 2)
        await cache.clear()
        assert len(cache) == 0
