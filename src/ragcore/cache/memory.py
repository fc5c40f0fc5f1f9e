"""In-memory LRU cache with TTL support and async safety."""

from __future__ import annotations

import asyncio
import fnmatch
from collections import OrderedDict
from typing import Any

from ragcore.cache.models import CacheEntry


class MemoryCache:
    """OrderedDict-based LRU cache with per-entry TTL expiry.

    Guarded by an ``asyncio.Lock`` so concurrent coroutines never observe a
    half-updated map. Check-then-set sequences spanning several calls are
    not atomic; the last write wins.
    """

    def __init__(self, max_entries: int = 1000) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._max_entries = max_entries
        self._store: OrderedDict[str, CacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def __len__(self) -> int:
        return len(self._store)

    async def get(self, key: str) -> Any | None:
        """Retrieve a value by key. Returns None on miss or TTL expiry."""
        entry = await self.get_entry(key)
        return None if entry is None else entry.value

    async def get_entry(self, key: str) -> CacheEntry | None:
        """Like :meth:`get` but returns the entry with its metadata."""
        async with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if entry.is_expired:
                del self._store[key]
                return None
            entry.hit_count += 1
            # Move to end (most recently used)
            self._store.move_to_end(key)
            return entry

    async def put(self, key: str, value: Any, *, ttl_seconds: float = 0) -> None:
        """Store a value with optional TTL. Evicts LRU entries if at capacity."""
        async with self._lock:
            if key in self._store:
                del self._store[key]

            self._store[key] = CacheEntry(
                key=key,
                value=value,
                ttl_seconds=ttl_seconds,
            )

            while len(self._store) > self._max_entries:
                self._store.popitem(last=False)

    async def invalidate(self, key: str) -> bool:
        """Remove a specific key. Returns True if it was present."""
        async with self._lock:
            return self._store.pop(key, None) is not None

    async def invalidate_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob pattern. Returns the number removed."""
        async with self._lock:
            doomed = [k for k in self._store if fnmatch.fnmatchcase(k, pattern)]
            for key in doomed:
                del self._store[key]
            return len(doomed)

    async def sweep(self) -> int:
        """Drop all expired entries. Returns the number removed."""
        async with self._lock:
            expired = [k for k, e in self._store.items() if e.is_expired]
            for key in expired:
                del self._store[key]
            return len(expired)

    async def clear(self) -> None:
        """Remove all entries."""
        async with self._lock:
            self._store.clear()
