"""Multi-tier cache manager: optional remote store over per-category LRU tiers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from ragcore.cache.memory import MemoryCache
from ragcore.cache.models import CacheCategory, CacheStats, CacheWriteResult, WarmUpEntry
from ragcore.cache.protocols import IRemoteCache
from ragcore.core.config import CacheConfig
from ragcore.exceptions import CacheBackendError

log = logging.getLogger(__name__)

T = TypeVar("T")


class CacheManager:
    """Cache-aside facade over a remote tier and bounded in-process tiers.

    Reads try the remote store first and fall through to the in-process
    tier on a miss or an outage. Writes go to both; a remote write failure
    is logged and reported through :class:`CacheWriteResult`, never raised.
    The in-process tier is therefore self-sufficient when Redis is absent
    or failing.

    Each :class:`CacheCategory` gets its own ``MemoryCache`` so one
    workload's churn cannot evict another's entries.
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        remote: IRemoteCache | None = None,
    ) -> None:
        self._config = config or CacheConfig()
        self._remote = remote
        self._tiers: dict[CacheCategory, MemoryCache] = {
            CacheCategory.EMBEDDINGS: MemoryCache(self._config.embeddings_max_entries),
            CacheCategory.SEARCH_RESULTS: MemoryCache(self._config.search_results_max_entries),
            CacheCategory.CHAT_RESPONSES: MemoryCache(self._config.chat_responses_max_entries),
        }
        self._default_ttls: dict[CacheCategory, float] = {
            CacheCategory.EMBEDDINGS: self._config.embeddings_ttl_seconds,
            CacheCategory.SEARCH_RESULTS: self._config.search_results_ttl_seconds,
            CacheCategory.CHAT_RESPONSES: self._config.chat_responses_ttl_seconds,
        }
        self._sweep_task: asyncio.Task[None] | None = None

    @property
    def backend_enabled(self) -> bool:
        return self._remote is not None

    def default_ttl(self, category: CacheCategory) -> float:
        return self._default_ttls[category]

    def tier(self, category: CacheCategory) -> MemoryCache:
        """The in-process tier for a category."""
        return self._tiers[category]

    # ── Core operations ─────────────────────────────────────────────

    async def get(
        self,
        key: str,
        category: CacheCategory = CacheCategory.CHAT_RESPONSES,
    ) -> Any | None:
        """Return the cached value, or None on miss in every tier."""
        if self._remote is not None:
            try:
                value = await self._remote.get(key)
            except CacheBackendError as e:
                log.warning("Remote cache get failed, using memory tier: %s", e)
            else:
                if value is not None:
                    log.debug("Cache hit (remote): %s", key)
                    return value

        value = await self._tiers[category].get(key)
        if value is not None:
            log.debug("Cache hit (memory/%s): %s", category.value, key)
        else:
            log.debug("Cache miss (%s): %s", category.value, key)
        return value

    async def set(
        self,
        key: str,
        value: Any,
        ttl_seconds: float | None = None,
        category: CacheCategory = CacheCategory.CHAT_RESPONSES,
    ) -> CacheWriteResult:
        """Write to every tier. Never raises for remote failures."""
        ttl = self._default_ttls[category] if ttl_seconds is None else ttl_seconds
        result = CacheWriteResult(remote_written=False)

        if self._remote is not None:
            try:
                await self._remote.set(key, value, ttl_seconds=ttl)
            except CacheBackendError as e:
                log.warning("Remote cache set failed, kept in memory only: %s", e)
                result = CacheWriteResult(remote_written=False, remote_error=e)
            else:
                result = CacheWriteResult(remote_written=True)

        await self._tiers[category].put(key, value, ttl_seconds=ttl)
        return result

    async def delete(
        self,
        key: str,
        category: CacheCategory = CacheCategory.CHAT_RESPONSES,
    ) -> None:
        """Remove a key from every tier."""
        if self._remote is not None:
            try:
                await self._remote.delete(key)
            except CacheBackendError as e:
                log.warning("Remote cache delete failed: %s", e)
        await self._tiers[category].invalidate(key)

    async def clear(self, pattern: str = "*") -> int:
        """Remove keys matching a glob pattern from every tier and category.

        Returns the number of in-process entries removed.
        """
        if self._remote is not None:
            try:
                removed = await self._remote.delete_pattern(pattern)
                log.debug("Cleared %d remote keys matching %s", removed, pattern)
            except CacheBackendError as e:
                log.warning("Remote cache clear failed: %s", e)

        total = 0
        for tier in self._tiers.values():
            if pattern == "*":
                total += len(tier)
                await tier.clear()
            else:
                total += await tier.invalidate_pattern(pattern)
        return total

    async def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], Awaitable[T]],
        ttl_seconds: float | None = None,
        category: CacheCategory = CacheCategory.CHAT_RESPONSES,
    ) -> T:
        """Return the cached value, or await ``compute_fn`` once and cache its result.

        No stampede protection: concurrent misses on the same key each
        compute and the last write wins.
        """
        cached = await self.get(key, category)
        if cached is not None:
            return cached

        log.debug("Computing: %s", key)
        value = await compute_fn()
        await self.set(key, value, ttl_seconds, category)
        return value

    # ── Bulk helpers ────────────────────────────────────────────────

    async def invalidate_by_tags(self, tags: Iterable[str]) -> None:
        """Clear every key containing any of the tags."""
        tags = list(tags)
        for tag in tags:
            await self.clear(f"*{tag}*")
        log.debug("Invalidated by tags: %s", tags)

    async def warm_up(self, entries: Iterable[WarmUpEntry]) -> int:
        """Preload commonly accessed values. Returns the number written."""
        count = 0
        for entry in entries:
            await self.set(entry.key, entry.value, entry.ttl_seconds, entry.category)
            count += 1
        log.debug("Cache warm-up complete: %d entries", count)
        return count

    def get_stats(self) -> CacheStats:
        return CacheStats(
            backend_enabled=self.backend_enabled,
            per_category_size={cat: len(tier) for cat, tier in self._tiers.items()},
        )

    # ── Lifecycle ───────────────────────────────────────────────────

    async def sweep(self) -> int:
        """Prune expired entries from every in-process tier."""
        removed = 0
        for tier in self._tiers.values():
            removed += await tier.sweep()
        if removed:
            log.debug("Cache sweep removed %d expired entries", removed)
        return removed

    async def _sweep_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.sweep()
            except Exception:
                log.exception("Cache sweep failed")

    def start(self) -> None:
        """Launch the periodic sweep task. Must be called from a running loop."""
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        interval = self._config.sweep_interval_seconds
        if interval <= 0:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(interval))

    async def dispose(self) -> None:
        """Stop the sweep task and close the remote client."""
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
        if self._remote is not None:
            await self._remote.close()

    async def __aenter__(self) -> CacheManager:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()
