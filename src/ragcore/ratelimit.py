"""In-process sliding-window rate limiter keyed by caller (API key, IP, ...).

Each key keeps the timestamps of its requests inside the window; a request
is allowed while fewer than ``limit`` of them remain after pruning.
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections.abc import Callable
from dataclasses import dataclass, field

from ragcore.core.config import RateLimitConfig

log = logging.getLogger(__name__)


@dataclass
class RateLimitEntry:
    """Request instants for one key, oldest first."""

    request_timestamps: list[float] = field(default_factory=list)

    def prune(self, now: float, window_seconds: float) -> None:
        cutoff = now - window_seconds
        self.request_timestamps = [t for t in self.request_timestamps if t > cutoff]


@dataclass(frozen=True)
class RateLimitResult:
    allowed: bool
    remaining: int
    reset_at: float
    limit: int
    retry_after: int | None = None


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Response headers describing the caller's rate-limit state."""
    headers = {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(math.ceil(result.reset_at)),
    }
    if not result.allowed and result.retry_after is not None:
        headers["Retry-After"] = str(result.retry_after)
    return headers


class RateLimiter:
    """Sliding-window limiter held in process memory.

    ``check`` is synchronous: it never awaits, so it is atomic with respect
    to other coroutines on the same loop.

    Args:
        config: Default limit, window, and cleanup interval.
        clock: Returns the current time in seconds. Injectable for tests.
    """

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._store: dict[str, RateLimitEntry] = {}
        self._cleanup_task: asyncio.Task[None] | None = None

    def check(
        self,
        key: str,
        limit: int | None = None,
        window_seconds: float | None = None,
    ) -> RateLimitResult:
        """Record a request for ``key`` if it is within the limit."""
        limit = self._config.default_limit if limit is None else limit
        window = self._config.window_seconds if window_seconds is None else window_seconds
        now = self._clock()

        entry = self._store.setdefault(key, RateLimitEntry())
        entry.prune(now, window)
        timestamps = entry.request_timestamps

        if len(timestamps) >= limit:
            oldest = timestamps[0] if timestamps else now
            log.warning(
                "Rate limit exceeded for %s (%d/%d requests)",
                key[:12] + "...", len(timestamps), limit,
            )
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset_at=oldest + window,
                limit=limit,
                retry_after=math.ceil(oldest + window - now),
            )

        timestamps.append(now)
        return RateLimitResult(
            allowed=True,
            remaining=limit - len(timestamps),
            reset_at=timestamps[0] + window,
            limit=limit,
        )

    def reset(self, key: str) -> None:
        self._store.pop(key, None)

    def cleanup(self) -> int:
        """Prune every key and drop those with no requests left in the window."""
        now = self._clock()
        removed = 0
        for key in list(self._store):
            entry = self._store[key]
            entry.prune(now, self._config.window_seconds)
            if not entry.request_timestamps:
                del self._store[key]
                removed += 1
        if removed:
            log.debug("Cleaned up %d expired rate limit entries", removed)
        return removed

    def size(self) -> int:
        return len(self._store)

    def clear(self) -> None:
        self._store.clear()

    async def _cleanup_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                self.cleanup()
            except Exception:
                log.exception("Rate limiter cleanup failed")

    def start(self) -> None:
        """Launch periodic cleanup. Must be called from a running loop."""
        if self._cleanup_task is not None and not self._cleanup_task.done():
            return
        if self._config.cleanup_interval_seconds <= 0:
            return
        self._cleanup_task = asyncio.create_task(
            self._cleanup_loop(self._config.cleanup_interval_seconds)
        )

    async def dispose(self) -> None:
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
