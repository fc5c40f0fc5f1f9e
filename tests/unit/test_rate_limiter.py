"""Tests for the sliding-window rate limiter."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

from ragcore.core.config import RateLimitConfig
from ragcore.ratelimit import RateLimiter, RateLimitResult, rate_limit_headers


class FakeClock:
    """Settable clock for deterministic windows."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _limiter(clock: FakeClock, **overrides: object) -> RateLimiter:
    config = RateLimitConfig(cleanup_interval_seconds=0, **overrides)
    return RateLimiter(config, clock=clock)


class TestCheck:
    """Sliding-window admission and retry hints."""

    def test_allows_up_to_limit(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock)
        results = [limiter.check("key", limit=3, window_seconds=60) for _ in range(3)]
        assert [r.remaining for r in results] == [2, 1, 0]
        assert all(r.allowed for r in results)

    def test_denies_over_limit_with_retry_after(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock)
        limiter.check("key", limit=2, window_seconds=60)
        clock.now += 10
        limiter.check("key", limit=2, window_seconds=60)
        clock.now += 5

        denied = limiter.check("key", limit=2, window_seconds=60)

        assert denied.allowed is False
        assert denied.remaining == 0
        assert denied.retry_after == 45
        assert denied.reset_at == 1_060.0

    def test_window_slides(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock)
        limiter.check("key", limit=1, window_seconds=60)
        assert limiter.check("key", limit=1, window_seconds=60).allowed is False
        clock.now += 60.5
        assert limiter.check("key", limit=1, window_seconds=60).allowed is True

    def test_denied_requests_are_not_recorded(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock)
        limiter.check("key", limit=1, window_seconds=60)
        for _ in range(5):
            limiter.check("key", limit=1, window_seconds=60)
        clock.now += 61
        assert limiter.check("key", limit=1, window_seconds=60).remaining == 0

    def test_keys_are_independent(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock)
        limiter.check("a", limit=1)
        assert limiter.check("b", limit=1).allowed is True

    def test_defaults_from_config(self) -> None:
        limiter = _limiter(FakeClock(), default_limit=5, window_seconds=30)
        result = limiter.check("key")
        assert result.limit == 5
        assert result.remaining == 4
        assert result.reset_at == 1_030.0

    def test_explicit_zero_limit_denies(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock)
        result = limiter.check("key", limit=0, window_seconds=60)
        assert result.allowed is False
        assert result.limit == 0
        assert result.retry_after == 60

    def test_explicit_zero_window_is_honoured(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock, default_limit=1)
        assert limiter.check("key", window_seconds=0).allowed is True
        # Zero-width window forgets every earlier request
        assert limiter.check("key", window_seconds=0).allowed is True


class TestMaintenance:
    """Reset, cleanup and the cleanup task."""

    def test_reset(self) -> None:
        limiter = _limiter(FakeClock())
        limiter.check("key", limit=1)
        limiter.reset("key")
        assert limiter.check("key", limit=1).allowed is True

    def test_cleanup_drops_idle_keys(self) -> None:
        clock = FakeClock()
        limiter = _limiter(clock, window_seconds=60)
        limiter.check("old")
        clock.now += 30
        limiter.check("recent")
        clock.now += 40
        assert limiter.cleanup() == 1
        assert limiter.size() == 1

    def test_clear(self) -> None:
        limiter = _limiter(FakeClock())
        limiter.check("a")
        limiter.check("b")
        limiter.clear()
        assert limiter.size() == 0

    async def test_start_and_dispose(self) -> None:
        limiter = RateLimiter(RateLimitConfig(cleanup_interval_seconds=3600))
        limiter.start()
        task = limiter._cleanup_task
        assert task is not None
        await limiter.dispose()
        assert task.cancelled()
        assert limiter._cleanup_task is None

    async def test_cleanup_loop_survives_errors(self) -> None:
        limiter = RateLimiter(RateLimitConfig(cleanup_interval_seconds=0.01))
        with patch.object(limiter, "cleanup", side_effect=RuntimeError("boom")) as cleanup:
            limiter.start()
            await asyncio.sleep(0.05)
            task = limiter._cleanup_task
            assert task is not None
            assert not task.done()
            await limiter.dispose()
        assert cleanup.call_count >= 2


class TestHeaders:
    """Rate-limit response headers."""

    def test_allowed(self) -> None:
        headers = rate_limit_headers(RateLimitResult(allowed=True, remaining=4, reset_at=1_030.2, limit=5))
        assert headers == {
            "X-RateLimit-Limit": "5",
            "X-RateLimit-Remaining": "4",
            "X-RateLimit-Reset": "1031",
        }

    def test_denied_includes_retry_after(self) -> None:
        result = RateLimitResult(allowed=False, remaining=0, reset_at=1_060.0, limit=2, retry_after=45)
        assert rate_limit_headers(result)["Retry-After"] == "45"
