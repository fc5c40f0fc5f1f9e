"""Data models for the multi-tier cache."""

from __future__ import annotations

import dataclasses
import time
from enum import Enum
from typing import Any


class CacheCategory(str, Enum):
    """Logically separate cache namespaces, each with its own capacity and TTL."""

    EMBEDDINGS = "embeddings"
    SEARCH_RESULTS = "search_results"
    CHAT_RESPONSES = "chat_responses"


@dataclasses.dataclass
class CacheEntry:
    """Metadata wrapper for cached values with TTL tracking."""

    key: str
    value: Any
    created_at: float = dataclasses.field(default_factory=time.time)
    ttl_seconds: float = 0
    hit_count: int = 0

    @property
    def expires_at(self) -> float | None:
        """Absolute expiry timestamp, or None for entries that never expire."""
        if self.ttl_seconds <= 0:
            return None
        return self.created_at + self.ttl_seconds

    @property
    def is_expired(self) -> bool:
        """Check if this entry has exceeded its TTL."""
        if self.ttl_seconds <= 0:
            return False
        return (time.time() - self.created_at) >= self.ttl_seconds


@dataclasses.dataclass(frozen=True)
class CacheWriteResult:
    """Outcome of a multi-tier write.

    The in-process tier always succeeds; the remote tier is best-effort and
    its failure is reported here instead of raised.
    """

    remote_written: bool
    remote_error: Exception | None = None

    @property
    def remote_failed(self) -> bool:
        return self.remote_error is not None


@dataclasses.dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache state for observability."""

    backend_enabled: bool
    per_category_size: dict[CacheCategory, int]


@dataclasses.dataclass(frozen=True)
class WarmUpEntry:
    """A single pre-computed value to load into the cache."""

    key: str
    value: Any
    ttl_seconds: float
    category: CacheCategory = CacheCategory.CHAT_RESPONSES
