"""Answer cache keyed on question embedding, retrieved context, and recent history.

Keying on the context fingerprint as well as the question means a changed
knowledge base or conversation state never serves a stale answer.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
from collections.abc import Sequence

from ragcore.cache.memory import MemoryCache
from ragcore.core.config import ResponseCacheConfig
from ragcore.generation.models import CachedResponse, ContextPassage, ConversationTurn

log = logging.getLogger(__name__)


def hash_embedding(embedding: Sequence[float], precision: int = 4) -> str:
    """128-bit hash of the embedding rounded to ``precision`` decimals.

    Rounding absorbs floating-point noise between otherwise identical
    embedding calls. Adding ``0.0`` folds ``-0.0`` into ``0.0``.
    """
    rounded = [round(float(v), precision) + 0.0 for v in embedding]
    raw = json.dumps(rounded, separators=(",", ":"))
    return hashlib.sha256(raw.encode()).hexdigest()[:32]


def compute_response_key(
    embedding: Sequence[float],
    passages: Sequence[ContextPassage],
    history: Sequence[ConversationTurn] = (),
    *,
    precision: int = 4,
    context_items: int = 3,
    history_turns: int = 2,
    history_chars: int = 50,
) -> str:
    """Composite fingerprint of question, top context, and last turns.

    The parts are JSON-encoded so ids or turn text containing separators
    cannot collide with a different context or conversation.
    """
    recent = list(history)[-history_turns:] if history_turns > 0 else []
    parts = [
        hash_embedding(embedding, precision),
        [[p.id, round(p.score * 100)] for p in passages[:context_items]],
        [[turn.role, turn.content[:history_chars]] for turn in recent],
    ]
    raw = json.dumps(parts, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(raw.encode()).hexdigest()[:32]


class ResponseCache:
    """Bounded LRU of high-confidence answers with per-request TTL.

    Entries carry their creation time. Each lookup applies the TTL of the
    *current* request: 10 minutes when it has conversation history, 60
    minutes otherwise. An entry that is too old for this request is a miss.
    """

    def __init__(self, config: ResponseCacheConfig | None = None) -> None:
        self._config = config or ResponseCacheConfig()
        self._store = MemoryCache(max_entries=self._config.max_entries)
        self._sweep_task: asyncio.Task[None] | None = None

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    @property
    def min_confidence(self) -> float:
        return self._config.min_confidence

    def __len__(self) -> int:
        return len(self._store)

    def key_for(
        self,
        embedding: Sequence[float],
        passages: Sequence[ContextPassage],
        history: Sequence[ConversationTurn] = (),
        *,
        namespace: str = "",
    ) -> str:
        key = compute_response_key(
            embedding,
            passages,
            history,
            precision=self._config.embedding_precision,
            context_items=self._config.context_items,
            history_turns=self._config.history_turns,
            history_chars=self._config.history_chars,
        )
        return f"{namespace}:{key}" if namespace else key

    def ttl_for(self, has_history: bool) -> float:
        return self._config.conversation_ttl_seconds if has_history else self._config.ttl_seconds

    @property
    def _max_ttl(self) -> float:
        return max(self._config.ttl_seconds, self._config.conversation_ttl_seconds)

    async def lookup(self, key: str, *, has_history: bool) -> CachedResponse | None:
        """Return the cached answer if it is fresh enough for this request."""
        cached = await self._store.get(key)
        if cached is None:
            log.debug("Response cache miss: %s", key)
            return None
        ttl = self.ttl_for(has_history)
        if cached.age() >= ttl:
            log.debug("Response cache entry too old for this request (ttl=%ds): %s", ttl, key)
            return None
        log.debug("Response cache hit: %s", key)
        return cached

    async def admit(self, key: str, response: CachedResponse) -> bool:
        """Store the answer if its confidence clears the admission bar."""
        if response.confidence < self._config.min_confidence:
            log.debug(
                "Not caching low-confidence answer (%.2f < %.2f)",
                response.confidence, self._config.min_confidence,
            )
            return False
        await self._store.put(key, response, ttl_seconds=self._max_ttl)
        log.debug("Cached high-confidence answer: %s", key)
        return True

    async def invalidate(self, key: str) -> bool:
        return await self._store.invalidate(key)

    async def clear(self) -> None:
        await self._store.clear()

    async def sweep(self) -> int:
        """Drop entries older than the longest TTL any request could use."""
        removed = await self._store.sweep()
        if removed:
            log.debug("Response cache sweep removed %d entries", removed)
        return removed

    async def _sweep_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.sweep()
            except Exception:
                log.exception("Response cache sweep failed")

    def start(self) -> None:
        """Launch the periodic sweep task. Must be called from a running loop."""
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        if self._config.sweep_interval_seconds <= 0:
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop(self._config.sweep_interval_seconds))

    async def dispose(self) -> None:
        if self._sweep_task is not None:
            self._sweep_task.cancel()
            try:
                await self._sweep_task
            except asyncio.CancelledError:
                pass
            self._sweep_task = None
