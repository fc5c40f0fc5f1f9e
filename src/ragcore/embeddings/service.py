"""Embedding service: cached, deduplicated, with a model fallback chain.

Availability wins over correctness here. When every model in the chain
fails, callers receive zero vectors instead of an exception so ingestion
and search can degrade rather than halt. Zero vectors are never cached.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from ragcore.cache.keys import embedding_key
from ragcore.cache.manager import CacheManager
from ragcore.cache.models import CacheCategory
from ragcore.core.config import EmbeddingConfig
from ragcore.dedup import group_by_content
from ragcore.exceptions import EmbeddingError
from ragcore.inference.protocols import IEmbeddingBackend

log = logging.getLogger(__name__)


def is_zero_vector(vector: Sequence[float]) -> bool:
    """True for the placeholder returned when every model failed."""
    return not any(vector)


class EmbeddingService:
    """Wraps an embedding backend with per-text caching and batch dedup."""

    def __init__(
        self,
        backend: IEmbeddingBackend,
        cache: CacheManager,
        config: EmbeddingConfig | None = None,
    ) -> None:
        self._backend = backend
        self._cache = cache
        self._config = config or EmbeddingConfig()

    @property
    def dimensions(self) -> int:
        return self._config.dimensions

    def zero_vector(self) -> list[float]:
        return [0.0] * self._config.dimensions

    async def _embed_with_fallback(self, texts: list[str]) -> list[list[float]] | None:
        """Walk the model chain. Returns None when every model failed.

        ``ConfigurationError`` from the backend propagates: a missing
        credential is not a model outage.
        """
        inputs = [t[: self._config.max_input_chars] for t in texts]
        models = self._config.models
        for position, model in enumerate(models, start=1):
            try:
                vectors = await self._backend.embed(model, inputs)
            except EmbeddingError as e:
                log.warning("Embedding model %s failed (%d/%d): %s", model, position, len(models), e)
                continue
            log.debug("Embedded %d texts with %s", len(inputs), model)
            return vectors

        log.error(
            "All embedding models failed (%s); returning zero vectors for %d texts",
            ", ".join(models), len(texts),
        )
        return None

    async def embed(self, text: str) -> list[float]:
        """Embed a single text, consulting the cache first."""
        key = embedding_key(text)
        cached = await self._cache.get(key, CacheCategory.EMBEDDINGS)
        if cached is not None:
            log.debug("Embedding cache hit: %.50s", text)
            return cached

        vectors = await self._embed_with_fallback([text])
        if vectors is None:
            return self.zero_vector()

        vector = vectors[0]
        await self._cache.set(key, vector, self._config.cache_ttl_seconds, CacheCategory.EMBEDDINGS)
        return vector

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed many texts with one backend call for the uncached unique ones.

        Output order matches input order, duplicates included.
        """
        if not texts:
            return []

        plan = group_by_content(texts)
        if plan.duplicate_count:
            log.info("Found %d duplicate texts, reusing embeddings", plan.duplicate_count)

        unique_vectors: list[list[float] | None] = []
        missing: list[int] = []
        for i, text in enumerate(plan.unique_texts):
            cached = await self._cache.get(embedding_key(text), CacheCategory.EMBEDDINGS)
            unique_vectors.append(cached)
            if cached is None:
                missing.append(i)

        hits = len(plan.unique_texts) - len(missing)
        if hits:
            log.info("Embedding cache hits: %d/%d", hits, len(plan.unique_texts))

        if missing:
            log.info("Generating %d new embeddings", len(missing))
            fresh = await self._embed_with_fallback([plan.unique_texts[i] for i in missing])
            if fresh is None:
                fresh = [self.zero_vector() for _ in missing]
            else:
                for i, vector in zip(missing, fresh):
                    await self._cache.set(
                        embedding_key(plan.unique_texts[i]),
                        vector,
                        self._config.cache_ttl_seconds,
                        CacheCategory.EMBEDDINGS,
                    )
            for i, vector in zip(missing, fresh):
                unique_vectors[i] = vector

        return plan.expand(unique_vectors)  # type: ignore[arg-type]

    async def clear_cache(self) -> int:
        """Drop every cached embedding."""
        removed = await self._cache.clear("emb:*")
        log.info("Embedding cache cleared")
        return removed
