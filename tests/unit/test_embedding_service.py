"""Tests for EmbeddingService: caching, batch dedup, model fallback."""

from __future__ import annotations

import pytest

from ragcore.cache.manager import CacheManager
from ragcore.cache.models import CacheCategory
from ragcore.core.config import CacheConfig, EmbeddingConfig
from ragcore.embeddings.service import EmbeddingService, is_zero_vector
from ragcore.exceptions import ConfigurationError
from tests.fakes.fake_embedding import FakeEmbeddingBackend, fake_vector

MODELS = ["model-a", "model-b", "model-c"]


def _service(
    backend: FakeEmbeddingBackend,
    **overrides: object,
) -> tuple[EmbeddingService, CacheManager]:
    config = EmbeddingConfig(models=MODELS, dimensions=8, **overrides)
    cache = CacheManager(CacheConfig(sweep_interval_seconds=0))
    return EmbeddingService(backend, cache, config), cache


class TestSingleEmbed:
    """Single-text embedding with caching and model fallback."""

    async def test_embeds_and_caches(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend)
        first = await service.embed("Hallo")
        second = await service.embed("  hallo ")
        assert first == fake_vector("Hallo")
        assert second == first
        assert len(backend.calls) == 1

    async def test_cache_entry_uses_embedding_ttl(self) -> None:
        backend = FakeEmbeddingBackend()
        service, cache = _service(backend, cache_ttl_seconds=123)
        await service.embed("x")
        tier = cache.tier(CacheCategory.EMBEDDINGS)
        (entry,) = tier._store.values()
        assert entry.ttl_seconds == 123

    async def test_falls_back_to_next_model(self) -> None:
        backend = FakeEmbeddingBackend(failing_models={"model-a"})
        service, _ = _service(backend)
        vector = await service.embed("x")
        assert not is_zero_vector(vector)
        assert [c["model"] for c in backend.calls] == ["model-a", "model-b"]

    async def test_all_models_fail_returns_zero_vector(self) -> None:
        backend = FakeEmbeddingBackend(failing_models=set(MODELS))
        service, cache = _service(backend)
        vector = await service.embed("x")
        assert vector == [0.0] * 8
        assert is_zero_vector(vector)
        assert [c["model"] for c in backend.calls] == MODELS

    async def test_zero_vector_is_not_cached(self) -> None:
        backend = FakeEmbeddingBackend(failing_models=set(MODELS))
        service, cache = _service(backend)
        await service.embed("x")
        assert len(cache.tier(CacheCategory.EMBEDDINGS)) == 0

    async def test_input_is_truncated(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend, max_input_chars=5)
        await service.embed("abcdefghij")
        assert backend.calls[0]["inputs"] == ["abcde"]

    async def test_configuration_error_propagates(self) -> None:
        class UnconfiguredBackend:
            async def embed(self, model: str, inputs: list[str]) -> list[list[float]]:
                raise ConfigurationError("OpenAI API key not configured.")

        cache = CacheManager(CacheConfig(sweep_interval_seconds=0))
        service = EmbeddingService(UnconfiguredBackend(), cache, EmbeddingConfig(models=MODELS))
        with pytest.raises(ConfigurationError):
            await service.embed("x")


class TestBatchEmbed:
    """Batch embedding embeds each unique uncached text once."""

    async def test_duplicates_embedded_once(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend)
        vectors = await service.embed_batch(["Hello", "hello ", "World"])
        assert len(backend.calls) == 1
        assert backend.calls[0]["inputs"] == ["Hello", "World"]
        assert vectors[0] == vectors[1]
        assert vectors[2] == fake_vector("World")

    async def test_only_uncached_texts_are_sent(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend)
        await service.embed("cached")
        vectors = await service.embed_batch(["cached", "new"])
        assert backend.calls[-1]["inputs"] == ["new"]
        assert vectors == [fake_vector("cached"), fake_vector("new")]

    async def test_fully_cached_batch_makes_no_call(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend)
        await service.embed_batch(["a", "b"])
        await service.embed_batch(["B", "a", "b"])
        assert len(backend.calls) == 1

    async def test_empty_batch(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend)
        assert await service.embed_batch([]) == []
        assert backend.calls == []

    async def test_all_models_fail_yields_zero_vectors_in_order(self) -> None:
        backend = FakeEmbeddingBackend(failing_models=set(MODELS))
        service, cache = _service(backend)
        vectors = await service.embed_batch(["a", "b", "A"])
        assert len(vectors) == 3
        assert all(is_zero_vector(v) for v in vectors)
        assert len(cache.tier(CacheCategory.EMBEDDINGS)) == 0

    async def test_clear_cache(self) -> None:
        backend = FakeEmbeddingBackend()
        service, _ = _service(backend)
        await service.embed_batch(["a", "b"])
        assert await service.clear_cache() == 2
        await service.embed("a")
        assert len(backend.calls) == 2
