"""Composition root: wires backends, caches, and services from settings."""

from __future__ import annotations

from dataclasses import dataclass

from ragcore.cache import create_cache_manager
from ragcore.cache.manager import CacheManager
from ragcore.cache.protocols import IRemoteCache
from ragcore.core.config import AppSettings
from ragcore.embeddings.service import EmbeddingService
from ragcore.generation.response_cache import ResponseCache
from ragcore.generation.service import AnswerService
from ragcore.inference.protocols import IChatBackend, IEmbeddingBackend
from ragcore.ratelimit import RateLimiter
from ragcore.validation.validator import ResponseValidator


@dataclass
class Pipeline:
    """Every long-lived component of the answer pipeline.

    Use as an async context manager to run and stop the background sweeps::

        async with build_pipeline(settings) as pipeline:
            result = await pipeline.answers.generate_answer(question, passages)
    """

    settings: AppSettings
    cache: CacheManager
    embeddings: EmbeddingService
    response_cache: ResponseCache
    validator: ResponseValidator
    answers: AnswerService
    rate_limiter: RateLimiter

    def start(self) -> None:
        """Launch background sweeps. Must be called from a running loop."""
        self.cache.start()
        self.response_cache.start()
        self.rate_limiter.start()

    async def dispose(self) -> None:
        await self.rate_limiter.dispose()
        await self.response_cache.dispose()
        await self.cache.dispose()

    async def __aenter__(self) -> Pipeline:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.dispose()


def build_pipeline(
    settings: AppSettings | None = None,
    *,
    chat_backend: IChatBackend | None = None,
    embedding_backend: IEmbeddingBackend | None = None,
    remote_cache: IRemoteCache | None = None,
) -> Pipeline:
    """Build a pipeline from settings.

    Backends default to the LiteLLM implementations. A ``remote_cache``
    overrides the Redis tier that ``settings.cache`` would otherwise create.
    """
    settings = settings or AppSettings()

    if chat_backend is None:
        from ragcore.inference.chat import LiteLLMChatBackend

        chat_backend = LiteLLMChatBackend(settings.llm)
    if embedding_backend is None:
        from ragcore.inference.embedding import LiteLLMEmbeddingBackend

        embedding_backend = LiteLLMEmbeddingBackend(settings.llm)

    if remote_cache is not None:
        cache = CacheManager(settings.cache, remote=remote_cache)
    else:
        cache = create_cache_manager(settings)

    embeddings = EmbeddingService(embedding_backend, cache, settings.embedding)
    response_cache = ResponseCache(settings.response_cache)
    validator = ResponseValidator(chat_backend, settings.validation)
    answers = AnswerService(
        chat_backend,
        embeddings=embeddings,
        response_cache=response_cache,
        validator=validator,
        settings=settings,
    )
    return Pipeline(
        settings=settings,
        cache=cache,
        embeddings=embeddings,
        response_cache=response_cache,
        validator=validator,
        answers=answers,
        rate_limiter=RateLimiter(settings.rate_limit),
    )
