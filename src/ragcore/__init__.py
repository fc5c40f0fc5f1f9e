"""ragcore: cached, validated answer generation for retrieval-augmented chat.

Typical use::

    from ragcore import AppSettings, ContextPassage, build_pipeline

    async with build_pipeline(AppSettings()) as pipeline:
        result = await pipeline.answers.generate_answer(
            "Wat zijn de openingstijden?",
            [ContextPassage(id="p1", type="faq", title="Openingstijden",
                            content="Wij zijn open van 9 tot 17 uur.", score=0.92)],
        )

Building blocks::

    from ragcore import (
        CacheManager, MemoryCache, EmbeddingService,
        AnswerService, ResponseCache, ResponseValidator, RateLimiter,
    )
"""

from __future__ import annotations

from ragcore.cache import CacheCategory, CacheManager, MemoryCache, create_cache_manager, memoize
from ragcore.core.config import AppSettings
from ragcore.core.logging_config import setup_logging
from ragcore.core.startup_checks import validate_settings
from ragcore.dedup import content_hash
from ragcore.embeddings import EmbeddingService
from ragcore.exceptions import (
    CacheBackendError,
    ConfigurationError,
    EmbeddingError,
    JSONParseError,
    LLMClientError,
    RagCoreError,
)
from ragcore.generation.models import (
    AnswerResult,
    ContextPassage,
    ConversationTurn,
    GenerationOptions,
    SourceReference,
    StreamChunk,
    StreamEventType,
)
from ragcore.generation.response_cache import ResponseCache
from ragcore.generation.service import AnswerService
from ragcore.pipeline import Pipeline, build_pipeline
from ragcore.ratelimit import RateLimiter, RateLimitResult
from ragcore.validation import ResponseValidator, ValidationResult

__all__ = [
    "AnswerResult",
    "AnswerService",
    "AppSettings",
    "CacheBackendError",
    "CacheCategory",
    "CacheManager",
    "ConfigurationError",
    "ContextPassage",
    "ConversationTurn",
    "EmbeddingError",
    "EmbeddingService",
    "GenerationOptions",
    "JSONParseError",
    "LLMClientError",
    "MemoryCache",
    "Pipeline",
    "RagCoreError",
    "RateLimitResult",
    "RateLimiter",
    "ResponseCache",
    "ResponseValidator",
    "SourceReference",
    "StreamChunk",
    "StreamEventType",
    "ValidationResult",
    "build_pipeline",
    "content_hash",
    "create_cache_manager",
    "memoize",
    "setup_logging",
    "validate_settings",
]
