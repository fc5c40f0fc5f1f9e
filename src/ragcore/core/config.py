"""Nested pydantic-settings configuration for the answer pipeline.

Each sub-config reads its own ``RAGCORE_<GROUP>_*`` env vars, e.g.::

    export RAGCORE_LLM_CHAT_MODEL=gpt-4o
    export RAGCORE_CACHE_REDIS_ENABLED=true
"""

from __future__ import annotations

from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class LLMConfig(BaseSettings):
    """Chat-completion backend configuration.

    Env vars use ``RAGCORE_LLM_`` prefix. The API key is also picked up
    from ``OPENAI_API_KEY`` when the prefixed variable is not set.
    """

    model_config = {"env_prefix": "RAGCORE_LLM_", "populate_by_name": True}

    api_key: str = Field(
        default="",
        validation_alias=AliasChoices("RAGCORE_LLM_API_KEY", "OPENAI_API_KEY"),
    )
    api_base: str = ""
    requires_api_key: bool = True
    chat_model: str = "gpt-4o-mini"
    temperature: float = 0.1
    max_tokens: int = 500
    timeout: float = 60.0
    max_retries: int = 3
    retry_jitter_factor: float = 0.5
    retry_max_delay: float = 30.0


class EmbeddingConfig(BaseSettings):
    """Embedding model chain configuration.

    Env vars use ``RAGCORE_EMBEDDING_`` prefix. Models are tried in order.
    """

    model_config = {"env_prefix": "RAGCORE_EMBEDDING_"}

    models: list[str] = Field(
        default_factory=lambda: [
            "text-embedding-3-small",
            "text-embedding-ada-002",
            "text-embedding-3-large",
        ]
    )
    dimensions: int = 1536
    max_input_chars: int = 8000
    cache_ttl_seconds: int = 7 * 24 * 60 * 60


class CacheConfig(BaseSettings):
    """Multi-tier cache configuration.

    Env vars use ``RAGCORE_CACHE_`` prefix::

        export RAGCORE_CACHE_REDIS_ENABLED=true
        export RAGCORE_CACHE_REDIS_URL=redis://cache:6379/0
    """

    model_config = {"env_prefix": "RAGCORE_CACHE_"}

    redis_enabled: bool = False
    redis_url: str = "redis://localhost:6379"
    key_prefix: str = "ragcore:"

    embeddings_ttl_seconds: int = 7 * 24 * 60 * 60
    search_results_ttl_seconds: int = 60 * 60
    chat_responses_ttl_seconds: int = 30 * 60

    embeddings_max_entries: int = Field(default=1000, ge=1)
    search_results_max_entries: int = Field(default=500, ge=1)
    chat_responses_max_entries: int = Field(default=200, ge=1)

    sweep_interval_seconds: float = 300.0


class ResponseCacheConfig(BaseSettings):
    """Composite-key answer cache configuration.

    Env vars use ``RAGCORE_RESPONSE_CACHE_`` prefix.
    """

    model_config = {"env_prefix": "RAGCORE_RESPONSE_CACHE_"}

    enabled: bool = True
    max_entries: int = Field(default=10_000, ge=1)
    ttl_seconds: int = 60 * 60
    conversation_ttl_seconds: int = 10 * 60
    min_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    embedding_precision: int = Field(default=4, ge=0)
    context_items: int = 3
    history_turns: int = 2
    history_chars: int = 50
    sweep_interval_seconds: float = 600.0


class GenerationConfig(BaseSettings):
    """Answer generation defaults.

    Env vars use ``RAGCORE_GENERATION_`` prefix.
    """

    model_config = {"env_prefix": "RAGCORE_GENERATION_"}

    language: str = "nl"
    tone: str = "professional"
    min_context_score: float = 0.35
    max_context_items: int = 8
    source_min_score: float = 0.4
    max_sources: int = 3
    history_turns: int = 8


class ValidationConfig(BaseSettings):
    """Grounding validator thresholds.

    Env vars use ``RAGCORE_VALIDATION_`` prefix.
    """

    model_config = {"env_prefix": "RAGCORE_VALIDATION_"}

    enabled: bool = True
    model: str = "gpt-4o-mini"
    temperature: float = 0.1
    reject_threshold: float = Field(default=0.4, ge=0.0, le=1.0)
    failure_confidence: float = Field(default=0.6, ge=0.0, le=1.0)


class RateLimitConfig(BaseSettings):
    """Sliding-window rate limiter configuration.

    Env vars use ``RAGCORE_RATE_LIMIT_`` prefix.
    """

    model_config = {"env_prefix": "RAGCORE_RATE_LIMIT_"}

    default_limit: int = Field(default=60, ge=1)
    window_seconds: float = 60.0
    cleanup_interval_seconds: float = 300.0


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``RAGCORE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "RAGCORE_OBSERVABILITY_"}

    log_level: str = "INFO"
    log_format: Literal["auto", "console", "json"] = "auto"


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs."""

    llm: LLMConfig = Field(default_factory=LLMConfig)
    embedding: EmbeddingConfig = Field(default_factory=EmbeddingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    response_cache: ResponseCacheConfig = Field(default_factory=ResponseCacheConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
