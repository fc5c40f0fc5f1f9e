"""Shared fixtures for ragcore tests."""

from __future__ import annotations

import pytest

from ragcore.core.config import (
    AppSettings,
    CacheConfig,
    EmbeddingConfig,
    LLMConfig,
    RateLimitConfig,
    ResponseCacheConfig,
)
from ragcore.generation.models import ContextPassage


@pytest.fixture
def settings() -> AppSettings:
    """Test settings: fake key, tiny embeddings, no background sweeps."""
    return AppSettings(
        llm=LLMConfig(api_key="test-key", max_retries=1),
        embedding=EmbeddingConfig(
            models=["model-a", "model-b", "model-c"],
            dimensions=8,
        ),
        cache=CacheConfig(sweep_interval_seconds=0),
        response_cache=ResponseCacheConfig(sweep_interval_seconds=0),
        rate_limit=RateLimitConfig(cleanup_interval_seconds=0),
    )


@pytest.fixture
def opening_hours_passage() -> ContextPassage:
    """Single strong Dutch FAQ passage."""
    return ContextPassage(
        id="p1",
        type="faq",
        title="Openingstijden",
        content="Wij zijn open van maandag tot en met vrijdag, van 9:00 tot 17:00 uur.",
        score=0.92,
        url="https://example.nl/openingstijden",
    )


@pytest.fixture
def passages() -> list[ContextPassage]:
    """Three ranked passages with mixed relevance."""
    return [
        ContextPassage(id="a", type="faq", title="Prijzen", content="Een consult kost 50 euro.", score=0.88),
        ContextPassage(
            id="b",
            type="document",
            title="Betalen",
            content="Wij accepteren iDEAL en creditcard.",
            score=0.55,
            url="https://example.nl/betalen",
        ),
        ContextPassage(id="c", type="website", title="Over ons", content="Opgericht in 1999.", score=0.3),
    ]
