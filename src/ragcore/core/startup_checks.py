"""Startup validation: fail-fast on critical misconfigurations."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ragcore.exceptions import ConfigurationError

if TYPE_CHECKING:
    from ragcore.core.config import AppSettings, LLMConfig

log = logging.getLogger(__name__)

# Model prefixes served locally, no API key needed
_NO_KEY_PREFIXES = ("ollama/", "ollama_chat/")


def require_api_key(config: LLMConfig, model: str = "") -> None:
    """Raise ``ConfigurationError`` if the backend needs a key and none is set.

    Called at the start of every backend call so that a missing credential
    surfaces immediately instead of being treated as a model outage.
    """
    if not config.requires_api_key:
        return
    if model.startswith(_NO_KEY_PREFIXES):
        return
    if config.api_key in ("", "no-key"):
        raise ConfigurationError(
            "OpenAI API key not configured. "
            "Set RAGCORE_LLM_API_KEY or OPENAI_API_KEY."
        )


def validate_settings(settings: AppSettings) -> None:
    """Validate application settings at startup. Raises ConfigurationError on fatal misconfig."""
    require_api_key(settings.llm, settings.llm.chat_model)
    _check_cache(settings)


def _check_cache(settings: AppSettings) -> None:
    """Warn about a Redis tier that is enabled but not addressable."""
    if settings.cache.redis_enabled and not settings.cache.redis_url:
        log.warning(
            "RAGCORE_CACHE_REDIS_ENABLED=true but RAGCORE_CACHE_REDIS_URL is empty. "
            "Only the in-process cache tier will be used."
        )

