"""Chat-completion backend routed through LiteLLM.

Supports ``openai/``, ``anthropic/``, ``ollama/`` ... model prefixes
transparently. Non-streaming calls retry with exponential backoff and jitter.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import AsyncIterator
from typing import Any

from ragcore.core.config import LLMConfig
from ragcore.core.startup_checks import require_api_key
from ragcore.exceptions import LLMClientError, NonRetryableError, RetryableError
from ragcore.inference.protocols import InferenceResult

log = logging.getLogger(__name__)


def _is_retryable(exc: Exception) -> bool:
    """Classify whether an LLM API error should be retried.

    Non-retryable: AuthenticationError, BadRequestError, NotFoundError,
    PermissionDeniedError (4xx non-429). Everything else is retried.
    """
    from litellm.exceptions import (
        AuthenticationError,
        BadRequestError,
        NotFoundError,
        PermissionDeniedError,
    )

    non_retryable = (AuthenticationError, BadRequestError, NotFoundError, PermissionDeniedError)
    return not isinstance(exc, non_retryable)


def _extract_usage(response: Any) -> dict[str, int]:
    usage = getattr(response, "usage", None)
    if not usage:
        return {}
    return {
        "prompt_tokens": getattr(usage, "prompt_tokens", 0) or 0,
        "completion_tokens": getattr(usage, "completion_tokens", 0) or 0,
        "total_tokens": getattr(usage, "total_tokens", 0) or 0,
    }


class LiteLLMChatBackend:
    """Chat backend using ``litellm.acompletion``."""

    def __init__(self, config: LLMConfig | None = None) -> None:
        self._config = config or LLMConfig()

    def _base_kwargs(self, model: str) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"model": model, "timeout": self._config.timeout}
        if self._config.api_key:
            kwargs["api_key"] = self._config.api_key
        if self._config.api_base:
            kwargs["api_base"] = self._config.api_base
        return kwargs

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        """Single completion with retries. Raises ``LLMClientError`` when exhausted."""
        from litellm import acompletion

        require_api_key(self._config, model)

        max_retries = max(1, self._config.max_retries)
        jitter_factor = self._config.retry_jitter_factor
        max_delay = self._config.retry_max_delay

        last_error: Exception | None = None
        for attempt in range(max_retries):
            try:
                response = await acompletion(
                    messages=messages,
                    **self._base_kwargs(model),
                    **params,
                )
                choice = response.choices[0]
                content = choice.message.content or ""
                mapped_reason = "max_output_reached" if choice.finish_reason == "length" else "finished"
                return InferenceResult(
                    content=content,
                    finish_reason=mapped_reason,
                    usage=_extract_usage(response),
                )

            except Exception as e:
                last_error = e
                if not _is_retryable(e):
                    raise NonRetryableError(f"Non-retryable LLM error: {e}") from e

                base_wait = min(2**attempt, max_delay)
                wait = base_wait + random.uniform(0, base_wait * jitter_factor)

                log.warning(
                    "LLM retry %d/%d: %s (wait=%.1fs)",
                    attempt + 1, max_retries, e, wait,
                )
                if attempt < max_retries - 1:
                    await asyncio.sleep(wait)

        raise RetryableError(
            f"LLM API failed after {max_retries} retries: {last_error}"
        ) from last_error

    async def stream(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> AsyncIterator[str]:
        """Yield non-empty content deltas as they arrive."""
        from litellm import acompletion

        require_api_key(self._config, model)

        try:
            response = await acompletion(
                messages=messages,
                stream=True,
                **self._base_kwargs(model),
                **params,
            )
            async for chunk in response:
                if not chunk.choices:
                    continue
                delta = getattr(chunk.choices[0], "delta", None)
                content = getattr(delta, "content", None) if delta is not None else None
                if content:
                    yield content
        except Exception as e:
            raise LLMClientError(f"LLM stream failed: {e}") from e
