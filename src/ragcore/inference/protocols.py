"""Inference backend protocols: the contracts for chat and embedding models."""

from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class InferenceResult:
    """Result from a single chat-completion call."""

    content: str
    finish_reason: str = "finished"
    usage: dict[str, int] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.usage.get("total_tokens", 0)


@runtime_checkable
class IChatBackend(Protocol):
    """Protocol for chat-completion backends."""

    async def complete(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> InferenceResult:
        """Run a single completion.

        Args:
            messages: Chat messages in OpenAI format.
            model: Model identifier (supports LiteLLM prefixes).
            **params: temperature, max_tokens, response_format, ...

        Raises:
            ConfigurationError: Credentials are missing.
            LLMClientError: The call failed after retries.
        """
        ...

    def stream(
        self,
        messages: list[dict[str, Any]],
        model: str,
        **params: Any,
    ) -> AsyncIterator[str]:
        """Stream a completion as incremental text chunks."""
        ...


@runtime_checkable
class IEmbeddingBackend(Protocol):
    """Protocol for embedding backends."""

    async def embed(self, model: str, inputs: list[str]) -> list[list[float]]:
        """Embed every input with one model, preserving order.

        Raises:
            ConfigurationError: Credentials are missing.
            EmbeddingError: This model failed; callers may try another.
        """
        ...
