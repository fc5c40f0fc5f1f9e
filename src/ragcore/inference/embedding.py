"""Embedding backend routed through ``litellm.aembedding``."""

from __future__ import annotations

from typing import Any

from ragcore.core.config import LLMConfig
from ragcore.core.startup_checks import require_api_key
from ragcore.exceptions import EmbeddingError


def _vector_of(item: Any) -> list[float]:
    if isinstance(item, dict):
        return list(item["embedding"])
    return list(item.embedding)


def _index_of(item: Any, default: int) -> int:
    if isinstance(item, dict):
        return item.get("index", default)
    return getattr(item, "index", default)


class LiteLLMEmbeddingBackend:
    """One embedding call per ``embed``; the model chain lives in the service."""

    def __init__(self, config: LLMConfig | None = None) -> None:
        self._config = config or LLMConfig()

    async def embed(self, model: str, inputs: list[str]) -> list[list[float]]:
        from litellm import aembedding

        require_api_key(self._config, model)

        kwargs: dict[str, Any] = {"model": model, "input": inputs, "timeout": self._config.timeout}
        if self._config.api_key:
            kwargs["api_key"] = self._config.api_key
        if self._config.api_base:
            kwargs["api_base"] = self._config.api_base

        try:
            response = await aembedding(**kwargs)
        except Exception as e:
            raise EmbeddingError(f"Embedding model {model} failed: {e}", model=model) from e

        items = sorted(enumerate(response.data), key=lambda pair: _index_of(pair[1], pair[0]))
        vectors = [_vector_of(item) for _, item in items]
        if len(vectors) != len(inputs):
            raise EmbeddingError(
                f"Embedding model {model} returned {len(vectors)} vectors for {len(inputs)} inputs",
                model=model,
            )
        return vectors
