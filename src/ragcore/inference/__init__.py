"""Pluggable chat and embedding backends."""

from __future__ import annotations

from ragcore.inference.chat import LiteLLMChatBackend
from ragcore.inference.embedding import LiteLLMEmbeddingBackend
from ragcore.inference.protocols import IChatBackend, IEmbeddingBackend, InferenceResult

__all__ = [
    "IChatBackend",
    "IEmbeddingBackend",
    "InferenceResult",
    "LiteLLMChatBackend",
    "LiteLLMEmbeddingBackend",
]
