"""Embedding generation with caching, deduplication, and model fallback."""

from __future__ import annotations

from ragcore.embeddings.service import EmbeddingService, is_zero_vector

__all__ = ["EmbeddingService", "is_zero_vector"]
