"""Cache key construction for the category namespaces."""

from __future__ import annotations

import hashlib
import json
from typing import Any

from ragcore.dedup import content_hash


def embedding_key(text: str) -> str:
    """Key for a cached embedding vector.

    Uses the content fingerprint so case/whitespace variants share a vector.
    """
    return f"emb:{content_hash(text)}"


def search_key(query: str, assistant_id: str) -> str:
    """Key for cached retrieval results, scoped to one assistant."""
    return f"search:{assistant_id}:{query}"


def chat_key(session_id: str, message_hash: str) -> str:
    """Key for a cached chat response within a session."""
    return f"chat:{session_id}:{message_hash}"


def compute_args_key(name: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """Stable key for a function call, used by :func:`ragcore.cache.memoize`.

    Falls back to ``repr`` for arguments JSON cannot encode.
    """
    raw = json.dumps(
        {"args": list(args), "kwargs": kwargs},
        sort_keys=True,
        separators=(",", ":"),
        default=repr,
    )
    return f"{name}:{hashlib.sha256(raw.encode()).hexdigest()[:16]}"
