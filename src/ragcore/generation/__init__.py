"""Answer generation: context building, prompting, scoring, and response caching.

``AnswerService`` lives in :mod:`ragcore.generation.service`; it is not
re-exported here because the validator depends on these models.
"""

from __future__ import annotations

from ragcore.generation.models import (
    AnswerResult,
    CachedResponse,
    ContextPassage,
    ConversationTurn,
    GenerationOptions,
    SourceReference,
    StreamChunk,
    StreamEventType,
)

__all__ = [
    "AnswerResult",
    "CachedResponse",
    "ContextPassage",
    "ConversationTurn",
    "GenerationOptions",
    "SourceReference",
    "StreamChunk",
    "StreamEventType",
]
