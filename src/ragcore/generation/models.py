"""Data models for answer generation."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal


@dataclass(frozen=True)
class ContextPassage:
    """A retrieved knowledge chunk, as supplied by the retrieval provider.

    Passages are expected in ranked order (best first).
    """

    id: str
    type: str
    title: str
    content: str
    score: float
    url: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ConversationTurn:
    """One prior message in the conversation."""

    role: Literal["user", "assistant"]
    content: str


@dataclass
class GenerationOptions:
    """Per-request overrides. ``None`` fields take the configured default.

    Attributes:
        namespace: Tenant/assistant scope for the response cache.
        question_embedding: Pre-computed question vector; skips re-embedding
            for the cache key when the caller already has it from retrieval.
    """

    tone: str | None = None
    language: str | None = None
    model: str | None = None
    temperature: float | None = None
    max_tokens: int | None = None
    conversation_history: list[ConversationTurn] = field(default_factory=list)
    system_prompt: str | None = None
    namespace: str = ""
    question_embedding: list[float] | None = None


@dataclass(frozen=True)
class SourceReference:
    """A passage cited back to the caller."""

    document_name: str
    document_type: str
    relevance_score: float
    url: str | None = None


@dataclass(frozen=True)
class CachedResponse:
    """An admitted answer in the response cache. Replaced, never mutated."""

    answer: str
    confidence: float
    sources: tuple[SourceReference, ...]
    tokens_used: int
    created_at: float = field(default_factory=time.time)

    def age(self, now: float | None = None) -> float:
        return (time.time() if now is None else now) - self.created_at


@dataclass
class AnswerResult:
    """What every ``generate_answer`` call returns, success or fallback."""

    answer: str
    confidence: float
    sources: list[SourceReference] = field(default_factory=list)
    tokens_used: int = 0
    suggested_questions: list[str] = field(default_factory=list)
    cached: bool = False


class StreamEventType(str, Enum):
    START = "start"
    CONTENT = "content"
    SUGGESTIONS = "suggestions"
    END = "end"
    ERROR = "error"


@dataclass(frozen=True)
class StreamChunk:
    """One event of a streamed answer.

    A stream opens with ``START`` (carrying the sources), continues with
    ``CONTENT`` text deltas, then ``SUGGESTIONS`` and ``END`` (carrying the
    confidence). A backend failure after content was sent ends the stream
    with ``ERROR`` instead.
    """

    type: StreamEventType
    content: str | None = None
    sources: list[SourceReference] | None = None
    suggested_questions: list[str] | None = None
    confidence: float | None = None
    error: str | None = None
