"""Context selection and rendering for the answer prompt."""

from __future__ import annotations

from collections.abc import Sequence

from ragcore.generation.models import ContextPassage, ConversationTurn, SourceReference
from ragcore.language import prompt_language

_LABELS = {
    "nl": {"source": "Bron", "relevance": "Relevantie", "user": "Gebruiker", "assistant": "Assistent"},
    "en": {"source": "Source", "relevance": "Relevance", "user": "User", "assistant": "Assistant"},
}


def select_context(
    passages: Sequence[ContextPassage],
    *,
    min_score: float = 0.35,
    limit: int = 8,
) -> list[ContextPassage]:
    """Keep passages at or above ``min_score``, at most ``limit``, in ranked order."""
    return [p for p in passages if p.score >= min_score][:limit]


def select_sources(
    passages: Sequence[ContextPassage],
    *,
    min_score: float = 0.4,
    limit: int = 3,
) -> list[SourceReference]:
    """The passages cited back to the caller."""
    return [
        SourceReference(
            document_name=p.title,
            document_type=p.type,
            relevance_score=p.score,
            url=p.url,
        )
        for p in passages
        if p.score >= min_score
    ][:limit]


def render_context(passages: Sequence[ContextPassage], language: str = "nl") -> str:
    """Render passages as numbered, labelled blocks separated by ``---``."""
    labels = _LABELS[prompt_language(language)]
    blocks: list[str] = []
    for index, item in enumerate(passages, start=1):
        metadata = [f"{labels['relevance']}: {item.score * 100:.0f}%"]
        if item.type:
            metadata.append(f"Type: {item.type}")
        if item.url:
            metadata.append(f"URL: {item.url}")
        blocks.append(
            f"### {labels['source']} {index}: {item.title}\n"
            f"{' | '.join(metadata)}\n\n"
            f"{item.content}\n\n"
            f"---"
        )
    return "\n\n".join(blocks)


def render_history(history: Sequence[ConversationTurn], language: str = "nl") -> str:
    """Render prior turns as ``Role: content`` lines."""
    labels = _LABELS[prompt_language(language)]
    return "\n".join(
        f"{labels['user'] if turn.role == 'user' else labels['assistant']}: {turn.content}"
        for turn in history
    )
