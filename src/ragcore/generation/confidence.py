"""Deterministic confidence heuristic for generated answers."""

from __future__ import annotations

from collections.abc import Sequence

from ragcore.generation.models import ContextPassage

MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0


def calculate_confidence(passages: Sequence[ContextPassage], answer: str) -> float:
    """Score an answer from retrieval quality and answer completeness.

    ``0.6 * best + 0.2 * completeness + 0.2 * result_count``, then:

    - ×1.3 if the best source scores ≥ 0.9, ×1.15 if ≥ 0.7 (capped at 1.0)
    - at least 0.3 when any source scores above 0.5
    - clamped to [0.1, 1.0]

    Passages are ranked, so the first one is the best.
    """
    if not passages:
        return MIN_CONFIDENCE

    best = passages[0].score

    completeness = min(len(answer) / 200, 1.0)
    # Short answers backed by a strong source are not penalized
    if len(answer) < 50 and best > 0.7:
        completeness = max(completeness, 0.7)

    result_count = min(len(passages) / 3, 1.0)

    confidence = best * 0.6 + completeness * 0.2 + result_count * 0.2

    if best >= 0.9:
        confidence = min(confidence * 1.3, MAX_CONFIDENCE)
    elif best >= 0.7:
        confidence = min(confidence * 1.15, MAX_CONFIDENCE)

    if any(p.score > 0.5 for p in passages):
        confidence = max(confidence, 0.3)

    return min(max(confidence, MIN_CONFIDENCE), MAX_CONFIDENCE)
