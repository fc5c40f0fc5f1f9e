"""Answer post-processing: strip throat-clearing, normalize bullets."""

from __future__ import annotations

import re

ROBOTIC_OPENINGS = (
    "Op basis van de bronnen",
    "Volgens de verstrekte informatie",
    "Op grond van de context",
    "Uit de bronnen blijkt",
    "Based on the sources",
    "According to the provided information",
    "Based on the context",
)

_OPENING_PATTERNS = [
    re.compile(rf"^{re.escape(phrase)}[,:]?\s*", re.IGNORECASE) for phrase in ROBOTIC_OPENINGS
]
_DASH_BULLET = re.compile(r"^- ", re.MULTILINE)
_STAR_BULLET = re.compile(r"^\* ", re.MULTILINE)
_BULLET_AFTER_SENTENCE = re.compile(r"([.!?])\s+(•)")

BULLET = "•"


def post_process_answer(answer: str) -> str:
    """Clean up raw model output for display."""
    processed = answer.strip()

    for pattern in _OPENING_PATTERNS:
        processed = pattern.sub("", processed)

    processed = _DASH_BULLET.sub(f"{BULLET} ", processed)
    processed = _STAR_BULLET.sub(f"{BULLET} ", processed)

    # Blank line before a bullet run that follows a sentence
    processed = _BULLET_AFTER_SENTENCE.sub(r"\1\n\n\2", processed)

    return processed
