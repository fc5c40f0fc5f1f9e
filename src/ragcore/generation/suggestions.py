"""Rule-based follow-up question suggestions."""

from __future__ import annotations

from dataclasses import dataclass

from ragcore.language import prompt_language

MAX_SUGGESTIONS = 3


@dataclass(frozen=True)
class _Rule:
    keywords: tuple[str, ...]
    prompts: tuple[str, str]


# Checked in order; each matching rule contributes its prompts while fewer
# than MAX_SUGGESTIONS have been collected.
_RULES: dict[str, tuple[_Rule, ...]] = {
    "nl": (
        _Rule(("prijs", "kost"), ("Welke betalingsmethoden accepteren jullie?", "Zijn er kortingen beschikbaar?")),
        _Rule(("hoe",), ("Wat zijn de volgende stappen?", "Hoelang duurt dit proces?")),
        _Rule(("wat", "welke"), ("Hoe kan ik dit gebruiken?", "Wat zijn de voordelen hiervan?")),
        _Rule(("wanneer", "tijd"), ("Wanneer kan ik terecht?", "Moet ik hiervoor een afspraak maken?")),
    ),
    "en": (
        _Rule(("price", "cost"), ("Which payment methods do you accept?", "Are there any discounts available?")),
        _Rule(("how",), ("What are the next steps?", "How long does this process take?")),
        _Rule(("what", "which"), ("How can I use this?", "What are the benefits of this?")),
        _Rule(("when", "time"), ("When can I visit?", "Do I need to make an appointment for this?")),
    ),
}

_GENERIC: dict[str, tuple[str, str]] = {
    "nl": ("Hoe kan ik contact opnemen voor meer informatie?", "Waar kan ik meer details vinden?"),
    "en": ("How can I get in touch for more information?", "Where can I find more details?"),
}


def suggest_follow_ups(question: str, language: str = "nl") -> list[str]:
    """Pick up to three follow-up prompts from keywords in the question.

    Matching is substring-based on the lower-cased question. Falls back to
    generic "contact us" prompts when fewer than two were found.
    """
    lang = prompt_language(language)
    lowered = question.lower()
    suggestions: list[str] = []

    for rule in _RULES[lang]:
        if len(suggestions) >= MAX_SUGGESTIONS:
            break
        if any(keyword in lowered for keyword in rule.keywords):
            suggestions.extend(rule.prompts)

    if len(suggestions) < 2:
        suggestions.extend(_GENERIC[lang])

    return suggestions[:MAX_SUGGESTIONS]
