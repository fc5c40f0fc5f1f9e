"""Language detection and language-specific answer texts."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

DEFAULT_LANGUAGE = "nl"
SUPPORTED_LANGUAGES = frozenset({"nl", "en", "de", "fr", "es"})

# Frequent function words per language; counted as whole-word matches
_INDICATORS: dict[str, tuple[str, ...]] = {
    "nl": (
        "het", "de", "een", "van", "voor", "wat", "hoe", "waarom", "wanneer", "waar",
        "jullie", "zijn", "hebben", "kunnen", "willen", "moet", "zou", "als", "dat",
        "deze", "dit",
    ),
    "en": (
        "the", "is", "are", "what", "how", "why", "when", "where", "can", "would",
        "should", "have", "has", "this", "that", "with", "for", "from", "your", "you",
    ),
    "de": (
        "der", "die", "das", "ist", "sind", "ein", "eine", "für", "von", "mit", "wie",
        "was", "wo", "wann", "warum", "ich", "du", "sie", "haben", "können",
    ),
    "fr": (
        "le", "la", "les", "un", "une", "est", "sont", "pour", "de", "avec", "comment",
        "quoi", "où", "quand", "pourquoi", "je", "tu", "vous", "avoir", "être",
    ),
    "es": (
        "el", "la", "los", "las", "un", "una", "es", "son", "para", "de", "con", "cómo",
        "qué", "dónde", "cuándo", "por qué", "yo", "tú", "usted", "tener", "ser",
    ),
}

_PATTERNS: dict[str, list[re.Pattern[str]]] = {
    lang: [re.compile(rf"\b{re.escape(word)}\b") for word in words]
    for lang, words in _INDICATORS.items()
}

_INSTRUCTIONS: dict[str, str] = {
    "nl": "Antwoord in het Nederlands. Wees professioneel en duidelijk.",
    "en": "Answer in English. Be professional and clear.",
    "de": "Antworten Sie auf Deutsch. Seien Sie professionell und klar.",
    "fr": "Répondez en français. Soyez professionnel et clair.",
    "es": "Responda en español. Sea profesional y claro.",
    "it": "Rispondi in italiano. Sii professionale e chiaro.",
}

_NO_CONTEXT: dict[str, str] = {
    "nl": (
        "Sorry, ik kan deze vraag niet beantwoorden op basis van de beschikbare "
        "informatie in onze knowledge base."
    ),
    "en": (
        "Sorry, I can't answer this question based on the information available "
        "in our knowledge base."
    ),
}

_NOT_SPECIFIC: dict[str, str] = {
    "nl": (
        " De informatie die ik heb gevonden is niet specifiek genoeg om een "
        "betrouwbaar antwoord te geven."
    ),
    "en": " The information I found is not specific enough to give a reliable answer.",
}

FallbackReason = Literal["no_context", "not_grounded"]


@dataclass(frozen=True)
class LanguageDetection:
    """Result of rule-based language detection."""

    language: str
    confidence: float
    is_supported: bool


def detect_language_fast(text: str) -> LanguageDetection:
    """Guess the language by counting common words.

    Ties resolve to the language listed first (Dutch). Confidence scales
    with the share of indicator hits relative to the word count.
    """
    lowered = text.lower()
    best_lang = DEFAULT_LANGUAGE
    best_count = -1
    for lang, patterns in _PATTERNS.items():
        count = sum(1 for p in patterns if p.search(lowered))
        if count > best_count:
            best_lang, best_count = lang, count

    total_words = len(text.split())
    confidence = min(best_count / max(total_words * 0.2, 1), 1.0)
    return LanguageDetection(
        language=best_lang,
        confidence=confidence,
        is_supported=best_lang in SUPPORTED_LANGUAGES,
    )


def resolve_language(language: str, text: str) -> str:
    """Turn ``"auto"`` into a concrete language code using ``text``."""
    if language != "auto":
        return language
    detection = detect_language_fast(text)
    if detection.confidence == 0 or not detection.is_supported:
        return DEFAULT_LANGUAGE
    return detection.language


def prompt_language(language: str) -> str:
    """Language the prompt scaffolding is written in (``nl`` or ``en``)."""
    return "nl" if language == "nl" else "en"


def language_instruction(language: str) -> str:
    return _INSTRUCTIONS.get(language, _INSTRUCTIONS[DEFAULT_LANGUAGE])


def fallback_message(language: str, reason: FallbackReason = "no_context") -> str:
    """Canned "insufficient information" answer in the requested language.

    Languages without their own text use English.
    """
    lang = language if language in _NO_CONTEXT else "en"
    message = _NO_CONTEXT[lang]
    if reason == "not_grounded":
        message += _NOT_SPECIFIC[lang]
    return message
