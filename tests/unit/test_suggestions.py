"""Tests for follow-up question suggestions."""

from __future__ import annotations

from ragcore.generation.suggestions import suggest_follow_ups


class TestSuggestFollowUps:
    """Rule-based follow-up questions."""

    def test_price_question(self) -> None:
        assert suggest_follow_ups("Wat kost een consult?", "nl") == [
            "Welke betalingsmethoden accepteren jullie?",
            "Zijn er kortingen beschikbaar?",
            "Hoe kan ik dit gebruiken?",
        ]

    def test_what_and_when_rules_combine(self) -> None:
        assert suggest_follow_ups("Wat zijn de openingstijden?", "nl") == [
            "Hoe kan ik dit gebruiken?",
            "Wat zijn de voordelen hiervan?",
            "Wanneer kan ik terecht?",
        ]

    def test_generic_fallback(self) -> None:
        assert suggest_follow_ups("Parkeren?", "nl") == [
            "Hoe kan ik contact opnemen voor meer informatie?",
            "Waar kan ik meer details vinden?",
        ]

    def test_english_bank(self) -> None:
        assert suggest_follow_ups("How do I sign up?", "en") == [
            "What are the next steps?",
            "How long does this process take?",
        ]

    def test_other_languages_use_english(self) -> None:
        assert suggest_follow_ups("Quel est le price?", "fr")[0] == "Which payment methods do you accept?"

    def test_never_more_than_three(self) -> None:
        question = "Hoe laat en wat kost het, welke tijd?"
        assert len(suggest_follow_ups(question, "nl")) == 3
