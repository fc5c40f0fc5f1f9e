"""Tests for answer post-processing."""

from __future__ import annotations

from ragcore.generation.postprocess import post_process_answer


class TestPostProcess:
    """Opening phrases stripped and bullets normalized."""

    def test_strips_dutch_robotic_opening(self) -> None:
        assert post_process_answer("Op basis van de bronnen, wij zijn open tot 17:00.") == "wij zijn open tot 17:00."

    def test_strips_english_opening_case_insensitive(self) -> None:
        assert post_process_answer("based on the context: the shop opens at 9.") == "the shop opens at 9."

    def test_opening_only_removed_at_start(self) -> None:
        text = "Wij zijn open. Op basis van de bronnen kan ik meer zeggen."
        assert post_process_answer(text) == text

    def test_normalizes_bullets(self) -> None:
        assert post_process_answer("Opties:\n- iDEAL\n* creditcard") == "Opties:\n• iDEAL\n• creditcard"

    def test_blank_line_before_bullet_after_sentence(self) -> None:
        assert post_process_answer("Wij accepteren:\nDit is alles. • iDEAL") == "Wij accepteren:\nDit is alles.\n\n• iDEAL"

    def test_trims_whitespace(self) -> None:
        assert post_process_answer("  \n Hallo! \n") == "Hallo!"

    def test_idempotent(self) -> None:
        once = post_process_answer("Volgens de verstrekte informatie: Prijs.\n- 50 euro\n- 75 euro")
        assert post_process_answer(once) == once
