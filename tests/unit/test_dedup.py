"""Tests for content-hash deduplication."""

from __future__ import annotations

import pytest

from ragcore.dedup import content_hash, group_by_content


class TestContentHash:
    """Hashes ignore case and surrounding whitespace."""

    def test_normalizes_case_and_whitespace(self) -> None:
        assert content_hash("  Hello World\n") == content_hash("hello world")

    def test_inner_whitespace_matters(self) -> None:
        assert content_hash("hello  world") != content_hash("hello world")

    def test_is_sha256_hex(self) -> None:
        digest = content_hash("x")
        assert len(digest) == 64
        int(digest, 16)


class TestGroupByContent:
    """Dedup plans collapse duplicates and expand in input order."""

    def test_first_seen_order(self) -> None:
        plan = group_by_content(["B", "a", "b ", "A", "c"])
        assert plan.unique_texts == ["B", "a", "c"]
        assert plan.duplicate_count == 2

    def test_expand_restores_positions(self) -> None:
        texts = ["x", "y", "X", "z", "y"]
        plan = group_by_content(texts)
        results = plan.expand([f"r-{t}" for t in plan.unique_texts])
        assert results == ["r-x", "r-y", "r-x", "r-z", "r-y"]

    def test_empty_batch(self) -> None:
        plan = group_by_content([])
        assert plan.unique_texts == []
        assert plan.expand([]) == []

    def test_expand_rejects_wrong_length(self) -> None:
        plan = group_by_content(["a", "b"])
        with pytest.raises(ValueError, match="Expected 2 results"):
            plan.expand(["only-one"])
