"""Content-hash deduplication for embedding inputs.

Texts that differ only in case or surrounding whitespace share a
fingerprint, so a batch pays for each distinct content once.
"""

from __future__ import annotations

import dataclasses
import hashlib
from collections.abc import Sequence
from typing import TypeVar

T = TypeVar("T")


def content_hash(text: str) -> str:
    """SHA-256 hex digest of the normalized (trimmed, lower-cased) text."""
    return hashlib.sha256(text.strip().lower().encode("utf-8")).hexdigest()


@dataclasses.dataclass(frozen=True)
class DedupPlan:
    """Mapping from an input batch to its distinct contents.

    Attributes:
        unique_texts: One representative per fingerprint, in first-seen order.
        hashes: Fingerprint of every input, aligned with the original batch.
        index_of_hash: Fingerprint -> position in ``unique_texts``.
    """

    unique_texts: list[str]
    hashes: list[str]
    index_of_hash: dict[str, int]

    @property
    def duplicate_count(self) -> int:
        return len(self.hashes) - len(self.unique_texts)

    def expand(self, unique_results: Sequence[T]) -> list[T]:
        """Broadcast per-unique results back to every original position."""
        if len(unique_results) != len(self.unique_texts):
            raise ValueError(
                f"Expected {len(self.unique_texts)} results, got {len(unique_results)}"
            )
        return [unique_results[self.index_of_hash[h]] for h in self.hashes]


def group_by_content(texts: Sequence[str]) -> DedupPlan:
    """Group a batch by content fingerprint, keeping first-seen order."""
    unique_texts: list[str] = []
    hashes: list[str] = []
    index_of_hash: dict[str, int] = {}

    for text in texts:
        digest = content_hash(text)
        hashes.append(digest)
        if digest not in index_of_hash:
            index_of_hash[digest] = len(unique_texts)
            unique_texts.append(text)

    return DedupPlan(unique_texts=unique_texts, hashes=hashes, index_of_hash=index_of_hash)
