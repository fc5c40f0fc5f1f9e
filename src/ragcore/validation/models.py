"""Grounding verdict models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class GroundingLevel(str, Enum):
    """How much of the answer the sources support."""

    FULLY = "fully"
    MOSTLY = "mostly"
    PARTIALLY = "partially"
    NOT = "not"

    @classmethod
    def from_confidence(cls, confidence: float) -> GroundingLevel:
        if confidence >= 0.9:
            return cls.FULLY
        if confidence >= 0.7:
            return cls.MOSTLY
        if confidence >= 0.4:
            return cls.PARTIALLY
        return cls.NOT


@dataclass(frozen=True)
class ValidationResult:
    """Fact-check verdict for one answer. Never persisted."""

    is_grounded: bool
    confidence: float
    unsupported_claims: list[str] = field(default_factory=list)
    reasoning: str = ""
    failed: bool = False

    @property
    def level(self) -> GroundingLevel:
        return GroundingLevel.from_confidence(self.confidence)
