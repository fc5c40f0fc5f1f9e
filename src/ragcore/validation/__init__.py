"""Answer grounding validation."""

from __future__ import annotations

from ragcore.validation.models import GroundingLevel, ValidationResult
from ragcore.validation.validator import ResponseValidator

__all__ = ["GroundingLevel", "ResponseValidator", "ValidationResult"]
