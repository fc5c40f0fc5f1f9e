"""Second-pass LLM fact check of a generated answer against its sources.

The validator is a safety net, not a hard gate: when the check itself
fails, the answer is accepted at a fixed moderate confidence.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ragcore.core.config import ValidationConfig
from ragcore.exceptions import JSONParseError, LLMClientError
from ragcore.generation.models import ContextPassage
from ragcore.inference.json_parser import extract_json
from ragcore.inference.protocols import IChatBackend
from ragcore.validation.models import ValidationResult

log = logging.getLogger(__name__)

VALIDATOR_SYSTEM_PROMPT = (
    "Je bent een nauwkeurige fact-checker. Wees streng maar niet te streng - "
    "generieke adviezen zonder claims zijn OK."
)

VALIDATION_PROMPT = """Je bent een fact-checker die controleert of antwoorden gefundeerd zijn in de gegeven bronnen.

BRONNEN:
{sources}

VRAAG: {question}

ANTWOORD OM TE VALIDEREN:
{answer}

VALIDATIE CRITERIA:
1. Alle feitelijke claims in het antwoord moeten DIRECT afleidbaar zijn uit de bronnen
2. Generieke/veilige uitspraken zonder claims zijn TOEGESTAAN (bijv. "Neem contact op voor meer info")
3. Parafraseringen en samenvatting van bronnen zijn TOEGESTAAN
4. Gevolgtrekkingen uit expliciete feiten in bronnen zijn TOEGESTAAN
5. Informatie die NIET in de bronnen staat is NIET toegestaan

SCORING:
- confidence: 1.0 = Volledig onderbouwd door bronnen
- confidence: 0.7-0.9 = Grotendeels onderbouwd, kleine gevolgtrekkingen
- confidence: 0.4-0.6 = Deels onderbouwd, bevat algemene info
- confidence: 0.0-0.3 = Niet onderbouwd, hallucinaties

Geef een JSON response (zonder extra tekst):
{{
  "isGrounded": true/false,
  "confidence": 0.0-1.0,
  "unsupportedClaims": ["specifieke claim die niet in bronnen staat"],
  "reasoning": "korte uitleg van de score"
}}"""


def render_sources(passages: Sequence[ContextPassage]) -> str:
    return "\n\n---\n\n".join(
        f"[Bron {i}] {p.title} (Relevantie: {p.score * 100:.0f}%):\n{p.content}"
        for i, p in enumerate(passages, start=1)
    )


def parse_verdict(payload: Any) -> ValidationResult:
    """Build a result from the model's JSON, with lenient defaults.

    Anything but an explicit ``false`` counts as grounded; a missing or
    zero confidence becomes 0.5.
    """
    if not isinstance(payload, dict):
        raise JSONParseError(f"Expected a JSON object, got {type(payload).__name__}")

    raw_confidence = payload.get("confidence")
    try:
        confidence = float(raw_confidence) if raw_confidence else 0.5
    except (TypeError, ValueError):
        confidence = 0.5
    confidence = min(max(confidence, 0.0), 1.0)

    claims = payload.get("unsupportedClaims") or []
    if not isinstance(claims, list):
        claims = [str(claims)]

    return ValidationResult(
        is_grounded=payload.get("isGrounded") is not False,
        confidence=confidence,
        unsupported_claims=[str(c) for c in claims],
        reasoning=str(payload.get("reasoning") or "No reasoning provided"),
    )


class ResponseValidator:
    """Asks a chat model whether an answer is grounded in its sources."""

    def __init__(self, backend: IChatBackend, config: ValidationConfig | None = None) -> None:
        self._backend = backend
        self._config = config or ValidationConfig()

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def failure_result(self) -> ValidationResult:
        return ValidationResult(
            is_grounded=True,
            confidence=self._config.failure_confidence,
            unsupported_claims=[],
            reasoning="Validation process failed - accepting response",
            failed=True,
        )

    def should_reject(self, result: ValidationResult) -> bool:
        """Reject only answers that are both ungrounded and low-confidence."""
        return not result.is_grounded and result.confidence < self._config.reject_threshold

    async def validate(
        self,
        question: str,
        answer: str,
        passages: Sequence[ContextPassage],
    ) -> ValidationResult:
        """Run the fact check. Never raises for backend or parse failures."""
        prompt = VALIDATION_PROMPT.format(
            sources=render_sources(passages),
            question=question,
            answer=answer,
        )
        messages = [
            {"role": "system", "content": VALIDATOR_SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ]

        try:
            result = await self._backend.complete(
                messages,
                self._config.model,
                temperature=self._config.temperature,
                response_format={"type": "json_object"},
            )
            verdict = parse_verdict(extract_json(result.content or "{}"))
        except (LLMClientError, JSONParseError) as e:
            log.error("Response validation failed, accepting answer: %s", e)
            return self.failure_result()

        log.info(
            "Validation: grounded=%s confidence=%.2f reasoning=%s",
            verdict.is_grounded, verdict.confidence, verdict.reasoning,
        )
        if verdict.unsupported_claims:
            log.info("Unsupported claims: %s", "; ".join(verdict.unsupported_claims))
        return verdict
