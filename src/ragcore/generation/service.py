"""Answer generation: cache lookup, prompt, completion, scoring, validation.

Per request::

    CACHE_LOOKUP → hit: return
                 → miss: BUILD_CONTEXT → GENERATE → POST_PROCESS → VALIDATE
                         → pass: CACHE_WRITE → return
                         → fail: return fallback

Callers always get a well-formed :class:`AnswerResult`. Only configuration
errors (missing credentials) raise.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from typing import Any

from ragcore.core.config import AppSettings
from ragcore.embeddings.service import EmbeddingService, is_zero_vector
from ragcore.exceptions import LLMClientError
from ragcore.generation.confidence import MIN_CONFIDENCE, calculate_confidence
from ragcore.generation.context import select_context, select_sources
from ragcore.generation.models import (
    AnswerResult,
    CachedResponse,
    ContextPassage,
    GenerationOptions,
    SourceReference,
    StreamChunk,
    StreamEventType,
)
from ragcore.generation.postprocess import post_process_answer
from ragcore.generation.prompts import build_messages, build_system_prompt
from ragcore.generation.response_cache import ResponseCache
from ragcore.generation.suggestions import suggest_follow_ups
from ragcore.inference.protocols import IChatBackend
from ragcore.language import FallbackReason, fallback_message, resolve_language
from ragcore.validation.validator import ResponseValidator

log = logging.getLogger(__name__)


class AnswerService:
    """Generates grounded answers from pre-retrieved context passages.

    Args:
        chat: Chat-completion backend used for answers.
        embeddings: Embeds the question for the response-cache key. Without
            it (and without ``GenerationOptions.question_embedding``) the
            response cache is bypassed.
        response_cache: Composite-key answer cache. None disables caching.
        validator: Grounding checker. None skips validation.
        settings: Application settings; defaults are used when omitted.
    """

    def __init__(
        self,
        chat: IChatBackend,
        *,
        embeddings: EmbeddingService | None = None,
        response_cache: ResponseCache | None = None,
        validator: ResponseValidator | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._chat = chat
        self._embeddings = embeddings
        self._response_cache = response_cache
        self._validator = validator
        settings = settings or AppSettings()
        self._llm = settings.llm
        self._gen = settings.generation

    # ── Public API ──────────────────────────────────────────────────

    async def generate_answer(
        self,
        question: str,
        passages: Sequence[ContextPassage],
        options: GenerationOptions | None = None,
    ) -> AnswerResult:
        """Answer ``question`` from ``passages`` (ranked, best first)."""
        options = options or GenerationOptions()
        language = resolve_language(options.language or self._gen.language, question)

        if not passages:
            log.info("No context passages supplied, returning fallback answer")
            return self._fallback(language, "no_context")

        sources = select_sources(
            passages,
            min_score=self._gen.source_min_score,
            limit=self._gen.max_sources,
        )

        cache_key = await self._response_cache_key(question, passages, options)
        has_history = bool(options.conversation_history)
        if cache_key is not None and self._response_cache is not None:
            cached = await self._response_cache.lookup(cache_key, has_history=has_history)
            if cached is not None:
                log.info("Using cached answer for question: %.50s", question)
                return AnswerResult(
                    answer=cached.answer,
                    confidence=cached.confidence,
                    sources=list(cached.sources),
                    tokens_used=cached.tokens_used,
                    suggested_questions=suggest_follow_ups(question, language),
                    cached=True,
                )

        result, grounded = await self._generate(question, passages, options, language, sources)

        if grounded and cache_key is not None and self._response_cache is not None:
            await self._response_cache.admit(
                cache_key,
                CachedResponse(
                    answer=result.answer,
                    confidence=result.confidence,
                    sources=tuple(result.sources),
                    tokens_used=result.tokens_used,
                ),
            )
        return result

    async def stream_answer(
        self,
        question: str,
        passages: Sequence[ContextPassage],
        options: GenerationOptions | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream the answer as typed events.

        Sources come first, then text deltas, then follow-up suggestions and
        the heuristic confidence. Streamed answers are neither cached nor
        validated.
        """
        options = options or GenerationOptions()
        language = resolve_language(options.language or self._gen.language, question)

        if not passages:
            yield StreamChunk(StreamEventType.START, sources=[])
            for chunk in self._stream_fallback(language):
                yield chunk
            return

        sources = select_sources(
            passages,
            min_score=self._gen.source_min_score,
            limit=self._gen.max_sources,
        )
        yield StreamChunk(StreamEventType.START, sources=sources)

        messages, params, model = self._prepare(question, passages, options, language)
        parts: list[str] = []
        try:
            async for delta in self._chat.stream(messages, model, **params):
                parts.append(delta)
                yield StreamChunk(StreamEventType.CONTENT, content=delta)
        except LLMClientError as e:
            log.error("Streaming answer failed: %s", e)
            if parts:
                yield StreamChunk(StreamEventType.ERROR, error=str(e))
                return

        if not parts:
            for chunk in self._stream_fallback(language):
                yield chunk
            return

        answer = post_process_answer("".join(parts))
        yield StreamChunk(
            StreamEventType.SUGGESTIONS,
            suggested_questions=suggest_follow_ups(question, language),
        )
        yield StreamChunk(StreamEventType.END, confidence=calculate_confidence(passages, answer))

    # ── Internals ───────────────────────────────────────────────────

    def _stream_fallback(self, language: str) -> list[StreamChunk]:
        return [
            StreamChunk(StreamEventType.CONTENT, content=fallback_message(language, "no_context")),
            StreamChunk(StreamEventType.END, confidence=MIN_CONFIDENCE),
        ]

    def _fallback(
        self,
        language: str,
        reason: FallbackReason,
        *,
        sources: list[SourceReference] | None = None,
        tokens_used: int = 0,
    ) -> AnswerResult:
        return AnswerResult(
            answer=fallback_message(language, reason),
            confidence=MIN_CONFIDENCE,
            sources=sources or [],
            tokens_used=tokens_used,
            suggested_questions=[],
        )

    async def _response_cache_key(
        self,
        question: str,
        passages: Sequence[ContextPassage],
        options: GenerationOptions,
    ) -> str | None:
        """Composite key for this request, or None when caching is bypassed."""
        if self._response_cache is None or not self._response_cache.enabled:
            return None

        embedding = options.question_embedding
        if embedding is None:
            if self._embeddings is None:
                return None
            embedding = await self._embeddings.embed(question)

        # Degraded embeddings would make unrelated questions collide
        if is_zero_vector(embedding):
            log.warning("Question embedding unavailable, bypassing response cache")
            return None

        return self._response_cache.key_for(
            embedding,
            passages,
            options.conversation_history,
            namespace=options.namespace,
        )

    def _prepare(
        self,
        question: str,
        passages: Sequence[ContextPassage],
        options: GenerationOptions,
        language: str,
    ) -> tuple[list[dict[str, Any]], dict[str, Any], str]:
        """Messages, sampling params, and model for the answer call."""
        context = select_context(
            passages,
            min_score=self._gen.min_context_score,
            limit=self._gen.max_context_items,
        )
        system_prompt = build_system_prompt(
            question,
            context,
            tone=options.tone or self._gen.tone,
            language=language,
            history=options.conversation_history,
            persona=options.system_prompt,
        )
        messages = build_messages(
            system_prompt,
            question,
            options.conversation_history,
            max_history=self._gen.history_turns,
        )
        params = {
            "temperature": self._llm.temperature if options.temperature is None else options.temperature,
            "max_tokens": options.max_tokens or self._llm.max_tokens,
        }
        return messages, params, options.model or self._llm.chat_model

    async def _generate(
        self,
        question: str,
        passages: Sequence[ContextPassage],
        options: GenerationOptions,
        language: str,
        sources: list[SourceReference],
    ) -> tuple[AnswerResult, bool]:
        """Run generation and validation. Returns the result and whether it may be cached."""
        messages, params, model = self._prepare(question, passages, options, language)

        try:
            inference = await self._chat.complete(messages, model, **params)
        except LLMClientError as e:
            log.error("Answer generation failed: %s", e)
            return self._fallback(language, "no_context", sources=sources), False

        tokens_used = inference.total_tokens
        answer = post_process_answer(inference.content or fallback_message(language, "no_context"))
        confidence = calculate_confidence(passages, answer)
        suggestions = suggest_follow_ups(question, language)

        if self._validator is not None and self._validator.enabled:
            context = select_context(
                passages,
                min_score=self._gen.min_context_score,
                limit=self._gen.max_context_items,
            )
            verdict = await self._validator.validate(question, answer, context)
            if self._validator.should_reject(verdict):
                log.warning(
                    "Answer rejected by validator (confidence=%.2f), using fallback",
                    verdict.confidence,
                )
                return (
                    self._fallback(language, "not_grounded", sources=sources, tokens_used=tokens_used),
                    False,
                )
            confidence = min(confidence, verdict.confidence)

        result = AnswerResult(
            answer=answer,
            confidence=confidence,
            sources=sources,
            tokens_used=tokens_used,
            suggested_questions=suggestions,
        )
        return result, True
