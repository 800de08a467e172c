"""
Content request service: topics, exercises, and reference translations.

Each operation is one chat completion. Exercise generation is all-or-nothing
and raises; topic suggestion and translation degrade to empty results so the
session can keep going.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Type, TypeVar

from openai import APIConnectionError, AsyncOpenAI, AuthenticationError, OpenAIError
from pydantic import BaseModel, ValidationError

from lexical_gap.core.errors import (
    GenerationFailed,
    MalformedContent,
    TopicSuggestionFailed,
    TranslationFailed,
)
from lexical_gap.models.catalog import CEFRLevel
from lexical_gap.models.exercise import Exercise
from lexical_gap.services.llm import DEFAULT_MODEL, LLMService, TokenUsage
from lexical_gap.services.placeholders import has_marker, marker_ids
from lexical_gap.services.prompts import (
    LLMRequest,
    PromptRenderer,
    build_exercise_request,
    build_topic_request,
    build_translation_request,
)

logger = logging.getLogger("lexical_gap.services.content")

T = TypeVar("T", bound=BaseModel)

EXPECTED_OPTION_COUNT = 4


def response_format_for(response_model: Type[BaseModel]) -> dict[str, Any]:
    """Structured-output contract derived from the model's JSON schema."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": response_model.__name__,
            "schema": response_model.model_json_schema(by_alias=True),
        },
    }


class ContentRequestService(LLMService):
    """Generates exercise content through the chat completions API."""

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        *,
        default_timeout: float = 60.0,
        pivot_language: str = "English",
        renderer: PromptRenderer | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        super().__init__(api_key, model, default_timeout=default_timeout, client=client)
        self.pivot_language = pivot_language
        self.renderer = renderer or PromptRenderer()

    async def chat_structured(self, request: LLMRequest[T]) -> tuple[T, TokenUsage]:
        """
        Run ``request`` with its response model as the JSON schema and validate the reply.

        Raises:
            ValueError: The request carries no response model
            pydantic.ValidationError: The reply is not JSON or does not match the model
            openai.OpenAIError: Transport or API failure
        """
        response_model = request.response_model
        if response_model is None:
            raise ValueError("Structured requests need a response model.")
        response_text, usage = await self.chat(
            request.messages,
            temperature=request.temperature,
            response_format=response_format_for(response_model),
        )
        try:
            parsed = response_model.model_validate_json(response_text)
        except ValidationError as e:
            logger.error(
                "Failed to parse LLM response",
                extra={
                    "error": str(e),
                    "response_preview": response_text[:200],
                    "expected_model": response_model.__name__,
                },
            )
            raise
        return parsed, usage

    async def suggest_topics(self, temperature: float = 0.9) -> list[str]:
        """
        Ask for six reading topics.

        Returns ``[]`` when the reply cannot be decoded or the API rejects the
        request. Raises ``TopicSuggestionFailed`` when the service is
        unreachable or the credential is refused.
        """
        request = build_topic_request(self.renderer, temperature=temperature)
        try:
            suggestions, _ = await self.chat_structured(request)
        except (APIConnectionError, AuthenticationError) as e:
            raise TopicSuggestionFailed() from e
        except (ValidationError, OpenAIError) as e:
            logger.warning(
                "Topic suggestion returned no usable topics",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            return []

        return [topic.strip() for topic in suggestions.topics if topic.strip()]

    async def generate_exercise(
        self,
        topic: str | None,
        level: CEFRLevel,
        language: str,
        temperature: float = 0.7,
    ) -> Exercise:
        """
        Generate a complete exercise or raise.

        Raises:
            MalformedContent: The content has no ``{{id}}`` marker
            GenerationFailed: Transport failure or an undecodable reply
        """
        request = build_exercise_request(
            self.renderer,
            topic=topic,
            level=level,
            language=language,
            temperature=temperature,
            reference_language=self.pivot_language,
        )
        log_extra = {"language": language, "level": level.value, "topic": topic}

        try:
            generated, _ = await self.chat_structured(request)
        except ValidationError as e:
            logger.error(
                "Exercise payload could not be decoded",
                extra={**log_extra, "error": str(e)},
            )
            raise GenerationFailed(details={"cause": "decode"}) from e
        except OpenAIError as e:
            logger.error(
                "Exercise generation request failed",
                extra={**log_extra, "error": str(e), "error_type": type(e).__name__},
            )
            raise GenerationFailed(details={"cause": "transport"}) from e

        if not generated.content.strip() or not has_marker(generated.content):
            logger.error("Generated text is missing placeholders", extra=log_extra)
            raise MalformedContent()

        exercise = generated.to_exercise()
        self._warn_on_inconsistencies(exercise, log_extra)

        logger.info(
            "Exercise generated",
            extra={**log_extra, "blank_count": len(exercise.blanks)},
        )
        return exercise

    async def translate(self, text: str, target_language: str) -> str:
        """Translate ``text`` into ``target_language``; ``""`` on any failure."""
        request = build_translation_request(
            self.renderer, text=text, target_language=target_language
        )
        try:
            translated, _ = await self.chat(request.messages, temperature=request.temperature)
            translated = translated.strip()
            if not translated:
                raise TranslationFailed()
        except (OpenAIError, TranslationFailed) as e:
            logger.warning(
                "Translation failed",
                extra={
                    "target_language": target_language,
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return ""
        return translated

    def _warn_on_inconsistencies(self, exercise: Exercise, log_extra: dict[str, Any]) -> None:
        # Only logged: a marker without a blank renders as an empty slot and
        # a blank without a marker is simply never shown.
        content_ids = Counter(marker_ids(exercise.content))
        blank_ids = set(exercise.blank_ids)

        orphan_markers = sorted(set(content_ids) - blank_ids)
        unused_blanks = sorted(blank_ids - set(content_ids))
        repeated_markers = sorted(blank_id for blank_id, count in content_ids.items() if count > 1)
        if orphan_markers or unused_blanks or repeated_markers:
            logger.warning(
                "Exercise markers and blanks disagree",
                extra={
                    **log_extra,
                    "orphan_markers": orphan_markers,
                    "unused_blanks": unused_blanks,
                    "repeated_markers": repeated_markers,
                },
            )

        for blank in exercise.blanks:
            problems = []
            if len(blank.options) != EXPECTED_OPTION_COUNT:
                problems.append("option_count")
            if blank.correct_answer not in blank.options:
                problems.append("correct_answer_missing")
            if len(set(blank.options)) != len(blank.options):
                problems.append("duplicate_options")
            if problems:
                logger.warning(
                    "Blank options look inconsistent",
                    extra={**log_extra, "blank_id": blank.id, "problems": problems},
                )


__all__ = ["ContentRequestService", "response_format_for"]
