"""Shared helpers for tests."""

from __future__ import annotations

import asyncio

from lexical_gap.models.catalog import CEFRLevel
from lexical_gap.models.exercise import Exercise


class FakeContentService:
    """In-memory stand-in for ContentRequestService."""

    def __init__(self, exercise: Exercise | None = None) -> None:
        self.exercise = exercise
        self.generate_error: Exception | None = None
        self.topics: list[str] = []
        self.topics_error: Exception | None = None
        self.translations: dict[str, str] = {}
        self.translate_calls: list[tuple[str, str]] = []
        self.generate_calls: list[tuple[str | None, CEFRLevel, str, float]] = []
        self.translate_gate: asyncio.Event | None = None
        self.generate_gate: asyncio.Event | None = None

    async def generate_exercise(
        self,
        topic: str | None,
        level: CEFRLevel,
        language: str,
        temperature: float = 0.7,
    ) -> Exercise:
        self.generate_calls.append((topic, level, language, temperature))
        if self.generate_gate is not None:
            await self.generate_gate.wait()
        if self.generate_error is not None:
            raise self.generate_error
        assert self.exercise is not None
        return self.exercise

    async def suggest_topics(self, temperature: float = 0.9) -> list[str]:
        if self.topics_error is not None:
            raise self.topics_error
        return list(self.topics)

    async def translate(self, text: str, target_language: str) -> str:
        self.translate_calls.append((text, target_language))
        if self.translate_gate is not None:
            await self.translate_gate.wait()
        return self.translations.get(target_language, "")


