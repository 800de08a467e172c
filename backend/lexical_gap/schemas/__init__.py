"""Public exports for Pydantic schemas."""

from __future__ import annotations

from lexical_gap.schemas.llm_responses import GeneratedBlank, GeneratedExercise, TopicSuggestions

__all__ = ["GeneratedBlank", "GeneratedExercise", "TopicSuggestions"]
