"""
Pydantic models for structured LLM responses.

The JSON schema of each model, including field descriptions, is sent to the
model as the structured-output contract, so the descriptions double as
instructions.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from lexical_gap.models.exercise import Blank, Exercise


class TopicSuggestions(BaseModel):
    """Reading-exercise topics proposed by the model."""

    topics: list[str] = Field(
        description=(
            "A list of 6 distinct, engaging, and specific topics for a newspaper-style article."
        )
    )


class GeneratedBlank(BaseModel):
    """One blank of a generated exercise, in wire form."""

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(description="The ID matching the placeholder in content (e.g., 1).")
    correct_answer: str = Field(
        alias="correctAnswer",
        description="The correct collocation/idiom in the target language.",
    )
    options: list[str] = Field(
        description=(
            "A list of 4 options in the target language: the correct answer and 3 plausible "
            "but incorrect distractors. They must be shuffled."
        )
    )
    explanation: str = Field(
        description=(
            "A brief explanation of why this lexical unit is correct in this context. "
            "Write this explanation in the reference language named in the instructions."
        )
    )

    def to_blank(self) -> Blank:
        return Blank(
            id=self.id,
            correct_answer=self.correct_answer,
            options=tuple(self.options),
            explanation=self.explanation,
        )


class GeneratedExercise(BaseModel):
    """Complete exercise payload returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(description="A catchy headline for the text in the target language.")
    content: str = Field(
        description=(
            "The article text (2-3 paragraphs) in the target language. Replace 6-8 distinct "
            "collocations, idioms, or phrasal verbs with placeholders in the format {{1}}, "
            "{{2}}, etc. Do not include the answer in the text, only the placeholder."
        )
    )
    reference_translation: str = Field(
        alias="englishTranslation",
        description=(
            "A complete natural translation of the full article (with the blanks filled in "
            "correctly) into the reference language named in the instructions."
        ),
    )
    blanks: list[GeneratedBlank]

    def to_exercise(self) -> Exercise:
        return Exercise(
            title=self.title,
            content=self.content,
            reference_translation=self.reference_translation,
            blanks=tuple(blank.to_blank() for blank in self.blanks),
        )


__all__ = ["GeneratedBlank", "GeneratedExercise", "TopicSuggestions"]
