"""Schemas for the session endpoints."""

from __future__ import annotations

from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from lexical_gap.models.catalog import (
    DEFAULT_LEVEL,
    DEFAULT_TEMPERATURE,
    MAX_TEMPERATURE,
    MIN_TEMPERATURE,
    CEFRLevel,
    TextDirection,
    loading_message,
    text_direction,
)
from lexical_gap.models.session import (
    GenerationRequest,
    ReferenceStatus,
    Session,
    SessionPhase,
)
from lexical_gap.services.placeholders import BlankRef, segment
from lexical_gap.services.scoring import is_complete, review, score


class StartRequest(BaseModel):
    """Request body for POST /api/sessions/{id}/start."""

    language: str = Field(min_length=1, max_length=64)
    level: CEFRLevel = DEFAULT_LEVEL
    topic: str | None = Field(default=None, max_length=200)
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)

    def to_domain(self) -> GenerationRequest:
        topic = self.topic.strip() if self.topic else None
        return GenerationRequest(
            language=self.language.strip(),
            level=self.level,
            topic=topic or None,
            temperature=self.temperature,
        )


class AnswerRequest(BaseModel):
    """Request body for PUT /api/sessions/{id}/answers/{blank_id}."""

    value: str = Field(min_length=1)


class ReferenceLanguageRequest(BaseModel):
    """Request body for PUT /api/sessions/{id}/reference-language."""

    language: str = Field(min_length=1, max_length=64)


class TopicsRequest(BaseModel):
    """Optional body for POST /api/sessions/{id}/topics."""

    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=MIN_TEMPERATURE, le=MAX_TEMPERATURE)


class GenerationRequestView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    language: str
    level: CEFRLevel
    topic: str | None
    temperature: float


class SegmentView(BaseModel):
    """One render unit: literal prose or an interactive blank."""

    type: Literal["text", "blank"]
    text: str | None = None
    blank_id: int | None = None


class BlankView(BaseModel):
    id: int
    options: list[str]


class ExerciseView(BaseModel):
    title: str
    segments: list[SegmentView]
    blanks: list[BlankView]


class BlankReviewView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    blank_id: int
    correct_answer: str
    user_answer: str | None
    is_correct: bool
    explanation: str


class ReferenceView(BaseModel):
    language: str | None
    text: str
    status: ReferenceStatus


class SessionView(BaseModel):
    """Everything the presentation layer needs to render one session."""

    id: UUID
    phase: SessionPhase
    request: GenerationRequestView | None
    error_message: str | None
    loading_message: str | None
    direction: TextDirection
    suggested_topics: list[str]
    is_generating: bool
    is_suggesting_topics: bool
    exercise: ExerciseView | None
    answers: dict[int, str]
    is_complete: bool
    score: int | None = None
    total: int | None = None
    review: list[BlankReviewView] | None = None
    reference: ReferenceView

    @classmethod
    def from_session(cls, session: Session) -> "SessionView":
        request = session.request
        exercise = session.exercise

        exercise_view: ExerciseView | None = None
        if exercise is not None:
            exercise_view = ExerciseView(
                title=exercise.title,
                segments=[
                    SegmentView(type="blank", blank_id=item.blank_id)
                    if isinstance(item, BlankRef)
                    else SegmentView(type="text", text=item.text)
                    for item in segment(exercise.content)
                ],
                blanks=[BlankView(id=blank.id, options=list(blank.options)) for blank in exercise.blanks],
            )

        view = cls(
            id=session.id,
            phase=session.phase,
            request=GenerationRequestView.model_validate(request) if request else None,
            error_message=session.error_message,
            loading_message=(
                loading_message(request.language, request.level)
                if request and session.phase is SessionPhase.LOADING
                else None
            ),
            direction=text_direction(request.language) if request else "ltr",
            suggested_topics=list(session.suggested_topics),
            is_generating=session.is_generating,
            is_suggesting_topics=session.is_suggesting_topics,
            exercise=exercise_view,
            answers=dict(session.answers),
            is_complete=is_complete(exercise, session.answers) if exercise else False,
            reference=ReferenceView(
                language=session.reference_language,
                text=session.reference_text,
                status=session.reference_status,
            ),
        )

        # Correct answers stay hidden until the answers are checked.
        if exercise is not None and session.phase is SessionPhase.RESULTS:
            view.score = score(exercise, session.answers)
            view.total = len(exercise.blanks)
            view.review = [
                BlankReviewView.model_validate(item) for item in review(exercise, session.answers)
            ]
        return view


class LanguageView(BaseModel):
    name: str
    direction: TextDirection


class LevelView(BaseModel):
    code: CEFRLevel
    description: str


class TemperatureBounds(BaseModel):
    min: float = MIN_TEMPERATURE
    max: float = MAX_TEMPERATURE
    default: float = DEFAULT_TEMPERATURE


class ConfigResponse(BaseModel):
    """Response body for GET /api/config."""

    languages: list[LanguageView]
    levels: list[LevelView]
    default_level: CEFRLevel
    sample_topics: list[str]
    temperature: TemperatureBounds
    pivot_language: str
    generation_enabled: bool


class ShareResponse(BaseModel):
    """Response body for GET /api/sessions/{id}/share."""

    subject: str
    body: str
    link: str


__all__ = [
    "AnswerRequest",
    "BlankReviewView",
    "ConfigResponse",
    "ExerciseView",
    "LanguageView",
    "LevelView",
    "ReferenceLanguageRequest",
    "SegmentView",
    "SessionView",
    "ShareResponse",
    "StartRequest",
    "TemperatureBounds",
    "TopicsRequest",
]
