"""Session aggregate: lifecycle phase, exercise, answers, and reference panel state."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field

from lexical_gap.models.catalog import (
    DEFAULT_LEVEL,
    DEFAULT_TEMPERATURE,
    SAMPLE_TOPICS,
    CEFRLevel,
)
from lexical_gap.models.exercise import AnswerMap, Exercise


class SessionPhase(str, enum.Enum):
    """Application phases of one exercise lifecycle."""

    CONFIGURING = "configuring"
    LOADING = "loading"
    PLAYING = "playing"
    RESULTS = "results"
    ERRORED = "errored"


class SessionEvent(str, enum.Enum):
    """Events that move a session between phases."""

    START = "start"
    SUCCEED = "succeed"
    FAIL = "fail"
    RETRY = "retry"
    SUBMIT = "submit"
    RESTART = "restart"
    NEW_GAME = "new_game"


class ReferenceStatus(str, enum.Enum):
    """Sub-state of the reference translation panel."""

    IDLE = "idle"
    TRANSLATING = "translating"


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Parameters captured when the learner starts a challenge."""

    language: str
    level: CEFRLevel = DEFAULT_LEVEL
    topic: str | None = None
    temperature: float = DEFAULT_TEMPERATURE


@dataclass
class Session:
    """
    Root aggregate for one learner's tab.

    Only the session service mutates it, always from the event loop, so no
    locking is needed. ``attempt_id`` identifies the outstanding generation and
    ``exercise_token`` the committed exercise; late responses compare against
    them before touching state.
    """

    id: uuid.UUID = field(default_factory=uuid.uuid4)
    phase: SessionPhase = SessionPhase.CONFIGURING
    request: GenerationRequest | None = None
    exercise: Exercise | None = None
    answers: AnswerMap = field(default_factory=dict)
    error_message: str | None = None

    reference_language: str | None = None
    reference_text: str = ""
    reference_status: ReferenceStatus = ReferenceStatus.IDLE

    suggested_topics: list[str] = field(default_factory=lambda: list(SAMPLE_TOPICS))
    is_generating: bool = False
    is_suggesting_topics: bool = False

    attempt_id: uuid.UUID | None = None
    exercise_token: uuid.UUID | None = None
    # Monotonic clock reading of the last lookup; drives idle eviction.
    touched_at: float = 0.0

    @property
    def is_translating(self) -> bool:
        return self.reference_status is ReferenceStatus.TRANSLATING

    def clear_exercise(self) -> None:
        """Drop the exercise, answers and reference state of the current game."""
        self.exercise = None
        self.answers = {}
        self.exercise_token = None
        self.reference_language = None
        self.reference_text = ""
        self.reference_status = ReferenceStatus.IDLE


__all__ = [
    "GenerationRequest",
    "ReferenceStatus",
    "Session",
    "SessionEvent",
    "SessionPhase",
]
