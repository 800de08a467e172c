"""Domain models shared across the backend."""

from lexical_gap.models.catalog import (
    LANGUAGES,
    SAMPLE_TOPICS,
    CEFRLevel,
    LanguageConfig,
)
from lexical_gap.models.exercise import AnswerMap, Blank, Exercise
from lexical_gap.models.session import (
    GenerationRequest,
    ReferenceStatus,
    Session,
    SessionEvent,
    SessionPhase,
)

__all__ = [
    "AnswerMap",
    "Blank",
    "CEFRLevel",
    "Exercise",
    "GenerationRequest",
    "LANGUAGES",
    "LanguageConfig",
    "ReferenceStatus",
    "SAMPLE_TOPICS",
    "Session",
    "SessionEvent",
    "SessionPhase",
]
