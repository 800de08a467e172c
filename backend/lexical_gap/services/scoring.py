"""Scoring, answer review, and the shareable results report."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Final
from urllib.parse import quote

from lexical_gap.core.config import DEFAULT_SHARE_COMPOSE_URL
from lexical_gap.models.catalog import CEFRLevel
from lexical_gap.models.exercise import AnswerMap, Exercise
from lexical_gap.services.placeholders import answered_text

DEFAULT_PREVIEW_MAX_CHARS: Final[int] = 1500
ELLIPSIS: Final[str] = "..."
GENERAL_TOPIC: Final[str] = "General"


@dataclass(frozen=True, slots=True)
class BlankReview:
    """Outcome of one blank once answers are checked."""

    blank_id: int
    correct_answer: str
    user_answer: str | None
    is_correct: bool
    explanation: str


@dataclass(frozen=True, slots=True)
class ShareReport:
    subject: str
    body: str
    link: str


def score(exercise: Exercise, answers: AnswerMap) -> int:
    """Number of blanks whose selected answer equals the correct answer."""
    return sum(1 for blank in exercise.blanks if blank.is_correct(answers.get(blank.id)))


def missing_blank_ids(exercise: Exercise, answers: AnswerMap) -> list[int]:
    return [blank.id for blank in exercise.blanks if blank.id not in answers]


def is_complete(exercise: Exercise, answers: AnswerMap) -> bool:
    """True when the answer map holds exactly one entry per blank."""
    return set(answers) == set(exercise.blank_ids)


def percentage(correct: int, total: int) -> int:
    if total <= 0:
        return 0
    # Round half up, matching what learners expect from a percentage.
    return math.floor(correct * 100 / total + 0.5)


def review(exercise: Exercise, answers: AnswerMap) -> list[BlankReview]:
    return [
        BlankReview(
            blank_id=blank.id,
            correct_answer=blank.correct_answer,
            user_answer=answers.get(blank.id),
            is_correct=blank.is_correct(answers.get(blank.id)),
            explanation=blank.explanation,
        )
        for blank in exercise.blanks
    ]


def truncate(text: str, max_chars: int) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + ELLIPSIS


def build_share_text(
    exercise: Exercise,
    answers: AnswerMap,
    topic: str | None,
    level: CEFRLevel,
    language: str,
    score: int,
    *,
    max_chars: int = DEFAULT_PREVIEW_MAX_CHARS,
) -> str:
    """
    Render the plain-text results report embedded in the share link.

    The passage is linearized with the learner's answers in brackets and cut
    to ``max_chars`` characters; vocabulary notes list every blank's correct
    answer with its explanation.
    """
    total = len(exercise.blanks)
    lines = [
        "My Lexical Gap Challenge Results",
        "",
        f"Language: {language}",
        f"Topic: {topic or GENERAL_TOPIC}",
        f"Level: {level.value}",
        f"Score: {score}/{total} ({percentage(score, total)}%)",
        "",
        "--- Text Snippet ---",
        exercise.title,
        "",
        truncate(answered_text(exercise, answers), max_chars),
        "",
        "--- Vocabulary Notes ---",
    ]
    lines.extend(f"• {blank.correct_answer}: {blank.explanation}" for blank in exercise.blanks)
    return "\n".join(lines) + "\n"


def build_share_subject(language: str, score: int, total: int) -> str:
    return f"{language} Lexical Challenge Result: {score}/{total}"


def build_share_link(
    subject: str,
    body: str,
    compose_url: str = DEFAULT_SHARE_COMPOSE_URL,
) -> str:
    """Mail-compose deep link; nothing is sent from the backend."""
    separator = "&" if "?" in compose_url else "?"
    return f"{compose_url}{separator}su={quote(subject, safe='')}&body={quote(body, safe='')}"


def build_share_report(
    exercise: Exercise,
    answers: AnswerMap,
    *,
    topic: str | None,
    level: CEFRLevel,
    language: str,
    max_chars: int = DEFAULT_PREVIEW_MAX_CHARS,
    compose_url: str = DEFAULT_SHARE_COMPOSE_URL,
) -> ShareReport:
    correct = score(exercise, answers)
    body = build_share_text(
        exercise, answers, topic, level, language, correct, max_chars=max_chars
    )
    subject = build_share_subject(language, correct, len(exercise.blanks))
    return ShareReport(subject=subject, body=body, link=build_share_link(subject, body, compose_url))


__all__ = [
    "BlankReview",
    "ShareReport",
    "build_share_link",
    "build_share_report",
    "build_share_subject",
    "build_share_text",
    "is_complete",
    "missing_blank_ids",
    "percentage",
    "review",
    "score",
    "truncate",
]
