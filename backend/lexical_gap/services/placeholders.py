"""
Placeholder reconciliation for exercise text.

Exercise content carries inline ``{{<id>}}`` markers. This module splits such
text into literal and blank segments for rendering, and linearizes it back to
plain prose by substituting every marker. The same ``resolve`` is used for the
translation request and for the shared report, so both read exactly like the
exercise the learner sees.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from typing import Final, TypeAlias

from lexical_gap.models.exercise import AnswerMap, Blank, Exercise

MARKER_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{\{([0-9]+)\}\}")

NO_ANSWER: Final[str] = "No Answer"

Resolver: TypeAlias = Callable[[int], str]


@dataclass(frozen=True, slots=True)
class LiteralText:
    text: str


@dataclass(frozen=True, slots=True)
class BlankRef:
    blank_id: int


Segment: TypeAlias = LiteralText | BlankRef


def _iter_markers(content: str) -> Iterator[tuple[re.Match[str], int]]:
    for match in MARKER_PATTERN.finditer(content):
        try:
            blank_id = int(match.group(1))
        except ValueError:
            # Digit strings beyond the int conversion limit are not markers.
            continue
        yield match, blank_id


def segment(content: str) -> list[Segment]:
    """
    Split ``content`` into an ordered list of literal and blank segments.

    Empty literals are not emitted. Unknown ids still produce a ``BlankRef`` so
    the text on either side stays in separate segments.
    """
    segments: list[Segment] = []
    cursor = 0
    for match, blank_id in _iter_markers(content):
        if match.start() > cursor:
            segments.append(LiteralText(content[cursor : match.start()]))
        segments.append(BlankRef(blank_id))
        cursor = match.end()
    if cursor < len(content):
        segments.append(LiteralText(content[cursor:]))
    return segments


def join_segments(segments: Iterable[Segment]) -> str:
    """Rebuild marker text from segments; the inverse of ``segment``."""
    parts: list[str] = []
    for item in segments:
        if isinstance(item, BlankRef):
            parts.append(f"{{{{{item.blank_id}}}}}")
        else:
            parts.append(item.text)
    return "".join(parts)


def marker_ids(content: str) -> list[int]:
    """Return marker ids in order of appearance, repeats included."""
    return [blank_id for _, blank_id in _iter_markers(content)]


def has_marker(content: str) -> bool:
    return next(_iter_markers(content), None) is not None


def resolve(content: str, blanks: Iterable[Blank], resolver: Resolver) -> str:
    """
    Replace every marker in ``content`` with ``resolver(id)``.

    Markers whose id has no matching blank become the empty string.
    """
    known_ids = {blank.id for blank in blanks}

    def _substitute(match: re.Match[str]) -> str:
        try:
            blank_id = int(match.group(1))
        except ValueError:
            return match.group(0)
        if blank_id not in known_ids:
            return ""
        return resolver(blank_id)

    return MARKER_PATTERN.sub(_substitute, content)


def correct_answer_resolver(exercise: Exercise) -> Resolver:
    """Resolver that fills every blank with its correct answer."""
    blanks = exercise.blanks_by_id()

    def _resolve(blank_id: int) -> str:
        blank = blanks.get(blank_id)
        return blank.correct_answer if blank else ""

    return _resolve


def user_answer_resolver(answers: AnswerMap, sentinel: str = NO_ANSWER) -> Resolver:
    """Resolver that renders the learner's choice as ``[answer]``, or ``[sentinel]``."""

    def _resolve(blank_id: int) -> str:
        return f"[{answers.get(blank_id) or sentinel}]"

    return _resolve


def clean_text(exercise: Exercise) -> str:
    """Exercise content with every blank filled by its correct answer."""
    return resolve(exercise.content, exercise.blanks, correct_answer_resolver(exercise))


def answered_text(exercise: Exercise, answers: AnswerMap, sentinel: str = NO_ANSWER) -> str:
    """Exercise content with every blank rendered as the learner's bracketed answer."""
    return resolve(exercise.content, exercise.blanks, user_answer_resolver(answers, sentinel))


__all__ = [
    "BlankRef",
    "LiteralText",
    "MARKER_PATTERN",
    "NO_ANSWER",
    "Resolver",
    "Segment",
    "answered_text",
    "clean_text",
    "correct_answer_resolver",
    "has_marker",
    "join_segments",
    "marker_ids",
    "resolve",
    "segment",
    "user_answer_resolver",
]
