"""Value objects describing a generated fill-in-the-blank exercise."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TypeAlias

AnswerMap: TypeAlias = dict[int, str]
"""Blank id -> the option the learner currently has selected."""


@dataclass(frozen=True, slots=True)
class Blank:
    """One gap in the exercise text with its multiple-choice options."""

    id: int
    correct_answer: str
    options: tuple[str, ...]
    # Always authored in the pivot language, whatever the exercise language.
    explanation: str

    def is_correct(self, answer: str | None) -> bool:
        return answer is not None and answer == self.correct_answer


@dataclass(frozen=True, slots=True)
class Exercise:
    """
    A generated reading passage with inline ``{{id}}`` markers.

    Exercises are created once per generation cycle and replaced wholesale by
    the next one; nothing mutates them in place.
    """

    title: str
    content: str
    reference_translation: str
    blanks: tuple[Blank, ...] = field(default_factory=tuple)

    @property
    def blank_ids(self) -> tuple[int, ...]:
        return tuple(blank.id for blank in self.blanks)

    def get_blank(self, blank_id: int) -> Blank | None:
        for blank in self.blanks:
            if blank.id == blank_id:
                return blank
        return None

    def blanks_by_id(self) -> dict[int, Blank]:
        return {blank.id: blank for blank in self.blanks}


__all__ = ["AnswerMap", "Blank", "Exercise"]
