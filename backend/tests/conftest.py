from __future__ import annotations

import os
from typing import Final

import pytest

_TEST_ENV_VARS: Final[dict[str, str]] = {
    "OPENAI_API_KEY": "sk-test",
}

for key, value in _TEST_ENV_VARS.items():
    os.environ.setdefault(key, value)

from lexical_gap.models.exercise import Blank, Exercise  # noqa: E402
from tests.helpers import FakeContentService  # noqa: E402


@pytest.fixture()
def sample_exercise() -> Exercise:
    return Exercise(
        title="A Day Out",
        content="I {{1}} the ball and {{2}} home.",
        reference_translation="I kicked the ball and went home.",
        blanks=(
            Blank(
                id=1,
                correct_answer="kicked",
                options=("kicked", "kissed", "cooked", "picked"),
                explanation="'Kick the ball' is the natural collocation.",
            ),
            Blank(
                id=2,
                correct_answer="went",
                options=("walked", "went", "gone", "goes"),
                explanation="'Go home' takes no preposition.",
            ),
        ),
    )


@pytest.fixture()
def fake_content(sample_exercise: Exercise) -> FakeContentService:
    return FakeContentService(sample_exercise)
