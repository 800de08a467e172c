from __future__ import annotations

import pytest

from lexical_gap.core.errors import InvalidTransitionError
from lexical_gap.models.session import SessionEvent, SessionPhase
from lexical_gap.services.state_machine import TRANSITIONS, transition

P = SessionPhase
E = SessionEvent


@pytest.mark.parametrize(
    ("phase", "event", "expected"),
    [
        (P.CONFIGURING, E.START, P.LOADING),
        (P.LOADING, E.SUCCEED, P.PLAYING),
        (P.LOADING, E.FAIL, P.ERRORED),
        (P.ERRORED, E.RETRY, P.CONFIGURING),
        (P.PLAYING, E.SUBMIT, P.RESULTS),
        (P.RESULTS, E.RESTART, P.CONFIGURING),
    ],
)
def test_lifecycle_transitions(phase: SessionPhase, event: SessionEvent, expected: SessionPhase) -> None:
    assert transition(phase, event) is expected


@pytest.mark.parametrize("phase", [P.LOADING, P.PLAYING, P.RESULTS, P.ERRORED])
def test_new_game_escapes_every_non_configuring_phase(phase: SessionPhase) -> None:
    assert transition(phase, E.NEW_GAME) is P.CONFIGURING


def test_new_game_not_available_while_configuring() -> None:
    with pytest.raises(InvalidTransitionError):
        transition(P.CONFIGURING, E.NEW_GAME)


def test_errored_only_reachable_from_loading() -> None:
    sources = {phase for (phase, _), target in TRANSITIONS.items() if target is P.ERRORED}

    assert sources == {P.LOADING}


def test_every_other_pair_is_rejected() -> None:
    for phase in SessionPhase:
        for event in SessionEvent:
            if (phase, event) in TRANSITIONS:
                continue
            with pytest.raises(InvalidTransitionError) as exc:
                transition(phase, event)
            assert exc.value.phase == phase.value
            assert exc.value.event == event.value


def test_start_rejected_while_loading() -> None:
    with pytest.raises(InvalidTransitionError, match="Cannot start while the session is loading"):
        transition(P.LOADING, E.START)
