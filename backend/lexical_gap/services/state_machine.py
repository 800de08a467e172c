"""Pure phase reducer for the exercise lifecycle."""

from __future__ import annotations

from typing import Final, Mapping

from lexical_gap.core.errors import InvalidTransitionError
from lexical_gap.models.session import SessionEvent, SessionPhase

_Phase = SessionPhase
_Event = SessionEvent

TRANSITIONS: Final[Mapping[tuple[SessionPhase, SessionEvent], SessionPhase]] = {
    (_Phase.CONFIGURING, _Event.START): _Phase.LOADING,
    (_Phase.LOADING, _Event.SUCCEED): _Phase.PLAYING,
    (_Phase.LOADING, _Event.FAIL): _Phase.ERRORED,
    (_Phase.ERRORED, _Event.RETRY): _Phase.CONFIGURING,
    (_Phase.PLAYING, _Event.SUBMIT): _Phase.RESULTS,
    (_Phase.RESULTS, _Event.RESTART): _Phase.CONFIGURING,
    # "New game" abandons whatever is on screen, a pending generation included.
    (_Phase.LOADING, _Event.NEW_GAME): _Phase.CONFIGURING,
    (_Phase.PLAYING, _Event.NEW_GAME): _Phase.CONFIGURING,
    (_Phase.RESULTS, _Event.NEW_GAME): _Phase.CONFIGURING,
    (_Phase.ERRORED, _Event.NEW_GAME): _Phase.CONFIGURING,
}


def transition(phase: SessionPhase, event: SessionEvent) -> SessionPhase:
    """Return the phase reached by applying ``event`` in ``phase``.

    Raises:
        InvalidTransitionError: The pair is not in the transition table
    """
    try:
        return TRANSITIONS[(phase, event)]
    except KeyError:
        raise InvalidTransitionError(phase.value, event.value) from None


__all__ = ["TRANSITIONS", "transition"]
