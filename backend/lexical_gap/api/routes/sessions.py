"""Session lifecycle endpoints: generation, answering, reference panel, and sharing."""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Path, status

from lexical_gap.api.dependencies import get_session_service
from lexical_gap.models.catalog import DEFAULT_TEMPERATURE
from lexical_gap.schemas.session import (
    AnswerRequest,
    ReferenceLanguageRequest,
    SessionView,
    ShareResponse,
    StartRequest,
    TopicsRequest,
)
from lexical_gap.services.session import SessionService

router = APIRouter(prefix="/sessions", tags=["sessions"])

SessionId = Annotated[UUID, Path(description="Session identifier")]
Service = Annotated[SessionService, Depends(get_session_service)]


@router.post(
    "",
    response_model=SessionView,
    status_code=status.HTTP_201_CREATED,
    summary="Open a new session",
)
async def create_session(service: Service) -> SessionView:
    return SessionView.from_session(service.create_session())


@router.get("/{session_id}", response_model=SessionView, summary="Return the session state")
async def get_session(session_id: SessionId, service: Service) -> SessionView:
    return SessionView.from_session(service.get_session(session_id))


@router.delete(
    "/{session_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Close a session",
)
async def delete_session(session_id: SessionId, service: Service) -> None:
    service.delete_session(session_id)


@router.post(
    "/{session_id}/start",
    response_model=SessionView,
    summary="Generate an exercise",
)
async def start(session_id: SessionId, payload: StartRequest, service: Service) -> SessionView:
    """
    Generate a new exercise and return the session once it is Playing or Errored.

    The reference translation may still be in progress when this returns.
    """
    session = await service.start(session_id, payload.to_domain())
    return SessionView.from_session(session)


@router.post("/{session_id}/retry", response_model=SessionView, summary="Leave the error screen")
async def retry(session_id: SessionId, service: Service) -> SessionView:
    return SessionView.from_session(service.retry(session_id))


@router.put(
    "/{session_id}/answers/{blank_id}",
    response_model=SessionView,
    summary="Select an option for a blank",
)
async def select_answer(
    session_id: SessionId,
    blank_id: Annotated[int, Path(description="Blank identifier")],
    payload: AnswerRequest,
    service: Service,
) -> SessionView:
    return SessionView.from_session(service.select_answer(session_id, blank_id, payload.value))


@router.post("/{session_id}/submit", response_model=SessionView, summary="Check the answers")
async def submit(session_id: SessionId, service: Service) -> SessionView:
    return SessionView.from_session(service.submit(session_id))


@router.post("/{session_id}/restart", response_model=SessionView, summary="Start over")
async def restart(session_id: SessionId, service: Service) -> SessionView:
    return SessionView.from_session(service.restart(session_id))


@router.post(
    "/{session_id}/new-game",
    response_model=SessionView,
    summary="Abandon the current exercise",
)
async def new_game(session_id: SessionId, service: Service) -> SessionView:
    return SessionView.from_session(service.new_game(session_id))


@router.put(
    "/{session_id}/reference-language",
    response_model=SessionView,
    summary="Switch the reference translation language",
)
async def change_reference_language(
    session_id: SessionId,
    payload: ReferenceLanguageRequest,
    service: Service,
) -> SessionView:
    session = await service.change_reference_language(session_id, payload.language.strip())
    return SessionView.from_session(session)


@router.post(
    "/{session_id}/topics",
    response_model=SessionView,
    summary="Suggest new reading topics",
)
async def suggest_topics(
    session_id: SessionId,
    service: Service,
    payload: Annotated[TopicsRequest | None, Body()] = None,
) -> SessionView:
    temperature = payload.temperature if payload else DEFAULT_TEMPERATURE
    session = await service.suggest_topics(session_id, temperature)
    return SessionView.from_session(session)


@router.get(
    "/{session_id}/share",
    response_model=ShareResponse,
    summary="Build the shareable results report",
)
async def share(session_id: SessionId, service: Service) -> ShareResponse:
    report = service.share(session_id)
    return ShareResponse(subject=report.subject, body=report.body, link=report.link)
