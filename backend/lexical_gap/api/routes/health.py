"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Literal

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from lexical_gap.api.dependencies import get_session_service
from lexical_gap.core.version import APP_VERSION
from lexical_gap.services.session import SessionService

router = APIRouter()


class HealthResponse(BaseModel):
    """Schema returned by the /health endpoint."""

    status: Literal["healthy", "degraded"]
    timestamp: datetime
    generation_enabled: bool
    version: str = Field(default=APP_VERSION)


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
    tags=["health"],
)
async def health(
    service: SessionService = Depends(get_session_service),  # noqa: B008
) -> HealthResponse:
    """
    Return the current application health snapshot.

    The service is reported as degraded, not down, when no model credential is
    configured: sessions still work but nothing can be generated.
    """

    return HealthResponse(
        status="healthy" if service.generation_enabled else "degraded",
        timestamp=datetime.now(tz=timezone.utc),
        generation_enabled=service.generation_enabled,
        version=APP_VERSION,
    )
