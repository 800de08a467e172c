"""Static catalog and feature flags for the presentation layer."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lexical_gap.api.dependencies import get_session_service
from lexical_gap.models.catalog import DEFAULT_LEVEL, LANGUAGES, SAMPLE_TOPICS, CEFRLevel
from lexical_gap.schemas.session import (
    ConfigResponse,
    LanguageView,
    LevelView,
    TemperatureBounds,
)
from lexical_gap.services.session import SessionService

router = APIRouter(tags=["config"])


@router.get("/config", response_model=ConfigResponse, summary="Languages, levels, and limits")
async def get_config(
    service: SessionService = Depends(get_session_service),  # noqa: B008
) -> ConfigResponse:
    return ConfigResponse(
        languages=[LanguageView(name=item.name, direction=item.direction) for item in LANGUAGES],
        levels=[LevelView(code=level, description=level.description) for level in CEFRLevel],
        default_level=DEFAULT_LEVEL,
        sample_topics=list(SAMPLE_TOPICS),
        temperature=TemperatureBounds(),
        pivot_language=service.pivot_language,
        generation_enabled=service.generation_enabled,
    )
