"""Shared FastAPI dependency builders."""

from __future__ import annotations

import logging
from functools import lru_cache

from lexical_gap.core.config import Settings, settings
from lexical_gap.services.content import ContentRequestService
from lexical_gap.services.session import SessionService

logger = logging.getLogger("lexical_gap.api.dependencies")


def build_content_service(config: Settings = settings) -> ContentRequestService | None:
    """Factory helper for ContentRequestService; None when no API key is configured."""
    if not config.generation_enabled or config.openai_api_key is None:
        logger.warning("OPENAI_API_KEY is not set; exercise generation is disabled")
        return None
    return ContentRequestService(
        api_key=config.openai_api_key.get_secret_value(),
        model=config.llm_model,
        default_timeout=config.llm_timeout,
        pivot_language=config.pivot_language,
    )


def build_session_service(config: Settings = settings) -> SessionService:
    return SessionService(
        build_content_service(config),
        pivot_language=config.pivot_language,
        secondary_language=config.secondary_language,
        share_preview_max_chars=config.share_preview_max_chars,
        share_compose_url=config.share_compose_url,
        session_ttl_seconds=config.session_ttl_seconds,
        max_sessions=config.max_sessions,
    )


@lru_cache
def get_session_service() -> SessionService:
    """Return the process-wide session service; sessions live only in memory."""
    return build_session_service()


__all__ = ["build_content_service", "build_session_service", "get_session_service"]
