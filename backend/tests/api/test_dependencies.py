from __future__ import annotations

from lexical_gap.api.dependencies import build_session_service
from lexical_gap.core.config import Settings


def test_session_service_uses_store_limits_from_settings() -> None:
    config = Settings(  # type: ignore[call-arg]
        OPENAI_API_KEY="sk-test",
        SESSION_TTL_SECONDS=120,
        MAX_SESSIONS=5,
    )

    service = build_session_service(config)

    assert service.session_ttl_seconds == 120
    assert service.max_sessions == 5
    assert service.generation_enabled is True


def test_session_service_without_key_disables_generation() -> None:
    config = Settings(OPENAI_API_KEY="")  # type: ignore[call-arg]

    assert build_session_service(config).generation_enabled is False
