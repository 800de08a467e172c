from __future__ import annotations

import pytest
from pydantic import ValidationError
from pydantic_settings import PydanticBaseSettingsSource

from lexical_gap.core.config import DEFAULT_SHARE_COMPOSE_URL, Settings

SettingsPayload = dict[str, object]


def build_settings(**overrides: object) -> Settings:
    return NoEnvSettings.model_validate(dict(overrides))


class NoEnvSettings(Settings):
    """Helper subclass that ignores the environment and .env files during validation."""

    model_config = Settings.model_config.copy()
    model_config["env_file"] = ()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[Settings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (init_settings,)


def test_settings_defaults() -> None:
    settings = build_settings()

    assert settings.project_name == "Lexical Gap"
    assert settings.api_v1_prefix == "/api"
    assert settings.pivot_language == "English"
    assert settings.secondary_language == "Spanish"
    assert settings.share_preview_max_chars == 1500
    assert settings.share_compose_url == DEFAULT_SHARE_COMPOSE_URL
    assert settings.cors_origins == []
    assert settings.session_ttl_seconds == 3600
    assert settings.max_sessions == 10_000


def test_generation_disabled_without_api_key() -> None:
    assert build_settings().generation_enabled is False
    assert build_settings(OPENAI_API_KEY="   ").generation_enabled is False


def test_generation_enabled_with_api_key() -> None:
    settings = build_settings(OPENAI_API_KEY="sk-test")

    assert settings.generation_enabled is True
    assert settings.openai_api_key is not None
    assert settings.openai_api_key.get_secret_value() == "sk-test"


def test_settings_strip_language_names() -> None:
    settings = build_settings(PIVOT_LANGUAGE="  French ", SECONDARY_LANGUAGE="Italian")

    assert settings.pivot_language == "French"


def test_settings_reject_blank_model_name() -> None:
    with pytest.raises(ValidationError):
        build_settings(LLM_MODEL="   ")


def test_settings_reject_same_pivot_and_secondary_language() -> None:
    with pytest.raises(ValidationError) as exc:
        build_settings(PIVOT_LANGUAGE="English", SECONDARY_LANGUAGE="English")

    assert "SECONDARY_LANGUAGE" in str(exc.value)


@pytest.mark.parametrize("timeout", [0, -5])
def test_settings_reject_non_positive_timeout(timeout: float) -> None:
    with pytest.raises(ValidationError):
        build_settings(LLM_TIMEOUT=timeout)


def test_settings_reject_non_positive_preview_length() -> None:
    with pytest.raises(ValidationError):
        build_settings(SHARE_PREVIEW_MAX_CHARS=0)


def test_settings_reject_relative_compose_url() -> None:
    with pytest.raises(ValidationError):
        build_settings(SHARE_COMPOSE_URL="mail.google.com/mail")


def test_settings_cors_origins_from_comma_list() -> None:
    settings = build_settings(
        BACKEND_CORS_ORIGINS="http://localhost:5173, http://localhost:3000/",
    )

    assert settings.cors_origins == ["http://localhost:5173", "http://localhost:3000"]


def test_settings_parse_cors_from_json_array() -> None:
    origins = Settings.parse_cors_origins('["https://one.com", "https://two.com/"]')
    assert origins == ["https://one.com", "https://two.com"]


def test_settings_parse_cors_blank_value() -> None:
    assert Settings.parse_cors_origins("   ") == []
    assert Settings.parse_cors_origins(None) == []


@pytest.mark.parametrize("field", ["SESSION_TTL_SECONDS", "MAX_SESSIONS"])
def test_settings_reject_non_positive_session_limits(field: str) -> None:
    with pytest.raises(ValidationError) as exc:
        build_settings(**{field: 0})

    assert field in str(exc.value)
