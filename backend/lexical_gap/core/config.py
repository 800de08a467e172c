"""
Environment-driven settings for the Lexical Gap backend.

Only ``OPENAI_API_KEY`` matters for generation; without it the service still
boots and serves sessions but every model call is refused.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from functools import lru_cache

from pydantic import (
    Field,
    SecretStr,
    ValidationInfo,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SHARE_COMPOSE_URL = "https://mail.google.com/mail/?view=cm&fs=1"
DEFAULT_SESSION_TTL_SECONDS = 3600
DEFAULT_MAX_SESSIONS = 10_000


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    project_name: str = Field(default="Lexical Gap", alias="PROJECT_NAME")
    debug: bool = Field(default=False, alias="DEBUG")
    api_v1_prefix: str = Field(default="/api", alias="API_V1_PREFIX")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    openai_api_key: SecretStr | None = Field(
        default=None,
        alias="OPENAI_API_KEY",
        description="Credential for the generative model. Generation is disabled without it.",
    )
    llm_model: str = Field(default="gpt-4.1-mini", alias="LLM_MODEL")
    llm_timeout: float = Field(default=60.0, alias="LLM_TIMEOUT")

    pivot_language: str = Field(
        default="English",
        alias="PIVOT_LANGUAGE",
        description="Language of blank explanations and of the cached reference translation.",
    )
    secondary_language: str = Field(
        default="Spanish",
        alias="SECONDARY_LANGUAGE",
        description="Default reference language when the learner studies the pivot language.",
    )

    share_preview_max_chars: int = Field(default=1500, alias="SHARE_PREVIEW_MAX_CHARS")
    share_compose_url: str = Field(default=DEFAULT_SHARE_COMPOSE_URL, alias="SHARE_COMPOSE_URL")

    session_ttl_seconds: int = Field(
        default=DEFAULT_SESSION_TTL_SECONDS,
        alias="SESSION_TTL_SECONDS",
        description="Sessions untouched for longer than this are dropped.",
    )
    max_sessions: int = Field(
        default=DEFAULT_MAX_SESSIONS,
        alias="MAX_SESSIONS",
        description="Upper bound on live sessions; the least recently used go first.",
    )

    raw_backend_cors_origins: str | None = Field(
        default=None,
        alias="BACKEND_CORS_ORIGINS",
        description="Comma-separated list or JSON array of allowed browser origins.",
    )

    @field_validator("llm_model", "pivot_language", "secondary_language", mode="before")
    @classmethod
    def _strip_string(cls, value: str | None, info: ValidationInfo) -> str:
        trimmed = (value or "").strip()
        if not trimmed:
            raise ValueError(f"{(info.field_name or 'value').upper()} must not be empty.")
        return trimmed

    @field_validator("llm_timeout")
    @classmethod
    def _validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("LLM_TIMEOUT must be a positive number of seconds.")
        return value

    @field_validator("session_ttl_seconds", "max_sessions")
    @classmethod
    def _validate_session_limits(cls, value: int, info: ValidationInfo) -> int:
        if value <= 0:
            field = (info.field_name or "value").upper()
            raise ValueError(f"{field} must be a positive integer.")
        return value

    @field_validator("share_preview_max_chars")
    @classmethod
    def _validate_preview_length(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("SHARE_PREVIEW_MAX_CHARS must be a positive integer.")
        return value

    @field_validator("share_compose_url")
    @classmethod
    def _validate_compose_url(cls, value: str) -> str:
        candidate = value.strip()
        if not candidate.startswith(("http://", "https://")):
            raise ValueError("SHARE_COMPOSE_URL must be an absolute http(s) URL.")
        return candidate

    @model_validator(mode="after")
    def _validate_languages(self) -> "Settings":
        if self.pivot_language == self.secondary_language:
            raise ValueError("SECONDARY_LANGUAGE must differ from PIVOT_LANGUAGE.")
        return self

    @computed_field(return_type=bool)
    def generation_enabled(self) -> bool:
        """Whether a usable credential is configured for the generative model."""
        if self.openai_api_key is None:
            return False
        return bool(self.openai_api_key.get_secret_value().strip())

    @property
    def cors_origins(self) -> list[str]:
        """Return the normalized list of browser origins allowed by CORS."""
        return self.parse_cors_origins(self.raw_backend_cors_origins)

    @staticmethod
    def parse_cors_origins(value: str | None) -> list[str]:
        """Split BACKEND_CORS_ORIGINS, given as a comma list or a JSON array."""
        normalized = (value or "").strip()
        candidates: Sequence[object] = normalized.split(",")
        if normalized.startswith("["):
            try:
                candidates = json.loads(normalized)
            except json.JSONDecodeError:
                candidates = normalized.split(",")
            if not isinstance(candidates, list):
                candidates = [candidates]
        origins = (str(origin).strip().rstrip("/") for origin in candidates)
        return [origin for origin in origins if origin]


@lru_cache
def get_settings() -> Settings:
    """Settings are read from the environment once per process."""
    return Settings()  # type: ignore[call-arg]


settings = get_settings()
