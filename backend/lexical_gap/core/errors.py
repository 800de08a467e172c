"""Domain error taxonomy and the FastAPI handlers that render it."""

from __future__ import annotations

import logging
from enum import StrEnum
from http import HTTPStatus
from typing import Any, ClassVar, Mapping, Sequence

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("lexical_gap.errors")

GENERIC_GENERATION_MESSAGE = (
    "Failed to generate content. Please check your connection or API limit and try again."
)


class ErrorCode(StrEnum):
    """Canonical error codes returned in the public error envelope."""

    # Validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNSUPPORTED_LANGUAGE = "UNSUPPORTED_LANGUAGE"
    UNKNOWN_BLANK = "UNKNOWN_BLANK"
    INVALID_OPTION = "INVALID_OPTION"

    # Resources
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"

    # Session lifecycle
    INVALID_TRANSITION = "INVALID_TRANSITION"
    INCOMPLETE_ANSWERS = "INCOMPLETE_ANSWERS"
    OPERATION_IN_PROGRESS = "OPERATION_IN_PROGRESS"
    NO_EXERCISE = "NO_EXERCISE"

    # Generative model
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    GENERATION_FAILED = "GENERATION_FAILED"
    MALFORMED_CONTENT = "MALFORMED_CONTENT"
    TOPIC_SUGGESTION_FAILED = "TOPIC_SUGGESTION_FAILED"
    TRANSLATION_FAILED = "TRANSLATION_FAILED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Transport/common
    INTERNAL_ERROR = "INTERNAL_ERROR"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    CONFLICT = "CONFLICT"


_CODE_FOR_STATUS: dict[int, ErrorCode] = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
    status.HTTP_502_BAD_GATEWAY: ErrorCode.SERVICE_UNAVAILABLE,
    status.HTTP_503_SERVICE_UNAVAILABLE: ErrorCode.SERVICE_UNAVAILABLE,
}


class ApplicationError(Exception):
    """
    Base for every error rendered in the public API.

    Subclasses pick their HTTP status through ``default_status_code``; callers
    may still override it per instance.
    """

    default_status_code: ClassVar[int] = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        status_code: int | None = None,
        details: object | None = None,
    ) -> None:
        super().__init__(message)
        self.code = str(code)
        self.message = message
        self.status_code = status_code or self.default_status_code
        self.details = details


class NotFoundError(ApplicationError):
    default_status_code = status.HTTP_404_NOT_FOUND


class ConflictError(ApplicationError):
    """The request clashes with the current session state."""

    default_status_code = status.HTTP_409_CONFLICT


class ExternalServiceError(ApplicationError):
    """The generative model failed; always a 502 or a 503."""

    default_status_code = status.HTTP_502_BAD_GATEWAY

    def __init__(
        self,
        code: ErrorCode | str,
        message: str,
        *,
        status_code: int | None = None,
        details: object | None = None,
    ) -> None:
        super().__init__(code, message, status_code=status_code, details=details)
        if self.status_code not in (
            status.HTTP_502_BAD_GATEWAY,
            status.HTTP_503_SERVICE_UNAVAILABLE,
        ):
            raise ValueError("External service errors must map to 502 or 503.")


class ConfigurationError(ExternalServiceError):
    """No model credential is configured, so nothing can be generated."""

    default_status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, message: str = "API key is missing from the environment.") -> None:
        super().__init__(ErrorCode.CONFIGURATION_ERROR, message)


class GenerationFailed(ExternalServiceError):
    """Exercise generation failed: transport error, undecodable payload, or bad content."""

    def __init__(
        self,
        message: str = GENERIC_GENERATION_MESSAGE,
        *,
        code: ErrorCode | str = ErrorCode.GENERATION_FAILED,
        details: object | None = None,
    ) -> None:
        super().__init__(code, message, details=details)


class MalformedContent(GenerationFailed):
    """The decoded exercise has no usable blank markers."""

    def __init__(self, message: str = "Generated text is missing placeholders.") -> None:
        super().__init__(message, code=ErrorCode.MALFORMED_CONTENT)


class TopicSuggestionFailed(ExternalServiceError):
    def __init__(self, message: str = "Topic suggestions are unavailable.") -> None:
        super().__init__(ErrorCode.TOPIC_SUGGESTION_FAILED, message)


class TranslationFailed(ExternalServiceError):
    def __init__(self, message: str = "Translation is unavailable.") -> None:
        super().__init__(ErrorCode.TRANSLATION_FAILED, message)


class InvalidTransitionError(ConflictError):
    """The requested lifecycle event is not allowed from the current phase."""

    def __init__(self, phase: str, event: str) -> None:
        super().__init__(
            ErrorCode.INVALID_TRANSITION,
            f"Cannot {event} while the session is {phase}.",
            details={"phase": phase, "event": event},
        )
        self.phase = phase
        self.event = event


class IncompleteAnswersError(ConflictError):
    """Submitting requires an answer for every blank."""

    def __init__(self, missing: Sequence[int]) -> None:
        self.missing = list(missing)
        super().__init__(
            ErrorCode.INCOMPLETE_ANSWERS,
            "Answer every blank before checking your answers.",
            details={"missing_blank_ids": self.missing},
        )


class OperationInProgressError(ConflictError):
    """A request of the same kind is already outstanding for this session."""

    def __init__(self, operation: str) -> None:
        super().__init__(
            ErrorCode.OPERATION_IN_PROGRESS,
            f"A {operation} request is already in progress.",
            details={"operation": operation},
        )
        self.operation = operation


def error_response(
    status_code: int,
    code: ErrorCode | str,
    message: str,
    details: object | None = None,
) -> JSONResponse:
    """Render the ``{"error": {code, message, details?}}`` envelope."""
    error: dict[str, Any] = {"code": str(code), "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(content=jsonable_encoder({"error": error}), status_code=status_code)


async def _handle_application_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, ApplicationError)
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


async def _handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, RequestValidationError)
    fields: dict[str, str] = {}
    for error in exc.errors():
        field = _field_name(error.get("loc") or ())
        message = error.get("msg", "Invalid value")
        fields[field] = f"{fields[field]}; {message}" if field in fields else message
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode.VALIDATION_ERROR,
        "Validation error",
        fields or None,
    )


async def _handle_http_exception(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, StarletteHTTPException)
    phrase = HTTPStatus(exc.status_code).phrase
    default_code = _CODE_FOR_STATUS.get(exc.status_code, ErrorCode.INTERNAL_ERROR)
    if isinstance(exc.detail, Mapping):
        return error_response(
            exc.status_code,
            exc.detail.get("code") or default_code,
            str(exc.detail.get("message") or phrase),
            exc.detail.get("details"),
        )
    return error_response(exc.status_code, default_code, str(exc.detail or phrase))


async def _handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception during request",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"http_path": request.url.path},
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorCode.INTERNAL_ERROR,
        "Internal server error. Please try again later.",
    )


def _field_name(location: Sequence[object]) -> str:
    parts = [str(part) for part in location if part not in {"body", "query", "path"}]
    if not parts:
        parts = [str(part) for part in location]
    return ".".join(parts) or "_schema"


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the envelope-producing handlers to ``app``."""
    app.add_exception_handler(ApplicationError, _handle_application_error)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(Exception, _handle_unexpected)


__all__ = [
    "ApplicationError",
    "ConfigurationError",
    "ConflictError",
    "ErrorCode",
    "ExternalServiceError",
    "GENERIC_GENERATION_MESSAGE",
    "GenerationFailed",
    "IncompleteAnswersError",
    "InvalidTransitionError",
    "MalformedContent",
    "NotFoundError",
    "OperationInProgressError",
    "TopicSuggestionFailed",
    "TranslationFailed",
    "error_response",
    "register_exception_handlers",
]
