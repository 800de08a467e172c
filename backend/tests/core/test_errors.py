from __future__ import annotations

from typing import AsyncIterator, cast

import pytest
import pytest_asyncio
from fastapi import FastAPI, HTTPException
from fastapi.routing import APIRouter
from httpx import ASGITransport, AsyncClient
from pydantic import BaseModel, Field
from starlette.types import ASGIApp

from lexical_gap.core.errors import (
    GENERIC_GENERATION_MESSAGE,
    ConfigurationError,
    ErrorCode,
    ExternalServiceError,
    GenerationFailed,
    IncompleteAnswersError,
    InvalidTransitionError,
    MalformedContent,
    OperationInProgressError,
    register_exception_handlers,
)


class EchoPayload(BaseModel):
    text: str = Field(min_length=1)


def _build_test_router() -> APIRouter:
    router = APIRouter()

    @router.get("/transition-error")
    async def raise_transition_error() -> None:
        raise InvalidTransitionError("configuring", "submit")

    @router.get("/incomplete")
    async def raise_incomplete() -> None:
        raise IncompleteAnswersError([2, 5])

    @router.get("/config-error")
    async def raise_config_error() -> None:
        raise ConfigurationError()

    @router.post("/echo")
    async def echo(payload: EchoPayload) -> EchoPayload:
        return payload

    @router.get("/http-error")
    async def raise_http_exc() -> None:
        raise HTTPException(status_code=404, detail="Nothing here")

    @router.get("/http-error-with-payload")
    async def raise_http_exc_with_payload() -> None:
        raise HTTPException(
            status_code=409,
            detail={
                "code": ErrorCode.OPERATION_IN_PROGRESS,
                "message": "Busy",
                "details": {"operation": "translation"},
            },
        )

    @router.get("/crash")
    async def raise_generic_exc() -> None:
        raise RuntimeError("boom")

    return router


@pytest.fixture(scope="module")
def error_test_app() -> FastAPI:
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(_build_test_router())
    return app


@pytest_asyncio.fixture
async def error_test_client(error_test_app: FastAPI) -> AsyncIterator[AsyncClient]:
    # FastAPI implements the ASGI callable interface but type stubs disagree.
    transport = ASGITransport(
        app=cast(ASGIApp, error_test_app),  # type: ignore[arg-type]
        raise_app_exceptions=False,
    )
    client = AsyncClient(transport=transport, base_url="http://testserver")
    try:
        yield client
    finally:
        await client.aclose()


@pytest.mark.asyncio
async def test_invalid_transition_renders_conflict(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/transition-error")

    assert response.status_code == 409
    payload = response.json()["error"]
    assert payload["code"] == "INVALID_TRANSITION"
    assert payload["details"] == {"phase": "configuring", "event": "submit"}


@pytest.mark.asyncio
async def test_incomplete_answers_lists_missing_blanks(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/incomplete")

    assert response.status_code == 409
    payload = response.json()["error"]
    assert payload["code"] == "INCOMPLETE_ANSWERS"
    assert payload["details"]["missing_blank_ids"] == [2, 5]


@pytest.mark.asyncio
async def test_configuration_error_is_service_unavailable(error_test_client: AsyncClient) -> None:
    response = await error_test_client.get("/config-error")

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"
    assert "details" not in response.json()["error"]


@pytest.mark.asyncio
async def test_validation_error_handler_formats_details(error_test_client: AsyncClient) -> None:
    response = await error_test_client.post("/echo", json={"text": ""})

    assert response.status_code == 422
    payload = response.json()["error"]
    assert payload["code"] == str(ErrorCode.VALIDATION_ERROR)
    assert payload["message"] == "Validation error"
    assert "text" in payload["details"]


@pytest.mark.asyncio
async def test_http_exception_without_payload_uses_default_code(
    error_test_client: AsyncClient,
) -> None:
    response = await error_test_client.get("/http-error")

    assert response.status_code == 404
    payload = response.json()["error"]
    assert payload["code"] == str(ErrorCode.NOT_FOUND)
    assert payload["message"] == "Nothing here"


@pytest.mark.asyncio
async def test_http_exception_with_payload_preserves_contract(
    error_test_client: AsyncClient,
) -> None:
    response = await error_test_client.get("/http-error-with-payload")

    assert response.status_code == 409
    payload = response.json()["error"]
    assert payload["code"] == "OPERATION_IN_PROGRESS"
    assert payload["details"]["operation"] == "translation"


@pytest.mark.asyncio
async def test_unhandled_exception_masked_as_internal_error(
    error_test_client: AsyncClient,
) -> None:
    response = await error_test_client.get("/crash")

    assert response.status_code == 500
    payload = response.json()["error"]
    assert payload["code"] == str(ErrorCode.INTERNAL_ERROR)
    assert "try again later" in payload["message"]


def test_generation_failed_uses_generic_message() -> None:
    error = GenerationFailed(details={"cause": "decode"})

    assert error.status_code == 502
    assert error.message == GENERIC_GENERATION_MESSAGE
    assert error.code == "GENERATION_FAILED"


def test_malformed_content_is_a_generation_failure() -> None:
    error = MalformedContent()

    assert isinstance(error, GenerationFailed)
    assert error.code == "MALFORMED_CONTENT"


def test_operation_in_progress_names_operation() -> None:
    error = OperationInProgressError("topic suggestion")

    assert error.status_code == 409
    assert error.details == {"operation": "topic suggestion"}


def test_external_service_error_rejects_non_gateway_status() -> None:
    with pytest.raises(ValueError):
        ExternalServiceError(ErrorCode.SERVICE_UNAVAILABLE, "nope", status_code=400)
