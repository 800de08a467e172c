"""Tests for main application module."""

from __future__ import annotations

from fastapi.testclient import TestClient

from lexical_gap.api.dependencies import get_session_service
from lexical_gap.main import app, create_app


class _DrainRecorder:
    def __init__(self) -> None:
        self.drained = False
        self.generation_enabled = True

    async def drain(self) -> None:
        self.drained = True


def test_app_title() -> None:
    """Test that app has correct title."""
    assert app.title == "Lexical Gap"


def test_app_has_routers() -> None:
    """Test that API routers are included."""
    routes = {route.path for route in app.routes}
    assert "/health" in routes
    assert "/api/config" in routes
    assert "/api/sessions/{session_id}/share" in routes


def test_openapi_schema() -> None:
    """Test that OpenAPI schema is generated."""
    client = TestClient(app)
    response = client.get("/openapi.json")
    assert response.status_code == 200
    assert "/api/sessions/{session_id}/start" in response.json()["paths"]


def test_shutdown_drains_background_translations() -> None:
    application = create_app()
    recorder = _DrainRecorder()
    application.dependency_overrides[get_session_service] = lambda: recorder

    with TestClient(application):
        pass

    assert recorder.drained is True
