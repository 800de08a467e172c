"""FastAPI application factory and entrypoint."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lexical_gap.api.dependencies import get_session_service
from lexical_gap.api.routes import api_router, root_router
from lexical_gap.core.config import settings
from lexical_gap.core.errors import register_exception_handlers
from lexical_gap.core.logging import configure_logging
from lexical_gap.core.middleware import REQUEST_ID_HEADER, RequestContextMiddleware
from lexical_gap.core.version import APP_VERSION

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
ALLOWED_HEADERS = ["Content-Type", "Accept", "X-Requested-With", REQUEST_ID_HEADER]

configure_logging(settings.log_level)


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""

    application = FastAPI(
        title=settings.project_name,
        debug=settings.debug,
        version=APP_VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    register_exception_handlers(application)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        max_age=86400,
    )
    application.add_middleware(RequestContextMiddleware)

    application.include_router(root_router)
    application.include_router(api_router)

    @application.on_event("shutdown")
    async def _drain_background_translations() -> None:
        service = application.dependency_overrides.get(get_session_service, get_session_service)()
        await service.drain()

    return application


app = create_app()

__all__ = ["app", "create_app"]
