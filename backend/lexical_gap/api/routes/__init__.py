"""Router aggregations for public API endpoints."""

from fastapi import APIRouter

from lexical_gap.api.routes import config, health, sessions
from lexical_gap.core.config import settings

# Health router (no prefix)
root_router = APIRouter()
root_router.include_router(health.router, tags=["health"])

# API routers with the configured prefix
api_router = APIRouter(prefix=settings.api_v1_prefix)
api_router.include_router(config.router)
api_router.include_router(sessions.router)

__all__ = ["api_router", "root_router"]
