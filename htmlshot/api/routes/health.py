"""
Health Routes
=============

FastAPI routes for health check endpoints.
"""

from fastapi import APIRouter

from htmlshot.config.settings import get_settings
from htmlshot.models.schemas import HealthStatus

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthStatus)
async def health_check() -> HealthStatus:
    """
    Basic health check endpoint.

    Browsers are launched per request, so there is no pool to probe; the
    service is healthy when it can answer.
    """
    settings = get_settings()
    return HealthStatus(
        message=f"{settings.app_name} is running",
        status="healthy",
        version=settings.app_version,
    )
