"""
Health check endpoint

GET /api/health - server status
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from core.config.loader import Settings
from web.dependencies import get_app_settings
from web.models.responses import HealthResponse

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """Server status

    Returns:
        HealthResponse: status, environment, timestamp
    """
    return HealthResponse(
        status="ok",
        environment=settings.environment.value,
        timestamp=datetime.now(timezone.utc),
    )
