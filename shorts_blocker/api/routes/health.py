"""
Health Check Routes
===================

Endpoints for health monitoring and service status.
"""

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends

from shorts_blocker.config import Settings, get_settings

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", summary="Basic health check")
async def health_check() -> dict[str, str]:
    """Simple status message indicating the API is running."""
    return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}


@router.get("/live", summary="Liveness probe")
async def liveness_check() -> dict[str, str]:
    return {"status": "alive"}


@router.get("/info", summary="Service information")
async def service_info(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """
    Get detailed service information.

    Returns:
        Service version, detection configuration, and environment info.
    """
    from shorts_blocker import __version__

    return {
        "service": "shorts-blocker",
        "version": __version__,
        "environment": settings.server.environment,
        "config": {
            "cooldown_ms": settings.detection.cooldown_ms,
            "youtube_heuristic": settings.detection.youtube_heuristic,
            "instagram_heuristic": settings.detection.instagram_heuristic,
            "poll_interval": settings.service.poll_interval,
            "debug_mode": settings.server.debug,
        },
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
