"""
Service Status Routes
=====================

Read-only view of the running blocker service.
"""

from typing import Any

from fastapi import APIRouter, Depends

from shorts_blocker.api.deps import get_service
from shorts_blocker.service import BlockerService

router = APIRouter(prefix="/service", tags=["Service"])


@router.get("/status", summary="Blocker service status")
async def service_status(service: BlockerService = Depends(get_service)) -> dict[str, Any]:
    """
    Current service state.

    Returns:
        Connection state, tracked packages, last outcome and counters.
    """
    return service.status()
