"""
API Dependencies
================

FastAPI dependencies resolving the objects attached to the application.
"""

from typing import Optional

from fastapi import HTTPException, Request, status

from shorts_blocker.preferences.store import PreferencesStore
from shorts_blocker.service import BlockerService


def get_store(request: Request) -> PreferencesStore:
    """Preferences store attached to the app."""
    return request.app.state.store


def get_optional_service(request: Request) -> Optional[BlockerService]:
    """Blocker service attached to the app, if any."""
    return getattr(request.app.state, "service", None)


def get_service(request: Request) -> BlockerService:
    """
    Blocker service attached to the app.

    Raises:
        HTTPException: 503 if the API runs without a service.
    """
    service = get_optional_service(request)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Blocker service is not running in this process",
        )
    return service
