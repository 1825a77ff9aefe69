"""
API Routes Package
==================

REST API route definitions.
"""

from shorts_blocker.api.routes.health import router as health_router
from shorts_blocker.api.routes.packages import router as packages_router
from shorts_blocker.api.routes.service import router as service_router

__all__ = [
    "health_router",
    "packages_router",
    "service_router",
]
