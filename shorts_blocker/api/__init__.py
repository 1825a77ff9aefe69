"""
API Module
==========

FastAPI routes for the blocker's settings and status.

This package contains:
    - routes/: REST API endpoints
    - deps: Dependencies resolving the store and service
"""

from shorts_blocker.api.routes import health_router, packages_router, service_router

__all__ = [
    "health_router",
    "packages_router",
    "service_router",
]
