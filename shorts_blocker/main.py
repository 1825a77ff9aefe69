"""
Shorts Blocker - Settings API
=============================

FastAPI application exposing the blocker's preferences and status.

This module sets up:
- FastAPI application with route registration
- Request logging middleware
- Lifespan management, optionally running the blocker service in the
  same event loop

Usage:
    # Preferences API only
    uvicorn shorts_blocker.main:app --host 127.0.0.1 --port 8000

    # API plus blocker service
    shorts-blocker serve
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shorts_blocker import __version__
from shorts_blocker.api.routes import health_router, packages_router, service_router
from shorts_blocker.config import get_settings
from shorts_blocker.preferences.store import PreferencesStore
from shorts_blocker.service import BlockerService
from shorts_blocker.utils.logger import get_logger

logger = get_logger(__name__)


def create_app(
    store: Optional[PreferencesStore] = None,
    service: Optional[BlockerService] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Preferences store. Defaults to the service's store, then to
            the configured preferences path.
        service: Blocker service to run alongside the API.

    Returns:
        Configured FastAPI app.
    """
    settings = get_settings()
    if store is None:
        store = service.store if service else PreferencesStore(settings.service.preferences_path)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(
            "Starting Shorts Blocker API",
            version=__version__,
            environment=settings.server.environment,
        )

        task: Optional[asyncio.Task] = None
        if service is not None:
            if await service.connect():
                task = asyncio.create_task(service.run())
            else:
                logger.error("Blocker service could not connect, serving preferences only")

        yield

        if task is not None:
            await service.shutdown()
            await task
        logger.info("Shutting down Shorts Blocker API")

    app = FastAPI(
        title="Shorts Blocker",
        description="Preferences and status API for the short-form content blocker.",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs" if settings.server.debug else None,
        redoc_url=None,
        openapi_url="/openapi.json" if settings.server.debug else None,
    )
    app.state.store = store
    app.state.service = service

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests with timing."""
        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(duration_ms, 2),
        )
        response.headers["X-Response-Time"] = f"{duration_ms:.2f}ms"
        return response

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        logger.exception(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "detail": str(exc) if settings.server.debug else "An unexpected error occurred",
            },
        )

    app.include_router(health_router)
    app.include_router(packages_router)
    app.include_router(service_router)

    @app.get("/", include_in_schema=False)
    async def root() -> dict[str, Any]:
        """Root endpoint with service information."""
        return {
            "service": "Shorts Blocker",
            "version": __version__,
            "health": "/health",
        }

    return app


app = create_app()
