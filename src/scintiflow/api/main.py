"""
scintiflow API Main Application

FastAPI application exposing the patient pathway over REST.

Run with:
    uvicorn --factory scintiflow.api.main:create_app
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scintiflow import __version__
from scintiflow.api.routes import patients, statistics
from scintiflow.config import get_settings
from scintiflow.exceptions import (
    ConfigurationError,
    InvalidTransitionError,
    NotFoundError,
    SnapshotError,
    UnknownRoomError,
)
from scintiflow.observability.logging import configure_logging
from scintiflow.store.service import PatientService

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    logger.info(
        "Starting scintiflow API",
        patients=len(app.state.service.repository),
    )
    yield
    logger.info("Shutting down scintiflow API")


# =============================================================================
# Error Handlers
# =============================================================================

def _error_response(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": str(exc)},
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(status.HTTP_404_NOT_FOUND, exc)


async def invalid_transition_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    return _error_response(status.HTTP_409_CONFLICT, exc)


async def server_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Request failed", path=request.url.path, error=str(exc))
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, exc)


# =============================================================================
# Application Factory
# =============================================================================

def create_app(service: PatientService | None = None) -> FastAPI:
    """
    Build the API application.

    Args:
        service: Patient service to serve; built from settings when omitted

    Returns:
        Configured FastAPI application
    """
    if service is None:
        settings = get_settings()
        configure_logging(settings.workflow.log_level, settings.workflow.log_json)
        service = PatientService.from_settings(settings)

    app = FastAPI(
        title="scintiflow API",
        description="Patient pathway tracking for nuclear medicine",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Room ids arrive in the URL, so an unknown one is a 404 rather than a
    # broken configuration.
    app.add_exception_handler(UnknownRoomError, not_found_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(InvalidTransitionError, invalid_transition_handler)
    app.add_exception_handler(ConfigurationError, server_error_handler)
    app.add_exception_handler(SnapshotError, server_error_handler)

    app.include_router(patients.router)
    app.include_router(statistics.router)

    @app.get("/", tags=["Health"])
    async def root():
        """Root endpoint with API information."""
        return {
            "name": "scintiflow API",
            "version": __version__,
            "docs": "/docs",
        }

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request):
        return {
            "status": "healthy",
            "patients": len(request.app.state.service.repository),
        }

    return app
