"""FastAPI application setup."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from classslots import __version__
from classslots.api.dependencies import close_service, init_service
from classslots.api.models import APIResponse
from classslots.api.routes import availability, options, slots
from classslots.config import Settings
from classslots.schedule.exceptions import (
    SlotGuardError,
    SlotNotFoundError,
    SlotValidationError,
)
from classslots.slots.exceptions import (
    ConflictError,
    CourseNotFoundError,
    UpstreamError,
    UpstreamTimeoutError,
)

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from classslots.api.dependencies import ClosableRepository

logger = logging.getLogger(__name__)

# Status per error class; the closest ancestor in the MRO applies
ERROR_STATUS: dict[type[Exception], int] = {
    SlotValidationError: status.HTTP_400_BAD_REQUEST,
    SlotGuardError: status.HTTP_409_CONFLICT,
    SlotNotFoundError: status.HTTP_404_NOT_FOUND,
    CourseNotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    UpstreamError: status.HTTP_502_BAD_GATEWAY,
    UpstreamTimeoutError: status.HTTP_504_GATEWAY_TIMEOUT,
}


def error_response(status_code: int, message: str, code: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=APIResponse[None](data=None, error=message, code=code).model_dump(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    # Startup
    settings: Settings = app.state.settings
    init_service(settings, app.state.repository)
    logger.info("Slot service started (backend=%s)", settings.backend)
    yield
    # Shutdown
    close_service()


def create_app(
    settings: Settings | None = None,
    repository: ClosableRepository | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Process settings; defaults apply when omitted.
        repository: Course repository to serve instead of the configured backend.
    """
    app = FastAPI(
        title="classslots API",
        description="REST API for class slot scheduling and capacity",
        version=__version__,
        lifespan=lifespan,
    )

    # Store config for lifespan manager
    app.state.settings = settings or Settings()
    app.state.repository = repository

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    async def schedule_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        status_code = next(
            ERROR_STATUS[cls] for cls in type(exc).__mro__ if cls in ERROR_STATUS
        )
        code = getattr(exc, "code", "error")
        logger.info("Request rejected (%s): %s", code, exc)
        return error_response(status_code, str(exc), code)

    for exc_class in ERROR_STATUS:
        app.add_exception_handler(exc_class, schedule_error_handler)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return error_response(
            status.HTTP_400_BAD_REQUEST, f"Invalid request: {details}", "invalid_request"
        )

    # Include routers
    app.include_router(slots.router, prefix="/api/v1")
    app.include_router(availability.router, prefix="/api/v1")
    app.include_router(options.router, prefix="/api/v1")

    return app
