"""
FastAPI application setup for the specboard dashboard.

create_app() builds an app with its own DashboardState, registers the
routes, and installs exception handlers that render every error as:

    {"error_code": ..., "message": ..., "detail": ..., "request_id": ...}
"""

import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from enum import Enum

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from specboard import __version__
from specboard.core.config.models import SpecboardConfig
from specboard.core.dashboard.api.routes import (
    browse,
    checklist,
    project,
    projects,
    recent,
    watch,
)
from specboard.core.dashboard.api.state import DashboardState
from specboard.core.registry.store import (
    DuplicateProjectError,
    InvalidProjectNameError,
    ProjectNotFoundError,
    RegistryError,
)

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Standard error codes for API responses."""

    # Client errors (4xx)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"
    CONFLICT = "CONFLICT"
    INVALID_PATH = "INVALID_PATH"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Server errors (5xx)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    REGISTRY_ERROR = "REGISTRY_ERROR"


class ErrorResponse(BaseModel):
    """Standard error response model."""

    error_code: ErrorCode
    message: str
    detail: str | None = None
    request_id: str | None = None


def _error_response(
    request: Request,
    status_code: int,
    error_code: ErrorCode,
    message: str,
    detail: str | None = None,
) -> JSONResponse:
    body = ErrorResponse(
        error_code=error_code,
        message=message,
        detail=detail if detail is not None else message,
        request_id=str(id(request)),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def _http_error_code(exc: HTTPException) -> ErrorCode:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return ErrorCode.NOT_FOUND
    if exc.status_code == status.HTTP_403_FORBIDDEN:
        return ErrorCode.FORBIDDEN
    if exc.status_code == status.HTTP_409_CONFLICT:
        return ErrorCode.CONFLICT
    if exc.status_code == status.HTTP_400_BAD_REQUEST:
        if "path" in str(exc.detail).lower():
            return ErrorCode.INVALID_PATH
        return ErrorCode.INVALID_REQUEST
    if exc.status_code >= 500 and "file" in str(exc.detail).lower():
        return ErrorCode.FILE_READ_ERROR
    return ErrorCode.INTERNAL_ERROR


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Render HTTPException in the standard error format.

    Server errors are logged at ERROR, client errors at INFO.
    """
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "HTTP %d on %s %s: %s",
        exc.status_code,
        request.method,
        request.url.path,
        exc.detail,
        extra={"request_id": id(request)},
    )
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(request, exc.status_code, _http_error_code(exc), message)


async def registry_exception_handler(request: Request, exc: RegistryError) -> JSONResponse:
    """Map registry failures to 400 (bad name), 404 (unknown), 409 (duplicate)."""
    if isinstance(exc, InvalidProjectNameError):
        status_code, error_code = status.HTTP_400_BAD_REQUEST, ErrorCode.INVALID_REQUEST
    elif isinstance(exc, ProjectNotFoundError):
        status_code, error_code = status.HTTP_404_NOT_FOUND, ErrorCode.NOT_FOUND
    elif isinstance(exc, DuplicateProjectError):
        status_code, error_code = status.HTTP_409_CONFLICT, ErrorCode.CONFLICT
    else:
        status_code, error_code = status.HTTP_500_INTERNAL_SERVER_ERROR, ErrorCode.REGISTRY_ERROR
        logger.error(f"Registry failure on {request.method} {request.url.path}: {exc}")
    return _error_response(request, status_code, error_code, str(exc))


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation errors without internal details."""
    logger.warning(
        "Validation error on %s %s: %s",
        request.method,
        request.url.path,
        exc.errors(),
        extra={"request_id": id(request)},
    )
    first_error = exc.errors()[0] if exc.errors() else {}
    field = " -> ".join(str(loc) for loc in first_error.get("loc", []))
    error_msg = first_error.get("msg", "Invalid input")
    return _error_response(
        request,
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        ErrorCode.VALIDATION_ERROR,
        "Request validation failed",
        f"{field}: {error_msg}" if field else error_msg,
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log uncaught exceptions with traceback; return a clean 500."""
    logger.error(
        "Unhandled exception on %s %s: %s\n%s",
        request.method,
        request.url.path,
        str(exc),
        traceback.format_exc(),
        extra={"request_id": id(request)},
    )
    if isinstance(exc, OSError):
        error_code, message = ErrorCode.FILE_READ_ERROR, "File operation failed"
    else:
        error_code, message = ErrorCode.INTERNAL_ERROR, "An internal server error occurred"
    return _error_response(
        request, status.HTTP_500_INTERNAL_SERVER_ERROR, error_code, message, str(exc)
    )


def create_app(
    config: SpecboardConfig | None = None,
    state: DashboardState | None = None,
) -> FastAPI:
    """
    Build the dashboard application.

    Args:
        config: Effective configuration (defaults to SpecboardConfig())
        state: Prebuilt state, e.g. with in-memory storage for tests

    Returns:
        Configured FastAPI app; its DashboardState is ``app.state.dashboard``
    """
    if state is None:
        state = DashboardState(config or SpecboardConfig())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        # Release timers and poll tasks of any stream still open
        app.state.dashboard.close_all()

    app = FastAPI(
        title="specboard Dashboard API",
        description="Live dashboard API for spec-kit projects",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.dashboard = state

    app.add_middleware(
        CORSMiddleware,
        allow_origins=state.config.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(project.router, prefix="/api", tags=["project"])
    app.include_router(watch.router, prefix="/api", tags=["watch"])
    app.include_router(checklist.router, prefix="/api", tags=["checklist"])
    app.include_router(projects.router, prefix="/api", tags=["projects"])
    app.include_router(recent.router, prefix="/api", tags=["recent"])
    app.include_router(browse.router, prefix="/api", tags=["browse"])

    app.add_exception_handler(HTTPException, http_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RegistryError, registry_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, general_exception_handler)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint - API health check."""
        return {"status": "ok", "message": "specboard Dashboard API"}

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app
