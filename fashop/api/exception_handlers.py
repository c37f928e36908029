"""
Exception handlers for FastAPI application.

Every error leaves the API as ``{"success": false, "error": {...}}``.
Domain exceptions map to HTTP status codes by family.
"""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from fashop.config.settings import get_settings
from fashop.core.domain import (
    ConcurrencyException,
    DomainException,
    DuplicateEntityException,
    EntityNotFoundException,
    InsufficientStockException,
    InvalidOperationException,
    NotificationException,
    OrderNumberExhaustedException,
)

logger = logging.getLogger(__name__)

# Checked in order; the first matching family wins
DOMAIN_STATUS_CODES: tuple[tuple[type[DomainException], int], ...] = (
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (InsufficientStockException, status.HTTP_409_CONFLICT),
    (DuplicateEntityException, status.HTTP_409_CONFLICT),
    (ConcurrencyException, status.HTTP_409_CONFLICT),
    (OrderNumberExhaustedException, status.HTTP_409_CONFLICT),
    (InvalidOperationException, status.HTTP_409_CONFLICT),
    (NotificationException, status.HTTP_502_BAD_GATEWAY),
)


def status_code_for(exc: DomainException) -> int:
    """HTTP status for a domain exception (400 when no family matches)."""
    for exc_type, code in DOMAIN_STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_400_BAD_REQUEST


def error_body(message: str, code: str, details: Any = None) -> dict[str, Any]:
    error: dict[str, Any] = {"message": message, "code": code}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


async def domain_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle DomainException subclasses raised by use cases."""
    if not isinstance(exc, DomainException):
        return await global_exception_handler(request, exc)

    status_code = status_code_for(exc)
    log_level = logging.ERROR if status_code >= 500 else logging.WARNING if status_code == 409 else logging.INFO
    logger.log(log_level, f"{request.method} {request.url.path} -> {status_code} {exc.code}: {exc.message}")

    return JSONResponse(status_code=status_code, content=error_body(exc.message, exc.code, exc.details))


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle HTTPException with consistent response format."""
    if not isinstance(exc, StarletteHTTPException):
        return await global_exception_handler(request, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail), f"HTTP_{exc.status_code}"),
        headers=exc.headers,
    )


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle request validation errors with detailed error messages."""
    if not isinstance(exc, RequestValidationError):
        return await global_exception_handler(request, exc)

    errors = []
    for error in exc.errors():
        errors.append(
            {
                "field": ".".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
            }
        )

    logger.warning(f"Validation error on {request.url.path}: {errors}")

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation error", "VALIDATION_ERROR", errors),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle all unhandled exceptions.

    Logs the full exception with traceback and returns a safe error response.
    The stack trace is only included in development.
    """
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}: {exc!s}",
        exc_info=exc,
    )

    details = None
    if get_settings().is_development:
        details = {"type": type(exc).__name__, "stack": traceback.format_exception(exc)}

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", "INTERNAL_ERROR", details),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    logger.info("Exception handlers registered")
