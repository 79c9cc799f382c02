"""Error Handlers — global exception handlers for the cart API.

Invariants:
    - CartSessionError → its own http_status (400/404/409/410) + structured JSON
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500, never leaks internal details
    - Every envelope is {"error": {code, message, statusCode, ...}, "timestamp"}

Design Decisions:
    - Three-layer handler: domain (CartSessionError), validation (Pydantic), catch-all (Exception)
    - Expected client errors logged at WARNING, not ERROR
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from cart_session.core.errors import CartSessionError

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_cart_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _register_cart_error_handler(app: FastAPI) -> None:
    """Register cart domain error handler."""

    @app.exception_handler(CartSessionError)
    async def cart_error_handler(request: Request, exc: CartSessionError):
        """Handle all cart domain errors."""
        logger.warning(
            f"CartSessionError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "cart_id": exc.context.cart_id,
            },
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all; never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "error": {
                    "code": "INTERNAL_SERVER_ERROR",
                    "message": "An unexpected error occurred",
                    "statusCode": 500,
                },
                "timestamp": _now_iso(),
            },
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "statusCode": 400,
            "category": "validation",
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
        "timestamp": _now_iso(),
    }
