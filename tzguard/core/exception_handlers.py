"""Global exception handlers for consistent error responses.

- AppError subclasses map to 400 / 429 / 500
- RateLimitAppError carries Retry-After and X-RateLimit-* headers
- Unexpected exceptions become a generic 500 (safety net)
- Every error body includes request_id for tracing
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tzguard.core.config import settings
from tzguard.core.errors import (
    AppError,
    ConfigurationAppError,
    RateLimitAppError,
    ValidationAppError,
)
from tzguard.core.logging import get_request_id

logger = logging.getLogger(__name__)


def _status_for(exc: AppError) -> int:
    if isinstance(exc, RateLimitAppError):
        return 429
    if isinstance(exc, ConfigurationAppError):
        return 500
    return 400


def _headers_for(exc: AppError) -> dict[str, str] | None:
    if not isinstance(exc, RateLimitAppError) or not exc.details:
        return None
    if not settings.app.rate_limit_include_headers:
        return None
    return {
        "Retry-After": str(exc.details.get("retry_after", 0)),
        "X-RateLimit-Limit": str(exc.details.get("limit", 0)),
        "X-RateLimit-Remaining": str(exc.details.get("remaining", 0)),
        "X-RateLimit-Reset": str(exc.details.get("reset_at", 0)),
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Render domain errors as ``{"error": {code, message, request_id, details?}}``.

    Args:
        request: FastAPI request object.
        exc: AppError instance (or subclass).

    Returns:
        JSONResponse with appropriate status code and error details.
    """
    status_code = _status_for(exc)

    logger.warning(
        "app_error_handled",
        extra={
            "error_code": exc.code,
            "error_message": exc.message,
            "status_code": status_code,
            "has_details": bool(exc.details),
            "request_id": get_request_id(),
        },
    )

    error_content = {
        "code": exc.code,
        "message": exc.message,
        "request_id": get_request_id(),
    }
    if exc.details:
        error_content["details"] = exc.details

    return JSONResponse(
        status_code=status_code,
        content={"error": error_content},
        headers=_headers_for(exc),
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report unparseable request bodies in the common error shape (400)."""
    fields: dict[str, str] = {}
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        fields.setdefault(location or "body", error.get("msg", "Invalid value"))
    return await app_error_handler(
        request,
        ValidationAppError(
            code="invalid_request",
            message="Request body could not be parsed",
            details={"fields": fields},
        ),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback handler for unexpected errors. Never leaks internals."""
    logger.error(
        "unhandled_exception",
        extra={
            "error_type": type(exc).__name__,
            "error_msg": str(exc),
            "request_path": request.url.path,
            "request_method": request.method,
            "request_id": get_request_id(),
        },
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "internal_server_error",
                "message": "An unexpected error occurred. Please try again later.",
                "request_id": get_request_id(),
            }
        },
    )


def setup_exception_handlers(app) -> None:
    """Register all exception handlers with the FastAPI app.

    Example:
        >>> from fastapi import FastAPI
        >>> app = FastAPI()
        >>> setup_exception_handlers(app)
    """
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(RequestValidationError)(request_validation_handler)
    app.exception_handler(Exception)(general_exception_handler)
