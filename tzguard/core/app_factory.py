"""Application factory for the tzguard FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers) so
tests can build isolated instances.
"""

from __future__ import annotations

from fastapi import FastAPI

from tzguard.api.routes import forms_router, health_router, security_router
from tzguard.core.config import settings
from tzguard.core.exception_handlers import setup_exception_handlers
from tzguard.core.logging import configure_logging
from tzguard.core.middleware import request_id_middleware, security_headers_middleware
from tzguard.core.openapi import apply_openapi_customizations


def create_app() -> FastAPI:
    """Create and configure the FastAPI application instance.

    Returns:
        Configured FastAPI app with middleware, handlers, routers and docs.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    app = FastAPI(
        title="tzguard",
        description=(
            "Request-policy and credential-hygiene service for timezone links: "
            "per-action rate limiting, form sanitization and validation, "
            "password strength scoring and CSRF tokens."
        ),
        version="0.1.0",
        debug=settings.app.debug,
    )

    # Last registered runs first: request id wraps the security headers.
    app.middleware("http")(security_headers_middleware)
    app.middleware("http")(request_id_middleware)

    setup_exception_handlers(app)

    app.include_router(forms_router, prefix="/v1")
    app.include_router(security_router, prefix="/v1")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
