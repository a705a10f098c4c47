"""HTTP middleware for request correlation and security headers.

- ``request_id_middleware`` accepts an incoming X-Request-ID (or generates a
  UUID), exposes it through contextvars for logging and echoes it back with
  the request duration.
- ``security_headers_middleware`` attaches the Content-Security-Policy built
  from the policy's directive table plus the fixed hardening headers.

Usage:
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(security_headers_middleware)
"""

from __future__ import annotations

import time
import uuid

from fastapi import Request, Response

from tzguard.core.config import settings
from tzguard.core.logging import clear_request_id, set_request_id
from tzguard.core.policy import security_policy

_CSP_HEADER_VALUE = security_policy.content_security_policy()


async def request_id_middleware(request: Request, call_next) -> Response:
    """Propagate a correlation id through the request and its response.

    Side Effects:
        - Sets request_id in contextvars (accessible via get_request_id())
        - Clears request_id from contextvars after request completes
        - Adds X-Request-ID and X-Request-Duration-ms response headers
    """

    header_name = settings.log.request_id_header
    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        response: Response = await call_next(request)
    finally:
        clear_request_id()

    duration_ms = (time.perf_counter() - start) * 1000
    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response


async def security_headers_middleware(request: Request, call_next) -> Response:
    response: Response = await call_next(request)
    response.headers.setdefault("Content-Security-Policy", _CSP_HEADER_VALUE)
    for name, value in security_policy.security_headers.items():
        response.headers.setdefault(name, value)
    return response
