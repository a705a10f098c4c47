"""OpenAPI metadata and customization utilities.

Enriches the generated schema with tag descriptions and documents the shared
429 response on every rate-limited (``/v1``) operation.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_TAGS = [
    {
        "name": "Forms",
        "description": "Sanitization and validation of auth, profile and link forms.",
    },
    {
        "name": "Security",
        "description": "Password strength scoring and CSRF tokens.",
    },
    {
        "name": "Health",
        "description": "Liveness checks.",
    },
]

_RATE_LIMITED_RESPONSE = {
    "description": "Rate limit exceeded. See Retry-After and X-RateLimit-* headers.",
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and 429 responses."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in _TAGS:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if not path.startswith("/v1/"):
                continue
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj.setdefault("responses", {}).setdefault(
                        "429", _RATE_LIMITED_RESPONSE
                    )

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
