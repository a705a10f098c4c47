from __future__ import annotations

from tzguard.api.routes.forms import router as forms_router
from tzguard.api.routes.health import router as health_router
from tzguard.api.routes.security import router as security_router

__all__ = ["forms_router", "health_router", "security_router"]
