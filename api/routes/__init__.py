"""API route modules."""

from api.routes.auth import router as auth_router
from api.routes.categories import router as categories_router
from api.routes.credentials import router as credentials_router
from api.routes.health import router as health_router
from api.routes.tools import router as tools_router

__all__ = [
    "auth_router",
    "categories_router",
    "credentials_router",
    "health_router",
    "tools_router",
]
