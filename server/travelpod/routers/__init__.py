"""FastAPI routers package."""

from .admin import router as admin_router
from .auth import router as auth_router
from .catalog import router as catalog_router
from .health import router as health_router
from .metrics import router as metrics_router
from .passenger import router as passenger_router
from .trip import router as trip_router
from .user import router as user_router

__all__ = [
    "admin_router",
    "auth_router",
    "catalog_router",
    "health_router",
    "metrics_router",
    "passenger_router",
    "trip_router",
    "user_router",
]
