"""API routers."""

from .cache import router as cache_router
from .chat import router as chat_router
from .health import router as health_router
from .products import router as products_router
from .sessions import router as sessions_router

__all__ = [
    "cache_router",
    "chat_router",
    "health_router",
    "products_router",
    "sessions_router",
]
