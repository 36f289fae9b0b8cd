"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    cache_router,
    chat_router,
    health_router,
    products_router,
    sessions_router,
)

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(sessions_router)
api_router.include_router(chat_router)
api_router.include_router(cache_router)
api_router.include_router(products_router)

__all__ = ["api_router"]
