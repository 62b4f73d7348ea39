"""
API routes module.

FastAPI routers for all HTTP endpoints.
"""

from fastapi import APIRouter

from .routers import (
    chats_router,
    documents_router,
    gemini_proxy_router,
    health_router,
)

api_router = APIRouter()

# Include all versioned routers
api_router.include_router(health_router)
api_router.include_router(chats_router)
api_router.include_router(documents_router)

__all__ = ["api_router", "gemini_proxy_router"]
