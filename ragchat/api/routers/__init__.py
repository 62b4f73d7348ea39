"""API routers."""

from .chats import router as chats_router
from .documents import router as documents_router
from .gemini_proxy import router as gemini_proxy_router
from .health import router as health_router

__all__ = [
    "chats_router",
    "documents_router",
    "gemini_proxy_router",
    "health_router",
]
