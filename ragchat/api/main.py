"""
FastAPI application with assembled routers.

Initializes FastAPI app with all API routers and configures uvicorn server.

Dependencies: fastapi, ragchat.api.routers, uvicorn, python-dotenv
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ragchat.api import api_router, gemini_proxy_router
from ragchat.api.deps.dependencies import get_service_cache
from ragchat.boundary.db import get_async_engine, init_db
from ragchat.core.rag.rag_prompt import register_prompts
from ragchat.observability import configure_logging
from ragchat.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Handles startup and shutdown events.
    """
    load_dotenv()
    cache = get_service_cache()
    settings = cache.settings
    configure_logging(settings.effective_log_level)
    logger.info(f"Starting RAG Chat API (environment={settings.environment}, debug={settings.debug})")

    # Startup
    if settings.database.is_configured:
        logger.info("Initializing database schema...")
        await init_db(get_async_engine(), ivfflat_lists=settings.vector_store.ivfflat_lists)
    else:
        logger.warning("Database not configured: retrieval and persistence are disabled")
    if not settings.gemini.is_configured:
        logger.warning("Gemini API key not configured: chat and ingestion will fail")

    if settings.observability.enable_tracing:
        register_prompts(model_id=settings.gemini.chat_model)

    logger.info("Pre-warming service cache...")
    await cache.chat_service.load()
    logger.info("Service cache pre-warmed")

    yield

    # Shutdown
    cache.clear()
    logger.info("Service cache cleared")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Returns:
        FastAPI: Configured application instance with all routers registered
    """
    app = FastAPI(
        title="RAG Chat API",
        description="Retrieval-augmented chat over scoped PDF knowledge bases",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add observability middleware (last added runs first)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Register routers with /api/v1 prefix for versioning; the provider gateway stays at /api/gemini
    app.include_router(api_router, prefix="/api/v1")
    app.include_router(gemini_proxy_router, prefix="/api")

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "ragchat.api.main:app",
        host="0.0.0.0",
        port=8000,
    )
