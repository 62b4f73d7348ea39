"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    ServiceCache,
    get_chat_service,
    get_document_service,
    get_embedding_client,
    get_gemini_client,
    get_service_cache,
    get_settings_dependency,
)

__all__ = [
    "ServiceCache",
    "get_chat_service",
    "get_document_service",
    "get_embedding_client",
    "get_gemini_client",
    "get_service_cache",
    "get_settings_dependency",
]
