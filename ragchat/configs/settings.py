"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from ragchat.configs.base import BaseSettings
from ragchat.configs.database import DatabaseSettings
from ragchat.configs.gemini import GeminiSettings
from ragchat.configs.live import LiveSessionSettings
from ragchat.configs.observability import ObservabilitySettings
from ragchat.configs.rag import RagSettings
from ragchat.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    gemini: GeminiSettings = GeminiSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    rag: RagSettings = RagSettings()
    live: LiveSessionSettings = LiveSessionSettings()
    observability: ObservabilitySettings = ObservabilitySettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from ragchat.configs import get_settings
        settings = get_settings()
    """
    return Settings()
