"""
Dependency injection container.

Builds the long-lived clients and services once per process and exposes
them as FastAPI dependencies. Store-backed collaborators are None when the
database is not configured, which puts the services in degraded mode.

Dependencies: ragchat.configs, ragchat.application, ragchat.boundary, ragchat.core
System role: DI container for service injection
"""

import logging
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.application.services.chat_service import ChatService
from ragchat.application.services.document_service import DocumentService
from ragchat.boundary.db.connection import get_async_session_factory
from ragchat.boundary.llm.embedding_client import EmbeddingClient
from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.boundary.vdb.vector_store_client import VectorStoreClient
from ragchat.configs import Settings, get_settings
from ragchat.core.rag.history_compressor import HistoryCompressor
from ragchat.core.rag.rag_orchestrator import RagOrchestrator

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached service instances."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings
        self._session_factory: async_sessionmaker[AsyncSession] | None = None
        self._embedding_client: EmbeddingClient | None = None
        self._gemini_client: GeminiClient | None = None
        self._vector_store: VectorStoreClient | None = None
        self._orchestrator: RagOrchestrator | None = None
        self._chat_service: ChatService | None = None
        self._document_service: DocumentService | None = None

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            self._settings = get_settings()
        return self._settings

    @property
    def store_configured(self) -> bool:
        return self.settings.database.is_configured

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession] | None:
        """Get cached session factory (None without a configured store)."""
        if self._session_factory is None and self.store_configured:
            self._session_factory = get_async_session_factory()
        return self._session_factory

    @property
    def embedding_client(self) -> EmbeddingClient:
        """Get cached embedding client."""
        if self._embedding_client is None:
            gemini = self.settings.gemini
            self._embedding_client = EmbeddingClient(
                api_key=gemini.api_key,
                model=gemini.embedding_model,
                dimension=gemini.embedding_dimension,
            )
        return self._embedding_client

    @property
    def gemini_client(self) -> GeminiClient:
        """Get cached generation client."""
        if self._gemini_client is None:
            gemini = self.settings.gemini
            self._gemini_client = GeminiClient(
                api_key=gemini.api_key,
                chat_model=gemini.chat_model,
                summary_model=gemini.summary_model,
                multimodal_model=gemini.multimodal_model,
                transcription_model=gemini.transcription_model,
                multimodal_max_output_tokens=gemini.multimodal_max_output_tokens,
                use_prompt_registry=self.settings.observability.enable_tracing,
            )
        return self._gemini_client

    @property
    def vector_store(self) -> VectorStoreClient | None:
        """Get cached vector store client (None without a configured store)."""
        if self._vector_store is None and self.session_factory is not None:
            self._vector_store = VectorStoreClient(self.session_factory, self.settings.vector_store)
        return self._vector_store

    @property
    def orchestrator(self) -> RagOrchestrator:
        """Get cached RAG orchestrator."""
        if self._orchestrator is None:
            rag = self.settings.rag
            if self.vector_store is None:
                logger.warning(f"{__name__}:orchestrator - Store not configured, RAG search disabled")
            self._orchestrator = RagOrchestrator(
                embedding_client=self.embedding_client,
                gemini_client=self.gemini_client,
                history_compressor=HistoryCompressor(
                    self.gemini_client,
                    max_context_chars=rag.max_context_chars,
                    keep_recent=rag.keep_recent_messages,
                    compression_target_chars=rag.compression_target_chars,
                ),
                vector_store=self.vector_store,
                top_k=self.settings.vector_store.top_k,
                use_prompt_registry=self.settings.observability.enable_tracing,
            )
        return self._orchestrator

    @property
    def chat_service(self) -> ChatService:
        """Get cached chat service (holds the in-memory chat state)."""
        if self._chat_service is None:
            self._chat_service = ChatService(
                orchestrator=self.orchestrator,
                gemini_client=self.gemini_client,
                session_factory=self.session_factory,
                api_key_configured=self.settings.gemini.is_configured,
            )
        return self._chat_service

    @property
    def document_service(self) -> DocumentService:
        """Get cached document service."""
        if self._document_service is None:
            self._document_service = DocumentService(
                embedding_client=self.embedding_client,
                session_factory=self.session_factory,
                vector_store=self.vector_store,
                search_top_k=self.settings.vector_store.document_search_top_k,
            )
        return self._document_service

    def clear(self) -> None:
        """Clear all cached instances."""
        self._session_factory = None
        self._embedding_client = None
        self._gemini_client = None
        self._vector_store = None
        self._orchestrator = None
        self._chat_service = None
        self._document_service = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_chat_service() -> ChatService:
    return get_service_cache().chat_service


def get_document_service() -> DocumentService:
    return get_service_cache().document_service


def get_gemini_client() -> GeminiClient:
    return get_service_cache().gemini_client


def get_embedding_client() -> EmbeddingClient:
    return get_service_cache().embedding_client
