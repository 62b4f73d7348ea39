"""
Document service orchestrator.

Coordinates batch upload (validation, scope resolution, sequential
ingestion), listing, preview, search and deletion of knowledge base
documents.

Dependencies: ragchat.core.document_processing, ragchat.boundary.db, ragchat.boundary.vdb
System role: Document management orchestration
"""

import inspect
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.db.CRUD.document_crud import document_crud
from ragchat.boundary.llm.embedding_client import EmbeddingClient
from ragchat.boundary.vdb.vector_schemas import VectorSearchResult
from ragchat.boundary.vdb.vector_store_client import VectorStoreClient
from ragchat.core.document_processing.configs import DocumentPipelineSettings, get_pipeline_settings
from ragchat.core.document_processing.entrypoint import DocumentPipeline, ProgressObserver
from ragchat.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
)
from ragchat.models.chat import ChatType
from ragchat.models.document import (
    GLOBAL_SCOPE,
    BatchUploadResponse,
    RagDocument,
    UploadCandidate,
)

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
DB_NOT_CONFIGURED_MESSAGE = "Database not configured. Cannot upload documents."
SEARCH_NEEDS_DB_MESSAGE = "Search requires database connection"
BATCH_START_STATUS = "Starting upload process..."
BATCH_ERROR_STATUS = "Error during upload."


def is_pdf(candidate: UploadCandidate) -> bool:
    """PDF by declared content type, or by extension when no type was sent."""
    if candidate.content_type:
        return candidate.content_type == PDF_CONTENT_TYPE
    return candidate.file_name.lower().endswith(".pdf")


def resolve_upload_scope(chat_type: ChatType, chat_id: str | None) -> str:
    """Dedicated uploads go to the chat's pool; without a chat they fall back to global."""
    if chat_type == ChatType.DEDICATED and chat_id:
        return chat_id
    return GLOBAL_SCOPE


class DocumentService:
    """
    Document service orchestrator.

    Every operation except validation needs the store; without it uploads,
    deletes, previews and searches raise ConfigurationError.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        vector_store: VectorStoreClient | None = None,
        pipeline: DocumentPipeline | None = None,
        settings: DocumentPipelineSettings | None = None,
        search_top_k: int = 10,
    ) -> None:
        """
        Initialize document service.

        Args:
            embedding_client: Embedding client for query search
            session_factory: Store session factory (None when not configured)
            vector_store: Chunk store client (None when not configured)
            pipeline: Optional DocumentPipeline (created lazily if None)
            settings: Pipeline settings for validation limits
            search_top_k: Result cap of document search
        """
        self._embedding_client = embedding_client
        self._session_factory = session_factory
        self._vector_store = vector_store
        self._pipeline = pipeline
        self._settings = settings or get_pipeline_settings()
        self._search_top_k = search_top_k

    @property
    def store_configured(self) -> bool:
        return self._session_factory is not None and self._vector_store is not None

    @property
    def pipeline(self) -> DocumentPipeline:
        """Lazy-load pipeline to avoid initialization cost."""
        if self._pipeline is None:
            self._require_store(DB_NOT_CONFIGURED_MESSAGE)
            self._pipeline = DocumentPipeline(
                self._embedding_client,
                self._session_factory,
                self._vector_store,
                settings=self._settings,
            )
        return self._pipeline

    def _require_store(self, message: str = DB_NOT_CONFIGURED_MESSAGE) -> None:
        if not self.store_configured:
            raise ConfigurationError(message, setting="POSTGRES_HOST")

    async def upload_documents(
        self,
        files: list[UploadCandidate],
        chat_type: ChatType = ChatType.GLOBAL,
        chat_id: str | None = None,
        on_progress: ProgressObserver | None = None,
    ) -> BatchUploadResponse:
        """
        Validate and ingest a batch of files one at a time.

        Steps:
        1. Reject non-PDF and oversized files before any network call
        2. Require a configured store
        3. Resolve the upload scope
        4. Ingest accepted files sequentially, counting successes and failures

        Args:
            files: Uploaded files staged on disk
            chat_type: GLOBAL uploads to the shared pool, DEDICATED to the chat
            chat_id: Chat receiving dedicated uploads
            on_progress: Observer receiving (status_text, percent)

        Returns:
            BatchUploadResponse: Success, failure, skipped and oversized counts

        Raises:
            ConfigurationError: When the store is not configured
        """
        # Step 1: Validation
        accepted: list[UploadCandidate] = []
        skipped = oversized = 0
        for candidate in files:
            if not is_pdf(candidate):
                skipped += 1
            elif candidate.size > self._settings.max_file_size_bytes:
                oversized += 1
            else:
                accepted.append(candidate)
        logger.info(
            f"{__name__}:upload_documents - Step 1: accepted={len(accepted)}, "
            f"skipped={skipped}, oversized={oversized}"
        )

        # Step 2: Store required
        self._require_store()

        # Step 3: Scope
        scope = resolve_upload_scope(chat_type, chat_id)

        # Step 4: Sequential ingestion
        success = failed = 0
        documents: list[RagDocument] = []
        for candidate in accepted:
            await self._report(on_progress, BATCH_START_STATUS, 0)
            try:
                result = await self.pipeline.ingest(
                    candidate.path,
                    candidate.file_name,
                    scope=scope,
                    on_progress=on_progress,
                )
            except Exception as e:
                failed += 1
                logger.error(
                    f"{__name__}:upload_documents - Ingestion failed for {candidate.file_name}",
                    exc_info=e,
                )
                await self._report(on_progress, BATCH_ERROR_STATUS, 0)
                continue
            success += 1
            documents.append(result.document)

        logger.info(f"{__name__}:upload_documents - Done: success={success}, failed={failed}")
        return BatchUploadResponse(
            success_count=success,
            fail_count=failed,
            skipped_count=skipped,
            oversized_count=oversized,
            documents=documents,
        )

    @staticmethod
    async def _report(on_progress: ProgressObserver | None, status: str, percent: int) -> None:
        if on_progress is None:
            return
        outcome = on_progress(status, percent)
        if inspect.isawaitable(outcome):
            await outcome

    async def list_documents(self, scope: str | None = None) -> list[RagDocument]:
        """Documents newest first, optionally limited to one scope."""
        if not self.store_configured:
            logger.warning(f"{__name__}:list_documents - Store not configured")
            return []
        async with self._session_factory() as session:
            return await document_crud.get_documents(session, scope=scope)

    async def delete_document(self, document_id: str) -> None:
        """Delete a document; its chunks are removed by the cascade."""
        self._require_store()
        async with self._session_factory() as session:
            deleted = await document_crud.delete_by_id(session, document_id)
            await session.commit()
        if not deleted:
            raise DocumentNotFoundError(document_id)
        logger.info(f"{__name__}:delete_document - Deleted document_id={document_id}")

    async def delete_documents(self, document_ids: list[str]) -> int:
        """Bulk delete; an empty list is a no-op."""
        if not document_ids:
            return 0
        self._require_store()
        async with self._session_factory() as session:
            count = await document_crud.delete_many(session, document_ids)
            await session.commit()
        logger.info(f"{__name__}:delete_documents - Deleted {count} of {len(document_ids)} documents")
        return count

    async def preview_document(self, document_id: str) -> str:
        """Page 1 text of a document."""
        self._require_store()
        async with self._session_factory() as session:
            if not await document_crud.exists(session, document_id):
                raise DocumentNotFoundError(document_id)
            return await document_crud.get_document_page_one(session, document_id)

    async def search_documents(self, query: str, scope: str = GLOBAL_SCOPE) -> list[VectorSearchResult]:
        """
        Semantic search over the knowledge base.

        Args:
            query: Free-text query (blank returns no results)
            scope: 'global' or a chat id

        Returns:
            list[VectorSearchResult]: Up to search_top_k results
        """
        if not query.strip():
            return []
        self._require_store(SEARCH_NEEDS_DB_MESSAGE)
        embedding = await self._embedding_client.embed(query)
        return await self._vector_store.search(
            embedding,
            filter_scope=scope or GLOBAL_SCOPE,
            top_k=self._search_top_k,
        )
