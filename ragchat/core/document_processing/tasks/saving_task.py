"""
Persistence task for ingested documents.

Writes document metadata first and commits it, then stores the embedded
chunks, so chunk rows always reference an existing parent.

Dependencies: sqlalchemy, ragchat.boundary.db, ragchat.boundary.vdb
System role: Final stage of document ingestion pipeline
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.db.CRUD import document_crud
from ragchat.boundary.vdb.vector_store_client import VectorStoreClient
from ragchat.core.exceptions import DocumentProcessingError
from ragchat.models.document import RagChunk, RagDocument

logger = logging.getLogger(__name__)


class SavingTask:
    """Persist a document record and its chunks."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        vector_store: VectorStoreClient,
    ) -> None:
        self._session_factory = session_factory
        self._vector_store = vector_store

    async def save_document(self, document: RagDocument) -> None:
        """Insert and commit document metadata."""
        try:
            async with self._session_factory() as session:
                await document_crud.add_document(session, document)
                await session.commit()
        except SQLAlchemyError as e:
            raise DocumentProcessingError(
                f"Failed to save document metadata: {e}",
                file_name=document.file_name,
            ) from e
        logger.info(
            f"{__name__}:save_document - Saved document {document.id} "
            f"({document.file_name}, scope={document.scope}, chunks={document.chunk_count})"
        )

    async def save_chunks(self, chunks: list[RagChunk], document_id: str) -> int:
        """
        Insert chunks for an already committed document.

        A failure here leaves the document row in place.
        """
        return await self._vector_store.add_chunks(chunks, document_id)
