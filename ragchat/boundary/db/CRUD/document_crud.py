"""
Document and chunk CRUD operations.

Provides document listing, bulk deletion, page-one preview and chunk
bulk insertion. Chunk removal relies on the ON DELETE CASCADE foreign key.

Dependencies: sqlalchemy, ragchat.boundary.db.models
System role: Knowledge base persistence operations
"""

from typing import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.base import to_uuid
from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.models import ChunkModel, DocumentModel
from ragchat.models.document import RagChunk, RagDocument

NO_PAGE_ONE_TEXT = "No text content found for Page 1."


class DocumentCRUD(BaseCRUD[DocumentModel]):
    """
    CRUD operations for DocumentModel.

    Extends BaseCRUD with scope filtering and preview lookups.
    """

    def __init__(self) -> None:
        """Initialize DocumentCRUD with DocumentModel."""
        super().__init__(DocumentModel)

    async def get_documents(
        self,
        session: AsyncSession,
        scope: str | None = None,
    ) -> list[RagDocument]:
        """
        Retrieve documents, newest first.

        Args:
            session: Async database session
            scope: Optional exact scope filter ('global' or a chat id)

        Returns:
            Documents ordered by upload_timestamp descending
        """
        stmt = select(DocumentModel).order_by(DocumentModel.upload_timestamp.desc())
        if scope is not None:
            stmt = stmt.where(DocumentModel.scope == scope)
        result = await session.execute(stmt)
        return [self.to_domain(row) for row in result.scalars().all()]

    async def add_document(self, session: AsyncSession, document: RagDocument) -> None:
        """Insert document metadata, keeping the domain id."""
        await self.create(
            session,
            id=to_uuid(document.id, field="document_id"),
            file_name=document.file_name,
            upload_timestamp=document.upload_timestamp,
            scope=document.scope,
            chunk_count=document.chunk_count,
        )

    async def get_document_page_one(self, session: AsyncSession, document_id: str) -> str:
        """
        Text of the first page-1 chunk of a document.

        Returns:
            Chunk text, or a placeholder sentence when page 1 has no chunk
        """
        stmt = (
            select(ChunkModel.text)
            .where(ChunkModel.document_id == to_uuid(document_id, field="document_id"))
            .where(ChunkModel.page_number == 1)
            .limit(1)
        )
        result = await session.execute(stmt)
        text = result.scalar_one_or_none()
        return text if text is not None else NO_PAGE_ONE_TEXT

    @staticmethod
    def to_domain(row: DocumentModel) -> RagDocument:
        return RagDocument(
            id=str(row.id),
            file_name=row.file_name,
            upload_timestamp=row.upload_timestamp,
            scope=row.scope,
            chunk_count=row.chunk_count,
        )


class ChunkCRUD(BaseCRUD[ChunkModel]):
    """CRUD operations for ChunkModel (insert-only; deleted through the parent)."""

    def __init__(self) -> None:
        super().__init__(ChunkModel)

    async def bulk_create(
        self,
        session: AsyncSession,
        chunks: Sequence[RagChunk],
        document_id: str,
    ) -> int:
        """
        Insert chunks for one document.

        Returns:
            Number of rows added
        """
        doc_uuid = to_uuid(document_id, field="document_id")
        session.add_all(
            ChunkModel(
                id=to_uuid(chunk.id),
                document_id=doc_uuid,
                text=chunk.text,
                embedding=chunk.embedding or None,
                page_number=chunk.page_number,
            )
            for chunk in chunks
        )
        await session.flush()
        return len(chunks)

    async def count_for_document(self, session: AsyncSession, document_id: str) -> int:
        stmt = select(ChunkModel.id).where(ChunkModel.document_id == to_uuid(document_id))
        result = await session.execute(stmt)
        return len(result.scalars().all())


document_crud = DocumentCRUD()
chunk_crud = ChunkCRUD()
