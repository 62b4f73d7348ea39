"""
Document and chunk ORM models.

Documents own their chunks; deleting a document cascades to its chunks at
the database level.

Dependencies: sqlalchemy, pgvector, ragchat.boundary.db.base
System role: Knowledge base persistence
"""

import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import BigInteger, ForeignKey, Integer, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragchat.boundary.db.base import Base, UUIDMixin

EMBEDDING_DIMENSION = 768


class DocumentModel(Base, UUIDMixin):
    """
    Ingested document row.

    Attributes:
        file_name: Original upload name
        upload_timestamp: Epoch milliseconds
        scope: 'global' or the owning chat id
        chunk_count: Number of chunks persisted for this document
    """

    __tablename__ = "documents"

    file_name: Mapped[str] = mapped_column(Text, nullable=False)
    upload_timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    scope: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    chunk_count: Mapped[int] = mapped_column(Integer, nullable=False)

    chunks = relationship(
        "ChunkModel",
        back_populates="document",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class ChunkModel(Base, UUIDMixin):
    """Embedded chunk row; the file name comes from the parent document."""

    __tablename__ = "rag_chunks"

    document_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("documents.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    embedding: Mapped[list[float] | None] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=True)
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True)

    document = relationship("DocumentModel", back_populates="chunks")
