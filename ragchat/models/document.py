"""
Document domain models and schemas.

RAG documents, their chunks, and the request/response schemas of the
document API.

Dependencies: pydantic
System role: Document domain entities and API contracts
"""

from pydantic import BaseModel, Field

from ragchat.models.common import new_id, now_ms

GLOBAL_SCOPE = "global"


class RagDocument(BaseModel):
    """Ingested document metadata. Scope is 'global' or a chat id."""

    id: str = Field(default_factory=new_id)
    file_name: str
    upload_timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    scope: str = GLOBAL_SCOPE
    chunk_count: int = 0


class RagChunk(BaseModel):
    """
    Embedded slice of a document page.

    `embedding` is left empty on search results.
    """

    id: str = Field(default_factory=new_id)
    text: str
    embedding: list[float] = Field(default_factory=list)
    source_file_name: str
    page_number: int | None = None
    document_id: str | None = None


class BatchUploadResponse(BaseModel):
    """Outcome counts of a multi-file upload."""

    success_count: int
    fail_count: int
    skipped_count: int = Field(description="Files rejected for not being PDFs")
    oversized_count: int = Field(description="Files rejected for exceeding the size limit")
    documents: list[RagDocument] = Field(default_factory=list)


class BulkDeleteRequest(BaseModel):
    """Request schema for deleting several documents."""

    ids: list[str] = Field(default_factory=list)


class DocumentSearchRequest(BaseModel):
    """Request schema for searching the knowledge base."""

    query: str = Field(description="Free-text query")
    scope: str = Field(default=GLOBAL_SCOPE, description="'global' or a chat id")


class DocumentPreviewResponse(BaseModel):
    """Page 1 text of a document."""

    document_id: str
    text: str


class UploadCandidate(BaseModel):
    """Uploaded file staged on disk, awaiting validation and ingestion."""

    file_name: str
    content_type: str | None = None
    size: int
    path: str
