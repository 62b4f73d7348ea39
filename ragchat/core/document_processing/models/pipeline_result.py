"""
Pipeline result model for document processing.

Represents the outcome of ingesting one document.

Dependencies: pydantic
System role: Return type for DocumentPipeline.ingest()
"""

from pydantic import BaseModel, Field

from ragchat.models.document import RagDocument


class PipelineResult(BaseModel):
    """Result of document processing pipeline execution."""

    document: RagDocument = Field(description="Persisted document metadata")
    chunk_count: int = Field(description="Number of chunks persisted")
    processing_time_ms: float = Field(description="Total processing time in milliseconds")
