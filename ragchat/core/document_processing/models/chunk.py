"""
Intermediate models for the document processing pipeline.

Page text produced by parsing and chunk drafts produced by chunking,
before embeddings are attached.

Dependencies: pydantic
System role: Data structures passed between ingestion stages
"""

from pydantic import BaseModel, Field


class PageText(BaseModel):
    """Extracted text of one PDF page (1-based page number)."""

    text: str
    page_number: int
    ocr_applied: bool = False


class ChunkDraft(BaseModel):
    """Chunk text with its provenance, not yet embedded."""

    text: str = Field(description="Raw window text")
    source_file_name: str
    page_number: int | None = None
