"""
Document processing pipeline for ingestion.

Parsing with OCR fallback, sliding-window chunking, embedding and saving.

Dependencies: langchain_community, pypdfium2, pytesseract, langchain_google_genai, pydantic
System role: Document ingestion pipeline entrypoint
"""

from .configs import (
    DocumentPipelineSettings,
    get_pipeline_settings,
)
from .entrypoint import DocumentPipeline
from .models import ChunkDraft, PageText, PipelineResult

__all__ = [
    "DocumentPipeline",
    "DocumentPipelineSettings",
    "get_pipeline_settings",
    "PageText",
    "ChunkDraft",
    "PipelineResult",
]
