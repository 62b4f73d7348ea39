"""
Models for document processing pipeline.

Exports: PageText, ChunkDraft, PipelineResult
"""

from .chunk import ChunkDraft, PageText
from .pipeline_result import PipelineResult

__all__ = [
    "PageText",
    "ChunkDraft",
    "PipelineResult",
]
