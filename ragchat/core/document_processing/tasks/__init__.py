"""
Task modules for document processing pipeline.

Exports: ParsingTask, TesseractOcrEngine, ChunkingTask, EmbeddingTask, SavingTask
"""

from .chunking_task import ChunkingTask
from .embedding_task import EmbeddingTask
from .ocr_task import TesseractOcrEngine
from .parsing_task import ParsingTask
from .saving_task import SavingTask

__all__ = [
    "ParsingTask",
    "TesseractOcrEngine",
    "ChunkingTask",
    "EmbeddingTask",
    "SavingTask",
]
