"""
Core business logic module.

Contains the exception hierarchy plus the document processing, RAG and
voice components. Components are imported from their own subpackages.
"""

from ragchat.core.exceptions import (
    RagChatException,
    ValidationError,
    ConfigurationError,
    ChatNotFoundError,
    DocumentNotFoundError,
    DocumentProcessingError,
    ParsingError,
    OcrError,
    EmbeddingError,
    VectorStoreError,
    GenerationError,
    TranscriptionError,
    MediaPermissionError,
)

__all__ = [
    "RagChatException",
    "ValidationError",
    "ConfigurationError",
    "ChatNotFoundError",
    "DocumentNotFoundError",
    "DocumentProcessingError",
    "ParsingError",
    "OcrError",
    "EmbeddingError",
    "VectorStoreError",
    "GenerationError",
    "TranscriptionError",
    "MediaPermissionError",
]
