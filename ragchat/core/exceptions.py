"""
Exception hierarchy for the RAG chat application.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class RagChatException(Exception):
    """Base exception for all RAG chat application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(RagChatException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class ConfigurationError(RagChatException):
    """Raised when a required credential or store is not configured."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if setting:
            details["setting"] = setting
        super().__init__(message, details)


class ChatNotFoundError(RagChatException):
    """Raised when a chat session cannot be found."""

    def __init__(self, chat_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["chat_id"] = chat_id
        super().__init__(f"Chat not found: {chat_id}", details)


class DocumentNotFoundError(RagChatException):
    """Raised when a RAG document cannot be found."""

    def __init__(self, document_id: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["document_id"] = document_id
        super().__init__(f"Document not found: {document_id}", details)


class DocumentProcessingError(RagChatException):
    """Base exception for document processing errors."""

    def __init__(
        self,
        message: str,
        file_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize document processing error.

        Args:
            message: Error message
            file_name: Name of the file that failed
            details: Additional context
        """
        details = details or {}
        if file_name:
            details["file_name"] = file_name
        super().__init__(message, details)


class ParsingError(DocumentProcessingError):
    """Raised when PDF text extraction fails."""

    pass


class OcrError(DocumentProcessingError):
    """Raised when rendering or recognizing an image-only page fails."""

    def __init__(
        self,
        message: str,
        page_number: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if page_number is not None:
            details["page_number"] = page_number
        super().__init__(message, details=details)


class EmbeddingError(DocumentProcessingError):
    """Raised when embedding generation fails."""

    pass


class VectorStoreError(RagChatException):
    """Raised when vector store operations fail."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize vector store error.

        Args:
            message: Error message
            operation: Operation that failed (search, add_chunks)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class GenerationError(RagChatException):
    """Raised when the generation provider fails."""

    pass


class TranscriptionError(RagChatException):
    """Raised when audio transcription fails."""

    pass


class MediaPermissionError(RagChatException):
    """Raised when screen or microphone capture is denied."""

    def __init__(
        self,
        message: str,
        device: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if device:
            details["device"] = device
        super().__init__(message, details)
