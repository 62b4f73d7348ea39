"""
Error translation for routers.

Maps the application exception hierarchy onto HTTP status codes and
streaming error codes.

Dependencies: fastapi, ragchat.core.exceptions
System role: HTTP error mapping
"""

from fastapi import HTTPException

from ragchat.core.exceptions import (
    ChatNotFoundError,
    ConfigurationError,
    DocumentNotFoundError,
    RagChatException,
    ValidationError,
)


def status_code_for(exc: RagChatException) -> int:
    if isinstance(exc, ValidationError):
        return 400
    if isinstance(exc, (ChatNotFoundError, DocumentNotFoundError)):
        return 404
    if isinstance(exc, ConfigurationError):
        return 503
    return 500


def error_code_for(exc: Exception) -> str:
    """Stable code carried by streaming error events."""
    if isinstance(exc, ValidationError):
        return "VALIDATION_ERROR"
    if isinstance(exc, ChatNotFoundError):
        return "CHAT_NOT_FOUND"
    if isinstance(exc, DocumentNotFoundError):
        return "DOCUMENT_NOT_FOUND"
    if isinstance(exc, ConfigurationError):
        return "CONFIGURATION_ERROR"
    return "PROCESSING_ERROR"


def to_http_exception(exc: RagChatException) -> HTTPException:
    """Convert an application error to an HTTPException with a readable detail."""
    return HTTPException(status_code=status_code_for(exc), detail=exc.message)
