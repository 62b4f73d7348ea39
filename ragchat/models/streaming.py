"""
Streaming event schemas for chat answers.

Defines event types and payloads emitted while a RAG answer is produced.

Dependencies: pydantic
System role: Streaming protocol schemas
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel


class StreamEventType(str, Enum):
    """Server-to-client event types for streaming chat."""

    STATUS = "status"
    SOURCES = "sources"
    CHUNK = "chunk"
    COMPLETE = "complete"
    ERROR = "error"


class StreamEvent(BaseModel):
    """
    Streaming event model.

    CHUNK events carry the entire accumulated answer in `data["text"]`,
    never a delta.

    Attributes:
        type: Event type identifier
        data: Event-specific payload
    """

    type: StreamEventType
    data: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {"type": self.type.value, "data": self.data}

    @classmethod
    def status(cls, message: str) -> "StreamEvent":
        return cls(type=StreamEventType.STATUS, data={"message": message})

    @classmethod
    def chunk(cls, text: str) -> "StreamEvent":
        return cls(type=StreamEventType.CHUNK, data={"text": text})
