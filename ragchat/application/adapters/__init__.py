"""Supporting adapters."""

from .chat_history_adapter import ChatHistoryAdapter
from .gemini_payload_adapter import GeminiPayloadAdapter

__all__ = ["ChatHistoryAdapter", "GeminiPayloadAdapter"]
