"""
Conversation history compressor.

Replaces older turns with one model-authored summary message when the
history plus retrieved context exceeds a character budget.

Dependencies: ragchat.boundary.llm
System role: Context-size control for RAG generation
"""

import logging

from ragchat.application.adapters.chat_history_adapter import ChatHistoryAdapter
from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.core.exceptions import GenerationError
from ragchat.models.chat import Message, Role

logger = logging.getLogger(__name__)

SUMMARY_NOTE_PREFIX = "[System Note: Previous conversation summary]: "
SUMMARY_UNAVAILABLE = "Previous conversation summary unavailable."


class HistoryCompressor:
    """
    Keep the most recent messages verbatim and summarize the rest.

    The post-summary size is only logged against compression_target_chars,
    never enforced.
    """

    def __init__(
        self,
        gemini_client: GeminiClient,
        max_context_chars: int = 20000,
        keep_recent: int = 4,
        compression_target_chars: int = 10000,
    ) -> None:
        self._client = gemini_client
        self._max_context_chars = max_context_chars
        self._keep_recent = keep_recent
        self._compression_target_chars = compression_target_chars

    def should_compress(self, history: list[Message], context_text: str = "", pending_text: str = "") -> bool:
        """
        Whether the combined size exceeds the budget.

        Args:
            history: Prior messages
            context_text: Assembled retrieval context
            pending_text: Current query text, counted but never summarized

        Returns:
            bool: True when history + pending + context is over the limit
        """
        total = ChatHistoryAdapter.total_chars(history) + len(pending_text) + len(context_text)
        return total > self._max_context_chars

    async def compress(self, history: list[Message]) -> list[Message]:
        """
        Summarize everything but the last `keep_recent` messages.

        Returns the history unchanged when there is nothing older to
        summarize or when summarization fails.

        Args:
            history: Prior messages, oldest first

        Returns:
            list[Message]: [summary message, *recent messages] or the input
        """
        recent = history[-self._keep_recent:] if self._keep_recent else []
        older = history[:-self._keep_recent] if self._keep_recent else list(history)

        if not older:
            return history

        transcript = ChatHistoryAdapter.to_transcript(older)
        try:
            summary = await self._client.summarize(transcript)
        except GenerationError as e:
            logger.error(f"{__name__}:compress - Failed to summarize history", exc_info=e)
            return history

        summary_message = Message(
            role=Role.MODEL,
            text=f"{SUMMARY_NOTE_PREFIX}{summary.strip() or SUMMARY_UNAVAILABLE}",
        )
        logger.info(
            f"{__name__}:compress - Summarized {len(older)} messages, kept {len(recent)} recent"
        )
        compressed = [summary_message, *recent]
        if ChatHistoryAdapter.total_chars(compressed) > self._compression_target_chars:
            logger.warning(
                f"{__name__}:compress - Compressed history still above target of "
                f"{self._compression_target_chars} chars"
            )
        return compressed
