"""
Chat history adapter.

Converts domain chat messages to LangChain messages for the generation
provider and to plain transcript text for summarization.

Dependencies: langchain_core.messages
System role: Chat history conversion adapter
"""

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from ragchat.models.chat import Message, Role


class ChatHistoryAdapter:
    """Stateless conversions between Message and provider formats."""

    @staticmethod
    def to_langchain(messages: list[Message]) -> list[BaseMessage]:
        """
        Convert messages to LangChain history.

        Args:
            messages: Chat messages in order

        Returns:
            list[BaseMessage]: HumanMessage for user turns, AIMessage for model turns
        """
        return [
            HumanMessage(content=msg.text) if msg.role == Role.USER else AIMessage(content=msg.text)
            for msg in messages
        ]

    @staticmethod
    def to_transcript(messages: list[Message]) -> str:
        """Render messages as 'User: ...' / 'AI: ...' lines."""
        return "\n".join(
            f"{'User' if msg.role == Role.USER else 'AI'}: {msg.text}" for msg in messages
        )

    @staticmethod
    def total_chars(messages: list[Message]) -> int:
        """Sum of message text lengths."""
        return sum(len(msg.text or "") for msg in messages)
