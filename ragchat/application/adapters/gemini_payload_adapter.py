"""
Gemini payload adapter.

Converts Gemini SDK-shaped request payloads (role/parts history, inline
media parts, generation config) into LangChain messages and content
blocks for the provider gateway.

Dependencies: langchain_core.messages
System role: Provider gateway payload conversion
"""

from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage

from ragchat.core.exceptions import ValidationError

ContentBlocks = str | list[dict[str, Any]]


class GeminiPayloadAdapter:
    """Stateless conversions from SDK payload fragments."""

    @staticmethod
    def to_content(message: Any) -> ContentBlocks:
        """
        Convert a message (plain string or list of parts) to LangChain content.

        Parts are {"text": ...} or {"inlineData": {"data": b64, "mimeType": ...}}.
        """
        if isinstance(message, str):
            return message
        if not isinstance(message, list):
            raise ValidationError("Message must be a string or a list of parts", field="message")

        blocks: list[dict[str, Any]] = []
        for part in message:
            if isinstance(part, str):
                blocks.append({"type": "text", "text": part})
            elif "text" in part:
                blocks.append({"type": "text", "text": part["text"]})
            elif "inlineData" in part:
                inline = part["inlineData"]
                blocks.append(
                    {"type": "media", "mime_type": inline.get("mimeType"), "data": inline.get("data")}
                )
            else:
                raise ValidationError(f"Unsupported message part: {sorted(part)}", field="message")
        return blocks

    @classmethod
    def to_history(cls, history: list[dict[str, Any]] | None) -> list[BaseMessage]:
        """Convert role/parts turns; role 'user' becomes HumanMessage, anything else AIMessage."""
        messages: list[BaseMessage] = []
        for turn in history or []:
            content = cls.to_content(turn.get("parts", []))
            if turn.get("role") == "user":
                messages.append(HumanMessage(content=content))
            else:
                messages.append(AIMessage(content=content))
        return messages

    @classmethod
    def split_contents(cls, contents: Any) -> tuple[list[BaseMessage], ContentBlocks]:
        """
        Split generate-content `contents` into prior turns and the current turn.

        Returns:
            tuple: (history, current turn content)
        """
        if isinstance(contents, str):
            return [], contents
        if isinstance(contents, dict):
            contents = [contents]
        if not contents:
            raise ValidationError("contents must not be empty", field="contents")
        *prior, current = contents
        return cls.to_history(prior), cls.to_content(current.get("parts", []))

    @staticmethod
    def max_output_tokens(config: dict[str, Any] | None) -> int | None:
        if not config:
            return None
        return config.get("maxOutputTokens")
