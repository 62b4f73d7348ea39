"""
Gemini generation client.

Non-streaming, cumulative-streaming and multimodal generation on top of
LangChain's ChatGoogleGenerativeAI, plus the title, summary and
transcription requests built on them.

Dependencies: langchain_google_genai, langchain_core.messages
System role: Generation provider boundary
"""

import base64
import logging
from collections.abc import AsyncIterator
from typing import Any

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from ragchat.core.exceptions import GenerationError, TranscriptionError
from ragchat.core.rag.rag_prompt import (
    MULTIMODAL_SYSTEM_INSTRUCTION,
    SUMMARY_PROMPT_NAME,
    TITLE_PROMPT_NAME,
    TRANSCRIPTION_INSTRUCTION,
    get_prompt,
)
from ragchat.models.chat import DEFAULT_CHAT_TITLE

logger = logging.getLogger(__name__)

MessageContent = str | list[dict[str, Any]]


def content_to_text(content: Any) -> str:
    """
    Flatten LangChain message content to plain text.

    Gemini may return a string or a list of content blocks.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            item if isinstance(item, str) else (item.get("text", "") if isinstance(item, dict) else "")
            for item in content
        )
    return str(content or "")


def media_part(data: bytes, mime_type: str) -> dict[str, Any]:
    """Build an inline media content block from raw bytes."""
    return {
        "type": "media",
        "mime_type": mime_type,
        "data": base64.b64encode(data).decode("ascii"),
    }


class GeminiClient:
    """Gemini chat model facade used by the RAG, chat and live components."""

    def __init__(
        self,
        api_key: str | None,
        chat_model: str = "gemini-3-flash-preview",
        summary_model: str = "gemini-3-flash-preview",
        multimodal_model: str = "gemini-3-flash-preview",
        transcription_model: str = "gemini-3-flash-preview",
        multimodal_max_output_tokens: int = 4096,
        use_prompt_registry: bool = False,
    ) -> None:
        self._api_key = api_key
        self._chat_model = chat_model
        self._summary_model = summary_model
        self._multimodal_model = multimodal_model
        self._transcription_model = transcription_model
        self._multimodal_max_output_tokens = multimodal_max_output_tokens
        self._use_prompt_registry = use_prompt_registry
        self._models: dict[tuple[str, int | None], ChatGoogleGenerativeAI] = {}

    @property
    def chat_model(self) -> str:
        return self._chat_model

    def _model(self, model: str, max_output_tokens: int | None = None) -> ChatGoogleGenerativeAI:
        key = (model, max_output_tokens)
        if key not in self._models:
            kwargs: dict[str, Any] = {"model": model, "google_api_key": self._api_key}
            if max_output_tokens is not None:
                kwargs["max_output_tokens"] = max_output_tokens
            self._models[key] = ChatGoogleGenerativeAI(**kwargs)
        return self._models[key]

    @staticmethod
    def _build_messages(
        history: list[BaseMessage] | None,
        message: MessageContent,
        system_instruction: str | None,
    ) -> list[BaseMessage]:
        messages: list[BaseMessage] = []
        if system_instruction:
            messages.append(SystemMessage(content=system_instruction))
        messages.extend(history or [])
        messages.append(HumanMessage(content=message))
        return messages

    async def generate(
        self,
        prompt: MessageContent,
        system_instruction: str | None = None,
        model: str | None = None,
        history: list[BaseMessage] | None = None,
        max_output_tokens: int | None = None,
    ) -> str:
        """
        Run one non-streaming generation.

        Args:
            prompt: Text or content blocks for the current turn
            system_instruction: Optional system instruction
            model: Model override (defaults to the chat model)
            history: Prior turns as LangChain messages
            max_output_tokens: Optional output cap

        Returns:
            str: Generated text

        Raises:
            GenerationError: When the provider call fails
        """
        messages = self._build_messages(history, prompt, system_instruction)
        try:
            response = await self._model(model or self._chat_model, max_output_tokens).ainvoke(messages)
        except Exception as e:
            raise GenerationError(f"Generation failed: {e}", {"model": model or self._chat_model}) from e
        return content_to_text(response.content)

    async def stream_generate(
        self,
        history: list[BaseMessage],
        message: MessageContent,
        system_instruction: str | None = None,
        model: str | None = None,
        max_output_tokens: int | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream a generation as cumulative text.

        Each yielded value is the entire answer accumulated so far, not a
        delta. Empty provider chunks are skipped.

        Args:
            history: Prior turns as LangChain messages (current turn excluded)
            message: Current turn
            system_instruction: Optional system instruction
            model: Model override
            max_output_tokens: Optional output cap

        Yields:
            str: Accumulated answer text

        Raises:
            GenerationError: When the provider stream fails
        """
        messages = self._build_messages(history, message, system_instruction)
        accumulated = ""
        try:
            async for chunk in self._model(model or self._chat_model, max_output_tokens).astream(messages):
                piece = content_to_text(chunk.content)
                if not piece:
                    continue
                accumulated += piece
                yield accumulated
        except GenerationError:
            raise
        except Exception as e:
            raise GenerationError(f"Streaming generation failed: {e}") from e

    async def generate_multimodal(
        self,
        prompt: str,
        history: list[BaseMessage],
        media: bytes,
        mime_type: str,
    ) -> str:
        """
        Answer a prompt about a recorded media clip.

        Args:
            prompt: Turn transcript or default prompt
            history: Bounded prior turns
            media: Recorded clip bytes
            mime_type: Clip mime type (e.g. video/webm)

        Returns:
            str: Generated text ("" when the model returns nothing)
        """
        content = [{"type": "text", "text": prompt}, media_part(media, mime_type)]
        return await self.generate(
            content,
            system_instruction=MULTIMODAL_SYSTEM_INSTRUCTION,
            model=self._multimodal_model,
            history=history,
            max_output_tokens=self._multimodal_max_output_tokens,
        )

    async def transcribe(self, audio: bytes, mime_type: str = "audio/webm") -> str:
        """
        Transcribe recorded audio.

        Raises:
            TranscriptionError: When the provider call fails
        """
        content = [{"type": "text", "text": TRANSCRIPTION_INSTRUCTION}, media_part(audio, mime_type)]
        try:
            text = await self.generate(content, model=self._transcription_model)
        except GenerationError as e:
            raise TranscriptionError(f"Transcription failed: {e.message}") from e
        return text.strip()

    async def generate_chat_title(self, first_message: str) -> str:
        """
        Generate a short chat title from the first user message.

        Returns:
            str: Title, or "New Chat" when generation fails or is empty
        """
        prompt = get_prompt(TITLE_PROMPT_NAME, use_registry=self._use_prompt_registry)
        try:
            title = await self.generate(prompt.format(message=first_message))
        except GenerationError as e:
            logger.error(f"{__name__}:generate_chat_title - Title generation failed", exc_info=e)
            return DEFAULT_CHAT_TITLE
        return title.strip() or DEFAULT_CHAT_TITLE

    async def summarize(self, conversation_text: str) -> str:
        """
        Summarize older conversation turns into one paragraph.

        Raises:
            GenerationError: When the provider call fails
        """
        prompt = get_prompt(SUMMARY_PROMPT_NAME, use_registry=self._use_prompt_registry)
        return await self.generate(
            prompt.format(conversation=conversation_text),
            model=self._summary_model,
        )
