"""
Chat service for conversational Q&A with RAG.

Owns the local chat session state and writes it through to the store when
one is configured. Runs the send flow: optimistic user message, streaming
placeholder answer, background title generation, finalization and
persistence.

Dependencies: ragchat.core.rag, ragchat.boundary.db, ragchat.boundary.llm
System role: Chat service orchestration layer
"""

import asyncio
import json
import logging
import re
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import datetime
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.db.CRUD.chat_crud import chat_crud, message_crud
from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.core.exceptions import (
    ChatNotFoundError,
    ConfigurationError,
    RagChatException,
    ValidationError,
)
from ragchat.core.rag.rag_orchestrator import RagOrchestrator
from ragchat.models.chat import (
    DEFAULT_CHAT_TITLE,
    ChatExport,
    ChatListFilter,
    ChatSession,
    ChatType,
    ExportFormat,
    Message,
    Role,
    SourceCitation,
)
from ragchat.models.common import now_ms
from ragchat.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

MISSING_API_KEY_MESSAGE = "Missing API Key. Please configure your environment."
GLOBAL_GREETING = "Ready to chat using Global Data."
DEDICATED_GREETING = "Ready. Upload documents to this chat to create a custom knowledge base."
EXPORT_SEPARATOR = "\n-------------------\n\n"


class ChatService:
    """
    Chat service for conversational Q&A.

    Chats live in memory for the lifetime of the service; with a store
    configured every mutation is also written through to it.
    """

    def __init__(
        self,
        orchestrator: RagOrchestrator,
        gemini_client: GeminiClient,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        api_key_configured: bool = True,
    ) -> None:
        """
        Initialize chat service.

        Args:
            orchestrator: RAG orchestrator producing answers
            gemini_client: Client used for background title generation
            session_factory: Store session factory (None runs local-only)
            api_key_configured: Whether generation credentials are present
        """
        self._orchestrator = orchestrator
        self._gemini_client = gemini_client
        self._session_factory = session_factory
        self._api_key_configured = api_key_configured
        self._chats: dict[str, ChatSession] = {}
        self._background_tasks: set[asyncio.Task] = set()

    @property
    def store_configured(self) -> bool:
        return self._session_factory is not None

    async def _write(self, operation: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        async with self._session_factory() as session:
            result = await operation(session)
            await session.commit()
            return result

    async def _write_or_log(self, action: str, operation: Callable[[AsyncSession], Awaitable[Any]]) -> None:
        """Write through to the store; a failure is logged and local state is kept."""
        if not self.store_configured:
            return
        try:
            await self._write(operation)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:{action} - Store write failed", exc_info=e)

    async def _write_or_raise(self, action: str, operation: Callable[[AsyncSession], Awaitable[Any]]) -> Any:
        if not self.store_configured:
            return None
        try:
            return await self._write(operation)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:{action} - Store write failed", exc_info=e)
            raise RagChatException(f"Failed to {action.replace('_', ' ')}", {"error": str(e)}) from e

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    async def load(self) -> list[ChatSession]:
        """
        Load chats from the store into local state.

        Returns:
            list[ChatSession]: Loaded chats (empty when no store is configured)
        """
        if not self.store_configured:
            logger.warning(f"{__name__}:load - Store not configured, chats are local only")
            return []
        try:
            async with self._session_factory() as session:
                chats = await chat_crud.get_chats(session)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:load - Failed to load chats", exc_info=e)
            return []
        self._chats = {chat.id: chat for chat in chats}
        logger.info(f"{__name__}:load - Loaded {len(chats)} chats")
        return chats

    async def create_chat(self, title: str = "", chat_type: ChatType = ChatType.GLOBAL) -> ChatSession:
        """
        Create a chat with its greeting message.

        A blank title becomes "New Chat". The chat is kept locally even when
        the store write fails.
        """
        greeting = GLOBAL_GREETING if chat_type == ChatType.GLOBAL else DEDICATED_GREETING
        chat = ChatSession(
            title=title.strip() or DEFAULT_CHAT_TITLE,
            type=chat_type,
            messages=[Message(role=Role.MODEL, text=greeting)],
        )
        self._chats[chat.id] = chat
        await self._write_or_log(
            "create_chat",
            lambda session: chat_crud.create_chat(session, chat, message_crud),
        )
        logger.info(f"{__name__}:create_chat - Created chat_id={chat.id}, type={chat_type.value}")
        return chat

    def list_chats(self, query: str = "", type_filter: ChatListFilter = ChatListFilter.ALL) -> list[ChatSession]:
        """Chats whose title contains query (case-insensitive), filtered by type."""
        needle = query.lower()
        return [
            chat
            for chat in self._chats.values()
            if needle in chat.title.lower()
            and (type_filter == ChatListFilter.ALL or chat.type.value == type_filter.value)
        ]

    def get_chat(self, chat_id: str) -> ChatSession:
        chat = self._chats.get(chat_id)
        if chat is None:
            raise ChatNotFoundError(chat_id)
        return chat

    async def update_title(self, chat_id: str, title: str) -> ChatSession:
        chat = self.get_chat(chat_id)
        if not title.strip():
            raise ValidationError("Title must not be empty", field="title")
        await self._write_or_raise(
            "update_chat_title",
            lambda session: chat_crud.update_chat_title(session, chat_id, title.strip()),
        )
        chat.title = title.strip()
        return chat

    async def clear_chat(self, chat_id: str) -> ChatSession:
        """Remove every message of a chat. The store is cleared before local state."""
        chat = self.get_chat(chat_id)
        await self._write_or_raise(
            "clear_chat",
            lambda session: message_crud.clear_chat_messages(session, chat_id),
        )
        chat.messages = []
        return chat

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat; its messages go with it through the cascade."""
        self.get_chat(chat_id)
        await self._write_or_raise(
            "delete_chat",
            lambda session: chat_crud.delete_by_id(session, chat_id),
        )
        del self._chats[chat_id]

    def export_chat(
        self,
        chat_id: str,
        export_format: ExportFormat = ExportFormat.TXT,
        now: datetime | None = None,
    ) -> ChatExport:
        """
        Render a chat as a downloadable text or JSON transcript.

        Args:
            chat_id: Chat to export
            export_format: txt (readable transcript) or json (message list)
            now: Export time (defaults to the current local time)

        Returns:
            ChatExport: File name, media type and content
        """
        chat = self.get_chat(chat_id)
        now = now or datetime.now()
        slug = re.sub(r"\s+", "_", chat.title)
        file_name = f"chat_{slug}_{now.strftime('%Y-%m-%d')}.{export_format.value}"

        if export_format == ExportFormat.JSON:
            content = json.dumps([m.model_dump(mode="json") for m in chat.messages], indent=2)
            return ChatExport(file_name=file_name, media_type="application/json", content=content)

        header = f"Chat: {chat.title}\nDate: {now.strftime('%m/%d/%Y, %I:%M:%S %p')}\n\n"
        blocks = []
        for msg in chat.messages:
            role = "User" if msg.role == Role.USER else "AI"
            stamp = datetime.fromtimestamp(msg.timestamp / 1000).strftime("%I:%M:%S %p")
            blocks.append(f"[{stamp}] {role}:\n{msg.text}\n")
        return ChatExport(
            file_name=file_name,
            media_type="text/plain",
            content=header + EXPORT_SEPARATOR.join(blocks),
        )

    # ------------------------------------------------------------------
    # Send flow
    # ------------------------------------------------------------------

    def _schedule_title(self, chat_id: str, first_message: str) -> None:
        task = asyncio.get_running_loop().create_task(self._generate_title(chat_id, first_message))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _generate_title(self, chat_id: str, first_message: str) -> None:
        title = await self._gemini_client.generate_chat_title(first_message)
        chat = self._chats.get(chat_id)
        if chat is None:
            return
        chat.title = title
        logger.info(f"{__name__}:_generate_title - chat_id={chat_id}, title={title!r}")
        await self._write_or_log(
            "_generate_title",
            lambda session: chat_crud.update_chat_title(session, chat_id, title),
        )

    async def wait_for_background_tasks(self) -> None:
        """Wait for pending title generation."""
        while self._background_tasks:
            await asyncio.gather(*list(self._background_tasks))

    async def stream_message(self, chat_id: str, text: str) -> AsyncGenerator[StreamEvent, None]:
        """
        Send a user message and stream the answer.

        Flow:
        1. Check credentials and schedule title generation for fresh chats
        2. Append and persist the user message
        3. Append a streaming placeholder answer
        4. Stream the orchestrator, replacing the placeholder text per chunk
        5. Finalize and persist the answer

        Args:
            chat_id: Target chat
            text: User message text

        Yields:
            StreamEvent: status, sources, chunk and complete events

        Raises:
            ChatNotFoundError: Unknown chat
            ValidationError: Empty message
            ConfigurationError: Missing generation credentials
        """
        if not text.strip():
            raise ValidationError("Message must not be empty", field="text")
        chat = self.get_chat(chat_id)
        if not self._api_key_configured:
            raise ConfigurationError(MISSING_API_KEY_MESSAGE, setting="GEMINI_API_KEY")

        logger.info(f"{__name__}:stream_message - START chat_id={chat_id}")

        # Step 1: Title generation for the first interaction
        if chat.title == DEFAULT_CHAT_TITLE and len(chat.messages) <= 1:
            self._schedule_title(chat_id, text)

        # Step 2: Optimistic user message
        user_msg = Message(role=Role.USER, text=text)
        history = list(chat.messages)
        chat.messages.append(user_msg)
        await self._write_or_log(
            "stream_message",
            lambda session: message_crud.add_messages(session, chat_id, [user_msg]),
        )

        # Step 3: Streaming placeholder
        placeholder = Message(role=Role.MODEL, text="", is_streaming=True)
        chat.messages.append(placeholder)

        # Step 4: Stream the answer
        sources: list[SourceCitation] = []
        finalized = False
        try:
            async for event in self._orchestrator.astream(user_msg, history, chat.type, chat.id):
                if event.type == StreamEventType.SOURCES:
                    sources = [SourceCitation(**s) for s in event.data["sources"]]
                    placeholder.sources = sources
                elif event.type == StreamEventType.CHUNK:
                    placeholder.text = event.data["text"]
                elif event.type == StreamEventType.COMPLETE:
                    placeholder.text = event.data["text"]
                    continue
                yield event

            # Step 5: Finalize and persist
            placeholder.is_streaming = False
            placeholder.timestamp = now_ms()
            placeholder.sources = sources
            finalized = True
        except Exception as e:
            logger.error(f"{__name__}:stream_message - Answer failed: {e}")
            raise
        finally:
            # Covers consumer close and cancellation as well as errors
            if not finalized:
                logger.warning(f"{__name__}:stream_message - Discarding unfinished answer chat_id={chat_id}")
                chat.messages = [m for m in chat.messages if m.id != placeholder.id]

        await self._write_or_log(
            "stream_message",
            lambda session: message_crud.add_messages(session, chat_id, [placeholder]),
        )
        logger.info(f"{__name__}:stream_message - END chat_id={chat_id}, answer_len={len(placeholder.text)}")
        yield StreamEvent(
            type=StreamEventType.COMPLETE,
            data={"message": placeholder.model_dump(mode="json")},
        )

    async def send_message(self, chat_id: str, text: str) -> Message:
        """Non-streaming send; returns the finalized answer message."""
        final: Message | None = None
        async for event in self.stream_message(chat_id, text):
            if event.type == StreamEventType.COMPLETE:
                final = Message(**event.data["message"])
        return final
