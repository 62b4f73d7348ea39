"""
Chat and message CRUD operations.

Loads chats with their messages and maps rows to domain ChatSession and
Message objects.

Dependencies: sqlalchemy, ragchat.boundary.db.models
System role: Chat persistence operations
"""

from typing import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.boundary.db.base import to_uuid
from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.models import ChatModel, MessageModel
from ragchat.models.chat import ChatSession, ChatType, Message, Role


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel (append-only within a chat)."""

    def __init__(self) -> None:
        super().__init__(MessageModel)

    async def add_messages(
        self,
        session: AsyncSession,
        chat_id: str,
        messages: Sequence[Message],
    ) -> None:
        """
        Insert messages for a chat.

        Args:
            session: Async database session
            chat_id: Owning chat id
            messages: Messages to insert (ids are kept)
        """
        chat_uuid = to_uuid(chat_id, field="chat_id")
        session.add_all(
            MessageModel(
                id=to_uuid(msg.id),
                chat_id=chat_uuid,
                role=msg.role.value,
                text=msg.text,
                timestamp=msg.timestamp,
            )
            for msg in messages
        )
        await session.flush()

    async def clear_chat_messages(self, session: AsyncSession, chat_id: str) -> int:
        """Delete every message of a chat; returns the number of rows removed."""
        stmt = delete(MessageModel).where(MessageModel.chat_id == to_uuid(chat_id, field="chat_id"))
        result = await session.execute(stmt)
        return result.rowcount

    @staticmethod
    def to_domain(row: MessageModel) -> Message:
        return Message(id=str(row.id), role=Role(row.role), text=row.text, timestamp=row.timestamp)


class ChatCRUD(BaseCRUD[ChatModel]):
    """
    CRUD operations for ChatModel.

    Extends BaseCRUD with eager message loading and title updates.
    """

    def __init__(self) -> None:
        super().__init__(ChatModel)

    async def get_chats(self, session: AsyncSession) -> list[ChatSession]:
        """
        Retrieve all chats with their messages.

        Returns:
            Chats ordered by created_at ascending, messages by timestamp ascending
        """
        stmt = select(ChatModel).order_by(ChatModel.created_at.asc())
        result = await session.execute(stmt)
        return [self.to_domain(row) for row in result.scalars().all()]

    async def create_chat(
        self,
        session: AsyncSession,
        chat: ChatSession,
        message_crud: MessageCRUD,
    ) -> None:
        """
        Insert a chat and its initial messages.

        Args:
            session: Async database session
            chat: Domain chat to persist
            message_crud: CRUD used for the initial messages
        """
        await self.create(
            session,
            id=to_uuid(chat.id, field="chat_id"),
            title=chat.title,
            type=chat.type.value,
            created_at=chat.created_at,
        )
        if chat.messages:
            await message_crud.add_messages(session, chat.id, chat.messages)

    async def update_chat_title(self, session: AsyncSession, chat_id: str, title: str) -> bool:
        """Rename a chat; returns False when the chat does not exist."""
        stmt = update(ChatModel).where(ChatModel.id == to_uuid(chat_id, field="chat_id")).values(title=title)
        result = await session.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    def to_domain(row: ChatModel) -> ChatSession:
        return ChatSession(
            id=str(row.id),
            title=row.title,
            type=ChatType(row.type),
            created_at=row.created_at,
            messages=[MessageCRUD.to_domain(m) for m in row.messages],
        )


chat_crud = ChatCRUD()
message_crud = MessageCRUD()
