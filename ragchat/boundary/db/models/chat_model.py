"""
Chat and message ORM models.

Chats own their messages; deleting a chat cascades to its messages.

Dependencies: sqlalchemy, ragchat.boundary.db.base
System role: Chat persistence
"""

import uuid

from sqlalchemy import BigInteger, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ragchat.boundary.db.base import Base, UUIDMixin


class ChatModel(Base, UUIDMixin):
    """
    Chat session row.

    Attributes:
        title: Display title
        type: 'global' or 'dedicated'
        created_at: Epoch milliseconds
        messages: Messages ordered by timestamp (cascade delete)
    """

    __tablename__ = "chats"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(16), nullable=False)
    created_at: Mapped[int] = mapped_column(BigInteger, nullable=False)

    messages = relationship(
        "MessageModel",
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="MessageModel.timestamp",
        lazy="selectin",
    )


class MessageModel(Base, UUIDMixin):
    """Chat message row ('user' or 'model' role, epoch-ms timestamp)."""

    __tablename__ = "messages"

    chat_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("chats.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)

    chat = relationship("ChatModel", back_populates="messages")
