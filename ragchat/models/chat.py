"""
Chat domain models and schemas.

Chat sessions, messages with streaming/citation state, and the request
schemas of the chat API.

Dependencies: pydantic
System role: Chat domain entities and API contracts
"""

from enum import Enum

from pydantic import BaseModel, Field

from ragchat.models.common import new_id, now_ms

DEFAULT_CHAT_TITLE = "New Chat"


class Role(str, Enum):
    """Author of a chat message."""

    USER = "user"
    MODEL = "model"


class ChatType(str, Enum):
    """Knowledge scope of a chat session."""

    GLOBAL = "global"
    DEDICATED = "dedicated"


class SourceCitation(BaseModel):
    """Source shown under an answer: document file name and page (0 when unknown)."""

    title: str
    page: int = 0


class Message(BaseModel):
    """
    Single chat message.

    While streaming, `text` is replaced wholesale on every increment and
    `is_streaming` stays True until the message is finalized.
    """

    id: str = Field(default_factory=new_id)
    role: Role
    text: str
    timestamp: int = Field(default_factory=now_ms, description="Epoch milliseconds")
    is_streaming: bool = False
    sources: list[SourceCitation] | None = None


class ChatSession(BaseModel):
    """Chat session with its ordered messages."""

    id: str = Field(default_factory=new_id)
    title: str = DEFAULT_CHAT_TITLE
    type: ChatType = ChatType.GLOBAL
    messages: list[Message] = Field(default_factory=list)
    created_at: int = Field(default_factory=now_ms, description="Epoch milliseconds")

    @property
    def retrieval_scope(self) -> str:
        """Scope used for vector search: own id for dedicated chats, else global."""
        if self.type == ChatType.DEDICATED:
            return self.id
        return ChatType.GLOBAL.value


class CreateChatRequest(BaseModel):
    """Request schema for creating a chat."""

    title: str = Field(default="", description="Chat title; blank becomes 'New Chat'")
    type: ChatType = Field(default=ChatType.GLOBAL, description="Knowledge scope")


class UpdateChatTitleRequest(BaseModel):
    """Request schema for renaming a chat."""

    title: str = Field(min_length=1, description="New chat title")


class SendMessageRequest(BaseModel):
    """Request schema for sending a chat message."""

    text: str = Field(min_length=1, description="User question or message")


class ChatListFilter(str, Enum):
    """Chat list type filter."""

    ALL = "all"
    GLOBAL = "global"
    DEDICATED = "dedicated"


class ExportFormat(str, Enum):
    TXT = "txt"
    JSON = "json"


class ChatExport(BaseModel):
    """Downloadable chat transcript."""

    file_name: str
    media_type: str
    content: str
