"""
CRUD operations for database models.

Exports base CRUD class and model-specific CRUD implementations
with pre-instantiated singletons for direct use.

Usage:
    from ragchat.boundary.db.CRUD import chat_crud, document_crud

    chats = await chat_crud.get_chats(db)
"""

from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.CRUD.chat_crud import ChatCRUD, MessageCRUD, chat_crud, message_crud
from ragchat.boundary.db.CRUD.document_crud import (
    NO_PAGE_ONE_TEXT,
    ChunkCRUD,
    DocumentCRUD,
    chunk_crud,
    document_crud,
)

__all__ = [
    "BaseCRUD",
    "ChatCRUD",
    "chat_crud",
    "MessageCRUD",
    "message_crud",
    "DocumentCRUD",
    "document_crud",
    "ChunkCRUD",
    "chunk_crud",
    "NO_PAGE_ONE_TEXT",
]
