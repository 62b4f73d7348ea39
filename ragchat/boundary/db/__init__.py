"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), get_async_db(): Async connection management
  - init_db(): Idempotent schema setup (extension, tables, index, match function)
  - ChatModel, MessageModel, DocumentModel, ChunkModel: ORM entities
  - chat_crud, message_crud, document_crud, chunk_crud: CRUD operation singletons

Dependencies: sqlalchemy, asyncpg, pgvector, ragchat.configs
System role: Database adapter providing persistent storage for chats,
messages, documents and embedded chunks.
"""

from ragchat.boundary.db.base import Base, UUIDMixin, to_uuid
from ragchat.boundary.db.connection import (
    get_async_db,
    get_async_engine,
    get_async_session_factory,
)
from ragchat.boundary.db.models import ChatModel, ChunkModel, DocumentModel, MessageModel
from ragchat.boundary.db.CRUD import (
    BaseCRUD,
    chat_crud,
    chunk_crud,
    document_crud,
    message_crud,
)
from ragchat.boundary.db.schema import init_db

__all__ = [
    "Base",
    "UUIDMixin",
    "to_uuid",
    "get_async_db",
    "get_async_engine",
    "get_async_session_factory",
    "init_db",
    "ChatModel",
    "MessageModel",
    "DocumentModel",
    "ChunkModel",
    "BaseCRUD",
    "chat_crud",
    "message_crud",
    "document_crud",
    "chunk_crud",
]
