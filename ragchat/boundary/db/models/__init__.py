"""
Database models package.

Exports:
  - ChatModel, MessageModel: Chat sessions and their messages
  - DocumentModel, ChunkModel: Knowledge base documents and embedded chunks

Dependencies: sqlalchemy, pgvector, ragchat.boundary.db.base
System role: Database model definitions for domain entities
"""

from ragchat.boundary.db.models.chat_model import ChatModel, MessageModel
from ragchat.boundary.db.models.document_model import (
    EMBEDDING_DIMENSION,
    ChunkModel,
    DocumentModel,
)

__all__ = [
    "ChatModel",
    "MessageModel",
    "DocumentModel",
    "ChunkModel",
    "EMBEDDING_DIMENSION",
]
