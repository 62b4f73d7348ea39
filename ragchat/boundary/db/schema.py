"""
Database schema initialization.

Creates the pgvector extension, the ORM tables, the ivfflat cosine index
over rag_chunks.embedding and the match_rag_chunks similarity function.
Every statement is idempotent.

Dependencies: sqlalchemy, pgvector, ragchat.boundary.db.models
System role: Database schema initialization
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from ragchat.boundary.db.base import Base
from ragchat.boundary.db.models import EMBEDDING_DIMENSION  # registers all models

logger = logging.getLogger(__name__)

DROP_MATCH_FUNCTION_SQL = (
    f"DROP FUNCTION IF EXISTS match_rag_chunks(vector({EMBEDDING_DIMENSION}), float, int, text)"
)

MATCH_FUNCTION_SQL = f"""
CREATE OR REPLACE FUNCTION match_rag_chunks (
  query_embedding vector({EMBEDDING_DIMENSION}),
  match_threshold float,
  match_count int,
  filter_scope text
) RETURNS TABLE (
  id uuid,
  text text,
  file_name text,
  page_number int,
  similarity float,
  document_id uuid,
  scope text
) LANGUAGE plpgsql STABLE AS $$
BEGIN
  RETURN QUERY
  SELECT
    rag_chunks.id,
    rag_chunks.text,
    documents.file_name,
    rag_chunks.page_number,
    1 - (rag_chunks.embedding <=> query_embedding) AS similarity,
    rag_chunks.document_id,
    documents.scope
  FROM rag_chunks
  JOIN documents ON rag_chunks.document_id = documents.id
  WHERE 1 - (rag_chunks.embedding <=> query_embedding) > match_threshold
  AND (documents.scope = 'global' OR documents.scope = filter_scope)
  ORDER BY similarity DESC
  LIMIT match_count;
END;
$$;
"""


def ivfflat_index_sql(lists: int = 100) -> str:
    """DDL for the cosine ivfflat index, created only when missing."""
    return f"""
    DO $$
    BEGIN
        IF NOT EXISTS (
            SELECT 1 FROM pg_indexes WHERE indexname = 'idx_rag_chunks_embedding_ivfflat'
        ) THEN
            CREATE INDEX idx_rag_chunks_embedding_ivfflat
            ON rag_chunks USING ivfflat (embedding vector_cosine_ops)
            WITH (lists = {lists});
        END IF;
    END$$;
    """


async def init_db(engine: AsyncEngine, ivfflat_lists: int = 100) -> None:
    """
    Initialize database extensions, tables, vector index and match function.

    Args:
        engine: Async engine bound to a PostgreSQL database with pgvector
        ivfflat_lists: Number of ivfflat lists for the embedding index
    """
    async with engine.begin() as conn:
        await conn.execute(text("CREATE EXTENSION IF NOT EXISTS vector"))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        await conn.execute(text(ivfflat_index_sql(ivfflat_lists)))
        await conn.execute(text(DROP_MATCH_FUNCTION_SQL))
        await conn.execute(text(MATCH_FUNCTION_SQL))

    logger.info(f"{__name__}:init_db - Schema ready (ivfflat lists={ivfflat_lists})")
