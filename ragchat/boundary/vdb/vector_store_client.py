"""
pgvector similarity search client.

Calls the match_rag_chunks database function for scoped nearest-neighbour
search and bulk-inserts embedded chunks.

Dependencies: sqlalchemy, ragchat.configs, ragchat.core.exceptions
System role: Vector store client for embedding operations
"""

import logging
from typing import Any, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.db.CRUD import chunk_crud
from ragchat.boundary.vdb.vector_schemas import VectorSearchResult
from ragchat.configs.vector_store import VectorStoreSettings
from ragchat.core.exceptions import VectorStoreError
from ragchat.models.chat import SourceCitation
from ragchat.models.document import GLOBAL_SCOPE, RagChunk

logger = logging.getLogger(__name__)


def to_vector_literal(embedding: Sequence[float]) -> str:
    """Render an embedding as a pgvector text literal: [0.1,0.2,...]."""
    return "[" + ",".join(repr(float(v)) for v in embedding) + "]"


def dedupe_sources(results: Sequence[VectorSearchResult]) -> list[SourceCitation]:
    """
    Distinct (title, page) citations in first-occurrence order.

    Missing page numbers become 0.
    """
    seen: set[tuple[str, int]] = set()
    sources: list[SourceCitation] = []
    for result in results:
        key = (result.chunk.source_file_name, result.chunk.page_number or 0)
        if key in seen:
            continue
        seen.add(key)
        sources.append(SourceCitation(title=key[0], page=key[1]))
    return sources


class VectorStoreClient:
    """
    pgvector client for vector operations.

    The similarity function filters by threshold and scope server-side; the
    same rules are re-applied to the returned rows so results never exceed
    top_k, never fall below the threshold and never leak other chats' scopes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        settings: VectorStoreSettings | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.config = settings or VectorStoreSettings()

    async def search(
        self,
        query_embedding: Sequence[float],
        filter_scope: str = GLOBAL_SCOPE,
        top_k: int | None = None,
        match_threshold: float | None = None,
    ) -> list[VectorSearchResult]:
        """
        Scoped nearest-neighbour search.

        Args:
            query_embedding: Query vector
            filter_scope: 'global' or a chat id; global documents always match
            top_k: Maximum results (defaults to config top_k)
            match_threshold: Similarity floor, exclusive (defaults to config)

        Missing page numbers come back as 0.

        Returns:
            Results ordered by descending similarity

        Raises:
            VectorStoreError: If the query fails
        """
        top_k = self.config.top_k if top_k is None else top_k
        threshold = self.config.match_threshold if match_threshold is None else match_threshold
        stmt = text(
            "SELECT id, text, file_name, page_number, similarity, document_id, scope "
            f"FROM {self.config.match_function}("
            "CAST(:query_embedding AS vector), :match_threshold, :match_count, :filter_scope)"
        )
        params = {
            "query_embedding": to_vector_literal(query_embedding),
            "match_threshold": threshold,
            "match_count": top_k,
            "filter_scope": filter_scope,
        }

        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt, params)
                rows = result.mappings().all()
        except Exception as e:
            raise VectorStoreError(
                message="Failed to query similar chunks",
                operation="search",
                details={"error": str(e), "filter_scope": filter_scope, "top_k": top_k},
            ) from e

        results = [
            self._to_result(row)
            for row in rows
            if row["similarity"] > threshold
            and (row.get("scope") is None or row["scope"] in (GLOBAL_SCOPE, filter_scope))
        ]
        results.sort(key=lambda r: r.similarity, reverse=True)
        logger.debug(
            f"{__name__}:search - {len(rows)} rows, {len(results[:top_k])} kept "
            f"(scope={filter_scope}, top_k={top_k})"
        )
        return results[:top_k]

    async def add_chunks(self, chunks: Sequence[RagChunk], document_id: str) -> int:
        """
        Bulk-insert embedded chunks for a document.

        Raises:
            VectorStoreError: If the insert fails
        """
        try:
            async with self._session_factory() as session:
                count = await chunk_crud.bulk_create(session, chunks, document_id)
                await session.commit()
        except Exception as e:
            raise VectorStoreError(
                message="Failed to save chunk embeddings",
                operation="add_chunks",
                details={"error": str(e), "chunk_count": len(chunks)},
            ) from e
        return count

    @staticmethod
    def _to_result(row: Any) -> VectorSearchResult:
        document_id = row.get("document_id")
        return VectorSearchResult(
            chunk=RagChunk(
                id=str(row["id"]),
                text=row["text"],
                source_file_name=row["file_name"],
                page_number=row["page_number"] or 0,
                document_id=str(document_id) if document_id is not None else None,
            ),
            similarity=float(row["similarity"]),
            scope=row.get("scope"),
        )
