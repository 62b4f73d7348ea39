"""
Embedding generation task.

Embeds chunk drafts one at a time through the embedding client and reports
per-chunk progress with a remaining-time estimate.

Dependencies: ragchat.boundary.llm
System role: Third stage of document ingestion pipeline
"""

import logging
import math
from typing import Awaitable, Callable

from ragchat.boundary.llm.embedding_client import EmbeddingClient
from ragchat.models.document import RagChunk

from ..models import ChunkDraft

logger = logging.getLogger(__name__)


class EmbeddingTask:
    """Sequentially embed chunks; any failure aborts the document."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        seconds_per_chunk_estimate: float = 0.2,
    ) -> None:
        self._client = embedding_client
        self._seconds_per_chunk = seconds_per_chunk_estimate

    def progress_for(self, index: int, total: int) -> tuple[str, int] | None:
        """
        Status text and percent for chunk `index` (0-based).

        Reported on every even index and on the last chunk; None otherwise.
        """
        if index % 2 != 0 and index != total - 1:
            return None
        remaining = total - index
        eta_seconds = math.ceil(remaining * self._seconds_per_chunk)
        status = f"Embedding chunk {index + 1} of {total} (approx. {eta_seconds}s remaining)..."
        return status, 20 + math.floor(index / total * 70)

    async def embed(
        self,
        drafts: list[ChunkDraft],
        report: Callable[[str, int], Awaitable[None]],
    ) -> list[RagChunk]:
        """
        Embed chunk drafts in order.

        Empty embeddings (blank text) are kept, not filtered.

        Args:
            drafts: Chunks from the chunking stage
            report: Async progress reporter (status, percent)

        Returns:
            list[RagChunk]: Chunks with embeddings, same order as drafts

        Raises:
            EmbeddingError: On the first provider failure
        """
        total = len(drafts)
        chunks: list[RagChunk] = []
        for index, draft in enumerate(drafts):
            progress = self.progress_for(index, total)
            if progress is not None:
                await report(*progress)

            embedding = await self._client.embed(draft.text)
            if not embedding:
                logger.warning(f"{__name__}:embed - Chunk {index + 1} produced an empty embedding")
            chunks.append(
                RagChunk(
                    text=draft.text,
                    embedding=embedding,
                    source_file_name=draft.source_file_name,
                    page_number=draft.page_number,
                )
            )
        return chunks
