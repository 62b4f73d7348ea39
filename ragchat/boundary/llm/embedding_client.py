"""
Embedding client for chunk and query vectors.

Dependencies: langchain_google_genai, fastapi.concurrency
System role: Embedding provider boundary
"""

import logging

from fastapi.concurrency import run_in_threadpool

from ragchat.boundary.llm.embeddings_wrapper import FixedDimensionEmbeddings
from ragchat.core.exceptions import EmbeddingError

logger = logging.getLogger(__name__)


class EmbeddingClient:
    """Async facade over the synchronous Gemini embedding SDK call."""

    def __init__(
        self,
        api_key: str | None,
        model: str = "models/gemini-embedding-001",
        dimension: int = 768,
        embeddings: FixedDimensionEmbeddings | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._dimension = dimension
        self._embeddings = embeddings

    @property
    def embeddings(self) -> FixedDimensionEmbeddings:
        """Lazy-load the SDK wrapper so a missing key only fails on first use."""
        if self._embeddings is None:
            self._embeddings = FixedDimensionEmbeddings(
                model=self._model,
                output_dimensionality=self._dimension,
                google_api_key=self._api_key,
            )
        return self._embeddings

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, text: str) -> list[float]:
        """
        Embed one text.

        Empty or whitespace-only text is not sent and yields [].

        Args:
            text: Text to embed

        Returns:
            list[float]: Embedding vector, or [] for empty input

        Raises:
            EmbeddingError: When the provider fails or returns no values
        """
        if not text or not text.strip():
            logger.warning(f"{__name__}:embed - Empty text, skipping embedding call")
            return []

        try:
            values = await run_in_threadpool(self.embeddings.embed_query, text)
        except Exception as e:
            raise EmbeddingError(f"Failed to generate embedding: {e}") from e

        if not values:
            raise EmbeddingError("Embedding provider returned no values")
        return list(values)
