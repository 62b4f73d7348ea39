"""
Google Generative AI Embeddings wrapper with fixed output dimensionality.

Wraps GoogleGenerativeAIEmbeddings so every call requests the same vector
size, which must match the vector(768) column of rag_chunks.

Dependencies: langchain_google_genai
System role: Embedding dimension consistency for pgvector storage
"""

import logging

from langchain_google_genai import GoogleGenerativeAIEmbeddings

logger = logging.getLogger(__name__)


class FixedDimensionEmbeddings(GoogleGenerativeAIEmbeddings):
    """
    GoogleGenerativeAIEmbeddings with a fixed output dimensionality.

    The base class does not apply output_dimensionality from the constructor
    to individual calls, so the configured size is injected on each one.
    """

    _output_dimensionality: int = 768

    def __init__(
        self,
        model: str = "models/gemini-embedding-001",
        output_dimensionality: int = 768,
        **kwargs,
    ) -> None:
        """
        Initialize embeddings with fixed output dimensionality.

        Args:
            model: Google embedding model ID
            output_dimensionality: Dimension for all embeddings
            **kwargs: Additional arguments for GoogleGenerativeAIEmbeddings
        """
        super().__init__(model=model, **kwargs)
        self._output_dimensionality = output_dimensionality
        logger.info(
            f"{__name__}:__init__ - Initialized with model={model}, "
            f"output_dimensionality={output_dimensionality}"
        )

    def embed_documents(self, texts: list[str], **kwargs) -> list[list[float]]:
        """Embed documents at the configured dimension unless overridden."""
        if not kwargs.get("output_dimensionality"):
            kwargs["output_dimensionality"] = self._output_dimensionality
        return super().embed_documents(texts, **kwargs)

    def embed_query(self, text: str, **kwargs) -> list[float]:
        """Embed one text at the configured dimension unless overridden."""
        if not kwargs.get("output_dimensionality"):
            kwargs["output_dimensionality"] = self._output_dimensionality
        return super().embed_query(text, **kwargs)
