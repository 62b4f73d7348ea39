"""
Generation and embedding provider boundary.

Exports: GeminiClient, EmbeddingClient, FixedDimensionEmbeddings
"""

from .embedding_client import EmbeddingClient
from .embeddings_wrapper import FixedDimensionEmbeddings
from .gemini_client import GeminiClient

__all__ = ["GeminiClient", "EmbeddingClient", "FixedDimensionEmbeddings"]
