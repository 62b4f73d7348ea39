"""
Vector search boundary.

Exports: VectorStoreClient, VectorSearchResult, dedupe_sources
"""

from ragchat.boundary.vdb.vector_schemas import VectorSearchResult
from ragchat.boundary.vdb.vector_store_client import VectorStoreClient, dedupe_sources

__all__ = ["VectorStoreClient", "VectorSearchResult", "dedupe_sources"]
