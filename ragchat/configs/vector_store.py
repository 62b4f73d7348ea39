"""
Vector store configuration settings.

Manages pgvector similarity search parameters: result caps, the similarity
floor and the server-side match function name.

Dependencies: pydantic, pydantic_settings
System role: Vector search configuration for RAG retrieval
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class VectorStoreSettings(BaseSettings):
    """pgvector search configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="VECTOR_STORE_",
        case_sensitive=False,
        extra="ignore",
    )

    top_k: int = Field(default=5, description="Number of chunks retrieved for a chat answer")
    document_search_top_k: int = Field(
        default=10,
        description="Number of chunks returned by the document manager content search",
    )
    match_threshold: float = Field(
        default=0.5,
        description="Cosine similarity floor; matches at or below it are dropped",
    )
    match_function: str = Field(
        default="match_rag_chunks",
        description="Server-side SQL function performing the scoped similarity search",
    )
    ivfflat_lists: int = Field(default=100, description="ivfflat index list count")
