"""
Vector database schemas.

Typed query results of the scoped similarity search.

Dependencies: pydantic
System role: Type definitions for vector operations
"""

from pydantic import BaseModel, Field

from ragchat.models.document import RagChunk


class VectorSearchResult(BaseModel):
    """
    Single result from vector search.

    The chunk carries no embedding; `scope` is the owning document's scope.
    """

    chunk: RagChunk = Field(description="Matched chunk (embedding stripped)")
    similarity: float = Field(description="Cosine similarity (1 - cosine distance)")
    scope: str | None = Field(default=None, description="Owning document scope")
