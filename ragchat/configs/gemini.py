"""
Gemini provider configuration settings.

Model identifiers and credentials for embedding, chat, summarization,
transcription and multimodal generation.

Dependencies: pydantic, pydantic_settings
System role: Generation/embedding provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragchat.configs.base import BaseSettings


class GeminiSettings(BaseSettings):
    """Google Gemini provider configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Gemini API key")

    chat_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used for streamed RAG answers and chat titles",
    )
    summary_model: str = Field(
        default="gemini-3-flash-preview",
        description="Fast model used to summarize older conversation turns",
    )
    multimodal_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used for live screen+audio turns",
    )
    transcription_model: str = Field(
        default="gemini-3-flash-preview",
        description="Model used to transcribe fallback audio recordings",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Google Gemini embedding model ID",
    )
    embedding_dimension: int = Field(
        default=768,
        description="Embedding vector dimension (must match the vector(768) column)",
    )
    multimodal_max_output_tokens: int = Field(
        default=4096,
        description="Output token cap for multimodal live responses",
    )

    @property
    def is_configured(self) -> bool:
        """Whether provider credentials are present."""
        return bool(self.api_key)
