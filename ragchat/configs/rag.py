"""
RAG orchestration configuration settings.

Character budgets for history compression and history bounds for
multimodal turns.

Dependencies: pydantic, pydantic_settings
System role: Context-size configuration for generation requests
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragchat.configs.base import BaseSettings


class RagSettings(BaseSettings):
    """Context budget configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RAG_",
        case_sensitive=False,
        extra="ignore",
    )

    max_context_chars: int = Field(
        default=20000,
        description="History + context character budget that triggers compression",
    )
    compression_target_chars: int = Field(
        default=10000,
        description="Advisory size after compression (not re-verified)",
    )
    keep_recent_messages: int = Field(
        default=4,
        description="Most recent messages kept verbatim during compression",
    )
    max_history_turns: int = Field(
        default=15,
        description="History messages sent with a live multimodal turn",
    )
