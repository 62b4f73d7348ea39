"""
Observability module.

Provides logging configuration, request logging middleware and versioned
prompt management for the chat service.
"""

from ragchat.observability.logger import configure_logging
from ragchat.observability.prompt_registry import ModelConfig, PromptRegistry

__all__ = ["configure_logging", "PromptRegistry", "ModelConfig"]
