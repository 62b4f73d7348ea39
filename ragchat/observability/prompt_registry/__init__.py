"""
Langfuse prompt registry module.

Versions the text prompts used for RAG answers, titles, summaries and
transcription, with model configuration tracking.

Dependencies: langfuse, langchain_core, pydantic
System role: Prompt version management and LangChain integration
"""

from ragchat.observability.prompt_registry.models import ModelConfig
from ragchat.observability.prompt_registry.registry import PromptRegistry

__all__ = ["PromptRegistry", "ModelConfig"]
