"""
Prompt templates for RAG answers, chat titles and history summaries.

Local templates are the source of truth. When the Langfuse registry is
enabled they can be registered and fetched back by name.

Dependencies: langchain_core.prompts, ragchat.observability.prompt_registry
System role: Prompt templates for generation requests
"""

import logging

from langchain_core.prompts import PromptTemplate

from ragchat.observability.prompt_registry.models import ModelConfig
from ragchat.observability.prompt_registry.registry import PromptRegistry

logger = logging.getLogger(__name__)

RAG_PROMPT_NAME = "rag-grounding-instruction"
TITLE_PROMPT_NAME = "chat-title"
SUMMARY_PROMPT_NAME = "history-summary"

RAG_SYSTEM_PROMPT = PromptTemplate.from_template(
    """
You are a helpful AI assistant. You have access to a RAG (Retrieval Augmented Generation) database.
Use the following pieces of retrieved context to answer the user's question.
If the answer is not in the context, check if the question is a follow-up or related to the previous conversation history.
If the question is about the previous conversation, answer it using the conversation history.
If the question is new and not in the retrieved context, just say that you don't know based on the provided documents.
Keep answers concise and relevant.
Use flowing, natural language paragraphs. Do NOT use markdown lists or bullet points for simple enumeration unless absolutely necessary.

Context:
{context}
"""
)

TITLE_PROMPT = PromptTemplate.from_template(
    "Generate a very concise title (max 5 words) for a chat conversation that begins with "
    'the following message. Do not use quotes. Message: "{message}"'
)

SUMMARY_PROMPT = PromptTemplate.from_template(
    "Summarize the following conversation history into a concise paragraph. "
    "Capture key facts, user preferences, and important context. \n\nConversation:\n{conversation}"
)

MULTIMODAL_SYSTEM_INSTRUCTION = (
    "You are a helpful AI assistant. Answer the user's questions naturally and conversationally. "
    "Use flowing paragraphs and avoid markdown lists or bullet points unless the user "
    "explicitly requests a list."
)

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe the following audio exactly as spoken. Do not add any commentary."
)

_LOCAL_PROMPTS: dict[str, PromptTemplate] = {
    RAG_PROMPT_NAME: RAG_SYSTEM_PROMPT,
    TITLE_PROMPT_NAME: TITLE_PROMPT,
    SUMMARY_PROMPT_NAME: SUMMARY_PROMPT,
}


def register_prompts(
    model_id: str = "gemini-3-flash-preview",
    labels: list[str] | None = None,
) -> None:
    """
    Register all local prompt templates with Langfuse.

    Args:
        model_id: Gemini model stored with each prompt version
        labels: Optional labels (e.g., ["production", "staging"])
    """
    registry = PromptRegistry()

    if not registry.is_enabled:
        logger.debug("Prompt registry disabled, skipping registration")
        return

    config = ModelConfig(model=model_id)
    for name, template in _LOCAL_PROMPTS.items():
        registry.register_prompt(
            name=name,
            template=template,
            config=config,
            labels=labels or ["development"],
        )
    logger.info("Registered %d prompts", len(_LOCAL_PROMPTS))


def get_prompt(
    name: str,
    use_registry: bool = False,
    label: str | None = None,
) -> PromptTemplate:
    """
    Get a prompt template by name.

    Args:
        name: One of RAG_PROMPT_NAME, TITLE_PROMPT_NAME, SUMMARY_PROMPT_NAME
        use_registry: Whether to fetch from Langfuse registry
        label: Optional label filter when using registry

    Returns:
        PromptTemplate: Registry version when available, else the local template

    Raises:
        KeyError: If the name is unknown
    """
    local = _LOCAL_PROMPTS[name]
    if use_registry:
        registry = PromptRegistry()
        if registry.is_enabled:
            prompt = registry.get_langchain_prompt(name, label=label)
            if prompt is not None:
                logger.debug("Using prompt from registry: name=%s", name)
                return prompt
            logger.debug("Prompt not found in registry, using local template")

    return local


def format_context(chunks: list[tuple[str, str, int | None]]) -> str:
    """
    Render retrieved chunks for the grounding instruction.

    Args:
        chunks: (text, source file name, page number) triples

    Returns:
        str: Annotated chunk texts separated by '---' rules
    """
    return "\n\n---\n\n".join(
        f"[Source: {file_name}, Page: {page or 'N/A'}]\n{text}"
        for text, file_name, page in chunks
    )
