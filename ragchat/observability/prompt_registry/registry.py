"""
Langfuse prompt registry for versioned prompt management.

Singleton registry that versions the application's text prompts in Langfuse
and hands back LangChain templates. When Langfuse is disabled the locally
defined template is used unchanged.

Dependencies: langfuse, ragchat.configs, ragchat.observability.prompt_registry
System role: Prompt version control and retrieval
"""

import logging
from typing import TYPE_CHECKING

from langchain_core.prompts import PromptTemplate
from langfuse import Langfuse

from ragchat.configs import get_settings
from ragchat.observability.prompt_registry.converter import (
    convert_text_template,
    to_langchain_syntax,
)
from ragchat.observability.prompt_registry.models import ModelConfig

if TYPE_CHECKING:
    from langfuse.model import TextPromptClient

logger = logging.getLogger(__name__)


class PromptRegistry:
    """
    Singleton registry for Langfuse prompt management.

    Attributes:
        _instance: Singleton instance
        _client: Langfuse client
        _enabled: Whether Langfuse integration is enabled

    Example:
        >>> registry = PromptRegistry()
        >>> registry.register_prompt(
        ...     name="chat-title",
        ...     template=PromptTemplate.from_template("Title for: {message}"),
        ...     config=ModelConfig(model="gemini-3-flash-preview"),
        ... )
    """

    _instance: "PromptRegistry | None" = None
    _client: Langfuse | None = None
    _enabled: bool = False

    def __new__(cls) -> "PromptRegistry":
        """Singleton pattern for registry instance."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self) -> None:
        """Initialize Langfuse client with configuration."""
        obs_settings = get_settings().observability

        if not obs_settings.enable_tracing:
            logger.info("Langfuse tracing disabled, prompt registry inactive")
            self._enabled = False
            return

        if not obs_settings.public_key or not obs_settings.secret_key:
            logger.warning("Langfuse keys not configured, prompt registry inactive")
            self._enabled = False
            return

        self._client = Langfuse(
            public_key=obs_settings.public_key,
            secret_key=obs_settings.secret_key,
            host=obs_settings.host,
        )
        self._enabled = True
        logger.info("Prompt registry initialized: host=%s", obs_settings.host)

    @property
    def is_enabled(self) -> bool:
        """Check if registry is active."""
        return self._enabled

    def register_prompt(
        self,
        name: str,
        template: PromptTemplate,
        config: ModelConfig,
        labels: list[str] | None = None,
    ) -> "TextPromptClient | None":
        """
        Register or version a text prompt in Langfuse.

        Args:
            name: Unique prompt identifier
            template: LangChain PromptTemplate
            config: Model configuration to store with prompt
            labels: Optional labels (e.g., ["production"])

        Returns:
            Created Langfuse prompt, or None if disabled

        Raises:
            ValueError: If template type is unsupported
        """
        if not isinstance(template, PromptTemplate):
            raise ValueError(f"Unsupported template type: {type(template)}")

        if not self._enabled or self._client is None:
            logger.debug("Prompt registry disabled, skipping registration: name=%s", name)
            return None

        labels = labels or []
        prompt = self._client.create_prompt(
            name=name,
            type="text",
            prompt=convert_text_template(template),
            config=config.to_langfuse_config(),
            labels=labels,
        )
        logger.info(
            "Registered text prompt: name=%s version=%s labels=%s",
            name, prompt.version, labels,
        )
        return prompt

    def get_prompt(
        self,
        name: str,
        label: str | None = None,
        version: int | None = None,
    ) -> "TextPromptClient | None":
        """
        Fetch prompt from Langfuse.

        Args:
            name: Prompt identifier
            label: Optional label filter (e.g., "production")
            version: Optional specific version number

        Returns:
            Langfuse prompt object, or None if disabled
        """
        if not self._enabled or self._client is None:
            logger.debug("Prompt registry disabled, cannot fetch: name=%s", name)
            return None

        kwargs: dict = {"name": name, "type": "text"}
        if label:
            kwargs["label"] = label
        if version is not None:
            kwargs["version"] = version

        prompt = self._client.get_prompt(**kwargs)
        logger.debug("Fetched prompt: name=%s version=%s", name, prompt.version)
        return prompt

    def get_langchain_prompt(
        self,
        name: str,
        label: str | None = None,
        version: int | None = None,
    ) -> PromptTemplate | None:
        """
        Fetch prompt from Langfuse as a LangChain PromptTemplate.

        Args:
            name: Prompt identifier
            label: Optional label filter
            version: Optional specific version number

        Returns:
            PromptTemplate, or None if disabled
        """
        prompt = self.get_prompt(name, label=label, version=version)
        if prompt is None:
            return None

        template = PromptTemplate.from_template(to_langchain_syntax(prompt.prompt))
        template.metadata = {"langfuse_prompt": prompt}
        return template

    def get_config(self, name: str, label: str | None = None) -> dict | None:
        """
        Get model configuration stored with prompt.

        Args:
            name: Prompt identifier
            label: Optional label filter

        Returns:
            dict: Model configuration, or None if disabled
        """
        prompt = self.get_prompt(name, label=label)
        if prompt is None:
            return None
        return prompt.config
