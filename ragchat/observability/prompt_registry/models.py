"""
Pydantic models for prompt registry configuration.

Dependencies: pydantic
System role: Configuration validation for prompt-model pairs
"""

from typing import Any

from pydantic import BaseModel, Field


class ModelConfig(BaseModel):
    """
    Generation parameters stored next to a prompt version.

    Attributes:
        model: Gemini model identifier
        temperature: Sampling temperature (0.0-2.0)
        max_output_tokens: Maximum tokens in response
        extra: Additional model-specific parameters
    """

    model: str = Field(description="Gemini model identifier")
    temperature: float | None = Field(
        default=None,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    max_output_tokens: int | None = Field(
        default=None,
        gt=0,
        description="Maximum tokens in response",
    )
    extra: dict[str, Any] | None = Field(
        default=None,
        description="Additional model-specific parameters",
    )

    def to_langfuse_config(self) -> dict[str, Any]:
        """
        Convert to Langfuse config dictionary.

        Returns:
            dict: Configuration dict for Langfuse prompt creation
        """
        config: dict[str, Any] = {"model": self.model}
        if self.temperature is not None:
            config["temperature"] = self.temperature
        if self.max_output_tokens is not None:
            config["max_output_tokens"] = self.max_output_tokens
        if self.extra:
            config.update(self.extra)
        return config
