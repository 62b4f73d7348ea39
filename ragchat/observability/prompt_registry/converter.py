"""
LangChain to Langfuse prompt converter.

Converts variable syntax between LangChain PromptTemplate ({var}) and
Langfuse text prompts ({{var}}).

Dependencies: langchain_core.prompts
System role: Template format conversion for prompt registry
"""

import re

from langchain_core.prompts import PromptTemplate

# Single braces not already doubled
_LANGCHAIN_VARIABLE = re.compile(r"(?<!\{)\{([^{}]+)\}(?!\})")
_LANGFUSE_VARIABLE = re.compile(r"\{\{\s*([^{}]+?)\s*\}\}")


def to_langfuse_syntax(content: str) -> str:
    """
    Convert LangChain variable syntax to Langfuse format.

    Args:
        content: Template string with {variable} placeholders

    Returns:
        str: Template string with {{variable}} placeholders
    """
    return _LANGCHAIN_VARIABLE.sub(r"{{\1}}", content)


def to_langchain_syntax(content: str) -> str:
    """
    Convert Langfuse variable syntax back to LangChain format.

    Args:
        content: Template string with {{variable}} placeholders

    Returns:
        str: Template string with {variable} placeholders
    """
    return _LANGFUSE_VARIABLE.sub(r"{\1}", content)


def convert_text_template(template: PromptTemplate) -> str:
    """
    Convert LangChain PromptTemplate to Langfuse text format.

    Args:
        template: LangChain PromptTemplate instance

    Returns:
        str: Langfuse-formatted template string

    Example:
        >>> template = PromptTemplate.from_template("Hello {name}!")
        >>> convert_text_template(template)
        'Hello {{name}}!'
    """
    return to_langfuse_syntax(template.template)
