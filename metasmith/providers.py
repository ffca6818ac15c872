"""Shortcut imports for the LLM provider adapters.

    from metasmith.providers import OpenAIClient
    from metasmith.providers import AnthropicClient  # needs metasmith[anthropic]
"""

from .enhancers.providers.anthropic import AnthropicClient
from .enhancers.providers.base import LLMAPIError, LLMClient, LLMResponse
from .enhancers.providers.openai import OpenAIClient

__all__ = ["LLMClient", "LLMResponse", "LLMAPIError", "OpenAIClient", "AnthropicClient"]
