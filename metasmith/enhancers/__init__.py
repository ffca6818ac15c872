"""Remote enhancement: the RemoteEnhancer and the capabilities it calls."""

from .providers import LLMAPIError, LLMClient, LLMResponse, OpenAIClient
from .remote import RemoteEnhancer
from .services import (
    HTTPEnhancementService,
    LLMEnhancementService,
    TextEnhancementService,
    build_system_prompt,
)

__all__ = [
    "RemoteEnhancer",
    "TextEnhancementService",
    "LLMEnhancementService",
    "HTTPEnhancementService",
    "build_system_prompt",
    "LLMClient",
    "LLMResponse",
    "LLMAPIError",
    "OpenAIClient",
]
