"""Text-generation service clients for conceptgraph."""

from conceptgraph.llm.base_client import BaseLLMClient, GenerationOptions, LLMResponse
from conceptgraph.llm.exceptions import (
    LLMConfigError,
    LLMError,
    LLMProviderError,
    LLMTimeoutError,
    LLMValidationError,
)

__all__ = [
    "BaseLLMClient",
    "GenerationOptions",
    "LLMResponse",
    "LLMError",
    "LLMProviderError",
    "LLMTimeoutError",
    "LLMValidationError",
    "LLMConfigError",
]
