"""
OpenAI-compatible LLM client (OpenAI, Kimi/Moonshot, DeepSeek).
"""

import logging
import time

from openai import AsyncOpenAI

from conceptgraph.llm.base_client import BaseLLMClient, LLMResponse
from conceptgraph.llm.exceptions import LLMProviderError

logger = logging.getLogger(__name__)


class OpenAICompatibleClient(BaseLLMClient):
    """LLM client for any chat-completions API speaking the OpenAI protocol."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        base_url: str | None = None,
        **kwargs,
    ):
        """
        Initialize OpenAI-compatible client.

        Args:
            api_key: Provider API key
            model: Model identifier (e.g., "gpt-4o-mini", "kimi-k2-turbo-preview")
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            base_url: API base URL (None for api.openai.com)
            **kwargs: Retry settings passed to BaseLLMClient
        """
        super().__init__(api_key, model, temperature, max_tokens, timeout, **kwargs)
        self.base_url = base_url
        self.client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)

    async def generate_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Generate completion from a chat-completions endpoint.

        Args:
            messages: Chat messages in OpenAI format
            temperature: Optional temperature override
            max_tokens: Optional output budget override

        Returns:
            LLMResponse: Response with content and metadata

        Raises:
            LLMProviderError: Provider API error
        """
        start_time = time.time()

        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
            "timeout": self.timeout,
        }

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except Exception as e:
            raise LLMProviderError(f"{self.model} API error: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        content = ""
        if response.choices and response.choices[0].message.content:
            content = response.choices[0].message.content

        tokens_used = response.usage.total_tokens if response.usage else 0

        return LLMResponse(
            content=content,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
            model_used=self.model,
        )
