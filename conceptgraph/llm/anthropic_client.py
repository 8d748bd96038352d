"""
Anthropic (Claude) LLM client implementation.
"""

import logging
import time

from anthropic import AsyncAnthropic

from conceptgraph.llm.base_client import BaseLLMClient, LLMResponse
from conceptgraph.llm.exceptions import LLMProviderError

logger = logging.getLogger(__name__)


class AnthropicClient(BaseLLMClient):
    """LLM client for Anthropic Claude API."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        **kwargs,
    ):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
            model: Model identifier (e.g., "claude-sonnet-4-5")
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            timeout: Request timeout in seconds
            **kwargs: Retry settings passed to BaseLLMClient
        """
        super().__init__(api_key, model, temperature, max_tokens, timeout, **kwargs)
        # Retries are handled by BaseLLMClient.generate_with_retry
        self.client = AsyncAnthropic(api_key=api_key, max_retries=0)

    async def generate_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Generate completion from Anthropic API.

        Args:
            messages: Chat messages in OpenAI format
            temperature: Optional temperature override
            max_tokens: Optional output budget override

        Returns:
            LLMResponse: Response with content and metadata

        Raises:
            LLMProviderError: Anthropic API error
        """
        start_time = time.time()

        # Convert OpenAI format to Anthropic format
        system_msg = None
        chat_messages = []

        for msg in messages:
            if msg["role"] == "system":
                system_msg = msg["content"]
            else:
                chat_messages.append({"role": msg["role"], "content": msg["content"]})

        kwargs = {
            "model": self.model,
            "messages": chat_messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
            "timeout": self.timeout,
        }

        if system_msg:
            kwargs["system"] = system_msg

        try:
            response = await self.client.messages.create(**kwargs)
        except Exception as e:
            raise LLMProviderError(f"Anthropic API error: {e}") from e

        latency_ms = int((time.time() - start_time) * 1000)

        # Concatenate all text blocks
        content = "".join(block.text for block in response.content if block.type == "text")
        tokens_used = response.usage.input_tokens + response.usage.output_tokens

        return LLMResponse(
            content=content,
            tokens_used=tokens_used,
            latency_ms=latency_ms,
            model_used=self.model,
        )
