"""
LLM Client Factory - Creates appropriate LLM clients based on configuration.
"""

import logging
import os
from enum import Enum

from dotenv import load_dotenv

from conceptgraph.config import ModelConfig, RetryConfig
from conceptgraph.llm.anthropic_client import AnthropicClient
from conceptgraph.llm.base_client import BaseLLMClient
from conceptgraph.llm.openai_client import OpenAICompatibleClient

logger = logging.getLogger(__name__)


class LLMProvider(str, Enum):
    """Supported LLM providers."""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    KIMI = "kimi"
    DEEPSEEK = "deepseek"


class LLMClientFactory:
    """Factory for creating LLM clients based on provider and configuration."""

    CLIENT_MAP = {
        LLMProvider.ANTHROPIC: AnthropicClient,
        LLMProvider.OPENAI: OpenAICompatibleClient,
        LLMProvider.KIMI: OpenAICompatibleClient,
        LLMProvider.DEEPSEEK: OpenAICompatibleClient,
    }

    DEFAULT_MODELS = {
        LLMProvider.ANTHROPIC: "claude-sonnet-4-5-20250929",
        LLMProvider.OPENAI: "gpt-4o-mini",
        LLMProvider.KIMI: "moonshot-v1-8k",
        LLMProvider.DEEPSEEK: "deepseek-chat",
    }

    DEFAULT_BASE_URLS = {
        LLMProvider.KIMI: "https://api.moonshot.ai/v1",
        LLMProvider.DEEPSEEK: "https://api.deepseek.com/v1",
    }

    @staticmethod
    def create_client(
        provider: str,
        api_key: str,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2500,
        timeout: float = 120.0,
        base_url: str | None = None,
        retry_config: RetryConfig | None = None,
    ) -> BaseLLMClient:
        """
        Create an LLM client based on provider and configuration.

        Args:
            provider: LLM provider name (anthropic, openai, kimi, deepseek)
            api_key: API key for the provider
            model: Specific model to use (provider default if omitted)
            temperature: Temperature for generation
            max_tokens: Maximum tokens to generate
            timeout: Hard per-call timeout in seconds
            base_url: Override for OpenAI-compatible endpoints
            retry_config: Retry settings (no retries if omitted)

        Returns:
            Configured LLM client instance

        Raises:
            ValueError: If provider is not supported
        """
        try:
            provider_enum = LLMProvider(provider.lower())
        except ValueError:
            raise ValueError(
                f"Unsupported LLM provider: {provider}. "
                f"Supported: {LLMClientFactory.get_supported_providers()}"
            )

        client_class = LLMClientFactory.CLIENT_MAP[provider_enum]
        retry_config = retry_config or RetryConfig()

        params = {
            "api_key": api_key,
            "model": model or LLMClientFactory.DEFAULT_MODELS[provider_enum],
            "temperature": temperature,
            "max_tokens": max_tokens,
            "timeout": timeout,
            "max_retries": retry_config.max_retries,
            "initial_delay_seconds": retry_config.initial_delay_seconds,
            "backoff_multiplier": retry_config.backoff_multiplier,
        }

        if client_class is OpenAICompatibleClient:
            params["base_url"] = base_url or LLMClientFactory.DEFAULT_BASE_URLS.get(provider_enum)

        client = client_class(**params)
        logger.info(f"Created {provider_enum.value} client with model: {params['model']}")
        return client

    @staticmethod
    def create_client_from_config(
        config: ModelConfig,
        retry_config: RetryConfig | None = None,
    ) -> BaseLLMClient | None:
        """
        Create LLM client from a model configuration.

        The API key is read from the environment variable named by
        ``config.api_key_env`` (a local .env file is loaded first).

        Args:
            config: Model configuration
            retry_config: Retry settings

        Returns:
            Configured client, or None if the API key is not set
        """
        load_dotenv()
        api_key = os.getenv(config.api_key_env)
        if not api_key:
            logger.warning(
                f"{config.api_key_env} not set - text generation service unavailable, "
                f"fallback extraction will be used"
            )
            return None

        return LLMClientFactory.create_client(
            provider=config.provider,
            api_key=api_key,
            model=config.model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout_seconds,
            base_url=config.base_url,
            retry_config=retry_config,
        )

    @staticmethod
    def get_supported_providers() -> list:
        """Get list of supported LLM providers."""
        return [provider.value for provider in LLMProvider]
