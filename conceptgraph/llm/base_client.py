"""
Base LLM client with async interface, hard timeout and optional retry.

The text-generation service is treated as an opaque capability: a prompt and
a token budget go in, text comes out or an ``LLMError`` is raised.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from conceptgraph.llm.exceptions import (
    LLMError,
    LLMProviderError,
    LLMTimeoutError,
    LLMValidationError,
)

logger = logging.getLogger(__name__)

# Field names under which structured service responses carry their text
TEXT_FIELDS = ("text", "response", "content", "summary", "output")


@dataclass
class LLMResponse:
    """Response from LLM API."""

    content: str
    function_call: dict | None = None
    tokens_used: int = 0
    latency_ms: int = 0
    model_used: str = ""


@dataclass(frozen=True)
class GenerationOptions:
    """Per-call overrides for a generation request."""

    temperature: float | None = None
    max_output_tokens: int | None = None
    system_context: str | None = None


@dataclass(frozen=True)
class TextResponse:
    """Service answered with plain text."""

    text: str


@dataclass(frozen=True)
class StructuredResponse:
    """Service answered with an object carrying its text in a named field."""

    text: str
    field: str


@dataclass(frozen=True)
class UnrecognizedResponse:
    """Service answered with something that holds no usable text."""

    raw: Any


ServiceResponse = TextResponse | StructuredResponse | UnrecognizedResponse


def classify_response(raw: Any) -> ServiceResponse:
    """
    Classify a raw service response into one of the known shapes.

    Args:
        raw: ``LLMResponse``, bare string, or mapping returned by a provider

    Returns:
        ServiceResponse: Tagged response shape
    """
    if isinstance(raw, LLMResponse):
        if raw.content and raw.content.strip():
            return TextResponse(raw.content)
        if raw.function_call:
            return classify_response(raw.function_call)
        return UnrecognizedResponse(raw)

    if isinstance(raw, str):
        return TextResponse(raw) if raw.strip() else UnrecognizedResponse(raw)

    if isinstance(raw, Mapping):
        for field in TEXT_FIELDS:
            value = raw.get(field)
            if isinstance(value, str) and value.strip():
                return StructuredResponse(text=value, field=field)

    return UnrecognizedResponse(raw)


def response_text(response: ServiceResponse) -> str | None:
    """Return the text carried by a classified response, if any."""
    if isinstance(response, (TextResponse, StructuredResponse)):
        return response.text
    return None


class BaseLLMClient(ABC):
    """Abstract base class for LLM clients."""

    def __init__(
        self,
        api_key: str,
        model: str,
        temperature: float,
        max_tokens: int,
        timeout: float,
        max_retries: int = 0,
        initial_delay_seconds: float = 1.0,
        backoff_multiplier: float = 2.0,
    ):
        """
        Initialize LLM client.

        Args:
            api_key: API key for the provider
            model: Model identifier
            temperature: Default sampling temperature (0.0-2.0)
            max_tokens: Default maximum tokens to generate
            timeout: Hard per-call timeout in seconds
            max_retries: Retries for provider errors (timeouts are never retried)
            initial_delay_seconds: First backoff delay
            backoff_multiplier: Backoff growth factor
        """
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.max_retries = max_retries
        self.initial_delay_seconds = initial_delay_seconds
        self.backoff_multiplier = backoff_multiplier

    @property
    def provider(self) -> str:
        """Short provider name used in logs."""
        return self.__class__.__name__.replace("Client", "").lower()

    @abstractmethod
    async def generate_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        """
        Generate completion from LLM.

        Args:
            messages: Chat messages in OpenAI format
            temperature: Optional temperature override
            max_tokens: Optional output budget override

        Returns:
            LLMResponse: Response with content and metadata

        Raises:
            LLMProviderError: Provider API error
        """
        pass

    def validate_config(self) -> bool:
        """Basic configuration check (API key and model present)."""
        if not self.api_key:
            logger.warning(f"{self.provider} API key not provided")
            return False
        if not self.model:
            logger.warning(f"{self.provider} model not configured")
            return False
        return True

    async def is_available(self, check_connectivity: bool = False) -> bool:
        """
        Probe whether the service can be used for this request.

        Args:
            check_connectivity: Also send a lightweight request

        Returns:
            True if the service looks usable
        """
        if not self.validate_config():
            return False
        if check_connectivity:
            return await self._test_connectivity()
        return True

    async def _test_connectivity(self, test_message: str = "Hi") -> bool:
        """Send a tiny request and report whether any text came back."""
        try:
            text = await self.generate(test_message, GenerationOptions(max_output_tokens=5))
            return bool(text.strip())
        except LLMError as e:
            logger.warning(f"API connectivity test failed for {self.provider}: {e}")
            return False

    async def _complete_with_timeout(
        self,
        messages: list[dict[str, str]],
        temperature: float | None,
        max_tokens: int | None,
    ) -> LLMResponse:
        try:
            return await asyncio.wait_for(
                self.generate_completion(messages, temperature, max_tokens),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise LLMTimeoutError(
                f"{self.provider} call exceeded {self.timeout}s timeout"
            ) from e

    async def generate_with_retry(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
        max_retries: int | None = None,
    ) -> LLMResponse:
        """
        Generate completion with exponential backoff retry.

        Timeouts are raised immediately and never retried.

        Args:
            messages: Chat messages
            temperature: Optional temperature override
            max_tokens: Optional output budget override
            max_retries: Retry count (defaults to the client's setting)

        Returns:
            LLMResponse: Response from LLM

        Raises:
            LLMTimeoutError: The call exceeded the hard timeout
            LLMProviderError: All retry attempts failed
        """
        if max_retries is None:
            max_retries = self.max_retries
        last_error = None

        for attempt in range(max_retries + 1):
            try:
                response = await self._complete_with_timeout(messages, temperature, max_tokens)

                logger.info(
                    f"LLM call succeeded (attempt {attempt + 1}/{max_retries + 1}) "
                    f"in {response.latency_ms}ms, {response.tokens_used} tokens"
                )

                return response

            except LLMTimeoutError:
                logger.warning(f"LLM call timed out after {self.timeout}s")
                raise

            except Exception as e:
                last_error = e
                logger.warning(f"LLM call failed (attempt {attempt + 1}/{max_retries + 1}): {e}")

                if attempt == max_retries:
                    break

                wait_time = self.initial_delay_seconds * (self.backoff_multiplier**attempt)
                logger.info(f"Retrying in {wait_time}s...")
                await asyncio.sleep(wait_time)

        raise LLMProviderError(
            f"LLM call failed after {max_retries + 1} attempts: {last_error}"
        ) from last_error

    async def generate(self, prompt: str, options: GenerationOptions | None = None) -> str:
        """
        Generate text for a single prompt.

        Args:
            prompt: User prompt
            options: Temperature, output budget and system context

        Returns:
            str: Generated text

        Raises:
            LLMTimeoutError: Call exceeded the hard timeout
            LLMProviderError: Provider failed
            LLMValidationError: Response carried no usable text
        """
        options = options or GenerationOptions()
        messages = self._prepare_messages(prompt, options.system_context)

        response = await self.generate_with_retry(
            messages,
            temperature=options.temperature,
            max_tokens=options.max_output_tokens,
        )

        shape = classify_response(response)
        text = response_text(shape)
        if text is None:
            raise LLMValidationError(f"{self.provider} returned no usable text")
        if isinstance(shape, StructuredResponse):
            logger.debug(f"Using '{shape.field}' field of structured {self.provider} response")
        return text

    def _prepare_messages(self, prompt: str, system_context: str | None) -> list[dict[str, str]]:
        """Prepare messages for API call."""
        messages = []
        if system_context:
            messages.append({"role": "system", "content": system_context})
        messages.append({"role": "user", "content": prompt})
        return messages
