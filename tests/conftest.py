"""
Shared fixtures for conceptgraph tests.
"""

import asyncio

import pytest

from conceptgraph.core.personas import get_persona
from conceptgraph.llm.base_client import BaseLLMClient, LLMResponse


class MockLLMClient(BaseLLMClient):
    """
    Scripted client exercising the real BaseLLMClient retry/timeout path.

    ``responses`` items are consumed in order; each is a string, an
    ``LLMResponse``, an exception instance (raised), or a callable taking the
    messages list and returning one of those. The last item repeats.
    """

    def __init__(self, responses=None, delay: float = 0.0, **kwargs):
        params = {
            "api_key": "test-key",
            "model": "mock-model",
            "temperature": 0.7,
            "max_tokens": 1000,
            "timeout": 5.0,
            "initial_delay_seconds": 0.001,
        }
        params.update(kwargs)
        super().__init__(**params)
        self.responses = list(responses or ["[]"])
        self.delay = delay
        self.calls: list[list[dict[str, str]]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate_completion(self, messages, temperature=None, max_tokens=None):
        self.calls.append(messages)
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        item = self.responses[index]

        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1

        if callable(item) and not isinstance(item, BaseException):
            item = item(messages)
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, LLMResponse):
            return item
        return LLMResponse(content=item, tokens_used=10, latency_ms=1, model_used=self.model)

    @property
    def prompts(self) -> list[str]:
        """User prompt of every recorded call."""
        return [m[-1]["content"] for m in self.calls]


@pytest.fixture
def mock_client_factory():
    """Build scripted clients."""
    return MockLLMClient


@pytest.fixture
def architect():
    """Default extraction persona."""
    return get_persona("architect")


@pytest.fixture
def mentor():
    """Default explanation persona."""
    return get_persona("mentor")


@pytest.fixture
def sample_nodes():
    """Well-formed raw node list in the prompt's vocabulary."""
    return [
        {"id": "main", "label": "Built-in AI", "type": "main", "connections": ["benefits", "performance"]},
        {"id": "benefits", "label": "Benefits", "type": "secondary", "connections": ["privacy", "offline"]},
        {"id": "privacy", "label": "Privacy Protection", "type": "tertiary", "connections": []},
        {"id": "offline", "label": "Offline Functionality", "type": "tertiary", "connections": []},
        {"id": "performance", "label": "Hardware Acceleration", "type": "secondary", "connections": []},
    ]
