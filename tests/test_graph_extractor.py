"""
Tests for GraphExtractor.
"""

import asyncio
import json

import pytest

from conceptgraph.extraction.exceptions import (
    MalformedResponseError,
    PromptTemplateError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from conceptgraph.extraction.graph_extractor import GraphExtractor
from conceptgraph.llm.exceptions import LLMProviderError, LLMTimeoutError


class TestGraphExtractor:
    """Tests for GraphExtractor.extract."""

    @pytest.mark.asyncio
    async def test_extract_success(self, mock_client_factory, architect, sample_nodes):
        """Decoded entries are returned as-is, unvalidated."""
        client = mock_client_factory([json.dumps(sample_nodes)])
        extractor = GraphExtractor(client)

        nodes = await extractor.extract("Some text about built-in AI.", architect, 12)

        assert nodes == sample_nodes
        assert len(client.calls) == 1

    @pytest.mark.asyncio
    async def test_prompt_carries_persona_and_budget(self, mock_client_factory, architect, sample_nodes):
        client = mock_client_factory([json.dumps(sample_nodes)])
        await GraphExtractor(client).extract("TEXT BODY", architect, 9)

        messages = client.calls[0]
        assert messages[0] == {"role": "system", "content": architect.system_prompt}
        prompt = messages[-1]["content"]
        assert prompt.startswith(architect.prompt_style)
        assert "at most 9 concepts" in prompt
        assert prompt.rstrip().endswith("No markdown code blocks, no extra text.")
        assert "TEXT BODY" in prompt

    @pytest.mark.asyncio
    async def test_no_client_raises_unavailable(self, architect):
        with pytest.raises(ServiceUnavailableError):
            await GraphExtractor(None).extract("text", architect, 12)

    @pytest.mark.asyncio
    async def test_broken_template_raises_before_calling(self, mock_client_factory, architect):
        client = mock_client_factory(["[]"])
        extractor = GraphExtractor(client)
        extractor.prompt_builder.templates["graph_extraction"] = '[{"id": "main"}] {text}'

        with pytest.raises(PromptTemplateError):
            await extractor.extract("text", architect, 12)
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_provider_error_raises_unavailable(self, mock_client_factory, architect):
        client = mock_client_factory([LLMProviderError("500")])
        with pytest.raises(ServiceUnavailableError):
            await GraphExtractor(client).extract("text", architect, 12)

    @pytest.mark.asyncio
    async def test_timeout_raises_service_timeout(self, mock_client_factory, architect):
        """A call exceeding the client's hard timeout surfaces as ServiceTimeoutError."""
        client = mock_client_factory(["[]"], delay=0.5, timeout=0.05)
        with pytest.raises(ServiceTimeoutError):
            await GraphExtractor(client).extract("text", architect, 12)

    @pytest.mark.asyncio
    async def test_prose_response_is_malformed(self, mock_client_factory, architect):
        client = mock_client_factory(["I could not find any concepts, sorry."])
        with pytest.raises(MalformedResponseError):
            await GraphExtractor(client).extract("text", architect, 12)

    @pytest.mark.asyncio
    async def test_blank_response_is_rejected(self, mock_client_factory, architect):
        """A response with no usable text never reaches the parser as valid."""
        client = mock_client_factory(["   "])
        with pytest.raises((ServiceUnavailableError, MalformedResponseError)):
            await GraphExtractor(client).extract("text", architect, 12)


def test_timeout_is_not_retried(mock_client_factory):
    """Timeouts propagate immediately even when retries are configured."""
    client = mock_client_factory(["late"], delay=0.5, timeout=0.05, max_retries=3)

    with pytest.raises(LLMTimeoutError):
        asyncio.run(client.generate("hi"))
    assert len(client.calls) == 1
