"""
Tests for recursive text compression.
"""

import pytest

from conceptgraph.config import CompressionConfig
from conceptgraph.llm.exceptions import LLMProviderError
from conceptgraph.text.compressor import TextCompressor


def paragraphs(count: int, size: int = 200) -> str:
    """Text of ``count`` numbered paragraphs of roughly ``size`` characters."""
    body = []
    for i in range(count):
        sentence = f"Paragraph {i} talks about topic {i}. "
        body.append((sentence * (size // len(sentence) + 1))[:size].strip())
    return "\n\n".join(body)


@pytest.fixture
def small_config():
    """Chunk sizes scaled down for fast tests."""
    return CompressionConfig(
        chunk_size=1_000,
        boundary_window=100,
        safety_ceiling=50_000,
        chunk_fallback_chars=100,
        max_concurrency=2,
    )


class TestCompressBaseCases:
    """Tests for inputs that need no summarization."""

    @pytest.mark.asyncio
    async def test_short_text_unchanged(self, mock_client_factory, small_config):
        """Text within the budget is returned as-is without calling the service."""
        client = mock_client_factory(["summary"])
        compressor = TextCompressor(client, small_config)

        result = await compressor.compress("Already short.", 100)

        assert result.text == "Already short."
        assert result.method == "unchanged"
        assert not result.degraded
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_empty_text(self, small_config):
        result = await TextCompressor(None, small_config).compress("", 100)
        assert result.text == ""
        assert not result.degraded

    @pytest.mark.asyncio
    async def test_safety_ceiling_truncates_without_calls(self, mock_client_factory, small_config):
        """Text over the ceiling is truncated to the target and marked degraded."""
        client = mock_client_factory(["summary"])
        compressor = TextCompressor(client, small_config)
        text = "x" * (small_config.safety_ceiling + 1)

        result = await compressor.compress(text, 500)

        assert result.text == text[:500]
        assert result.degraded
        assert result.method == "truncated"
        assert client.calls == []


class TestCompressRecursion:
    """Tests for chunked summarization."""

    @pytest.mark.asyncio
    async def test_converges_within_budget(self, mock_client_factory, small_config):
        """Summaries that shrink well bring the text under the target."""
        client = mock_client_factory(["Short summary of a chunk."])
        compressor = TextCompressor(client, small_config)
        text = paragraphs(20)

        result = await compressor.compress(text, 800)

        assert len(result.text) <= 800
        assert not result.degraded
        assert result.method == "summarized"
        assert 1 <= result.depth <= small_config.max_depth
        assert "Short summary of a chunk." in result.text

    @pytest.mark.asyncio
    async def test_output_never_longer_than_input(self, mock_client_factory, small_config):
        for summary in ("tiny", "x" * 900, "y" * 5_000):
            client = mock_client_factory([summary])
            text = paragraphs(10)
            result = await TextCompressor(client, small_config).compress(text, 300)
            assert len(result.text) <= len(text)
            assert len(result.text) <= 300

    @pytest.mark.asyncio
    async def test_ineffective_summaries_truncate(self, mock_client_factory, small_config):
        """A reduction ratio at or above the threshold stops recursion."""
        client = mock_client_factory([lambda messages: "z" * 990])
        compressor = TextCompressor(client, small_config)
        text = paragraphs(5)

        result = await compressor.compress(text, 200)

        assert result.degraded
        assert result.method == "truncated"
        assert result.text == text[:200]
        assert result.depth == 0

    @pytest.mark.asyncio
    async def test_depth_limit(self, mock_client_factory):
        """Recursion stops at max_depth even when each level reduces the text."""
        config = CompressionConfig(chunk_size=1_000, boundary_window=50, max_depth=2)

        def halve(messages):
            prompt = messages[-1]["content"]
            chunk = prompt.split("TEXT:\n", 1)[1]
            return chunk[: len(chunk) // 2]

        client = mock_client_factory([halve])
        text = paragraphs(40)

        result = await TextCompressor(client, config).compress(text, 100)

        assert result.depth <= 2
        assert result.degraded
        assert len(result.text) <= 100

    @pytest.mark.asyncio
    async def test_chunk_order_preserved(self, mock_client_factory, small_config):
        """Summaries are joined in chunk order regardless of completion order."""

        def echo_part(messages):
            prompt = messages[-1]["content"]
            header = prompt.split("\n", 1)[0]
            return header.split("part ", 1)[1].split(" of", 1)[0]

        client = mock_client_factory([echo_part], delay=0.01)
        compressor = TextCompressor(client, small_config)
        text = paragraphs(15)
        expected = len(compressor.split_chunks(text))

        result = await compressor.compress(text, len(text) - 1)

        assert result.text.split("\n\n") == [str(i) for i in range(1, expected + 1)]

    @pytest.mark.asyncio
    async def test_concurrency_is_capped(self, mock_client_factory, small_config):
        client = mock_client_factory(["s"], delay=0.01)
        await TextCompressor(client, small_config).compress(paragraphs(30), 100)
        assert 1 <= client.max_in_flight <= small_config.max_concurrency

    @pytest.mark.asyncio
    async def test_failed_chunk_uses_leading_sentences(self, mock_client_factory, small_config):
        """A chunk whose summary fails contributes its first sentences instead."""
        def fail_first_chunk(messages):
            if "Paragraph 0 " in messages[-1]["content"]:
                return LLMProviderError("boom")
            return "Good summary."

        client = mock_client_factory([fail_first_chunk])
        compressor = TextCompressor(client, small_config)
        text = paragraphs(8)

        result = await compressor.compress(text, 1_000)

        assert "Paragraph 0 talks about topic 0." in result.text
        assert "Good summary." in result.text
        assert len(result.text) <= 1_000

    @pytest.mark.asyncio
    async def test_broken_chunk_template_uses_leading_sentences(self, mock_client_factory, small_config):
        client = mock_client_factory(["Good summary."])
        compressor = TextCompressor(client, small_config)
        compressor.prompt_builder.templates["chunk_summary"] = 'Summarize {text} as {"format": "list"}'

        result = await compressor.compress(paragraphs(8), 1_000)

        assert result.text.startswith("Paragraph 0 talks about topic 0.")
        assert "Good summary." not in result.text
        assert client.calls == []

    @pytest.mark.asyncio
    async def test_without_client_uses_sentence_extraction(self, small_config):
        text = paragraphs(12)
        result = await TextCompressor(None, small_config).compress(text, 1_000)
        assert len(result.text) <= 1_000
        assert result.text.startswith("Paragraph 0 talks about topic 0.")


class TestSplitChunks:
    """Tests for chunk boundary selection."""

    def test_prefers_paragraph_break_near_boundary(self, small_config):
        compressor = TextCompressor(None, small_config)
        text = "a" * 950 + "\n\n" + "b" * 600

        chunks = compressor.split_chunks(text)

        assert chunks[0] == "a" * 950 + "\n\n"
        assert chunks[1] == "b" * 600

    def test_hard_cut_without_break(self, small_config):
        compressor = TextCompressor(None, small_config)
        chunks = compressor.split_chunks("c" * 2_500)
        assert [len(c) for c in chunks] == [1_000, 1_000, 500]

    def test_chunks_cover_text(self, small_config):
        compressor = TextCompressor(None, small_config)
        text = paragraphs(25, size=170)
        assert "".join(compressor.split_chunks(text)) == text
