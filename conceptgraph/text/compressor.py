"""
Recursive text compression for a bounded-context text-generation service.

Oversized text is split into chunks, each chunk is summarized concurrently,
and the joined summaries are compressed again until they fit. Every failure
path degrades to truncation; ``compress`` never raises.
"""

import asyncio
import logging
from dataclasses import dataclass

from conceptgraph.config import CompressionConfig
from conceptgraph.extraction.exceptions import PromptTemplateError
from conceptgraph.extraction.prompt_builder import ConceptPromptBuilder
from conceptgraph.llm.base_client import BaseLLMClient, GenerationOptions
from conceptgraph.llm.exceptions import LLMError
from conceptgraph.text.sentences import leading_sentences

logger = logging.getLogger(__name__)

PARAGRAPH_BREAK = "\n\n"


@dataclass(frozen=True)
class CompressionResult:
    """Compressed text plus how it was obtained."""

    text: str
    degraded: bool = False
    depth: int = 0
    method: str = "unchanged"  # unchanged | summarized | truncated


class TextCompressor:
    """Reduces text to a target length through chunked summarization."""

    def __init__(
        self,
        client: BaseLLMClient | None,
        config: CompressionConfig | None = None,
        prompt_builder: ConceptPromptBuilder | None = None,
    ):
        """
        Initialize compressor.

        Args:
            client: Text-generation client, or None to summarize by sentence extraction only
            config: Chunking and recursion limits
            prompt_builder: Source of the chunk summary prompt
        """
        self.client = client
        self.config = config or CompressionConfig()
        self.prompt_builder = prompt_builder or ConceptPromptBuilder()

    async def compress(self, text: str, target_length: int, depth: int = 0) -> CompressionResult:
        """
        Compress ``text`` to at most ``target_length`` characters.

        Args:
            text: Input text
            target_length: Length budget (values below 1 are treated as 1)
            depth: Current recursion depth

        Returns:
            CompressionResult: Text no longer than the input; within the
            budget unless flagged degraded
        """
        text = text or ""
        target_length = max(1, target_length)

        if len(text) <= target_length:
            return CompressionResult(text=text, depth=depth, method="summarized" if depth else "unchanged")

        if depth >= self.config.max_depth:
            logger.warning(f"Compression depth limit {self.config.max_depth} reached, truncating")
            return self._truncate(text, target_length, depth)

        if len(text) > self.config.safety_ceiling:
            logger.warning(
                f"Budget exceeded: {len(text)} chars over safety ceiling "
                f"{self.config.safety_ceiling}, truncating without summarization"
            )
            return self._truncate(text, target_length, depth)

        chunks = self.split_chunks(text)
        logger.info(
            f"Compressing {len(text)} chars to {target_length} "
            f"(depth {depth}, {len(chunks)} chunks)"
        )

        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        summaries = await asyncio.gather(
            *(self._summarize_chunk(chunk, i, len(chunks), semaphore) for i, chunk in enumerate(chunks))
        )
        combined = PARAGRAPH_BREAK.join(s for s in summaries if s)

        ratio = len(combined) / len(text)
        if ratio >= self.config.min_reduction_ratio:
            logger.warning(f"Compression ineffective (ratio {ratio:.2f}), truncating")
            return self._truncate(text, target_length, depth)

        logger.debug(f"Depth {depth}: {len(text)} -> {len(combined)} chars (ratio {ratio:.2f})")
        return await self.compress(combined, target_length, depth + 1)

    def split_chunks(self, text: str) -> list[str]:
        """Split text into chunks, preferring paragraph breaks near each boundary."""
        size = self.config.chunk_size
        window = self.config.boundary_window
        chunks = []
        start = 0

        while start < len(text):
            end = start + size
            if end >= len(text):
                chunks.append(text[start:])
                break

            cut = self._paragraph_break_near(text, end, max(start + 1, end - window), end + window)
            chunks.append(text[start:cut])
            start = cut

        return chunks

    @staticmethod
    def _paragraph_break_near(text: str, boundary: int, lo: int, hi: int) -> int:
        """Position just after the paragraph break closest to ``boundary``, else ``boundary``."""
        best = None
        pos = text.find(PARAGRAPH_BREAK, lo, hi)
        while pos != -1:
            cut = pos + len(PARAGRAPH_BREAK)
            if best is None or abs(cut - boundary) < abs(best - boundary):
                best = cut
            pos = text.find(PARAGRAPH_BREAK, pos + 1, hi)
        return best if best is not None else boundary

    async def _summarize_chunk(
        self,
        chunk: str,
        index: int,
        total: int,
        semaphore: asyncio.Semaphore,
    ) -> str:
        if self.client is None:
            return leading_sentences(chunk, self.config.chunk_fallback_chars)

        options = GenerationOptions(
            temperature=self.config.summary_temperature,
            max_output_tokens=self.config.summary_max_tokens,
        )

        async with semaphore:
            try:
                prompt = self.prompt_builder.build_chunk_summary_prompt(chunk, index, total)
                summary = (await self.client.generate(prompt, options)).strip()
            except (LLMError, PromptTemplateError) as e:
                logger.warning(f"Chunk {index + 1}/{total} summarization failed, using leading sentences: {e}")
                return leading_sentences(chunk, self.config.chunk_fallback_chars)

        return summary or leading_sentences(chunk, self.config.chunk_fallback_chars)

    @staticmethod
    def _truncate(text: str, target_length: int, depth: int) -> CompressionResult:
        return CompressionResult(
            text=text[:target_length],
            degraded=True,
            depth=depth,
            method="truncated",
        )
