"""
Standalone text summarization in the voice of a reading persona.

Long input is first compressed to the summary context window, then
summarized in one call. Any failure yields the leading sentences of the
text instead; ``summarize`` never raises.
"""

import logging
from dataclasses import dataclass
from itertools import islice

from conceptgraph.config import SummaryConfig
from conceptgraph.core.personas import Persona
from conceptgraph.extraction.exceptions import PromptTemplateError
from conceptgraph.extraction.prompt_builder import ConceptPromptBuilder
from conceptgraph.llm.base_client import BaseLLMClient, GenerationOptions
from conceptgraph.llm.exceptions import LLMError
from conceptgraph.text.compressor import TextCompressor
from conceptgraph.text.sentences import leading_sentences, split_sentences

logger = logging.getLogger(__name__)

SUMMARY_STYLES = {
    "key-points": "a short list of key points",
    "tldr": "a TL;DR of one or two sentences",
    "teaser": "a teaser that makes the reader want the full text",
    "headline": "a single headline",
}


@dataclass(frozen=True)
class SummaryResult:
    """Summary text plus how it was obtained."""

    summary: str
    method: str  # ai | fallback
    persona: str
    degraded: bool = False


def fallback_summary(text: str, sentence_count: int = 3, max_chars: int = 500) -> str:
    """First few sentences of the text, kept within ``max_chars``."""
    text = text or ""
    summary = " ".join(islice(split_sentences(text), sentence_count))
    if len(summary) > max_chars:
        summary = leading_sentences(text, max_chars)
    return summary or text.strip()[:max_chars]


class Summarizer:
    """Summarizes whole texts through the service, with a sentence fallback."""

    def __init__(
        self,
        llm_client: BaseLLMClient | None,
        compressor: TextCompressor,
        prompt_builder: ConceptPromptBuilder | None = None,
        config: SummaryConfig | None = None,
    ):
        self.llm = llm_client
        self.compressor = compressor
        self.prompt_builder = prompt_builder or ConceptPromptBuilder()
        self.config = config or SummaryConfig()

    def fallback(self, text: str, persona: Persona) -> SummaryResult:
        """Sentence-extraction summary used when the service cannot help."""
        summary = fallback_summary(text, self.config.fallback_sentences, self.config.fallback_chars)
        return SummaryResult(summary=summary, method="fallback", persona=persona.id, degraded=True)

    async def summarize(
        self,
        text: str,
        persona: Persona,
        summary_type: str | None = None,
        length: str | None = None,
    ) -> SummaryResult:
        """
        Summarize text.

        Args:
            text: Source text of any length
            persona: Persona whose system prompt frames the summary
            summary_type: key-points, tldr, teaser or headline (default from config)
            length: short, medium or long (default from config)

        Returns:
            SummaryResult: Service summary, or the fallback when the service fails
        """
        text = text or ""
        if self.llm is None or not text.strip():
            return self.fallback(text, persona)

        if summary_type not in SUMMARY_STYLES:
            summary_type = self.config.default_type
        if length not in self.config.length_chars:
            length = self.config.default_length
        max_chars = self.config.length_chars.get(length, self.config.fallback_chars)

        compressed = await self.compressor.compress(text, self.config.context_chars)
        options = GenerationOptions(
            temperature=self.config.temperature,
            max_output_tokens=self.config.max_tokens,
            system_context=persona.system_prompt,
        )

        try:
            prompt = self.prompt_builder.build_summary_prompt(
                compressed.text, persona, SUMMARY_STYLES[summary_type], length, max_chars
            )
            summary = (await self.llm.generate(prompt, options)).strip()
        except (LLMError, PromptTemplateError) as e:
            logger.warning(f"Summarization failed, using leading sentences: {e}")
            return self.fallback(text, persona)

        if not summary:
            return self.fallback(text, persona)
        if len(summary) > max_chars:
            summary = leading_sentences(summary, max_chars)

        logger.info(f"Summarized {len(text)} chars to {len(summary)} ({summary_type}, {length})")
        return SummaryResult(summary=summary, method="ai", persona=persona.id, degraded=compressed.degraded)
