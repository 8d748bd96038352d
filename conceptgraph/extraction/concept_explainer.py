"""
On-demand explanation of a single concept for node detail popovers.
"""

import logging
import re

from conceptgraph.core.personas import Persona
from conceptgraph.extraction.exceptions import PromptTemplateError
from conceptgraph.extraction.prompt_builder import ConceptPromptBuilder
from conceptgraph.llm.base_client import BaseLLMClient, GenerationOptions
from conceptgraph.llm.exceptions import LLMError

logger = logging.getLogger(__name__)

_ECHO_PREFIX = re.compile(r"^Explain[^:\n]*:\s*", re.IGNORECASE)


def fallback_explanation(label: str) -> str:
    """Templated explanation used when the service cannot answer."""
    return (
        f'"{label}" is a key concept in this content. '
        f"It relates to the main themes and ideas discussed in the text."
    )


def truncate_explanation(text: str, max_length: int) -> str:
    """Cut to ``max_length`` characters, ending with an ellipsis when there is room for one."""
    max_length = max(0, max_length)
    if len(text) <= max_length:
        return text
    if max_length <= 3:
        return text[:max_length]
    return text[: max_length - 3].rstrip() + "..."


def clean_explanation(text: str, label: str, max_length: int) -> str:
    """Strip prompt echoes and cut to ``max_length`` characters."""
    explanation = _ECHO_PREFIX.sub("", text.strip())
    label_echo = re.compile(rf'^"{re.escape(label)}"[^:\n]*:\s*', re.IGNORECASE)
    explanation = label_echo.sub("", explanation).strip()
    return truncate_explanation(explanation, max_length)


class ConceptExplainer:
    """Explains one concept label against a bounded context window."""

    def __init__(
        self,
        llm_client: BaseLLMClient | None,
        prompt_builder: ConceptPromptBuilder | None = None,
        context_chars: int = 2000,
        max_tokens: int = 500,
        temperature: float = 0.7,
    ):
        self.llm = llm_client
        self.prompt_builder = prompt_builder or ConceptPromptBuilder()
        self.context_chars = context_chars
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def explain(self, label: str, context_text: str, persona: Persona, max_length: int = 300) -> str:
        """
        Explain a concept in two or three sentences.

        Never raises: any service failure yields the templated explanation.
        The result is at most ``max_length`` characters.
        """
        if self.llm is None:
            return truncate_explanation(fallback_explanation(label), max_length)

        options = GenerationOptions(
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            system_context=persona.system_prompt,
        )

        try:
            prompt = self.prompt_builder.build_explanation_prompt(
                label, (context_text or "")[: self.context_chars], persona, max_length
            )
            response = await self.llm.generate(prompt, options)
        except (LLMError, PromptTemplateError) as e:
            logger.warning(f"Failed to explain concept '{label}': {e}")
            return truncate_explanation(fallback_explanation(label), max_length)

        explanation = clean_explanation(response, label, max_length)
        return explanation or truncate_explanation(fallback_explanation(label), max_length)
