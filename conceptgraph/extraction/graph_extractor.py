"""
Graph extraction: prompt the service for a concept array and decode it.

Returns the raw node list exactly as decoded. Structural repair happens in
graph_validator.
"""

import logging
from typing import Any

from conceptgraph.core.personas import Persona
from conceptgraph.extraction.exceptions import (
    MalformedResponseError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from conceptgraph.extraction.prompt_builder import ConceptPromptBuilder
from conceptgraph.extraction.response_parser import parse_node_list
from conceptgraph.llm.base_client import BaseLLMClient, GenerationOptions
from conceptgraph.llm.exceptions import LLMError, LLMTimeoutError

logger = logging.getLogger(__name__)


class GraphExtractor:
    """Extracts a raw concept node list from text via the service."""

    def __init__(
        self,
        llm_client: BaseLLMClient | None,
        prompt_builder: ConceptPromptBuilder | None = None,
        max_tokens: int = 2500,
        temperature: float = 0.7,
    ):
        """Initialize with dependencies."""
        self.llm = llm_client
        self.prompt_builder = prompt_builder or ConceptPromptBuilder()
        self.max_tokens = max_tokens
        self.temperature = temperature

    async def extract(self, text: str, persona: Persona, max_nodes: int) -> list[Any]:
        """
        Extract raw concept nodes from text.

        Args:
            text: Text to analyze (already compressed to the context budget)
            persona: Persona shaping the prompt
            max_nodes: Node budget stated in the prompt

        Returns:
            list: Raw decoded entries, not yet validated

        Raises:
            ServiceUnavailableError: No client, or the service call failed
            ServiceTimeoutError: The service call timed out
            MalformedResponseError: No node array in the response
            PromptTemplateError: The extraction template failed to render
        """
        if self.llm is None:
            raise ServiceUnavailableError("No text generation service configured")

        prompt = self.prompt_builder.build_graph_prompt(text, persona, max_nodes)
        options = GenerationOptions(
            temperature=self.temperature,
            max_output_tokens=self.max_tokens,
            system_context=persona.system_prompt,
        )

        logger.info(f"Extracting graph: {len(text)} chars, persona={persona.id}, max_nodes={max_nodes}")

        try:
            content = await self.llm.generate(prompt, options)
        except LLMTimeoutError as e:
            raise ServiceTimeoutError(str(e)) from e
        except LLMError as e:
            raise ServiceUnavailableError(str(e)) from e

        nodes = parse_node_list(content)
        if not isinstance(nodes, list) or not nodes:
            raise MalformedResponseError("Service returned an empty concept array")

        logger.info(f"Decoded {len(nodes)} raw entries from service response")
        return nodes
