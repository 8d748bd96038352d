"""
Caller-facing concept graph service.

Wires compression, extraction, validation and the fallback builder into
calls that always succeed: ``extract_graph``, ``explain_concept`` and
``summarize``. Every service failure is absorbed here; callers read
``ConceptGraph.method`` and ``ConceptGraph.degraded`` to show
reduced-quality indicators.
"""

from conceptgraph.config import AppConfig, default_config, load_config
from conceptgraph.core.models import ConceptGraph, GraphMethod
from conceptgraph.core.personas import get_persona
from conceptgraph.extraction.concept_explainer import ConceptExplainer
from conceptgraph.extraction.exceptions import ExtractionError
from conceptgraph.extraction.fallback_builder import build_fallback_graph
from conceptgraph.extraction.graph_extractor import GraphExtractor
from conceptgraph.extraction.graph_validator import OrphanPolicy, graph_violations, validate_graph
from conceptgraph.extraction.prompt_builder import ConceptPromptBuilder
from conceptgraph.llm.base_client import BaseLLMClient
from conceptgraph.llm.factory import LLMClientFactory
from conceptgraph.text.compressor import TextCompressor
from conceptgraph.text.summarizer import SummaryResult, Summarizer
from conceptgraph.utils.logger import ExtractionLogger, get_logger

logger = get_logger(__name__)


class ConceptGraphService:
    """Turns free-form text into a validated concept graph."""

    def __init__(self, llm_client: BaseLLMClient | None = None, config: AppConfig | None = None):
        """
        Initialize the service.

        Args:
            llm_client: Text-generation client; None runs fallback-only
            config: Settings (defaults when omitted)
        """
        self.config = config or default_config()
        self.llm = llm_client

        prompt_builder = ConceptPromptBuilder(self.config.prompts_path)
        self.compressor = TextCompressor(llm_client, self.config.compression, prompt_builder)
        self.extractor = GraphExtractor(
            llm_client,
            prompt_builder,
            max_tokens=self.config.extraction.max_tokens,
            temperature=self.config.extraction.temperature,
        )
        self.explainer = ConceptExplainer(
            llm_client,
            prompt_builder,
            context_chars=self.config.explainer.context_chars,
            max_tokens=self.config.explainer.max_tokens,
            temperature=self.config.explainer.temperature,
        )
        self.summarizer = Summarizer(llm_client, self.compressor, prompt_builder, self.config.summary)
        self.orphan_policy = OrphanPolicy(self.config.extraction.orphan_policy)

    @classmethod
    def from_config(cls, config_path: str) -> "ConceptGraphService":
        """Build a service and its client from a YAML config file."""
        config = load_config(config_path)
        client = LLMClientFactory.create_client_from_config(config.model, config.retry_config)
        return cls(client, config)

    async def service_available(self) -> bool:
        """Probe the text-generation service for this request."""
        if self.llm is None:
            return False
        try:
            return await self.llm.is_available(self.config.model.check_connectivity)
        except Exception as e:
            logger.warning(f"Availability probe failed: {e}")
            return False

    async def extract_graph(
        self,
        text: str,
        persona: str | None = None,
        max_nodes: int | None = None,
    ) -> ConceptGraph:
        """
        Extract a concept graph from text.

        Never raises. Falls back to the term-frequency builder when the
        service is unavailable, times out, or returns nothing usable.

        Args:
            text: Source text of any length
            persona: Persona id (unknown ids use the configured default)
            max_nodes: Node budget (configured default when omitted)

        Returns:
            ConceptGraph: Validated graph tagged with its provenance
        """
        text = text or ""
        max_nodes = max(1, max_nodes or self.config.extraction.max_nodes)
        persona_config = get_persona(persona, self.config.extraction.default_persona)
        request_log = ExtractionLogger()
        request_log.request_start(len(text), persona_config.id, max_nodes)

        if not text.strip():
            request_log.fallback_used("empty input")
            return self._fallback(text, max_nodes, request_log)

        available = await self.service_available()
        request_log.service_status(available)
        if not available:
            request_log.fallback_used("text generation service unavailable")
            return self._fallback(text, max_nodes, request_log)

        compressed = await self.compressor.compress(text, self.config.extraction.context_chars)
        request_log.compression_result(len(text), len(compressed.text), compressed.depth, compressed.degraded)

        try:
            raw_nodes = await self.extractor.extract(compressed.text, persona_config, max_nodes)
        except ExtractionError as e:
            request_log.fallback_used(f"{type(e).__name__}: {e}")
            return self._fallback(text, max_nodes, request_log)

        graph = validate_graph(raw_nodes, max_nodes, self.orphan_policy)
        request_log.validation_summary(graph.diagnostics.model_dump(), len(graph.nodes))

        if not graph.nodes:
            request_log.fallback_used("no usable concepts in service response")
            return self._fallback(text, max_nodes, request_log)

        violations = graph_violations(graph)
        if violations:
            # validate_graph guarantees the invariants; reaching here is a bug
            logger.error(f"Validated graph violates invariants: {violations}")
            request_log.fallback_used("validated graph failed invariant check")
            return self._fallback(text, max_nodes, request_log)

        disconnected = graph.disconnected_ids()
        if disconnected:
            request_log.debug(f"Nodes unreachable from root: {disconnected}")

        graph = graph.model_copy(update={"method": GraphMethod.AI, "degraded": compressed.degraded})
        request_log.request_end(graph.method.value, len(graph.nodes), graph.degraded)
        return graph

    async def explain_concept(
        self,
        label: str,
        context: str = "",
        persona: str | None = None,
        max_length: int | None = None,
    ) -> str:
        """
        Explain one concept in a few sentences. Never raises.

        Args:
            label: Concept label
            context: Source text giving the concept its meaning
            persona: Persona id (unknown ids use the configured default)
            max_length: Maximum characters (configured default when omitted)

        Returns:
            str: Explanation, or a templated sentence when the service fails
        """
        persona_config = get_persona(persona, self.config.explainer.default_persona)
        max_length = max_length or self.config.explainer.max_length
        return await self.explainer.explain(label, context, persona_config, max_length)

    async def summarize(
        self,
        text: str,
        persona: str | None = None,
        length: str | None = None,
        summary_type: str | None = None,
    ) -> SummaryResult:
        """
        Summarize text in a persona's voice. Never raises.

        Args:
            text: Source text of any length
            persona: Persona id (unknown ids use the configured default)
            length: short, medium or long
            summary_type: key-points, tldr, teaser or headline

        Returns:
            SummaryResult: Summary tagged ``ai`` or ``fallback``
        """
        persona_config = get_persona(persona, self.config.summary.default_persona)
        if not (text or "").strip() or not await self.service_available():
            return self.summarizer.fallback(text, persona_config)
        return await self.summarizer.summarize(text, persona_config, summary_type, length)

    @staticmethod
    def _fallback(text: str, max_nodes: int, request_log: ExtractionLogger) -> ConceptGraph:
        graph = build_fallback_graph(text, max_nodes)
        request_log.request_end(graph.method.value, len(graph.nodes), graph.degraded)
        return graph
