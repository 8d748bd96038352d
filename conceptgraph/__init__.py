"""
conceptgraph: hierarchical concept graphs from free-form text.

Typical use::

    service = ConceptGraphService.from_config("configs/conceptgraph.yaml")
    graph = await service.extract_graph(text, persona="analyst", max_nodes=12)
    summary = await service.summarize(text, persona="strategist", length="short")
"""

from conceptgraph.config import AppConfig, default_config, load_config
from conceptgraph.core.models import ConceptGraph, ConceptNode, GraphMethod, NodeKind, ValidationDiagnostics
from conceptgraph.extraction.graph_validator import OrphanPolicy, graph_violations, validate_graph
from conceptgraph.pipeline import ConceptGraphService
from conceptgraph.text.summarizer import SummaryResult

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ConceptGraph",
    "ConceptGraphService",
    "ConceptNode",
    "GraphMethod",
    "NodeKind",
    "OrphanPolicy",
    "SummaryResult",
    "ValidationDiagnostics",
    "default_config",
    "graph_violations",
    "load_config",
    "validate_graph",
]
