"""
Concept graph extraction components.

Prompting and parsing the service response, validating and repairing the
decoded node list, and the deterministic fallback used when the service
cannot help.
"""

from .concept_explainer import ConceptExplainer
from .exceptions import (
    ExtractionError,
    MalformedResponseError,
    PromptTemplateError,
    ServiceTimeoutError,
    ServiceUnavailableError,
)
from .fallback_builder import build_fallback_graph
from .graph_extractor import GraphExtractor
from .graph_validator import OrphanPolicy, graph_violations, validate_graph
from .prompt_builder import ConceptPromptBuilder
from .response_parser import parse_node_list

__all__ = [
    'ConceptExplainer',
    'ConceptPromptBuilder',
    'ExtractionError',
    'GraphExtractor',
    'MalformedResponseError',
    'OrphanPolicy',
    'PromptTemplateError',
    'ServiceTimeoutError',
    'ServiceUnavailableError',
    'build_fallback_graph',
    'graph_violations',
    'parse_node_list',
    'validate_graph',
]
