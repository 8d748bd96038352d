"""
Core data structures for concept graphs.
"""

from conceptgraph.core.models import (
    ConceptGraph,
    ConceptNode,
    GraphMethod,
    NodeKind,
    ValidationDiagnostics,
)
from conceptgraph.core.personas import PERSONAS, Persona, get_persona

__all__ = [
    # Graph
    "ConceptGraph",
    "ConceptNode",
    "GraphMethod",
    "NodeKind",
    "ValidationDiagnostics",
    # Personas
    "PERSONAS",
    "Persona",
    "get_persona",
]
