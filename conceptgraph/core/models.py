"""
Pydantic data models for concept graphs.

A concept graph is a three-level tree: one root, branch nodes under the
root, and leaf nodes under branches. Models are frozen; repair code builds
new instances instead of mutating existing ones.
"""

from enum import Enum
from typing import Any

import networkx as nx
from pydantic import BaseModel, ConfigDict, Field

# Source vocabulary used by the extraction prompt, plus canonical names
_KIND_ALIASES = {
    "main": "root",
    "root": "root",
    "secondary": "branch",
    "branch": "branch",
    "tertiary": "leaf",
    "leaf": "leaf",
}


class NodeKind(str, Enum):
    """Level of a node in the concept hierarchy."""

    ROOT = "root"
    BRANCH = "branch"
    LEAF = "leaf"

    @classmethod
    def from_raw(cls, value: Any) -> "NodeKind | None":
        """Map a raw kind/type value to a NodeKind, or None if unknown."""
        if isinstance(value, NodeKind):
            return value
        if not isinstance(value, str):
            return None
        canonical = _KIND_ALIASES.get(value.strip().lower())
        return cls(canonical) if canonical else None

    @property
    def child_kind(self) -> "NodeKind | None":
        """Kind that may appear in this kind's children list."""
        if self is NodeKind.ROOT:
            return NodeKind.BRANCH
        if self is NodeKind.BRANCH:
            return NodeKind.LEAF
        return None


class GraphMethod(str, Enum):
    """Provenance of a graph."""

    AI = "ai"
    FALLBACK = "fallback"


class ConceptNode(BaseModel):
    """A single concept in the graph."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique node identifier")
    label: str = Field(..., description="Sanitized short label")
    kind: NodeKind = Field(..., description="Level in the hierarchy")
    children: tuple[str, ...] = Field(default=(), description="Ordered child node ids")


class ValidationDiagnostics(BaseModel):
    """Counts of repairs applied while validating a raw node list."""

    model_config = ConfigDict(frozen=True)

    input_count: int = 0
    dropped_invalid: int = 0
    dropped_duplicates: int = 0
    demoted_roots: int = 0
    promoted_root: bool = False
    dropped_over_cap: int = 0
    pruned_orphan_edges: int = 0
    pruned_hierarchy_edges: int = 0
    pruned_duplicate_edges: int = 0
    synthesized_nodes: int = 0

    @property
    def total_repairs(self) -> int:
        """Number of individual repairs applied."""
        return (
            self.dropped_invalid
            + self.dropped_duplicates
            + self.demoted_roots
            + int(self.promoted_root)
            + self.dropped_over_cap
            + self.pruned_orphan_edges
            + self.pruned_hierarchy_edges
            + self.pruned_duplicate_edges
            + self.synthesized_nodes
        )


class ConceptGraph(BaseModel):
    """
    Validated concept graph handed to rendering and storage.

    Consumers must treat it as read-only and tolerate disconnected nodes:
    a branch or leaf that no parent lists is kept rather than re-parented.
    """

    model_config = ConfigDict(frozen=True)

    nodes: tuple[ConceptNode, ...] = Field(default=())
    method: GraphMethod = GraphMethod.AI
    degraded: bool = False
    diagnostics: ValidationDiagnostics = Field(default_factory=ValidationDiagnostics)

    @property
    def root(self) -> ConceptNode | None:
        """The root node (None only for an empty graph)."""
        return next((n for n in self.nodes if n.kind is NodeKind.ROOT), None)

    def get_node(self, node_id: str) -> ConceptNode | None:
        """Retrieve a node by id."""
        return next((n for n in self.nodes if n.id == node_id), None)

    def children_of(self, node_id: str) -> list[ConceptNode]:
        """Child nodes of ``node_id`` in listed order."""
        node = self.get_node(node_id)
        if node is None:
            return []
        by_id = {n.id: n for n in self.nodes}
        return [by_id[c] for c in node.children if c in by_id]

    def nodes_of_kind(self, kind: NodeKind) -> list[ConceptNode]:
        """All nodes of one kind, in graph order."""
        return [n for n in self.nodes if n.kind is kind]

    def to_networkx(self) -> nx.DiGraph:
        """Directed parent→child graph with label/kind node attributes."""
        g = nx.DiGraph()
        for node in self.nodes:
            g.add_node(node.id, label=node.label, kind=node.kind.value)
        for node in self.nodes:
            for child_id in node.children:
                if child_id in g:
                    g.add_edge(node.id, child_id)
        return g

    def disconnected_ids(self) -> list[str]:
        """Ids of nodes not reachable from the root."""
        root = self.root
        if root is None:
            return [n.id for n in self.nodes]
        reachable = nx.descendants(self.to_networkx(), root.id) | {root.id}
        return [n.id for n in self.nodes if n.id not in reachable]

    def connected(self) -> "ConceptGraph":
        """Copy of the graph without nodes unreachable from the root."""
        dropped = set(self.disconnected_ids())
        if not dropped:
            return self
        return self.model_copy(update={"nodes": tuple(n for n in self.nodes if n.id not in dropped)})

    def to_raw(self) -> list[dict[str, Any]]:
        """Plain dicts (id, label, kind, children) for JSON or re-validation."""
        return [
            {"id": n.id, "label": n.label, "kind": n.kind.value, "children": list(n.children)}
            for n in self.nodes
        ]
