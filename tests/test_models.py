"""
Tests for concept graph data models.
"""

import networkx as nx
import pytest
from pydantic import ValidationError

from conceptgraph.core.models import ConceptGraph, ConceptNode, GraphMethod, NodeKind


@pytest.fixture
def graph():
    """Small graph with one disconnected leaf."""
    return ConceptGraph(
        nodes=(
            ConceptNode(id="r", label="Root", kind=NodeKind.ROOT, children=("b",)),
            ConceptNode(id="b", label="Branch", kind=NodeKind.BRANCH, children=("l",)),
            ConceptNode(id="l", label="Leaf", kind=NodeKind.LEAF),
            ConceptNode(id="x", label="Loose", kind=NodeKind.LEAF),
        ),
        method=GraphMethod.AI,
    )


class TestNodeKind:
    """Tests for NodeKind."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("main", NodeKind.ROOT),
            ("Secondary", NodeKind.BRANCH),
            (" tertiary ", NodeKind.LEAF),
            ("root", NodeKind.ROOT),
            ("LEAF", NodeKind.LEAF),
            (NodeKind.BRANCH, NodeKind.BRANCH),
        ],
    )
    def test_from_raw(self, raw, expected):
        assert NodeKind.from_raw(raw) is expected

    @pytest.mark.parametrize("raw", ["planet", "", None, 1])
    def test_from_raw_unknown(self, raw):
        assert NodeKind.from_raw(raw) is None

    def test_child_kind(self):
        assert NodeKind.ROOT.child_kind is NodeKind.BRANCH
        assert NodeKind.BRANCH.child_kind is NodeKind.LEAF
        assert NodeKind.LEAF.child_kind is None


class TestConceptGraph:
    """Tests for ConceptGraph accessors."""

    def test_accessors(self, graph):
        assert graph.root.id == "r"
        assert graph.get_node("missing") is None
        assert [n.id for n in graph.children_of("r")] == ["b"]
        assert graph.children_of("missing") == []
        assert [n.id for n in graph.nodes_of_kind(NodeKind.LEAF)] == ["l", "x"]

    def test_to_networkx(self, graph):
        g = graph.to_networkx()
        assert isinstance(g, nx.DiGraph)
        assert set(g.edges) == {("r", "b"), ("b", "l")}
        assert g.nodes["l"]["kind"] == "leaf"

    def test_disconnected(self, graph):
        assert graph.disconnected_ids() == ["x"]
        assert [n.id for n in graph.connected().nodes] == ["r", "b", "l"]

    def test_to_raw(self, graph):
        assert graph.to_raw()[0] == {"id": "r", "label": "Root", "kind": "root", "children": ["b"]}

    def test_is_frozen(self, graph):
        with pytest.raises(ValidationError):
            graph.degraded = True
        with pytest.raises(ValidationError):
            graph.nodes[0].label = "Changed"

    def test_empty_graph(self):
        empty = ConceptGraph()
        assert empty.root is None
        assert empty.disconnected_ids() == []
