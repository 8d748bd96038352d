"""
Validation and repair of raw concept node lists.

``validate_graph`` turns whatever the service produced into a graph with
exactly one root, unique ids and labels, no dangling references and only
root→branch and branch→leaf edges. It is pure and total: each pass builds
a new node list from the previous snapshot, and every repair is counted in
the returned ``ValidationDiagnostics`` instead of being printed.
"""

import logging
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from conceptgraph.core.models import ConceptGraph, ConceptNode, NodeKind, ValidationDiagnostics

logger = logging.getLogger(__name__)

MAX_LABEL_LENGTH = 50

_LABEL_DISALLOWED = re.compile(r"[^\w\s-]")
_WHITESPACE = re.compile(r"\s+")
_ID_SEPARATORS = re.compile(r"[-_]+")


class OrphanPolicy(str, Enum):
    """What to do with a children entry that names no existing node."""

    DROP = "drop"
    SYNTHESIZE = "synthesize"


def sanitize_label(value: Any) -> str:
    """Keep word characters, spaces and hyphens; collapse whitespace; cap length."""
    if not isinstance(value, str):
        return ""
    label = _LABEL_DISALLOWED.sub("", value)
    label = _WHITESPACE.sub(" ", label).strip()
    return label[:MAX_LABEL_LENGTH].strip()


def normalize_label(label: str) -> str:
    """Comparison key for duplicate detection."""
    return label.strip().casefold()


def label_from_id(node_id: str) -> str:
    """Readable label derived from an id, e.g. ``offline-access`` -> ``Offline Access``."""
    words = _ID_SEPARATORS.sub(" ", node_id).split()
    return sanitize_label(" ".join(w.capitalize() for w in words))


def _coerce_id(value: Any) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _parse_entry(entry: Any) -> ConceptNode | None:
    """Field check for one raw entry; None if id, label or kind is unusable."""
    if not isinstance(entry, Mapping):
        return None

    node_id = _coerce_id(entry.get("id"))
    label = sanitize_label(entry.get("label"))
    kind = NodeKind.from_raw(entry["kind"] if "kind" in entry else entry.get("type"))
    if node_id is None or not label or kind is None:
        return None

    raw_children = entry["children"] if "children" in entry else entry.get("connections")
    if not isinstance(raw_children, list):
        raw_children = []
    children = tuple(c for c in (_coerce_id(c) for c in raw_children) if c is not None)

    return ConceptNode(id=node_id, label=label, kind=kind, children=children)


def _with_kind(node: ConceptNode, kind: NodeKind) -> ConceptNode:
    return node.model_copy(update={"kind": kind})


def _with_children(node: ConceptNode, children: list[str]) -> ConceptNode:
    return node.model_copy(update={"children": tuple(children)})


def _ensure_root(nodes: list[ConceptNode]) -> tuple[list[ConceptNode], bool]:
    """Promote the first node to root if none exists."""
    if not nodes or any(n.kind is NodeKind.ROOT for n in nodes):
        return nodes, False
    return [_with_kind(nodes[0], NodeKind.ROOT)] + nodes[1:], True


def _synthesize_orphans(
    nodes: list[ConceptNode],
    max_nodes: int,
) -> tuple[list[ConceptNode], int, int]:
    """Create nodes for dangling references where the budget and labels allow."""
    valid_ids = {n.id for n in nodes}
    seen_labels = {normalize_label(n.label) for n in nodes}
    created: list[ConceptNode] = []
    repaired: list[ConceptNode] = []
    pruned = 0

    for node in nodes:
        kept = []
        for child_id in node.children:
            if child_id in valid_ids:
                kept.append(child_id)
                continue

            child_kind = node.kind.child_kind
            label = label_from_id(child_id)
            if (
                child_kind is None
                or not label
                or normalize_label(label) in seen_labels
                or len(nodes) + len(created) >= max_nodes
            ):
                pruned += 1
                continue

            created.append(ConceptNode(id=child_id, label=label, kind=child_kind))
            valid_ids.add(child_id)
            seen_labels.add(normalize_label(label))
            kept.append(child_id)
        repaired.append(_with_children(node, kept) if len(kept) != len(node.children) else node)

    return repaired + created, pruned, len(created)


def validate_graph(
    raw_nodes: Any,
    max_nodes: int,
    orphan_policy: OrphanPolicy = OrphanPolicy.DROP,
) -> ConceptGraph:
    """
    Validate and repair a raw node list.

    Args:
        raw_nodes: Entries decoded from the service (anything is tolerated)
        max_nodes: Node budget; the surviving list is truncated in input order
        orphan_policy: Drop dangling references (default) or synthesize nodes for them

    Returns:
        ConceptGraph: Graph satisfying the hierarchy invariants, or an empty
        graph when no entry survives the field check
    """
    entries = raw_nodes if isinstance(raw_nodes, list) else []
    max_nodes = max(1, max_nodes)

    # Field check and label sanitation
    parsed = [_parse_entry(e) for e in entries]
    nodes = [n for n in parsed if n is not None]
    dropped_invalid = len(entries) - len(nodes)

    # Dedup: first occurrence of an id or normalized label wins
    seen_ids: set[str] = set()
    seen_labels: set[str] = set()
    unique = []
    for node in nodes:
        key = normalize_label(node.label)
        if node.id in seen_ids or key in seen_labels:
            continue
        seen_ids.add(node.id)
        seen_labels.add(key)
        unique.append(node)
    dropped_duplicates = len(nodes) - len(unique)

    # Root uniqueness: later roots become branches
    demoted_roots = 0
    single_root = []
    root_seen = False
    for node in unique:
        if node.kind is NodeKind.ROOT:
            if root_seen:
                node = _with_kind(node, NodeKind.BRANCH)
                demoted_roots += 1
            root_seen = True
        single_root.append(node)

    # Root existence, cap, and root existence again if the cap cut the root
    nodes, promoted = _ensure_root(single_root)
    capped = nodes[:max_nodes]
    dropped_over_cap = len(nodes) - len(capped)
    nodes, promoted_after_cap = _ensure_root(capped)
    promoted_root = promoted or promoted_after_cap

    # Orphan edges
    synthesized = 0
    if orphan_policy is OrphanPolicy.SYNTHESIZE:
        nodes, pruned_orphans, synthesized = _synthesize_orphans(nodes, max_nodes)
    else:
        valid_ids = {n.id for n in nodes}
        pruned_orphans = 0
        repaired = []
        for node in nodes:
            kept = [c for c in node.children if c in valid_ids]
            pruned_orphans += len(node.children) - len(kept)
            repaired.append(_with_children(node, kept) if len(kept) != len(node.children) else node)
        nodes = repaired

    # Hierarchy: only root->branch and branch->leaf survive
    kinds = {n.id: n.kind for n in nodes}
    pruned_hierarchy = 0
    repaired = []
    for node in nodes:
        allowed = node.kind.child_kind
        kept = [c for c in node.children if allowed is not None and kinds[c] is allowed]
        pruned_hierarchy += len(node.children) - len(kept)
        repaired.append(_with_children(node, kept) if len(kept) != len(node.children) else node)
    nodes = repaired

    # Single parent: a child keeps only the first edge that claims it
    claimed: set[str] = set()
    pruned_duplicate = 0
    repaired = []
    for node in nodes:
        kept = []
        for child_id in node.children:
            if child_id in claimed:
                pruned_duplicate += 1
                continue
            claimed.add(child_id)
            kept.append(child_id)
        repaired.append(_with_children(node, kept) if len(kept) != len(node.children) else node)
    nodes = repaired

    diagnostics = ValidationDiagnostics(
        input_count=len(entries),
        dropped_invalid=dropped_invalid,
        dropped_duplicates=dropped_duplicates,
        demoted_roots=demoted_roots,
        promoted_root=promoted_root,
        dropped_over_cap=dropped_over_cap,
        pruned_orphan_edges=pruned_orphans,
        pruned_hierarchy_edges=pruned_hierarchy,
        pruned_duplicate_edges=pruned_duplicate,
        synthesized_nodes=synthesized,
    )

    if diagnostics.total_repairs:
        logger.info(f"Validated {len(nodes)}/{len(entries)} concepts with {diagnostics.total_repairs} repairs")
        logger.debug(f"Validation diagnostics: {diagnostics.model_dump()}")
    else:
        logger.debug(f"Validated {len(nodes)} concepts, no repairs needed")

    return ConceptGraph(nodes=tuple(nodes), diagnostics=diagnostics)


def graph_violations(graph: ConceptGraph) -> list[str]:
    """
    List structural invariant violations of a graph.

    Args:
        graph: Graph to check

    Returns:
        list[str]: Human-readable violations (empty when the graph is valid)
    """
    errors = []
    roots = graph.nodes_of_kind(NodeKind.ROOT)
    if len(roots) != 1:
        errors.append(f"Expected exactly one root, found {len(roots)}")

    ids: set[str] = set()
    labels: set[str] = set()
    for node in graph.nodes:
        if node.id in ids:
            errors.append(f"Duplicate id '{node.id}'")
        ids.add(node.id)
        key = normalize_label(node.label)
        if key in labels:
            errors.append(f"Duplicate label '{node.label}'")
        labels.add(key)

    kinds = {n.id: n.kind for n in graph.nodes}
    claimed: set[str] = set()
    for node in graph.nodes:
        for child_id in node.children:
            if child_id not in kinds:
                errors.append(f"Dangling reference {node.id} -> {child_id}")
                continue
            if kinds[child_id] is not node.kind.child_kind:
                errors.append(
                    f"Invalid edge {node.id} ({node.kind.value}) -> {child_id} ({kinds[child_id].value})"
                )
            if child_id in claimed:
                errors.append(f"Node '{child_id}' has more than one parent")
            claimed.add(child_id)

    return errors
