"""
Deterministic concept graph built from term statistics, without the service.

Used whenever extraction fails. Pure, synchronous and bounded: the graph
satisfies every hierarchy invariant by construction.
"""

import logging
import re
from collections import Counter

from conceptgraph.core.models import ConceptGraph, ConceptNode, GraphMethod, NodeKind
from conceptgraph.extraction.graph_validator import MAX_LABEL_LENGTH

logger = logging.getLogger(__name__)

MIN_WORD_LENGTH = 6
MAX_BRANCHES = 3
MAX_INPUT_CHARS = 500_000
DEFAULT_ROOT_LABEL = "Main Topic"

_WORD = re.compile(r"[A-Za-z0-9][A-Za-z0-9-]*")

STOP_WORDS = frozenset({
    "about", "above", "across", "actually", "after", "again", "against", "almost", "already",
    "although", "always", "another", "anything", "around", "because", "become", "becomes",
    "before", "behind", "being", "below", "between", "beyond", "cannot", "could", "during",
    "either", "enough", "especially", "every", "everything", "example", "further", "however",
    "including", "instead", "itself", "little", "mostly", "myself", "neither", "nothing",
    "others", "otherwise", "perhaps", "rather", "really", "should", "similar", "simply",
    "something", "sometimes", "still", "through", "throughout", "together", "toward",
    "towards", "under", "unless", "until", "usually", "various", "whatever", "whether",
    "which", "while", "within", "without", "would", "yourself", "themselves", "therefore",
    "there", "these", "those", "though", "thing", "things", "where", "whose", "called",
    "certain", "different", "important", "often", "people", "provide", "provides",
    "number", "first", "second", "third", "later", "shows", "makes", "using", "based",
})


def _candidate_terms(text: str) -> list[str]:
    """Capitalized terms in order of appearance, then repeated terms by frequency."""
    words = [w.strip("-") for w in _WORD.findall(text)]
    words = [w for w in words if len(w) >= MIN_WORD_LENGTH and w.lower() not in STOP_WORDS]

    capitalized = [w for w in words if w[0].isupper() and w != w.upper()]

    lowered = [w.lower() for w in words]
    counts = Counter(lowered)
    first_seen: dict[str, int] = {}
    for i, w in enumerate(lowered):
        first_seen.setdefault(w, i)
    frequent = sorted((w for w, c in counts.items() if c >= 2), key=lambda w: (-counts[w], first_seen[w]))

    terms = []
    seen: set[str] = set()
    for term in capitalized + frequent:
        term = term[:MAX_LABEL_LENGTH]
        key = term.lower()
        if key not in seen:
            seen.add(key)
            terms.append(term)
    return terms


def _split_evenly(items: list[str], parts: int) -> list[list[str]]:
    """Contiguous slices whose sizes differ by at most one."""
    size, extra = divmod(len(items), parts)
    slices = []
    start = 0
    for i in range(parts):
        end = start + size + (1 if i < extra else 0)
        slices.append(items[start:end])
        start = end
    return slices


def build_fallback_graph(text: str, max_nodes: int) -> ConceptGraph:
    """
    Build a concept graph from term frequency and capitalization.

    Args:
        text: Source text
        max_nodes: Node budget

    Returns:
        ConceptGraph: One root, up to three branches, leaves split evenly
        across the branches
    """
    text = (text or "")[:MAX_INPUT_CHARS]
    terms = _candidate_terms(text)[:max(1, max_nodes)]
    labels = [t[0].upper() + t[1:].lower() for t in terms] or [DEFAULT_ROOT_LABEL]
    ids = [f"concept-{i}" for i in range(len(labels))]

    if len(labels) == 1:
        nodes = (ConceptNode(id=ids[0], label=labels[0], kind=NodeKind.ROOT),)
    else:
        branch_count = max(1, min(MAX_BRANCHES, (len(labels) - 1) // 2))
        branch_ids = ids[1:branch_count + 1]
        leaf_slices = _split_evenly(ids[branch_count + 1:], branch_count)
        label_by_id = dict(zip(ids, labels))

        nodes = [ConceptNode(id=ids[0], label=labels[0], kind=NodeKind.ROOT, children=tuple(branch_ids))]
        for branch_id, leaves in zip(branch_ids, leaf_slices):
            nodes.append(
                ConceptNode(id=branch_id, label=label_by_id[branch_id], kind=NodeKind.BRANCH, children=tuple(leaves))
            )
            nodes.extend(ConceptNode(id=leaf_id, label=label_by_id[leaf_id], kind=NodeKind.LEAF) for leaf_id in leaves)
        nodes = tuple(nodes)

    logger.info(f"Built fallback graph with {len(nodes)} concepts from {len(terms)} candidate terms")
    return ConceptGraph(nodes=nodes, method=GraphMethod.FALLBACK, degraded=True)
