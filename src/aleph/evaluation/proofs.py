"""
Executable checks of strong normalization and local confluence.

Strong normalization: term_size strictly decreases along every step, so
every reduction sequence terminates. demonstrate_strong_normalization checks
the leftmost trace and, through the full reduction graph, every edge.

Local confluence: whenever t → t1 and t → t2, both sides reach a common
reduct. check_confluence builds the reduction graph of a term (networkx
DiGraph, one node per distinct term) and checks every divergence plus the
uniqueness of the terminal term.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, Iterable, List, Optional

import networkx as nx

from aleph.core.terms import CHAIN, FUSE, IMPL, N, SENTENCE, SEQ, Term, term_size
from aleph.reduction.system import ReductionSystem

logger = logging.getLogger(__name__)

DEFAULT_MAX_GRAPH_NODES = 10_000


class ReductionGraphTooLarge(RuntimeError):
    """Raised when a reduction graph exceeds its node budget."""


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class StrongNormalizationProof:
    """
    Evidence that a term's reductions terminate.

    Attributes:
        term: Signature of the term.
        sizes: term_size along the leftmost trace.
        strictly_decreasing: Every consecutive pair in sizes decreases.
        all_edges_decreasing: Every edge of the reduction graph decreases size.
        normal_form: Signature of the terminal term reached.
        reached_normal_form: Whether that terminal term is a normal form.
        verified: Termination shown along the trace and every graph edge.
    """
    term: str
    sizes: List[int]
    strictly_decreasing: bool
    all_edges_decreasing: bool
    normal_form: str
    reached_normal_form: bool
    verified: bool


@dataclass
class ConfluenceCase:
    """
    Confluence evidence for one term.

    Attributes:
        term: Signature of the term.
        normal_forms: Signatures of every terminal term in the graph.
        local_divergences: Number of (t → t1, t → t2) pairs inspected.
        joinable: Number of those pairs that meet again.
        confluent: Single terminal term and every divergence joinable.
        paths_explored: Distinct maximal reduction sequences from term.
    """
    term: str
    normal_forms: List[str]
    local_divergences: int
    joinable: int
    confluent: bool
    paths_explored: int

    @property
    def normal_form(self) -> Optional[str]:
        return self.normal_forms[0] if len(self.normal_forms) == 1 else None


@dataclass
class ConfluenceReport:
    """test_local_confluence over a battery of terms."""
    all_confluent: bool
    test_cases: List[ConfluenceCase] = field(default_factory=list)


# Terms with several redexes, so the reduction graph actually branches.
CONFLUENCE_BATTERY: List[Term] = [
    FUSE(3, 5, 11),
    CHAIN([2, 3], N(7)),
    CHAIN([2], FUSE(3, 5, 11)),
    SEQ(SENTENCE(FUSE(3, 5, 11)), SENTENCE(CHAIN([2, 3], N(7)))),
    IMPL(SENTENCE(CHAIN([2], FUSE(5, 7, 11))), SENTENCE(FUSE(3, 7, 13))),
    SEQ(
        SEQ(SENTENCE(FUSE(3, 5, 11)), SENTENCE(FUSE(5, 7, 11))),
        SENTENCE(CHAIN([3, 5], FUSE(3, 7, 13))),
    ),
]


# =============================================================================
# REDUCTION GRAPH
# =============================================================================

def build_reduction_graph(
    term: Term,
    reducer: Optional[ReductionSystem] = None,
    max_nodes: int = DEFAULT_MAX_GRAPH_NODES,
) -> nx.DiGraph:
    """
    Every term reachable from term, with one edge per single step.

    Nodes carry ``size`` and ``signature``; edges carry ``rule``.

    Raises:
        ReductionGraphTooLarge: more than max_nodes distinct terms.
    """
    reducer = reducer or ReductionSystem()
    graph = nx.DiGraph()
    graph.add_node(term, size=term_size(term), signature=term.signature())
    queue = deque([term])
    while queue:
        node = queue.popleft()
        for result in reducer.successors(node):
            after = result.after
            if after not in graph:
                if graph.number_of_nodes() >= max_nodes:
                    raise ReductionGraphTooLarge(
                        f"Reduction graph of {term} exceeds {max_nodes} nodes"
                    )
                graph.add_node(after, size=term_size(after), signature=after.signature())
                queue.append(after)
            graph.add_edge(node, after, rule=result.rule.value)
    return graph


def _terminals(graph: nx.DiGraph) -> List[Term]:
    return [n for n in graph.nodes if graph.out_degree(n) == 0]


def _count_paths(graph: nx.DiGraph, root: Term) -> int:
    counts: Dict[Term, int] = {}
    for node in reversed(list(nx.topological_sort(graph))):
        succ = list(graph.successors(node))
        counts[node] = sum(counts[s] for s in succ) if succ else 1
    return counts[root]


# =============================================================================
# STRONG NORMALIZATION
# =============================================================================

def demonstrate_strong_normalization(
    term: Term,
    reducer: Optional[ReductionSystem] = None,
) -> StrongNormalizationProof:
    """
    Normalize term and check that size strictly decreases.

    Stuck terms still terminate; reached_normal_form tells them apart.
    """
    reducer = reducer or ReductionSystem()
    trace = reducer.normalize(term)
    sizes = trace.sizes()
    strictly_decreasing = all(a > b for a, b in zip(sizes, sizes[1:]))

    graph = build_reduction_graph(term, reducer)
    all_edges = all(
        graph.nodes[u]["size"] > graph.nodes[v]["size"] for u, v in graph.edges
    )

    proof = StrongNormalizationProof(
        term=term.signature(),
        sizes=sizes,
        strictly_decreasing=strictly_decreasing,
        all_edges_decreasing=all_edges,
        normal_form=trace.final.signature(),
        reached_normal_form=trace.normalized,
        verified=strictly_decreasing and all_edges and not trace.truncated,
    )
    if not proof.verified:
        logger.warning(f"Strong normalization not demonstrated for {term}: sizes={sizes}")
    return proof


# =============================================================================
# CONFLUENCE
# =============================================================================

def check_confluence(
    term: Term,
    reducer: Optional[ReductionSystem] = None,
) -> ConfluenceCase:
    """Local and global confluence of the reduction graph rooted at term."""
    reducer = reducer or ReductionSystem()
    graph = build_reduction_graph(term, reducer)

    divergences = 0
    joinable = 0
    for node in graph.nodes:
        succ = list(graph.successors(node))
        for left, right in combinations(succ, 2):
            divergences += 1
            reach_left = nx.descendants(graph, left) | {left}
            reach_right = nx.descendants(graph, right) | {right}
            if reach_left & reach_right:
                joinable += 1

    terminals = _terminals(graph)
    case = ConfluenceCase(
        term=term.signature(),
        normal_forms=sorted(t.signature() for t in terminals),
        local_divergences=divergences,
        joinable=joinable,
        confluent=len(terminals) == 1 and joinable == divergences,
        paths_explored=_count_paths(graph, term),
    )
    logger.debug(
        f"Confluence of {term}: {divergences} divergences, "
        f"{len(terminals)} terminal term(s), {case.paths_explored} paths"
    )
    return case


def test_local_confluence(
    terms: Optional[Iterable[Term]] = None,
    reducer: Optional[ReductionSystem] = None,
) -> ConfluenceReport:
    """
    check_confluence over terms (CONFLUENCE_BATTERY by default).

    Returns:
        ConfluenceReport; all_confluent is True when every case is.
    """
    reducer = reducer or ReductionSystem()
    cases = [check_confluence(t, reducer) for t in (terms if terms is not None else CONFLUENCE_BATTERY)]
    report = ConfluenceReport(all_confluent=all(c.confluent for c in cases), test_cases=cases)
    logger.info(
        f"Local confluence: {sum(c.confluent for c in cases)}/{len(cases)} cases confluent"
    )
    return report


# Public API name; not a pytest test.
test_local_confluence.__test__ = False


__all__ = [
    "ReductionGraphTooLarge",
    "StrongNormalizationProof",
    "ConfluenceCase",
    "ConfluenceReport",
    "CONFLUENCE_BATTERY",
    "build_reduction_graph",
    "demonstrate_strong_normalization",
    "check_confluence",
    "test_local_confluence",
]
