from __future__ import annotations

import pytest

from aleph.core.operators import NextPrimeOperator
from aleph.core.terms import A, CHAIN, FUSE, N, SENTENCE, SEQ
from aleph.evaluation.proofs import (
    CONFLUENCE_BATTERY,
    ReductionGraphTooLarge,
    build_reduction_graph,
    check_confluence,
    demonstrate_strong_normalization,
    test_local_confluence as run_local_confluence,
)
from aleph.reduction.system import ReductionSystem


def test_strong_normalization_for_fusion():
    proof = demonstrate_strong_normalization(FUSE(3, 5, 11))
    assert proof.sizes == [4, 1]
    assert proof.strictly_decreasing
    assert proof.all_edges_decreasing
    assert proof.normal_form == "N(19)"
    assert proof.reached_normal_form
    assert proof.verified


def test_strong_normalization_for_stuck_term():
    proof = demonstrate_strong_normalization(CHAIN([7, 2], N(3)))
    assert proof.verified
    assert not proof.reached_normal_form
    assert proof.sizes == [3, 2]


@pytest.mark.parametrize("term", CONFLUENCE_BATTERY, ids=str)
def test_battery_strongly_normalizes(term):
    assert demonstrate_strong_normalization(term).verified


def test_reduction_graph_shape():
    term = SEQ(SENTENCE(FUSE(3, 5, 11)), SENTENCE(CHAIN([2, 3], N(7))))
    graph = build_reduction_graph(term)
    assert graph.number_of_nodes() == 6
    assert graph.out_degree(term) == 2
    assert graph.nodes[term]["size"] == 10
    assert {d["rule"] for _, _, d in graph.edges(data=True)} == {"fusion", "operator"}


def test_reduction_graph_node_budget():
    term = SEQ(SENTENCE(FUSE(3, 5, 11)), SENTENCE(CHAIN([2, 3], N(7))))
    with pytest.raises(ReductionGraphTooLarge):
        build_reduction_graph(term, max_nodes=3)


def test_check_confluence_counts_divergences():
    term = SEQ(SENTENCE(FUSE(3, 5, 11)), SENTENCE(CHAIN([2, 3], N(7))))
    case = check_confluence(term)
    assert case.confluent
    assert case.local_divergences == 2
    assert case.joinable == 2
    assert case.paths_explored == 3
    assert case.normal_forms == ["([N(19)] ∘ [N(13)])"]
    assert case.normal_form == "([N(19)] ∘ [N(13)])"


def test_linear_reduction_has_no_divergence():
    case = check_confluence(CHAIN([2, 3], N(7)))
    assert case.local_divergences == 0
    assert case.paths_explored == 1
    assert case.confluent


def test_stuck_and_unsaturated_terms_are_trivially_confluent():
    assert check_confluence(CHAIN([7], N(3))).confluent
    assert check_confluence(A(3)).normal_forms == ["A(3)"]


def test_local_confluence_report():
    report = run_local_confluence()
    assert report.all_confluent
    assert len(report.test_cases) == len(CONFLUENCE_BATTERY)
    assert all(case.normal_form is not None for case in report.test_cases)


def test_local_confluence_with_next_prime():
    report = run_local_confluence(reducer=ReductionSystem(NextPrimeOperator()))
    assert report.all_confluent


def test_local_confluence_custom_terms():
    report = run_local_confluence([N(7), FUSE(5, 7, 11)])
    assert [c.term for c in report.test_cases] == ["N(7)", "FUSE(5,7,11)"]


def test_reduction_graph_of_deeply_nested_chain():
    term = N(3)
    for _ in range(1500):
        term = CHAIN([2], term)
    graph = build_reduction_graph(term)
    assert graph.number_of_nodes() == 1501
    assert graph.nodes[term]["size"] == 1501
    case = check_confluence(term)
    assert case.confluent
    assert case.local_divergences == 0
    assert case.paths_explored == 1


def test_nested_chain_over_fusion_is_locally_confluent():
    term = SEQ(
        SENTENCE(CHAIN([2], CHAIN([3], FUSE(3, 5, 11)))),
        SENTENCE(FUSE(3, 7, 13)),
    )
    case = check_confluence(term)
    assert case.confluent
    assert case.local_divergences > 0
    assert demonstrate_strong_normalization(CHAIN([2], CHAIN([3], N(7)))).verified
