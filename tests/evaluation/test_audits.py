from __future__ import annotations

import pandas as pd

from aleph.config import SemanticsConfig
from aleph.core.terms import CHAIN, N
from aleph.evaluation.audits import (
    AUDIT_COLUMNS,
    AuditResult,
    DEFAULT_AUDIT_TERMS,
    agreement_gate,
    audits_to_dataframe,
    canonical_determinism_gate,
    round_trip_gate,
    run_all_audits,
    strong_normalization_gate,
)


def test_all_gates_pass_for_resonance():
    results = run_all_audits()
    assert [r.gate_id for r in results] == ["SN1", "CF1", "DS1", "LT1", "FC1"]
    assert all(r.passed for r in results), [r.details for r in results if not r.passed]


def test_all_gates_pass_for_next_prime():
    results = run_all_audits(SemanticsConfig.for_next_prime())
    assert all(r.passed for r in results)


def test_gate_counts():
    result = strong_normalization_gate(DEFAULT_AUDIT_TERMS)
    assert result.total == len(DEFAULT_AUDIT_TERMS)
    assert result.succeeded == result.total
    assert result.success_rate == 1.0
    assert result.details == ""


def test_round_trip_gate_accepts_stuck_terms():
    result = round_trip_gate([CHAIN([7], N(3)), N(7)])
    assert result.passed
    assert agreement_gate([CHAIN([7], N(3))]).passed


def test_canonical_gate_tolerates_primes_without_triads():
    result = canonical_determinism_gate([7, 9, 23])
    assert result.passed
    assert result.total == 3


def test_success_rate_of_empty_gate():
    empty = AuditResult("X", 0)
    assert empty.success_rate == 1.0
    assert empty.passed
    assert AuditResult("X", 4, ["a"]).success_rate == 0.75


def test_verdict_and_counts_derive_from_failures():
    result = AuditResult("X", 4, ["a"], threshold=0.75)
    assert result.succeeded == 3
    assert result.passed
    assert not AuditResult("X", 4, ["a", "b"], threshold=0.75).passed


def test_details_truncate_long_failure_lists():
    result = AuditResult("X", 10, [f"t{i}" for i in range(7)])
    assert result.details == "t0; t1; t2; t3; t4; +2 more"
    assert result.failures[-1] == "t6"


def test_to_dict_matches_dataframe_columns():
    row = AuditResult("SN1", 2, ["N(7): sizes [1]"]).to_dict()
    assert list(row) == AUDIT_COLUMNS
    assert row["passed"] is False
    assert row["succeeded"] == 1
    assert row["details"] == "N(7): sizes [1]"


def test_audits_to_dataframe():
    df = audits_to_dataframe(run_all_audits())
    assert isinstance(df, pd.DataFrame)
    assert df.shape == (5, 7)
    assert df["passed"].all()
