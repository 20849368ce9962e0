"""
Deterministic audit gates over the semantics core.

Each gate runs one property across a battery of terms (or primes) and
reports an AuditResult. Gates never raise on a failing term; failures are
recorded on the result and summarized in ``details``.

Gates:
    SN1  every battery term strongly normalizes (size strictly decreases)
    CF1  every battery term is confluent (single terminal term)
    DS1  operational and denotational semantics agree
    LT1  τ(e) evaluates to the same prime as e (round trip through λ)
    FC1  canonical triad selection is deterministic and well-formed
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

import pandas as pd

from aleph.config import SemanticsConfig
from aleph.core.operators import get_operator
from aleph.core.terms import A, CHAIN, FUSE, N, SENTENCE, SEQ, Term
from aleph.evaluation.proofs import (
    CONFLUENCE_BATTERY,
    check_confluence,
    demonstrate_strong_normalization,
)
from aleph.lambda_calculus.evaluator import LambdaEvaluator
from aleph.lambda_calculus.translator import Translator
from aleph.reduction.canonical import FusionCanonicalizer
from aleph.reduction.system import ReductionSystem
from aleph.semantics.denotation import Semantics

logger = logging.getLogger(__name__)

MAX_DETAIL_FAILURES = 5

# Battery terms plus stuck and unsaturated shapes.
DEFAULT_AUDIT_TERMS: List[Term] = CONFLUENCE_BATTERY + [
    N(7),
    FUSE(5, 7, 11),
    CHAIN([2], N(7)),
    CHAIN([2, 3, 5], N(11)),
    CHAIN([7], N(3)),
    A(3),
    SEQ(SENTENCE(CHAIN([7], N(3))), SENTENCE(N(5))),
]

DEFAULT_AUDIT_PRIMES: List[int] = [7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47]


AUDIT_COLUMNS = ["gate_id", "passed", "total", "succeeded", "success_rate", "threshold", "details"]


@dataclass
class AuditResult:
    """
    Outcome of one gate over its battery.

    Only the failure messages are stored. The success count, rate, verdict
    and the truncated ``details`` summary are all derived from them.
    """
    gate_id: str
    total: int
    failures: List[str] = field(default_factory=list)
    threshold: float = 1.0

    @property
    def succeeded(self) -> int:
        return self.total - len(self.failures)

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 1.0

    @property
    def passed(self) -> bool:
        return self.success_rate >= self.threshold

    @property
    def details(self) -> str:
        if not self.failures:
            return ""
        shown = "; ".join(self.failures[:MAX_DETAIL_FAILURES])
        extra = len(self.failures) - MAX_DETAIL_FAILURES
        return f"{shown}; +{extra} more" if extra > 0 else shown

    def to_dict(self) -> Dict[str, object]:
        return {column: getattr(self, column) for column in AUDIT_COLUMNS}


def _result(gate_id: str, total: int, failures: List[str], threshold: float = 1.0) -> AuditResult:
    result = AuditResult(gate_id, total, failures, threshold)
    if not result.passed:
        logger.warning(f"Audit {gate_id} failed: {result.succeeded}/{total} ({result.details})")
    return result


# =============================================================================
# GATES
# =============================================================================

def strong_normalization_gate(
    terms: Sequence[Term],
    reducer: Optional[ReductionSystem] = None,
) -> AuditResult:
    reducer = reducer or ReductionSystem()
    failures = []
    for term in terms:
        proof = demonstrate_strong_normalization(term, reducer)
        if not proof.verified:
            failures.append(f"{term}: sizes {proof.sizes}")
    return _result("SN1", len(terms), failures)


def confluence_gate(
    terms: Sequence[Term],
    reducer: Optional[ReductionSystem] = None,
) -> AuditResult:
    reducer = reducer or ReductionSystem()
    failures = []
    for term in terms:
        case = check_confluence(term, reducer)
        if not case.confluent:
            failures.append(f"{term}: terminals {case.normal_forms}")
    return _result("CF1", len(terms), failures)


def agreement_gate(
    terms: Sequence[Term],
    semantics: Optional[Semantics] = None,
) -> AuditResult:
    semantics = semantics or Semantics()
    failures = []
    for term in terms:
        agreement = semantics.verify_semantic_equivalence(term)
        if not agreement.equivalent:
            failures.append(
                f"{term}: operational={agreement.operational} "
                f"denotational={agreement.denotational}"
            )
    return _result("DS1", len(terms), failures)


def round_trip_gate(
    terms: Sequence[Term],
    translator: Optional[Translator] = None,
    evaluator: Optional[LambdaEvaluator] = None,
    reducer: Optional[ReductionSystem] = None,
) -> AuditResult:
    """
    τ preserves values: eval(τ(e)) = v whenever e →* N(v).

    Terms that get stuck must leave the λ side without a constant value.
    """
    translator = translator or Translator()
    evaluator = evaluator or LambdaEvaluator(translator.operator)
    reducer = reducer or ReductionSystem(translator.operator)
    failures = []
    for term in terms:
        expected = reducer.evaluate(term).prime
        actual = evaluator.evaluate(translator.translate(term)).value
        if expected != actual:
            failures.append(f"{term}: reduction={expected} lambda={actual}")
    return _result("LT1", len(terms), failures)


def canonical_determinism_gate(
    primes: Iterable[int],
    canonicalizer: Optional[FusionCanonicalizer] = None,
) -> AuditResult:
    canonicalizer = canonicalizer or FusionCanonicalizer()
    primes = list(primes)
    failures = []
    for P in primes:
        first = canonicalizer.select_canonical(P)
        second = canonicalizer.select_canonical(P)
        if first != second:
            failures.append(f"P={P}: {first} vs {second}")
        elif first is not None and (
            first.target != P or len(set(first.as_tuple())) != 3
        ):
            failures.append(f"P={P}: malformed {first}")
    return _result("FC1", len(primes), failures)


# =============================================================================
# RUNNER
# =============================================================================

def run_all_audits(
    config: Optional[SemanticsConfig] = None,
    terms: Optional[Sequence[Term]] = None,
    primes: Optional[Iterable[int]] = None,
) -> List[AuditResult]:
    """Run every gate with components built from one config."""
    config = config or SemanticsConfig()
    terms = list(terms) if terms is not None else DEFAULT_AUDIT_TERMS
    primes = list(primes) if primes is not None else DEFAULT_AUDIT_PRIMES

    operator = get_operator(config.operator)
    reducer = ReductionSystem(operator, config)
    results = [
        strong_normalization_gate(terms, reducer),
        confluence_gate(terms, reducer),
        agreement_gate(terms, Semantics(operator, config)),
        round_trip_gate(
            terms,
            Translator(operator, config),
            LambdaEvaluator(operator, config),
            reducer,
        ),
        canonical_determinism_gate(primes, FusionCanonicalizer(config=config)),
    ]
    passed = sum(r.passed for r in results)
    logger.info(f"Audits: {passed}/{len(results)} gates passed ({config.operator})")
    return results


def audits_to_dataframe(results: Sequence[AuditResult]) -> pd.DataFrame:
    return pd.DataFrame([r.to_dict() for r in results], columns=AUDIT_COLUMNS)


__all__ = [
    "AUDIT_COLUMNS",
    "AuditResult",
    "DEFAULT_AUDIT_TERMS",
    "DEFAULT_AUDIT_PRIMES",
    "strong_normalization_gate",
    "confluence_gate",
    "agreement_gate",
    "round_trip_gate",
    "canonical_determinism_gate",
    "run_all_audits",
    "audits_to_dataframe",
]
