"""
Normal Form Verification (NF_ok).

NF_ok(e, v) holds when e →* N(v). A false claim is an ordinary outcome:
verify() returns False and certificate() records the mismatch; neither
raises for a well-formed term.
"""

from __future__ import annotations

import numbers
from dataclasses import dataclass, asdict
from typing import Dict, Optional, Union

from aleph.core.terms import Term, noun_value
from aleph.reduction.system import ReductionSystem, normal_form_prime

Claim = Union[int, Term]


@dataclass
class VerificationCertificate:
    """
    Auditable record of one NF_ok check.

    Attributes:
        term: Signature of the checked term.
        claimed: The claim as given (prime or term signature).
        actual: Signature of the normal form actually reached.
        actual_prime: Prime of that normal form, None when stuck.
        verified: Whether the claim holds.
        steps: Reduction steps taken.
        trace_length: Terms in the trace, initial and final included.
        outcome: Name of the terminal reduction outcome.
    """
    term: str
    claimed: str
    actual: str
    actual_prime: Optional[int]
    verified: bool
    steps: int
    trace_length: int
    outcome: str

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def _claimed_prime(claimed: Claim) -> Optional[int]:
    if isinstance(claimed, bool):
        return None
    if isinstance(claimed, numbers.Integral):
        return int(claimed)
    if isinstance(claimed, Term):
        value = noun_value(claimed)
        return value if value is not None else normal_form_prime(claimed)
    return None


def _claim_label(claimed: Claim) -> str:
    if isinstance(claimed, Term):
        return claimed.signature()
    return str(claimed)


class NormalFormVerifier:
    """
    Checks normal-form claims against the reduction system.

    Args:
        reducer: ReductionSystem to evaluate with; a default one otherwise.
    """

    def __init__(self, reducer: Optional[ReductionSystem] = None):
        self.reducer = reducer or ReductionSystem()

    def verify(self, term: Term, claimed: Claim) -> bool:
        """NF_ok(term, claimed): claimed is a prime or a normal-form noun."""
        expected = _claimed_prime(claimed)
        if expected is None:
            return False
        actual = self.reducer.evaluate(term).prime
        return actual is not None and actual == expected

    def certificate(self, term: Term, claimed: Claim) -> VerificationCertificate:
        """verify() plus the trace summary that justifies the verdict."""
        trace = self.reducer.normalize(term)
        actual_prime = normal_form_prime(trace.final) if trace.normalized else None
        expected = _claimed_prime(claimed)
        verified = expected is not None and actual_prime is not None and actual_prime == expected
        if trace.truncated:
            outcome = "truncated"
        else:
            outcome = trace.outcome.value
        return VerificationCertificate(
            term=term.signature(),
            claimed=_claim_label(claimed),
            actual=trace.final.signature(),
            actual_prime=actual_prime,
            verified=verified,
            steps=len(trace.steps),
            trace_length=len(trace.steps) + 1,
            outcome=outcome,
        )


__all__ = ["VerificationCertificate", "NormalFormVerifier"]
