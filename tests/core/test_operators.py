from __future__ import annotations

import pytest

from aleph.config import SemanticsConfig
from aleph.core.operators import (
    NextPrimeOperator,
    OperatorNotApplicableError,
    ResonancePrimeOperator,
    UnknownOperatorError,
    get_operator,
    list_operators,
    resolve_operator,
)
from aleph.core.primes import is_prime, primes_up_to


def test_resonance_values():
    op = ResonancePrimeOperator()
    assert op.resonance(3, 7) == 2
    assert op.apply(3, 7) == 11
    assert op.apply(2, 11) == 13
    assert op.apply(5, 11) == 17


def test_next_prime_values():
    op = NextPrimeOperator()
    assert op.apply(3, 7) == 11
    assert op.apply(2, 11) == 17


def test_apply_rejects_inapplicable_pairs():
    op = ResonancePrimeOperator()
    assert not op.can_apply(7, 3)
    assert not op.can_apply(7, 7)
    assert not op.can_apply(4, 7)
    with pytest.raises(OperatorNotApplicableError) as excinfo:
        op.apply(7, 3)
    assert excinfo.value.p == 7
    assert excinfo.value.q == 3


@pytest.mark.parametrize("name", ["resonance", "next_prime"])
def test_results_are_prime_and_exceed_target(name):
    op = get_operator(name)
    primes = primes_up_to(60)
    for p in primes:
        for q in primes:
            if p < q:
                result = op.apply(p, q)
                assert is_prime(result)
                assert result > q


def test_registry_lookup():
    assert list_operators() == ["next_prime", "resonance"]
    assert get_operator("next-prime") == NextPrimeOperator()
    assert get_operator(" Resonance ") == ResonancePrimeOperator()
    with pytest.raises(UnknownOperatorError):
        get_operator("bogus")


def test_resolve_operator_precedence():
    explicit = NextPrimeOperator()
    assert resolve_operator(explicit, SemanticsConfig()) is explicit
    assert resolve_operator(None, SemanticsConfig.for_next_prime()) == NextPrimeOperator()
    assert resolve_operator(None) == ResonancePrimeOperator()
