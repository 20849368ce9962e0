from __future__ import annotations

import pytest

from aleph.core.operators import get_operator
from aleph.core.terms import CHAIN, FUSE, IMPL, N, SENTENCE, SEQ
from aleph.lambda_calculus.evaluator import LambdaEvaluator
from aleph.lambda_calculus.translator import Translator
from aleph.reduction.system import ReductionSystem
from aleph.semantics.denotation import Semantics

# (term, resonance value, next_prime value); None means the term gets stuck.
NESTED_TERMS = [
    (CHAIN([2], CHAIN([3], N(7))), 13, 17),
    (CHAIN([2], CHAIN([3, 5], FUSE(3, 5, 11))), 31, 41),
    (CHAIN([], CHAIN([2], N(7))), 11, 11),
    (CHAIN([2], CHAIN([], CHAIN([3], N(7)))), 13, 17),
    (CHAIN([2, 3], CHAIN([5], N(11))), 29, 29),
    (
        SEQ(
            SENTENCE(CHAIN([2], CHAIN([3], N(7)))),
            SENTENCE(CHAIN([5], CHAIN([7], FUSE(5, 7, 11)))),
        ),
        37,
        37,
    ),
    (
        IMPL(
            SENTENCE(CHAIN([3], CHAIN([2], N(5)))),
            SEQ(SENTENCE(N(7)), SENTENCE(CHAIN([2], CHAIN([3], FUSE(3, 7, 13))))),
        ),
        31,
        37,
    ),
    (CHAIN([13], CHAIN([2], N(7))), None, None),
    (SEQ(SENTENCE(CHAIN([13], CHAIN([2], N(7)))), SENTENCE(N(5))), None, None),
]


def _three_ways(term, operator_name):
    operator = get_operator(operator_name)
    reduced = ReductionSystem(operator).evaluate(term).prime
    denoted = Semantics(operator).denote(term).prime
    expr = Translator(operator).translate(term)
    lam = LambdaEvaluator(operator).evaluate(expr).value
    return reduced, denoted, lam


@pytest.mark.parametrize("term,resonance,next_prime", NESTED_TERMS)
def test_nested_terms_agree_under_resonance(term, resonance, next_prime):
    assert _three_ways(term, "resonance") == (resonance, resonance, resonance)


@pytest.mark.parametrize("term,resonance,next_prime", NESTED_TERMS)
def test_nested_terms_agree_under_next_prime(term, resonance, next_prime):
    assert _three_ways(term, "next_prime") == (next_prime, next_prime, next_prime)


@pytest.mark.parametrize("term", [t for t, _, _ in NESTED_TERMS])
def test_semantic_equivalence_check_over_nested_terms(term):
    assert Semantics().verify_semantic_equivalence(term).equivalent
