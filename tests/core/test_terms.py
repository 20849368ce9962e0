from __future__ import annotations

import pytest

from aleph.core.primes import is_prime, next_prime, primes_up_to
from aleph.core.terms import (
    A,
    CHAIN,
    FUSE,
    IMPL,
    N,
    SENTENCE,
    SEQ,
    Chain,
    MalformedTermError,
    Noun,
    discourse_state,
    noun_value,
    sentences_of,
    term_size,
)


def test_is_prime_rejects_non_integers_and_small_values():
    assert is_prime(2)
    assert is_prime(97)
    assert not is_prime(1)
    assert not is_prime(0)
    assert not is_prime(-7)
    assert not is_prime(91)
    assert not is_prime(True)
    assert not is_prime(7.0)
    assert not is_prime("7")


def test_next_prime_is_strictly_greater():
    assert next_prime(7) == 11
    assert next_prime(8) == 11
    assert next_prime(1) == 2
    assert next_prime(-5) == 2


def test_primes_up_to_returns_python_ints():
    primes = primes_up_to(30)
    assert primes == [2, 3, 5, 7, 11, 13, 17, 19, 23, 29]
    assert all(type(p) is int for p in primes)
    assert primes_up_to(1) == []


def test_noun_requires_prime():
    with pytest.raises(MalformedTermError) as excinfo:
        N(4)
    assert excinfo.value.term_kind == "Noun"
    assert excinfo.value.field == "prime"
    assert excinfo.value.value == 4


def test_fuse_requires_distinct_primes_with_prime_sum():
    assert FUSE(3, 5, 11).fused_prime == 19

    with pytest.raises(MalformedTermError) as dup:
        FUSE(3, 3, 5)
    assert dup.value.field == "primes"

    with pytest.raises(MalformedTermError) as composite:
        FUSE(2, 3, 5)
    assert composite.value.field == "sum"

    with pytest.raises(MalformedTermError):
        FUSE(3, 4, 11)


def test_chain_validates_ops_and_base_level():
    with pytest.raises(MalformedTermError) as bad_op:
        CHAIN([4], N(7))
    assert bad_op.value.field == "ops[0]"

    with pytest.raises(MalformedTermError):
        CHAIN([2], SENTENCE(N(7)))


def test_chain_ordering_is_not_a_construction_check():
    term = CHAIN([7], N(3))
    assert term.ops == (7,)


def test_sentence_forms_require_sentence_operands():
    with pytest.raises(MalformedTermError):
        SENTENCE(A(3))
    with pytest.raises(MalformedTermError) as left:
        SEQ(N(7), SENTENCE(N(11)))
    assert left.value.field == "left"
    with pytest.raises(MalformedTermError) as consequent:
        IMPL(SENTENCE(N(7)), N(11))
    assert consequent.value.field == "consequent"


def test_signatures():
    assert CHAIN([2, 3], N(7)).signature() == "A(2)A(3)N(7)"
    assert str(CHAIN([], N(7))) == "CHAIN([],N(7))"
    assert CHAIN([2], CHAIN([3], N(7))).signature() == "A(2)(A(3)N(7))"
    assert SEQ(SENTENCE(N(7)), SENTENCE(N(11))).signature() == "([N(7)] ∘ [N(11)])"
    assert IMPL(SENTENCE(N(7)), SENTENCE(N(11))).signature() == "([N(7)] ⇒ [N(11)])"


def test_terms_are_hashable_values():
    assert CHAIN([2, 3], N(7)) == Chain((2, 3), Noun(7))
    assert len({N(7), N(7), FUSE(3, 5, 11)}) == 2


def test_term_size():
    assert term_size(N(7)) == 1
    assert term_size(A(3)) == 1
    assert term_size(FUSE(3, 5, 11)) == 4
    assert term_size(CHAIN([2, 3], N(7))) == 3
    assert term_size(CHAIN([2], FUSE(3, 5, 11))) == 5
    assert term_size(SEQ(SENTENCE(N(7)), SENTENCE(N(11)))) == 5


def test_term_size_handles_long_chains():
    ops = [2] * 5000
    assert term_size(CHAIN(ops, N(7))) == 5001


def test_noun_value_looks_through_empty_chains():
    assert noun_value(N(7)) == 7
    assert noun_value(CHAIN([], CHAIN([], N(7)))) == 7
    assert noun_value(CHAIN([2], N(7))) is None
    assert noun_value(FUSE(3, 5, 11)) is None


def test_adj_can_apply_to():
    assert A(3).can_apply_to(N(7))
    assert not A(7).can_apply_to(N(3))
    assert not A(2).can_apply_to(FUSE(3, 5, 11))


def test_discourse_state_orders_sentences():
    discourse = SEQ(
        SEQ(SENTENCE(N(7)), SENTENCE(FUSE(3, 5, 11))),
        SENTENCE(N(13)),
    )
    assert len(sentences_of(discourse)) == 3
    assert discourse_state(discourse) == [7, None, 13]


def _nested(depth, base):
    term = base
    for _ in range(depth):
        term = CHAIN([2], term)
    return term


def test_deeply_nested_terms_render_compare_and_hash():
    term = _nested(1500, N(3))
    twin = _nested(1500, N(3))
    signature = term.signature()
    assert signature.startswith("A(2)(A(2)(")
    assert signature.endswith("A(2)N(3)" + ")" * 1499)
    assert term == twin
    assert hash(term) == hash(twin)
    assert term != _nested(1500, N(5))
    assert len({term, twin, SENTENCE(term)}) == 2
    assert repr(SENTENCE(term)).startswith("Sentence<[A(2)(")


def test_composite_equality_is_structural():
    assert SEQ(SENTENCE(N(7)), SENTENCE(N(11))) == SEQ(SENTENCE(N(7)), SENTENCE(N(11)))
    assert SEQ(SENTENCE(N(7)), SENTENCE(N(11))) != IMPL(SENTENCE(N(7)), SENTENCE(N(11)))
    assert CHAIN([2, 3], N(7)) != CHAIN([2], CHAIN([3], N(7)))
    assert CHAIN([], N(7)) != N(7)
