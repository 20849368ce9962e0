from __future__ import annotations

from aleph.core.terms import A, CHAIN, FUSE, IMPL, N, SENTENCE, SEQ
from aleph.core.type_system import TermType, TypeChecker


def test_infer_type():
    checker = TypeChecker()
    assert checker.infer_type(N(7)) is TermType.NOUN
    assert checker.infer_type(FUSE(3, 5, 11)) is TermType.NOUN
    assert checker.infer_type(CHAIN([2], N(7))) is TermType.NOUN
    assert checker.infer_type(A(3)) is TermType.ADJECTIVE
    assert checker.infer_type(SENTENCE(N(7))) is TermType.SENTENCE
    assert checker.infer_type(IMPL(SENTENCE(N(7)), SENTENCE(N(11)))) is TermType.SENTENCE


def test_chain_derivation_records_ordering_conditions():
    checker = TypeChecker()
    judgment = checker.derive(CHAIN([2, 3], N(7)))
    assert judgment.is_valid()
    assert "2 < 7" in judgment.side_conditions
    assert "3 < 7" in judgment.side_conditions
    assert len(judgment.premises) == 3


def test_chain_with_large_operator_fails_check():
    checker = TypeChecker()
    judgment = checker.derive(CHAIN([11], N(7)))
    assert not judgment.is_valid()
    assert judgment.failed_conditions == ["11 < 7"]
    assert not checker.check(SENTENCE(CHAIN([11], N(7))))


def test_ordering_over_fusion_is_deferred():
    assert TypeChecker().check(CHAIN([23], FUSE(3, 5, 11)))


def test_judgment_string():
    checker = TypeChecker()
    assert str(checker.derive(N(7))) == "⊢ N(7) : N"
    discourse = checker.derive(SEQ(SENTENCE(N(7)), SENTENCE(N(11))))
    assert str(discourse) == "⊢ ([N(7)] ∘ [N(11)]) : S"
    assert [p.term_type for p in discourse.premises] == [TermType.SENTENCE, TermType.SENTENCE]


def test_derivation_of_deeply_nested_chain():
    term = N(3)
    for _ in range(1500):
        term = CHAIN([2], term)
    judgment = TypeChecker().derive(term)
    assert judgment.is_valid()
    assert [p.term_type for p in judgment.premises] == [TermType.NOUN, TermType.ADJECTIVE]
    assert not TypeChecker().check(CHAIN([2], CHAIN([7], N(3))))
