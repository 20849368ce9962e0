from __future__ import annotations

import pytest

from aleph.constants import DEFAULT_NOUN_CONCEPTS
from aleph.core.terms import A, CHAIN, FUSE, IMPL, N, SENTENCE, SEQ, MalformedTermError
from aleph.semantics.concepts import ConceptInterpreter


def test_interpret_basic_terms():
    interpreter = ConceptInterpreter()
    assert interpreter.interpret(N(7)) == "truth"
    assert interpreter.interpret(A(3)) == "triple"
    assert interpreter.interpret(CHAIN([2, 3], N(7))) == "dual triple truth"
    assert interpreter.interpret(FUSE(3, 5, 11)) == "fusion of structure, change and light"


def test_interpret_sentence_forms():
    interpreter = ConceptInterpreter()
    assert interpreter.interpret(SENTENCE(N(7))) == "truth"
    assert interpreter.interpret(SEQ(SENTENCE(N(7)), SENTENCE(N(11)))) == "truth; then light"
    assert interpreter.interpret(IMPL(SENTENCE(N(7)), SENTENCE(N(11)))) == "if truth then light"


def test_unknown_primes_fall_back():
    interpreter = ConceptInterpreter()
    assert interpreter.noun_gloss(53) == "prime-53"
    # no adjective form registered for 29
    assert interpreter.adjective_gloss(29) == "creation"
    assert interpreter.adjective_gloss(53) == "prime-53"


def test_registration_is_per_instance():
    first = ConceptInterpreter()
    second = ConceptInterpreter()
    first.add_noun_concept(53, "horizon")
    first.add_adjective_concept(7, "certain")
    assert first.interpret(CHAIN([7], N(53))) == "certain horizon"
    assert second.noun_gloss(53) == "prime-53"
    assert second.adjective_gloss(7) == "true"
    assert 53 not in DEFAULT_NOUN_CONCEPTS


def test_registration_requires_primes():
    interpreter = ConceptInterpreter()
    with pytest.raises(MalformedTermError):
        interpreter.add_noun_concept(4, "square")
    with pytest.raises(MalformedTermError):
        interpreter.add_adjective_concept(9, "odd")


def test_custom_tables():
    interpreter = ConceptInterpreter(noun_concepts={7: "seven"}, adjective_concepts={})
    assert interpreter.interpret(CHAIN([2], N(7))) == "prime-2 seven"
    tables = interpreter.noun_concepts
    tables[11] = "mutated"
    assert interpreter.noun_gloss(11) == "prime-11"


def test_typed_lookups_reject_other_terms():
    interpreter = ConceptInterpreter()
    with pytest.raises(TypeError, match="Fuse"):
        interpreter.interpret_noun(FUSE(3, 5, 11))
    with pytest.raises(TypeError, match="Noun"):
        interpreter.interpret_adjective(N(7))
    assert interpreter.interpret_noun(N(7)) == "truth"
    assert interpreter.interpret_adjective(A(3)) == "triple"


def test_interpret_deeply_nested_chain():
    term = N(3)
    for _ in range(1500):
        term = CHAIN([2], term)
    words = ConceptInterpreter().interpret(term).split()
    assert len(words) == 1501
    assert set(words[:-1]) == {"dual"}
    assert words[-1] == "structure"
