"""
Concept Interpreter: rendering terms as pseudo-natural-language phrases.

Each interpreter owns its prime → gloss tables. Tables are seeded from the
read-only defaults in aleph.constants and change only through
add_noun_concept / add_adjective_concept on that instance. Instances never
share tables; concurrent use of one instance must be serialized by the caller.
"""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from aleph.constants import (
    DEFAULT_ADJECTIVE_CONCEPTS,
    DEFAULT_NOUN_CONCEPTS,
    UNKNOWN_CONCEPT_PREFIX,
)
from aleph.core.primes import is_prime
from aleph.core.terms import (
    Adj,
    Chain,
    Fuse,
    Impl,
    MalformedTermError,
    Noun,
    Sentence,
    Seq,
    Term,
)

logger = logging.getLogger(__name__)


class ConceptInterpreter:
    """
    Prime → gloss lookup and phrase rendering.

    Args:
        noun_concepts: Initial noun glosses; defaults to DEFAULT_NOUN_CONCEPTS.
        adjective_concepts: Initial adjective glosses; defaults to
            DEFAULT_ADJECTIVE_CONCEPTS.
    """

    def __init__(
        self,
        noun_concepts: Optional[Mapping[int, str]] = None,
        adjective_concepts: Optional[Mapping[int, str]] = None,
    ):
        self._nouns: Dict[int, str] = dict(
            DEFAULT_NOUN_CONCEPTS if noun_concepts is None else noun_concepts
        )
        self._adjectives: Dict[int, str] = dict(
            DEFAULT_ADJECTIVE_CONCEPTS if adjective_concepts is None else adjective_concepts
        )

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def add_noun_concept(self, prime: int, gloss: str) -> None:
        if not is_prime(prime):
            raise MalformedTermError("NounConcept", "prime", prime, "not a prime number")
        self._nouns[int(prime)] = str(gloss)
        logger.debug(f"Registered noun concept {prime} → {gloss!r}")

    def add_adjective_concept(self, prime: int, gloss: str) -> None:
        if not is_prime(prime):
            raise MalformedTermError("AdjectiveConcept", "prime", prime, "not a prime number")
        self._adjectives[int(prime)] = str(gloss)
        logger.debug(f"Registered adjective concept {prime} → {gloss!r}")

    @property
    def noun_concepts(self) -> Dict[int, str]:
        return dict(self._nouns)

    @property
    def adjective_concepts(self) -> Dict[int, str]:
        return dict(self._adjectives)

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def noun_gloss(self, prime: int) -> str:
        return self._nouns.get(prime, f"{UNKNOWN_CONCEPT_PREFIX}{prime}")

    def adjective_gloss(self, prime: int) -> str:
        """Adjective form, falling back to the noun gloss."""
        if prime in self._adjectives:
            return self._adjectives[prime]
        return self.noun_gloss(prime)

    def interpret_noun(self, term: Noun) -> str:
        if not isinstance(term, Noun):
            raise TypeError(f"interpret_noun expects a Noun, got {type(term).__name__}")
        return self.noun_gloss(term.prime)

    def interpret_adjective(self, term: Adj) -> str:
        if not isinstance(term, Adj):
            raise TypeError(f"interpret_adjective expects an Adj, got {type(term).__name__}")
        return self.adjective_gloss(term.prime)

    def interpret_chain(self, term: Chain) -> str:
        """Adjective glosses left to right, then the base phrase."""
        words = []
        node: Term = term
        while isinstance(node, Chain):
            words.extend(self.adjective_gloss(p) for p in node.ops)
            node = node.base
        words.append(self.interpret(node))
        return " ".join(words)

    def interpret(self, term: Term) -> str:
        """Phrase for any term."""
        if isinstance(term, Noun):
            return self.interpret_noun(term)
        if isinstance(term, Adj):
            return self.interpret_adjective(term)
        if isinstance(term, Chain):
            return self.interpret_chain(term)
        if isinstance(term, Fuse):
            a, b, c = (self.noun_gloss(p) for p in (term.p, term.q, term.r))
            return f"fusion of {a}, {b} and {c}"
        if isinstance(term, Sentence):
            return self.interpret(term.term)
        if isinstance(term, Seq):
            return f"{self.interpret(term.left)}; then {self.interpret(term.right)}"
        if isinstance(term, Impl):
            return f"if {self.interpret(term.antecedent)} then {self.interpret(term.consequent)}"
        raise TypeError(f"Unhandled term type: {type(term).__name__}")


__all__ = ["ConceptInterpreter"]
