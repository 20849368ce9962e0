"""
Denotational Semantics: [[·]] from terms straight to values.

    [[N(p)]]               = p
    [[FUSE(p,q,r)]]        = p + q + r
    [[A(p1)...A(pk) e]]    = p1 ⊕ (p2 ⊕ ... (pk ⊕ [[e]]))     each ⊕ applicable
    [[A(p)]]               = a function; no standalone value
    [[ [e] ]]              = [[e]]
    [[S1 ∘ S2]]            = [[S2]]      provided [[S1]] is defined
    [[S1 ⇒ S2]]            = [[S2]]      provided [[S1]] is defined

The evaluator is independent of the ReductionSystem; agreement of the two
(e →* N(v) iff [[e]] = v) is checked per term by verify_semantic_equivalence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from aleph.config import SemanticsConfig
from aleph.core.operators import PrimeOperator, resolve_operator
from aleph.core.terms import Adj, Chain, Fuse, Impl, Noun, Sentence, Seq, Term, sentences_of
from aleph.reduction.system import ReductionSystem

logger = logging.getLogger(__name__)


class ValueKind(Enum):
    PRIME = "prime"
    FUNCTION = "function"
    UNDEFINED = "undefined"


@dataclass(frozen=True)
class Value:
    """
    A denotation.

    Attributes:
        kind: PRIME for defined values, FUNCTION for bare adjectives,
            UNDEFINED when some operator application is not applicable.
        prime: The value when kind is PRIME.
        reason: Why the value is not a prime, if it is not.
        discourse: Primes of the sentences of a discourse, in order.
    """
    kind: ValueKind
    prime: Optional[int] = None
    reason: str = ""
    discourse: Tuple[Optional[int], ...] = ()

    @property
    def value(self) -> Optional[int]:
        return self.prime

    @property
    def is_defined(self) -> bool:
        return self.kind is ValueKind.PRIME

    def __str__(self) -> str:
        if self.is_defined:
            return str(self.prime)
        return f"⊥ ({self.reason})" if self.reason else "⊥"


def _prime(p: int) -> Value:
    return Value(ValueKind.PRIME, p)


def _undefined(reason: str) -> Value:
    return Value(ValueKind.UNDEFINED, None, reason)


@dataclass
class SemanticAgreement:
    """Result of comparing the operational and denotational paths for one term."""
    term: Term
    operational: Optional[int]
    denotational: Optional[int]
    equivalent: bool


class Semantics:
    """
    Direct compositional evaluator.

    Args:
        operator: Operator adjectives denote. Defaults to the configured one.
        config: SemanticsConfig shared with the reduction system used by
            verify_semantic_equivalence.
    """

    def __init__(
        self,
        operator: Optional[PrimeOperator] = None,
        config: Optional[SemanticsConfig] = None,
    ):
        self.config = config or SemanticsConfig()
        self.operator = resolve_operator(operator, self.config)

    def _denote_noun(self, term: Term) -> Value:
        # Collect the adjective layers outermost-first, then apply innermost-first.
        layers: List[Tuple[int, ...]] = []
        node = term
        while isinstance(node, Chain):
            layers.append(node.ops)
            node = node.base

        if isinstance(node, Noun):
            current = node.prime
        elif isinstance(node, Fuse):
            current = node.fused_prime
        else:
            raise TypeError(f"Unhandled term type: {type(node).__name__}")

        for ops in reversed(layers):
            for p in reversed(ops):
                if not self.operator.can_apply(p, current):
                    return _undefined(f"{self.operator.name} not applicable to ({p}, {current})")
                current = self.operator.apply(p, current)
        return _prime(current)

    def denote(self, term: Term) -> Value:
        """Compute [[term]]."""
        if isinstance(term, Adj):
            return Value(ValueKind.FUNCTION, None, f"A({term.prime}) awaits a target")
        if isinstance(term, (Noun, Fuse, Chain)):
            return self._denote_noun(term)
        if isinstance(term, (Sentence, Seq, Impl)):
            values = [self._denote_noun(s.term) for s in sentences_of(term)]
            discourse = tuple(v.prime for v in values)
            for v in values:
                if not v.is_defined:
                    return Value(ValueKind.UNDEFINED, None, v.reason, discourse)
            return Value(ValueKind.PRIME, values[-1].prime, "", discourse)
        raise TypeError(f"Unhandled term type: {type(term).__name__}")

    def equivalent(self, t1: Term, t2: Term) -> bool:
        """[[t1]] = [[t2]], both defined."""
        v1, v2 = self.denote(t1), self.denote(t2)
        return v1.is_defined and v2.is_defined and v1.prime == v2.prime

    def verify_semantic_equivalence(self, term: Term) -> SemanticAgreement:
        """
        Check operational/denotational agreement for one term.

        The operational side runs a ReductionSystem sharing this operator and
        config; a stuck or unsaturated reduction agrees with an undefined
        denotation.
        """
        operational = ReductionSystem(self.operator, self.config).evaluate(term).prime
        denotational = self.denote(term).prime
        agreement = SemanticAgreement(
            term=term,
            operational=operational,
            denotational=denotational,
            equivalent=operational == denotational,
        )
        if not agreement.equivalent:
            logger.warning(
                f"Semantic disagreement on {term}: operational={operational}, "
                f"denotational={denotational}"
            )
        return agreement


__all__ = ["ValueKind", "Value", "SemanticAgreement", "Semantics"]
