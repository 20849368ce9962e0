"""
Type System: static typing judgments for terms.

Types:
    N  - noun (a prime-valued expression)
    A  - adjective (N → N, awaiting a target)
    S  - sentence

Typing rules:
    ⊢ N(p) : N                      p prime
    ⊢ A(p) : A                      p prime
    ⊢ FUSE(p,q,r) : N               p,q,r distinct primes, p+q+r prime
    ⊢ A(p1)...A(pk) e : N           ⊢ e : N, and pi < prime(e) when e = N(q)
    ⊢ [e] : S                       ⊢ e : N
    ⊢ S1 ∘ S2 : S, ⊢ S1 ⇒ S2 : S    ⊢ S1 : S, ⊢ S2 : S

The ordering premise is only decidable statically when the chain base is a
literal noun; otherwise it is left to the reduction system, which reports an
inapplicable operator at the step where it happens.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from aleph.core.terms import (
    Adj,
    Chain,
    Fuse,
    Impl,
    Noun,
    Sentence,
    Seq,
    Term,
    children,
    noun_value,
)


class TermType(Enum):
    """The three syntactic categories."""
    NOUN = "N"
    ADJECTIVE = "A"
    SENTENCE = "S"


@dataclass
class TypingJudgment:
    """A derivation node: ⊢ term : type, justified by premises."""
    term: Term
    term_type: TermType
    premises: List["TypingJudgment"] = field(default_factory=list)
    side_conditions: List[str] = field(default_factory=list)
    failed_conditions: List[str] = field(default_factory=list)

    def is_valid(self) -> bool:
        """True when this node and every premise hold."""
        pending: List[TypingJudgment] = [self]
        while pending:
            node = pending.pop()
            if node.failed_conditions:
                return False
            pending.extend(node.premises)
        return True

    def __str__(self) -> str:
        return f"⊢ {self.term.signature()} : {self.term_type.value}"


class TypeChecker:
    """Infers types and builds typing derivations."""

    def infer_type(self, term: Term) -> TermType:
        if isinstance(term, Adj):
            return TermType.ADJECTIVE
        if isinstance(term, (Noun, Fuse, Chain)):
            return TermType.NOUN
        if isinstance(term, (Sentence, Seq, Impl)):
            return TermType.SENTENCE
        raise TypeError(f"Unhandled term type: {type(term).__name__}")

    def check(self, term: Term) -> bool:
        return self.derive(term).is_valid()

    def derive(self, term: Term) -> TypingJudgment:
        """
        Build the full typing derivation for term.

        Premises are listed subterms first (left to right), then a chain's
        adjectives. The derivation is built with an explicit stack.
        """
        root = self._judge(term)
        pending: List[TypingJudgment] = [root]
        while pending:
            judgment = pending.pop()
            node = judgment.term
            for child in children(node):
                premise = self._judge(child)
                judgment.premises.append(premise)
                pending.append(premise)
            if isinstance(node, Chain):
                judgment.premises.extend(self._judge(Adj(p)) for p in node.ops)
                self._check_ordering(node, judgment)
        return root

    def _judge(self, term: Term) -> TypingJudgment:
        """Judgment for term alone, with its local side conditions."""
        judgment = TypingJudgment(term, self.infer_type(term))
        if isinstance(term, (Noun, Adj)):
            judgment.side_conditions.append(f"{term.prime} is prime")
        elif isinstance(term, Fuse):
            judgment.side_conditions.append(f"{term.p}, {term.q}, {term.r} distinct primes")
            judgment.side_conditions.append(f"{term.fused_prime} is prime")
        return judgment

    def _check_ordering(self, chain: Chain, judgment: TypingJudgment) -> None:
        base_prime: Optional[int] = noun_value(chain.base)
        if base_prime is None:
            return
        for p in chain.ops:
            condition = f"{p} < {base_prime}"
            if p < base_prime:
                judgment.side_conditions.append(condition)
            else:
                judgment.failed_conditions.append(condition)


__all__ = ["TermType", "TypingJudgment", "TypeChecker"]
