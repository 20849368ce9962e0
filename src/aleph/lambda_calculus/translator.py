"""
Translation τ: Term → λ-expression.

τ is a homomorphism over the term constructors:

    τ(N(p))              = p
    τ(FUSE(p,q,r))       = p+q+r
    τ(A(p))              = λx.(p ⊕ x)
    τ(A(p1)...A(pk) e)   = (τ(A(p1)) (τ(A(p2)) ... (τ(A(pk)) τ(e))))
    τ([e])               = τ(e)
    τ(S1 ∘ S2)           = ((λa.λb.(a ∘ b)) τ(S1)) τ(S2)
    τ(S1 ⇒ S2)           = ((λa.λb.(a ⇒ b)) τ(S1)) τ(S2)

Bound variables are drawn fresh per translate() call (x0, x1, ...), so no
translated expression ever needs alpha-renaming during evaluation.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from aleph.config import SemanticsConfig
from aleph.constants import PRIM_IMPL, PRIM_SEQ
from aleph.core.operators import PrimeOperator, resolve_operator
from aleph.core.terms import Adj, Chain, Fuse, Impl, Noun, Sentence, Seq, Term
from aleph.lambda_calculus.expr import (
    App,
    Const,
    Lam,
    LambdaExpr,
    Prim,
    Var,
    expr_size,
    fresh_names,
)

logger = logging.getLogger(__name__)


class Translator:
    """
    Compositional translator from terms to lambda expressions.

    Args:
        operator: Operator named by adjective primitives.
        config: SemanticsConfig used when operator is not given.
    """

    def __init__(
        self,
        operator: Optional[PrimeOperator] = None,
        config: Optional[SemanticsConfig] = None,
    ):
        self.operator = resolve_operator(operator, config)

    def translate(self, term: Term) -> LambdaExpr:
        names = fresh_names("x")
        expr = self._translate(term, names)
        logger.debug(f"Translated {type(term).__name__} into {expr_size(expr)} lambda nodes")
        return expr

    def translate_adjective(self, prime: int, names: Iterator[str]) -> Lam:
        x = next(names)
        return Lam(x, Prim(self.operator.name, (Const(prime), Var(x))))

    def _combinator(self, op: str, names: Iterator[str]) -> Lam:
        a, b = next(names), next(names)
        return Lam(a, Lam(b, Prim(op, (Var(a), Var(b)))))

    def _translate(self, term: Term, names: Iterator[str]) -> LambdaExpr:
        # Peel sentence wrappers and chains iteratively, then rebuild.
        chains: List[Chain] = []
        node = term
        while isinstance(node, (Sentence, Chain)):
            if isinstance(node, Sentence):
                node = node.term
            else:
                chains.append(node)
                node = node.base

        if isinstance(node, Noun):
            expr: LambdaExpr = Const(node.prime)
        elif isinstance(node, Fuse):
            expr = Const(node.fused_prime)
        elif isinstance(node, Adj):
            expr = self.translate_adjective(node.prime, names)
        elif isinstance(node, Seq):
            expr = App(
                App(self._combinator(PRIM_SEQ, names), self._translate(node.left, names)),
                self._translate(node.right, names),
            )
        elif isinstance(node, Impl):
            expr = App(
                App(self._combinator(PRIM_IMPL, names), self._translate(node.antecedent, names)),
                self._translate(node.consequent, names),
            )
        else:
            raise TypeError(f"Unhandled term type: {type(node).__name__}")

        for chain in reversed(chains):
            for p in reversed(chain.ops):
                expr = App(self.translate_adjective(p, names), expr)
        return expr


def tau(term: Term, operator: Optional[PrimeOperator] = None) -> LambdaExpr:
    """τ with a throwaway Translator."""
    return Translator(operator).translate(term)


__all__ = ["Translator", "tau"]
