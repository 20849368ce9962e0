"""
Lambda Evaluator: normal-order reduction of λ-expressions.

Two reduction rules:
    beta   (λx.e) a        → e[x := a]
    delta  op(c1, ..., cn) → c             all arguments constants, op applicable

The leftmost-outermost redex is contracted first (call-by-name), and
reduction continues under binders until no redex remains. A primitive whose
operator rejects its constant arguments (p >= q) is left in place; the
result is then reported as stuck rather than raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from aleph.config import SemanticsConfig
from aleph.constants import SENTENCE_PRIMITIVES
from aleph.core.operators import PrimeOperator, get_operator, resolve_operator
from aleph.lambda_calculus.expr import (
    App,
    Const,
    Lam,
    LambdaExpr,
    Prim,
    subexpressions,
    substitute,
)

logger = logging.getLogger(__name__)

RULE_BETA = "beta"
RULE_DELTA = "delta"


@dataclass
class LambdaStep:
    """One contraction: the rule used and the expression it produced."""
    rule: str
    expr: LambdaExpr


@dataclass
class LambdaResult:
    """
    Outcome of evaluating a λ-expression.

    Attributes:
        result: Expression reached when reduction stopped.
        steps: Number of beta/delta contractions performed.
        truncated: True when the step ceiling stopped reduction.
        stuck: True when an inapplicable primitive remains.
        trace: Intermediate expressions (only when requested).
    """
    result: LambdaExpr
    steps: int
    truncated: bool = False
    stuck: bool = False
    trace: List[LambdaStep] = field(default_factory=list)

    @property
    def value(self) -> Optional[int]:
        """The integer result when reduction ended in a constant."""
        if isinstance(self.result, Const) and not self.truncated:
            return self.result.value
        return None

    @property
    def normal_form(self) -> LambdaExpr:
        return self.result


def _rebuild(parent: LambdaExpr, index: int, child: LambdaExpr) -> LambdaExpr:
    if isinstance(parent, Lam):
        return Lam(parent.param, child)
    if isinstance(parent, App):
        return App(child, parent.arg) if index == 0 else App(parent.fn, child)
    if isinstance(parent, Prim):
        args = list(parent.args)
        args[index] = child
        return Prim(parent.op, tuple(args))
    raise TypeError(f"Expression type {type(parent).__name__} has no subexpressions")


def _replace_at(expr: LambdaExpr, path: Tuple[int, ...], replacement: LambdaExpr) -> LambdaExpr:
    ancestors = []
    node = expr
    for idx in path:
        ancestors.append((node, idx))
        node = subexpressions(node)[idx]
    new = replacement
    for parent, idx in reversed(ancestors):
        new = _rebuild(parent, idx, new)
    return new


class LambdaEvaluator:
    """
    Normal-order evaluator with step counting.

    Args:
        operator: Operator used for primitives named after it; other registry
            names are resolved on demand.
        config: SemanticsConfig supplying max_lambda_steps.
    """

    def __init__(
        self,
        operator: Optional[PrimeOperator] = None,
        config: Optional[SemanticsConfig] = None,
    ):
        self.config = config or SemanticsConfig()
        self.operator = resolve_operator(operator, self.config)

    def _operator_for(self, name: str) -> PrimeOperator:
        if name == self.operator.name:
            return self.operator
        return get_operator(name)

    def _delta_ready(self, prim: Prim) -> bool:
        return all(isinstance(a, Const) for a in prim.args)

    def _delta_applicable(self, prim: Prim) -> bool:
        if prim.op in SENTENCE_PRIMITIVES:
            return len(prim.args) == 2
        if len(prim.args) != 2:
            return False
        p, q = (a.value for a in prim.args)
        return self._operator_for(prim.op).can_apply(p, q)

    def _delta(self, prim: Prim) -> Const:
        if prim.op in SENTENCE_PRIMITIVES:
            return prim.args[1]
        p, q = (a.value for a in prim.args)
        return Const(self._operator_for(prim.op).apply(p, q))

    def _find_redex(self, expr: LambdaExpr) -> Tuple[Optional[Tuple[Tuple[int, ...], str]], bool]:
        """Leftmost-outermost redex path and rule, plus whether a stuck primitive was seen."""
        stuck = False
        stack: List[Tuple[Tuple[int, ...], LambdaExpr]] = [((), expr)]
        while stack:
            path, node = stack.pop()
            if isinstance(node, App) and isinstance(node.fn, Lam):
                return (path, RULE_BETA), stuck
            if isinstance(node, Prim) and self._delta_ready(node):
                if self._delta_applicable(node):
                    return (path, RULE_DELTA), stuck
                stuck = True
                continue
            subs = subexpressions(node)
            for idx in reversed(range(len(subs))):
                stack.append((path + (idx,), subs[idx]))
        return None, stuck

    def _contract(self, expr: LambdaExpr, path: Tuple[int, ...], rule: str) -> LambdaExpr:
        node = expr
        for idx in path:
            node = subexpressions(node)[idx]
        if rule == RULE_BETA:
            replacement = substitute(node.fn.body, node.fn.param, node.arg)
        else:
            replacement = self._delta(node)
        return _replace_at(expr, path, replacement)

    def evaluate(
        self,
        expr: LambdaExpr,
        max_steps: Optional[int] = None,
        record: bool = False,
    ) -> LambdaResult:
        """
        Reduce expr until no redex remains or the step ceiling is reached.

        Args:
            expr: Expression to evaluate.
            max_steps: Overrides config.max_lambda_steps.
            record: Keep every intermediate expression in the result trace.

        Returns:
            LambdaResult with the final expression and step count.
        """
        limit = max_steps if max_steps is not None else self.config.max_lambda_steps
        current = expr
        steps = 0
        trace: List[LambdaStep] = []
        while True:
            found, stuck = self._find_redex(current)
            if found is None:
                if stuck:
                    logger.info("Lambda evaluation stopped at an inapplicable primitive")
                return LambdaResult(current, steps, stuck=stuck, trace=trace)
            if steps >= limit:
                logger.warning(f"Lambda evaluation truncated after {limit} steps")
                return LambdaResult(current, steps, truncated=True, stuck=stuck, trace=trace)
            path, rule = found
            current = self._contract(current, path, rule)
            steps += 1
            if record:
                trace.append(LambdaStep(rule, current))

    def reduce_with_trace(self, expr: LambdaExpr, max_steps: Optional[int] = None) -> LambdaResult:
        """evaluate() keeping every intermediate expression."""
        return self.evaluate(expr, max_steps=max_steps, record=True)


__all__ = [
    "RULE_BETA",
    "RULE_DELTA",
    "LambdaStep",
    "LambdaResult",
    "LambdaEvaluator",
]
