"""
Reduction System: small-step operational semantics (→).

Rules (each removes at least one unit of term_size):
    FUSION    FUSE(p,q,r)              → N(p+q+r)
    OPERATOR  A(p1)...A(pk) v          → A(p1)...A(pk-1) N(pk ⊕ v)     pk < v
              A(p) v                   → N(p ⊕ v)                      p < v

where v is a noun in normal form (N(q) or CHAIN([], N(q))). The innermost
adjective is peeled first, so A(2)A(3)N(7) computes 3 ⊕ 7 before 2 ⊕ _.
Sentence forms ([e], S1 ∘ S2, S1 ⇒ S2) reduce by congruence only.

Redex selection is leftmost-innermost: a chain is only a redex once its base
is a normal form, so any FUSE inside it is always contracted first.

Non-reducing outcomes are values, never exceptions:
    NORMAL_FORM              - nothing left to do
    OPERATOR_NOT_APPLICABLE  - some A(p) faces a value q with p >= q
    UNSATURATED              - a bare A(p) with no target

Every traversal uses an explicit stack; long adjective chains never recurse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from aleph.config import SemanticsConfig
from aleph.constants import (
    REDUCING_RULES,
    RULE_FUSION,
    RULE_NORMAL_FORM,
    RULE_OPERATOR,
    RULE_OPERATOR_NOT_APPLICABLE,
    RULE_UNSATURATED,
)
from aleph.core.operators import PrimeOperator, resolve_operator
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
    term_size,
)

logger = logging.getLogger(__name__)

Path = Tuple[int, ...]


class ReductionRule(Enum):
    """Rules that fired, or the reason nothing fired."""
    FUSION = RULE_FUSION
    OPERATOR = RULE_OPERATOR
    NORMAL_FORM = RULE_NORMAL_FORM
    OPERATOR_NOT_APPLICABLE = RULE_OPERATOR_NOT_APPLICABLE
    UNSATURATED = RULE_UNSATURATED

    @property
    def reduces(self) -> bool:
        return self.value in REDUCING_RULES


class ReductionStrategy(Enum):
    """Which redex step() contracts when several are available."""
    LEFTMOST = "leftmost"
    RIGHTMOST = "rightmost"


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class StepResult:
    """One application of the step relation."""
    before: Term
    after: Term
    rule: ReductionRule
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def reduced(self) -> bool:
        return self.rule.reduces

    def to_dict(self) -> Dict[str, Any]:
        return {
            "before": self.before.signature(),
            "after": self.after.signature(),
            "rule": self.rule.value,
            "details": dict(self.details),
        }

    def __str__(self) -> str:
        return f"{self.before} →[{self.rule.value}] {self.after}"


@dataclass
class ReductionTrace:
    """
    Full record of a normalization run.

    Attributes:
        initial: Term normalization started from.
        steps: Every reducing step, in order.
        final: Last term reached.
        outcome: NORMAL_FORM, a stuck rule, or None when truncated.
        stuck: The non-reducing StepResult explaining a stuck outcome.
        truncated: True when the step ceiling was hit first.
    """
    initial: Term
    steps: List[StepResult] = field(default_factory=list)
    final: Optional[Term] = None
    outcome: Optional[ReductionRule] = None
    stuck: Optional[StepResult] = None
    truncated: bool = False

    @property
    def normalized(self) -> bool:
        return self.outcome is ReductionRule.NORMAL_FORM

    def sizes(self) -> List[int]:
        """term_size along the trace, initial term first."""
        return [term_size(self.initial)] + [term_size(s.after) for s in self.steps]

    def to_dataframe(self) -> pd.DataFrame:
        """One row per reducing step."""
        rows = []
        for idx, s in enumerate(self.steps, start=1):
            rows.append({
                "step": idx,
                "before": s.before.signature(),
                "after": s.after.signature(),
                "rule": s.rule.value,
                "size_before": term_size(s.before),
                "size_after": term_size(s.after),
                "operator": s.details.get("operator"),
                "operand": s.details.get("operand"),
                "result": s.details.get("result", s.details.get("sum")),
            })
        columns = [
            "step", "before", "after", "rule", "size_before", "size_after",
            "operator", "operand", "result",
        ]
        return pd.DataFrame(rows, columns=columns)


@dataclass
class EvaluationResult:
    """Normal form of a term and the prime it denotes (None when stuck)."""
    term: Term
    prime: Optional[int]
    normal_form: Term
    steps: int
    outcome: Optional[ReductionRule]
    truncated: bool = False


# =============================================================================
# PREDICATES
# =============================================================================

def is_normal_form(term: Term) -> bool:
    """N(p), CHAIN([], N(p)), or a sentence form built only from normal forms."""
    stack: List[Term] = [term]
    while stack:
        node = stack.pop()
        if isinstance(node, Noun):
            continue
        if isinstance(node, Chain):
            if node.ops or noun_value(node) is None:
                return False
            continue
        if isinstance(node, (Sentence, Seq, Impl)):
            stack.extend(children(node))
            continue
        if isinstance(node, (Fuse, Adj)):
            return False
        raise TypeError(f"Unhandled term type: {type(node).__name__}")
    return True


def is_reducible(term: Term) -> bool:
    return not is_normal_form(term)


def normal_form_prime(term: Term) -> Optional[int]:
    """
    Prime carried by a normal form.

    Sentence forms carry the prime of their right-most sentence; the left
    operands of ∘ and ⇒ must already be normal forms.
    """
    if not is_normal_form(term):
        return None
    node = term
    while True:
        if isinstance(node, Sentence):
            node = node.term
        elif isinstance(node, Seq):
            node = node.right
        elif isinstance(node, Impl):
            node = node.consequent
        else:
            return noun_value(node)


# =============================================================================
# REDUCTION SYSTEM
# =============================================================================

@dataclass
class _Site:
    path: Path
    term: Term
    kind: str                  # "fusion", "operator", "blocked"


def _subterm(term: Term, path: Path) -> Term:
    node = term
    for idx in path:
        node = children(node)[idx]
    return node


def _replace_child(parent: Term, index: int, child: Term) -> Term:
    if isinstance(parent, Chain):
        return Chain(parent.ops, child)
    if isinstance(parent, Sentence):
        return Sentence(child)
    if isinstance(parent, Seq):
        return Seq(child, parent.right) if index == 0 else Seq(parent.left, child)
    if isinstance(parent, Impl):
        if index == 0:
            return Impl(child, parent.consequent)
        return Impl(parent.antecedent, child)
    raise TypeError(f"Term type {type(parent).__name__} has no children")


def _replace_at(term: Term, path: Path, replacement: Term) -> Term:
    """Rebuild term with the subterm at path swapped out."""
    ancestors = []
    node = term
    for idx in path:
        ancestors.append((node, idx))
        node = children(node)[idx]
    new = replacement
    for parent, idx in reversed(ancestors):
        new = _replace_child(parent, idx, new)
    return new


class ReductionSystem:
    """
    Small-step reducer with trace recording.

    Args:
        operator: Operator used by adjectives. Defaults to the configured one.
        config: SemanticsConfig supplying operator name and step ceiling.
    """

    def __init__(
        self,
        operator: Optional[PrimeOperator] = None,
        config: Optional[SemanticsConfig] = None,
    ):
        self.config = config or SemanticsConfig()
        self.operator = resolve_operator(operator, self.config)

    # -------------------------------------------------------------------------
    # Redex discovery
    # -------------------------------------------------------------------------

    def _sites(self, term: Term) -> List[_Site]:
        """All redexes and blocked chains, in left-to-right pre-order."""
        sites: List[_Site] = []
        stack: List[Tuple[Path, Term]] = [((), term)]
        while stack:
            path, node = stack.pop()
            if isinstance(node, Fuse):
                sites.append(_Site(path, node, "fusion"))
            elif isinstance(node, Chain):
                value = noun_value(node.base)
                if value is None:
                    stack.append((path + (0,), node.base))
                elif node.ops:
                    kind = "operator" if self.operator.can_apply(node.ops[-1], value) else "blocked"
                    sites.append(_Site(path, node, kind))
            elif isinstance(node, (Sentence, Seq, Impl)):
                kids = children(node)
                for idx in reversed(range(len(kids))):
                    stack.append((path + (idx,), kids[idx]))
            elif isinstance(node, (Noun, Adj)):
                continue
            else:
                raise TypeError(f"Unhandled term type: {type(node).__name__}")
        return sites

    def _contract(self, term: Term, site: _Site) -> StepResult:
        node = site.term
        if isinstance(node, Fuse):
            replacement = Noun(node.fused_prime)
            rule = ReductionRule.FUSION
            details = {"p": node.p, "q": node.q, "r": node.r, "sum": node.fused_prime}
        else:
            p = node.ops[-1]
            q = noun_value(node.base)
            result = self.operator.apply(p, q)
            rest = node.ops[:-1]
            replacement = Chain(rest, Noun(result)) if rest else Noun(result)
            rule = ReductionRule.OPERATOR
            details = {
                "operator": p,
                "operand": q,
                "result": result,
                "op_name": self.operator.name,
            }
        details["path"] = site.path
        after = _replace_at(term, site.path, replacement)
        return StepResult(before=term, after=after, rule=rule, details=details)

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def is_normal_form(self, term: Term) -> bool:
        return is_normal_form(term)

    def is_reducible(self, term: Term) -> bool:
        return is_reducible(term)

    def is_stuck(self, term: Term) -> bool:
        """Not a normal form, yet no rule applies."""
        return not is_normal_form(term) and not self.successors(term)

    def successors(self, term: Term) -> List[StepResult]:
        """Every legal one-step reduct of term, one per redex position."""
        return [
            self._contract(term, site)
            for site in self._sites(term)
            if site.kind != "blocked"
        ]

    def step(
        self,
        term: Term,
        strategy: ReductionStrategy = ReductionStrategy.LEFTMOST,
    ) -> StepResult:
        """
        Perform exactly one reduction step.

        Args:
            term: Term to reduce.
            strategy: Which redex to contract when several exist.

        Returns:
            StepResult; when no rule applies, after is before and rule names
            the reason (NORMAL_FORM, OPERATOR_NOT_APPLICABLE, UNSATURATED).
        """
        sites = self._sites(term)
        redexes = [s for s in sites if s.kind != "blocked"]
        if redexes:
            site = redexes[0] if strategy is ReductionStrategy.LEFTMOST else redexes[-1]
            result = self._contract(term, site)
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"{result}")
            return result

        blocked = [s for s in sites if s.kind == "blocked"]
        if blocked:
            site = blocked[0]
            details = {
                "operator": site.term.ops[-1],
                "operand": noun_value(site.term.base),
                "op_name": self.operator.name,
                "path": site.path,
            }
            return StepResult(term, term, ReductionRule.OPERATOR_NOT_APPLICABLE, details)

        if isinstance(term, Adj):
            return StepResult(term, term, ReductionRule.UNSATURATED, {"operator": term.prime})

        return StepResult(term, term, ReductionRule.NORMAL_FORM, {})

    def normalize(
        self,
        term: Term,
        strategy: ReductionStrategy = ReductionStrategy.LEFTMOST,
        max_steps: Optional[int] = None,
    ) -> ReductionTrace:
        """
        Reduce until a normal form, a stuck term, or the step ceiling.

        Args:
            term: Term to normalize.
            strategy: Redex selection strategy.
            max_steps: Overrides config.max_reduction_steps.

        Returns:
            ReductionTrace with every step taken.
        """
        limit = max_steps if max_steps is not None else self.config.max_reduction_steps
        trace = ReductionTrace(initial=term)
        current = term
        while True:
            if len(trace.steps) >= limit:
                trace.truncated = True
                logger.warning(f"Reduction of {term} truncated after {limit} steps")
                break
            result = self.step(current, strategy)
            if not result.reduced:
                trace.outcome = result.rule
                if result.rule is not ReductionRule.NORMAL_FORM:
                    trace.stuck = result
                    logger.info(f"Reduction of {term} stuck: {result.rule.value} {result.details}")
                break
            trace.steps.append(result)
            current = result.after
        trace.final = current
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Normalized {term} → {current} in {len(trace.steps)} steps")
        return trace

    def evaluate(self, term: Term) -> EvaluationResult:
        """normalize() and extract the prime of the normal form."""
        trace = self.normalize(term)
        prime = normal_form_prime(trace.final) if trace.normalized else None
        return EvaluationResult(
            term=term,
            prime=prime,
            normal_form=trace.final,
            steps=len(trace.steps),
            outcome=trace.outcome,
            truncated=trace.truncated,
        )


__all__ = [
    "ReductionRule",
    "ReductionStrategy",
    "StepResult",
    "ReductionTrace",
    "EvaluationResult",
    "ReductionSystem",
    "is_normal_form",
    "is_reducible",
    "normal_form_prime",
]
