"""
Operator Registry: prime-preserving binary operators (⊕).

Every adjective A(p) denotes "apply ⊕ with left operand p". An operator is
applicable to (p, q) only when both are prime and p < q. Results are always
prime and strictly greater than q, so a chain that starts applicable stays
applicable as long as its outer adjectives are below the running value.

Operator Set:
    resonance   - q advanced by the integer harmonic resonance of (p, q)
    next_prime  - smallest prime strictly greater than p + q

All arithmetic is integer-only, so results are bit-identical everywhere.
"""

from typing import Dict, List, Optional, Type

from aleph.constants import OPERATOR_NEXT_PRIME, OPERATOR_RESONANCE
from aleph.core.primes import is_prime, next_prime


class OperatorNotApplicableError(ValueError):
    """apply() was called on a pair the operator does not accept."""

    def __init__(self, operator: str, p: object, q: object):
        self.operator = operator
        self.p = p
        self.q = q
        super().__init__(f"{operator} not applicable to ({p!r}, {q!r}): requires primes p < q")


class UnknownOperatorError(KeyError):
    """Operator name is not in the registry."""
    pass


# =============================================================================
# OPERATORS
# =============================================================================

class PrimeOperator:
    """
    Base class for prime-preserving operators.

    Subclasses implement _combine(p, q); apply() guards it with can_apply().
    """

    name: str = ""
    symbol: str = "⊕"

    def can_apply(self, p: int, q: int) -> bool:
        return is_prime(p) and is_prime(q) and p < q

    def apply(self, p: int, q: int) -> int:
        if not self.can_apply(p, q):
            raise OperatorNotApplicableError(self.name, p, q)
        return self._combine(int(p), int(q))

    def _combine(self, p: int, q: int) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)


class ResonancePrimeOperator(PrimeOperator):
    """
    p ⊕ q = next_prime(q + ⌊pq / (p + q)⌋).

    ⌊pq / (p + q)⌋ is half the harmonic mean of the pair, the integer
    resonance between the two primes.
    """

    name = OPERATOR_RESONANCE

    def resonance(self, p: int, q: int) -> int:
        return (p * q) // (p + q)

    def _combine(self, p: int, q: int) -> int:
        return next_prime(q + self.resonance(p, q))


class NextPrimeOperator(PrimeOperator):
    """p ⊕ q = smallest prime strictly greater than p + q."""

    name = OPERATOR_NEXT_PRIME

    def _combine(self, p: int, q: int) -> int:
        return next_prime(p + q)


# =============================================================================
# REGISTRY
# =============================================================================

OPERATOR_REGISTRY: Dict[str, Type[PrimeOperator]] = {
    OPERATOR_RESONANCE: ResonancePrimeOperator,
    OPERATOR_NEXT_PRIME: NextPrimeOperator,
}


def get_operator(name: str) -> PrimeOperator:
    """Instantiate a registered operator by name."""
    key = str(name).strip().lower().replace("-", "_")
    cls = OPERATOR_REGISTRY.get(key)
    if cls is None:
        raise UnknownOperatorError(name)
    return cls()


def list_operators() -> List[str]:
    return sorted(OPERATOR_REGISTRY)


def resolve_operator(operator: Optional[PrimeOperator], config=None) -> PrimeOperator:
    """Pick an explicit operator, else the configured one, else the default."""
    if operator is not None:
        return operator
    if config is not None:
        return get_operator(config.operator)
    return ResonancePrimeOperator()


__all__ = [
    "OperatorNotApplicableError",
    "UnknownOperatorError",
    "PrimeOperator",
    "ResonancePrimeOperator",
    "NextPrimeOperator",
    "OPERATOR_REGISTRY",
    "get_operator",
    "list_operators",
    "resolve_operator",
]
