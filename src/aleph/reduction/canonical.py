"""
Fusion Canonicalization: choosing d*(P), the canonical triad for a prime.

A prime P usually admits several decompositions P = p + q + r into distinct
primes. FUSE terms built from any of them reduce to the same N(P), so a
canonical choice is needed to give every prime one preferred fusion.

Scoring (exact rational arithmetic, no floats):
    pair resonance  gcd(a - 1, b - 1)  shared structure of the unit groups
    resonance       mean pair resonance over (p,q), (p,r), (q,r)
    balance         1 - (r - p) / P     1 when the three parts are close
    score           resonance + balance

The canonical triad has maximal score; ties go to the lexicographically
smallest (p, q, r).
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from fractions import Fraction
from math import gcd
from typing import List, Optional, Tuple

from aleph.config import SemanticsConfig
from aleph.core.primes import is_prime, primes_up_to
from aleph.core.terms import Fuse

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Triad:
    """Three primes p < q < r whose sum is the target prime."""
    p: int
    q: int
    r: int

    @property
    def target(self) -> int:
        return self.p + self.q + self.r

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.p, self.q, self.r)

    def as_term(self) -> Fuse:
        return Fuse(self.p, self.q, self.r)

    def __str__(self) -> str:
        return f"FUSE({self.p},{self.q},{self.r})"


def _pair_resonance(a: int, b: int) -> int:
    return gcd(a - 1, b - 1)


class FusionCanonicalizer:
    """
    Enumerates and ranks fusion triads.

    Args:
        workers: Thread count for get_triads sharding; None or 1 runs serially.
        config: Supplies fusion_workers when workers is not given.
    """

    def __init__(self, workers: Optional[int] = None, config: Optional[SemanticsConfig] = None):
        if workers is None and config is not None:
            workers = config.fusion_workers
        self.workers = workers

    def _triads_from(self, p: int, P: int, primes: List[int], prime_set: frozenset) -> List[Triad]:
        """Triads whose smallest member is p."""
        found = []
        for q in primes:
            if q <= p:
                continue
            r = P - p - q
            if r <= q:
                break
            if r in prime_set:
                found.append(Triad(p, q, r))
        return found

    def get_triads(self, P: int) -> List[Triad]:
        """
        All triads of distinct primes summing to P, in lexicographic order.

        Args:
            P: Target prime. Non-primes yield an empty list.

        Returns:
            Sorted list of Triad.
        """
        if not is_prime(P):
            return []
        primes = primes_up_to(P)
        prime_set = frozenset(primes)
        # smallest member satisfies 3p < P
        firsts = [p for p in primes if 3 * p < P]

        if self.workers and self.workers > 1 and len(firsts) > 1:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                shards = list(executor.map(
                    lambda p: self._triads_from(p, P, primes, prime_set), firsts
                ))
        else:
            shards = [self._triads_from(p, P, primes, prime_set) for p in firsts]

        triads = sorted(t for shard in shards for t in shard)
        logger.debug(f"Found {len(triads)} triads for P={P}")
        return triads

    def resonance_score(self, triad: Triad) -> Fraction:
        """Exact score: mean pairwise gcd resonance plus magnitude balance."""
        p, q, r = sorted(triad.as_tuple())
        resonance = Fraction(
            _pair_resonance(p, q) + _pair_resonance(p, r) + _pair_resonance(q, r),
            3,
        )
        balance = 1 - Fraction(r - p, p + q + r)
        return resonance + balance

    def rank(self, P: int) -> List[Tuple[Triad, Fraction]]:
        """Triads for P with scores, best first; ties in lexicographic order."""
        scored = [(t, self.resonance_score(t)) for t in self.get_triads(P)]
        scored.sort(key=lambda item: (-item[1], item[0].as_tuple()))
        return scored

    def select_canonical(self, P: int) -> Optional[Triad]:
        """The maximal-score triad for P, or None when P has no decomposition."""
        ranked = self.rank(P)
        if not ranked:
            return None
        return ranked[0][0]


__all__ = ["Triad", "FusionCanonicalizer"]
