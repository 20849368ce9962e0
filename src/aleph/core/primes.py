"""Integer prime arithmetic shared by terms, operators and the canonicalizer."""

from __future__ import annotations

from math import isqrt
from typing import List

import numpy as np


def is_prime(n: object) -> bool:
    """Deterministic primality by 6k±1 trial division. Non-integers are not prime."""
    if isinstance(n, bool) or not isinstance(n, (int, np.integer)):
        return False
    n = int(n)
    if n < 2:
        return False
    if n < 4:
        return True
    if n % 2 == 0 or n % 3 == 0:
        return False
    k = 5
    while k * k <= n:
        if n % k == 0 or n % (k + 2) == 0:
            return False
        k += 6
    return True


def next_prime(n: int) -> int:
    """Return the smallest prime strictly greater than n."""
    candidate = max(int(n) + 1, 2)
    while not is_prime(candidate):
        candidate += 1
    return candidate


def primes_up_to(limit: int) -> List[int]:
    """
    Return all primes <= limit in ascending order.

    Uses a numpy sieve of Eratosthenes; values are converted back to Python
    ints so callers never see numpy scalar types.
    """
    limit = int(limit)
    if limit < 2:
        return []
    sieve = np.ones(limit + 1, dtype=bool)
    sieve[:2] = False
    for k in range(2, isqrt(limit) + 1):
        if sieve[k]:
            sieve[k * k::k] = False
    return [int(p) for p in np.flatnonzero(sieve)]


__all__ = ["is_prime", "next_prime", "primes_up_to"]
