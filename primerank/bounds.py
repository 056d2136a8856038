"""
Closed-form bounds on the prime-counting function pi(x) and their inverses.

Responsibility: pure integer math. Nothing here knows about sieves.

For x >= 59 (Rosser & Schoenfeld, 1962):

    x / ln x * (1 + 1 / (2 ln x))  <  pi(x)  <  x / ln x * (1 + 3 / (2 ln x))

the upper inequality holding for all x > 1. Between 11 and 58 the lower
bound falls back to x / ln x (valid for x >= 17, and checked by hand for
11..16). Below 11 both bounds are exact.

The inverses bracket the prime with a given ordinal. Inverting an upper
bound on pi gives a lower bound on the prime and vice versa, so each inverse
binary-searches on the opposite bound.
"""

import math
import operator

import numpy as np
from typing import Tuple
from loguru import logger

# pi(x) for x = 0..10
_EXACT_PI = (0, 0, 1, 2, 2, 3, 3, 4, 4, 4, 4)

# Smallest x where the (1 + 1/(2 ln x)) lower bound holds.
_LOWER_CORRECTION_MIN = 59


def _check_non_negative(name: str, value: int) -> int:
    value = operator.index(value)
    if value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")
    return value


def prime_pi_lower_bound(p: int) -> int:
    """
    Lower bound on pi(p), the count of primes <= p.

    Parameters
    ----------
    p : int
        Non-negative integer.

    Returns
    -------
    int
        An integer <= pi(p). Exact for p <= 10.
    """
    p = _check_non_negative('p', p)
    if p < len(_EXACT_PI):
        return _EXACT_PI[p]

    x = float(p)
    log_x = math.log(x)
    if p < _LOWER_CORRECTION_MIN:
        return int(math.floor(x / log_x))
    return int(math.floor(x / log_x * (1. + 1. / (2. * log_x))))


def prime_pi_upper_bound(p: int) -> int:
    """
    Upper bound on pi(p), the count of primes <= p.

    Parameters
    ----------
    p : int
        Non-negative integer.

    Returns
    -------
    int
        An integer >= pi(p). Exact for p <= 10.
    """
    p = _check_non_negative('p', p)
    if p < len(_EXACT_PI):
        return _EXACT_PI[p]

    x = float(p)
    log_x = math.log(x)
    return int(math.floor(x / log_x * (1. + 3. / (2. * log_x))))


def prime_pi_inv_lower_bound(idx: int) -> int:
    """
    Lower bound on the prime with ordinal `idx`.

    Inverse of `prime_pi_upper_bound`: the largest x with
    prime_pi_upper_bound(x) < idx. Fewer than idx primes are <= x, so both
    the idx-th prime (1-based) and the prime with 0-based ordinal idx are
    greater than x. The returned number is not guaranteed to be prime.

    Parameters
    ----------
    idx : int
        Ordinal, non-negative. idx = 0 returns 0.

    Returns
    -------
    int
        Lower bound on the prime.
    """
    idx = _check_non_negative('idx', idx)
    if idx == 0:
        return 0

    h = 1
    while prime_pi_upper_bound(h) < idx:
        h *= 2
    logger.debug(f"inv_lower({idx}): bracket [{h // 2}, {h})")

    # l satisfies the predicate, h does not.
    l = h // 2
    while l + 1 < h:
        m = (l + h) // 2
        if prime_pi_upper_bound(m) < idx:
            l = m
        else:
            h = m

    return l


def prime_pi_inv_upper_bound(idx: int) -> int:
    """
    Upper bound on the prime with ordinal `idx`.

    Inverse of `prime_pi_lower_bound`: the smallest x with
    prime_pi_lower_bound(x) > idx. At least idx + 1 primes are <= x, so the
    prime with 0-based ordinal idx is <= x. The returned number is not
    guaranteed to be prime.

    Parameters
    ----------
    idx : int
        Ordinal, non-negative.

    Returns
    -------
    int
        Upper bound on the prime.
    """
    idx = _check_non_negative('idx', idx)

    h = 1
    while prime_pi_lower_bound(h) <= idx:
        h *= 2
    logger.debug(f"inv_upper({idx}): bracket [{h // 2}, {h})")

    # l satisfies the predicate, h does not.
    l = h // 2
    while l + 1 < h:
        m = (l + h) // 2
        if prime_pi_lower_bound(m) <= idx:
            l = m
        else:
            h = m

    return h


# Vectorized versions for arrays
def prime_pi_bounds_array(xs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Compute (lower, upper) pi bounds for every value in xs."""
    xs = np.asarray(xs)
    lower = np.zeros(len(xs), dtype=np.uint64)
    upper = np.zeros(len(xs), dtype=np.uint64)
    for i, x in enumerate(xs):
        lower[i] = prime_pi_lower_bound(x)
        upper[i] = prime_pi_upper_bound(x)
    return lower, upper


def prime_pi_inv_bounds_array(idxs: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Compute (lower, upper) bounds on the primes with ordinals idxs."""
    idxs = np.asarray(idxs)
    lower = np.zeros(len(idxs), dtype=np.uint64)
    upper = np.zeros(len(idxs), dtype=np.uint64)
    for i, idx in enumerate(idxs):
        lower[i] = prime_pi_inv_lower_bound(idx)
        upper[i] = prime_pi_inv_upper_bound(idx)
    return lower, upper
