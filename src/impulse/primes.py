"""
Prime number generation.
"""

import math
import numbers
import logging

import numpy as np

from .errors import InvalidArgument

logger = logging.getLogger("impulse.primes")

_SMALL_PRIMES = (2, 3, 5, 7)


def primes(upto):
    """
    Generate all prime numbers up to a given value.

    uses a sieve of Eratosthenes restricted to odd candidates, which stops
    once the candidate factors exceed sqrt(upto).

    Args:
        upto: Upper bound (inclusive). a float bound must be a whole number

    Returns:
        Sorted array of primes <= upto, int64 for an integer bound and
        float64 for a float bound

    Raises:
        InvalidArgument: if `upto` is not a real number or not whole
    """
    if isinstance(upto, (bool, np.bool_)) or not isinstance(upto, numbers.Real):
        raise InvalidArgument(f"`upto` must be a number, got {upto!r}")

    if isinstance(upto, numbers.Integral):
        dtype = np.int64
        limit = int(upto)
    else:
        dtype = np.float64
        if not math.isfinite(upto) or upto != round(upto):
            raise InvalidArgument(f"`upto` value ({upto}) must be a whole number")
        limit = int(upto)

    if limit < 11:
        # few enough to list, and the sieve indexing below assumes upto > 10
        return np.array([p for p in _SMALL_PRIMES if p <= limit], dtype=dtype)

    candidates = np.arange(3, limit + 1, 2)
    is_prime = np.ones((limit - 1) // 2, dtype=bool)
    for factor in candidates[:math.isqrt(limit) // 2]:
        if is_prime[(factor - 2) // 2]:
            is_prime[(3 * factor - 2) // 2::factor] = False

    result = np.concatenate(([2], candidates[is_prime])).astype(dtype)
    logger.debug(f"Found {result.size} primes up to {limit}")
    return result
