"""
Factorization of FFT lengths into radix factors.

the real FFT kernels have dedicated code paths for 2, 3, 4 and 5, so a length
is split into 4s first, then a single 2 which is moved to the front of the
sequence, then the remaining odd primes in ascending order. trial division
uses 3, 5 and 7 directly and a {2, 3, 5, 7} wheel from 11 onwards.
"""

import logging
import numbers
from enum import Enum
from functools import reduce
from typing import List, Sequence, Tuple

from .errors import InvalidArgument

logger = logging.getLogger("impulse.factorization")

# largest factor with a dedicated (specialized) kernel
MAX_SPECIALIZED_RADIX = 5

# primes handled by plain trial division before switching to the wheel
SMALL_PRIMES = (3, 5, 7)
WHEEL_BASIS = (2, 3, 5, 7)
FIRST_WHEEL_PRIME = 11


class FactorKind(Enum):
    """Kind of kernel a factor is executed with."""
    SPECIALIZED = 'specialized'  # radix 2, 3, 4, 5
    GENERIC = 'generic'          # any other odd prime, needs its own twiddle table

    @classmethod
    def of(cls, factor: int) -> 'FactorKind':
        if factor > MAX_SPECIALIZED_RADIX:
            return cls.GENERIC
        return cls.SPECIALIZED


def _check_length(n) -> int:
    if isinstance(n, bool) or not isinstance(n, numbers.Integral):
        raise InvalidArgument(f"Transform length must be an integer, got {n!r}")
    if n <= 0:
        raise InvalidArgument(f"Transform length must be positive, got {n}")
    return int(n)


def wheel(basis: Sequence[int] = WHEEL_BASIS,
          first_next_prime: int = FIRST_WHEEL_PRIME) -> Tuple[int, ...]:
    """
    Compute the gaps of a factorization wheel.

    Starting at `first_next_prime`, the gaps step through every number that
    is coprime with all of `basis`. the pattern repeats with a period equal
    to the product of the basis.

    Args:
        basis: Small primes whose multiples are skipped
        first_next_prime: First candidate after the basis primes

    Returns:
        Tuple of gaps, one full turn of the wheel
    """
    circumference = reduce(lambda a, b: a * b, basis, 1)
    spokes = [k for k in range(first_next_prime, first_next_prime + circumference + 1)
              if all(k % p for p in basis)]
    return tuple(b - a for a, b in zip(spokes, spokes[1:]))


# {2, 3, 5, 7} wheel: 48 gaps for 210 numbers, about 23% of the candidates
WHEEL_GAPS = wheel()


def list_factorize(n: int, primes: Sequence[int]) -> Tuple[List[int], int]:
    """
    Divide `n` by each of `primes`, as often as each one divides it.

    Returns:
        (factors found in order, remaining cofactor)
    """
    factors = []
    for p in primes:
        while n % p == 0:
            factors.append(p)
            n //= p
    return factors, n


def wheel_factorize(n: int,
                    first_next_prime: int = FIRST_WHEEL_PRIME,
                    gaps: Sequence[int] = WHEEL_GAPS) -> List[int]:
    """
    Factorize `n` by trial division over the candidates produced by a wheel.

    `n` must not have any prime factor below `first_next_prime`. whatever is
    left once the candidate exceeds sqrt(n) is itself prime and is appended.
    """
    factors = []
    candidate = first_next_prime
    spoke = 0
    while candidate * candidate <= n:
        while n % candidate == 0:
            factors.append(candidate)
            n //= candidate
        candidate += gaps[spoke]
        spoke = (spoke + 1) % len(gaps)
    if n > 1:
        factors.append(n)
    return factors


def factorize(n: int) -> Tuple[int, ...]:
    """
    Split a transform length into the ordered radix factors of a real FFT plan.

    Args:
        n: Transform length (positive integer)

    Returns:
        Tuple of factors whose product is `n`. empty for n == 1.

    Raises:
        InvalidArgument: if n is not a positive integer
    """
    n = _check_length(n)

    fours = 0
    while n & 3 == 0:
        fours += 1
        n >>= 2
    head = [4] * fours
    if n & 1 == 0:
        n >>= 1
        # the lone 2 goes in front so the outermost pass uses the radix-2 butterfly
        head = [2] + head

    odd, n = list_factorize(n, SMALL_PRIMES)
    factors = tuple(head + odd + wheel_factorize(n))
    logger.debug(f"Factorized length into {factors}")
    return factors


def largest_prime_factor(n: int) -> int:
    """Largest prime factor of n (1 for n == 1)."""
    n = _check_length(n)
    largest = 1
    for f in factorize(n):
        # 4 is the only composite factor
        largest = max(largest, 2 if f == 4 else f)
    return largest
