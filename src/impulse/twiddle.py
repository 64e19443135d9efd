"""
Roots of unity for FFT twiddle factors.

values are always computed in double precision. a TwiddleGenerator for
length n stores two small tables of about sqrt(n/2) entries each, so any
root e^{-2πi k/n} costs one complex multiplication of two lookups.
"""

import math
import logging
from typing import Tuple, Union

import numpy as np

from .errors import InvalidArgument
from .factorization import _check_length

logger = logging.getLogger("impulse.twiddle")


def _octant_point(x: int, n: int) -> Tuple[float, float]:
    """(cos, sin) of 2πx/n, evaluating cos/sin only on [0, π/4]."""
    # divide the circle in 8
    angle = 0.25 * math.pi / n
    x <<= 3  # multiply by 8

    if x < 4 * n:          # first half
        if x < 2 * n:      # first quadrant
            if x < n:      # first octant
                return math.cos(x * angle), math.sin(x * angle)
            return math.sin((2 * n - x) * angle), math.cos((2 * n - x) * angle)
        x -= 2 * n         # second quadrant
        if x < n:
            return -math.sin(x * angle), math.cos(x * angle)
        return -math.cos((2 * n - x) * angle), math.sin((2 * n - x) * angle)

    x = 8 * n - x          # second half
    if x < 2 * n:          # fourth quadrant, mirrored
        if x < n:
            return math.cos(x * angle), -math.sin(x * angle)
        return math.sin((2 * n - x) * angle), -math.cos((2 * n - x) * angle)
    x -= 2 * n             # third quadrant, mirrored
    if x < n:
        return -math.sin(x * angle), -math.cos(x * angle)
    return -math.cos((2 * n - x) * angle), -math.sin((2 * n - x) * angle)


def nth_root_of_unity(x: int, n: int) -> complex:
    """
    Compute e^{-2πi x/n} for 0 <= x < n.

    x == 0 gives exactly 1+0j.
    """
    if x == 0:
        return complex(1.0, 0.0)
    c, s = _octant_point(x, n)
    return complex(c, -s)


class TwiddleGenerator:
    """
    Compressed table of the n-th roots of unity.

    only indices up to n/2 are stored, as v1[i & mask] * v2[i >> shift];
    the upper half is obtained from root(n - i) = conj(root(i)).
    """

    def __init__(self, n: int):
        self.n = _check_length(n)

        nvals = (self.n + 2) >> 1
        shift = 1
        while (1 << shift) * (1 << shift) < nvals:
            shift += 1
        self.shift = shift
        self.mask = (1 << shift) - 1

        v1 = np.empty(1 << shift, dtype=np.complex128)
        v1[0] = 1.0
        for i in range(1, v1.size):
            v1[i] = nth_root_of_unity(i, self.n)

        v2 = np.empty((nvals + self.mask) >> shift, dtype=np.complex128)
        v2[0] = 1.0
        for i in range(1, v2.size):
            v2[i] = nth_root_of_unity(i << shift, self.n)

        self.v1 = v1
        self.v2 = v2

    def __len__(self) -> int:
        return self.n

    def __getitem__(self, idx: int) -> complex:
        if idx < 0 or idx >= self.n:
            raise IndexError(f"Twiddle index {idx} out of range for length {self.n}")
        if 2 * idx <= self.n:
            return complex(self.v1[idx & self.mask] * self.v2[idx >> self.shift])
        idx = self.n - idx
        return complex(self.v1[idx & self.mask] * self.v2[idx >> self.shift]).conjugate()

    def take(self, indices: Union[np.ndarray, list]) -> np.ndarray:
        """
        Vectorised lookup of many roots at once.

        Args:
            indices: Integer array with values in [0, n)

        Returns:
            complex128 array of the same shape
        """
        idx = np.asarray(indices, dtype=np.int64)
        if idx.size and (idx.min() < 0 or idx.max() >= self.n):
            raise InvalidArgument(f"Twiddle indices must lie in [0, {self.n})")
        mirrored = 2 * idx > self.n
        folded = np.where(mirrored, self.n - idx, idx)
        roots = self.v1[folded & self.mask] * self.v2[folded >> self.shift]
        return np.where(mirrored, np.conj(roots), roots)

    def table(self) -> np.ndarray:
        """Expand the full table of n roots (mostly useful for testing)."""
        return self.take(np.arange(self.n))

    def __repr__(self):
        return f"TwiddleGenerator(n={self.n}, v1={self.v1.size}, v2={self.v2.size})"
