"""
FFT planning: real FFT plans and backend planning strategies.

this module builds RealFFTPlan objects (factor sequence plus one contiguous
twiddle arena) and provides the heuristics used to pick thread counts and
planner effort for the native backend.
"""

import os
import platform
import logging
from dataclasses import dataclass
from typing import Dict, Tuple, Optional, Any, List

import numpy as np
import psutil

from .errors import InvalidArgument
from .factorization import FactorKind, factorize, largest_prime_factor, _check_length
from .twiddle import TwiddleGenerator

# set up logging
logger = logging.getLogger("impulse.planning")

# Constants for planning strategies of the native backend
PLANNER_ESTIMATE = 'FFTW_ESTIMATE'  # quick planning, good for one-off FFTs
PLANNER_MEASURE = 'FFTW_MEASURE'    # thorough planning, good for repeated FFTs
PLANNER_PATIENT = 'FFTW_PATIENT'    # very thorough planning, for critical performance
PLANNER_EXHAUSTIVE = 'FFTW_EXHAUSTIVE'  # maximum optimization, can be very slow

# Size thresholds
SMALL_ARRAY_THRESHOLD = 256 * 256
LARGE_ARRAY_THRESHOLD = 2048 * 2048

# largest prime factor still considered a "fast" length
FAST_RADIX_LIMIT = 7

# Cache for system info to avoid repeated calls
_system_info_cache = {}
_length_stats_cache = {}
LENGTH_STATS_CACHE_SIZE = 1024  # oldest entries are dropped beyond this


# ----------------------------------------------------------------------------------
# Real FFT plans
# ----------------------------------------------------------------------------------

Span = Tuple[int, int]  # (start, length) into RealFFTPlan.mem


@dataclass(frozen=True)
class PlanFactorDescriptor:
    """One pass of a real FFT plan."""
    factor: int
    kind: FactorKind
    twiddle: Optional[Span] = None          # absent for the last factor
    generic_twiddle: Optional[Span] = None  # only for FactorKind.GENERIC

    @property
    def is_generic(self) -> bool:
        return self.kind is FactorKind.GENERIC


def required_twiddle_mem_size(factors: Tuple[int, ...], n: int) -> int:
    """
    Number of real values needed to store every twiddle table of a plan.

    each factor ip needs (ip-1)*(ido-1) values for its pass twiddles, where
    ido = n / (l1*ip) and l1 is the product of the previous factors (the last
    factor has ido == 1 and thus needs none). generic factors need another
    2*ip values for their kernel.
    """
    total = 0
    l1 = 1
    for ip in factors:
        ido = n // (l1 * ip)
        total += (ip - 1) * (ido - 1)
        if FactorKind.of(ip) is FactorKind.GENERIC:
            total += 2 * ip
        l1 *= ip
    return total


class RealFFTPlan:
    """
    FFT plan along a single dimension of length n.

    all twiddle coefficients live in `mem`; descriptors only keep
    (start, length) spans into it. a plan never changes after construction
    and may be shared between threads.
    """

    def __init__(self, n: int, dtype=np.float64):
        self.length = _check_length(n)
        self.dtype = np.dtype(dtype)
        if self.dtype.kind != 'f':
            raise InvalidArgument(f"Plan dtype must be a real floating type, got {self.dtype}")

        factors = factorize(self.length) if self.length > 1 else ()
        self.mem = np.zeros(required_twiddle_mem_size(factors, self.length), dtype=self.dtype)
        self.roots = TwiddleGenerator(self.length)
        self.descriptors = self._compute_twiddle_factors(factors)
        self.mem.flags.writeable = False

        logger.debug(f"Built real FFT plan for length {self.length}: "
                     f"factors={factors}, twiddle values={self.mem.size}")

    def _compute_twiddle_factors(self, factors: Tuple[int, ...]) -> Tuple[PlanFactorDescriptor, ...]:
        n = self.length
        twid = self.roots
        mem = self.mem
        descriptors = []
        offset = 0
        l1 = 1

        for k, ip in enumerate(factors):
            ido = n // (l1 * ip)
            kind = FactorKind.of(ip)
            twiddle = None
            generic = None

            if k < len(factors) - 1:  # the last factor doesn't need twiddle factors
                size = (ip - 1) * (ido - 1)
                twiddle = (offset, size)
                for j in range(1, ip):
                    base = offset + (j - 1) * (ido - 1)
                    for i in range(1, (ido - 1) // 2 + 1):
                        tw = twid[j * l1 * i]
                        mem[base + 2 * i - 2] = tw.real
                        mem[base + 2 * i - 1] = tw.imag
                offset += size

            if kind is FactorKind.GENERIC:
                generic = (offset, 2 * ip)
                g = mem[offset:offset + 2 * ip]
                g[0] = 1.0
                g[1] = 0.0
                i, ic = 2, 2 * ip - 2
                while i <= ic:
                    tw = twid[(i >> 1) * (n // ip)]
                    g[i] = tw.real
                    g[i + 1] = tw.imag
                    g[ic] = tw.real
                    g[ic + 1] = -tw.imag
                    i += 2
                    ic -= 2
                offset += 2 * ip

            descriptors.append(PlanFactorDescriptor(ip, kind, twiddle, generic))
            l1 *= ip

        return tuple(descriptors)

    @property
    def factors(self) -> Tuple[int, ...]:
        return tuple(d.factor for d in self.descriptors)

    def _view(self, span: Optional[Span]) -> Optional[np.ndarray]:
        if span is None:
            return None
        start, size = span
        return self.mem[start:start + size]

    def twiddles(self, k: int) -> Optional[np.ndarray]:
        """Pass twiddles of the k-th factor as interleaved (re, im) values."""
        return self._view(self.descriptors[k].twiddle)

    def generic_twiddles(self, k: int) -> Optional[np.ndarray]:
        """Kernel twiddles of the k-th factor, None for specialized factors."""
        return self._view(self.descriptors[k].generic_twiddle)

    def __eq__(self, other):
        if not isinstance(other, RealFFTPlan):
            return NotImplemented
        return (self.length == other.length and self.dtype == other.dtype
                and self.descriptors == other.descriptors
                and np.array_equal(self.mem, other.mem))

    def __hash__(self):
        return hash((self.length, self.dtype.str, self.factors))

    def __repr__(self):
        return f"RealFFTPlan(length={self.length}, factors={self.factors}, dtype={self.dtype})"


def new_real_fft_plan(n: int, dtype=np.float64) -> RealFFTPlan:
    """Build a reusable real FFT plan for length n."""
    return RealFFTPlan(n, dtype)


# ----------------------------------------------------------------------------------
# Backend planning strategies
# ----------------------------------------------------------------------------------

def get_system_info() -> Dict[str, Any]:
    """
    Get information about the system that's relevant for planning.

    Returns:
        Dict with system information like CPU count, memory, etc.
    """
    # use cached info if available
    if _system_info_cache:
        return _system_info_cache

    info = {
        'cpu_count': os.cpu_count() or 1,
        'physical_cores': psutil.cpu_count(logical=False) or 1,
        'total_memory_gb': psutil.virtual_memory().total / (1024**3),
        'available_memory_gb': psutil.virtual_memory().available / (1024**3),
        'platform': platform.system(),
        'processor': platform.processor(),
    }
    _system_info_cache.update(info)
    return info


def clear_cache():
    """Clear cached information to force re-calculation."""
    _system_info_cache.clear()
    _length_stats_cache.clear()


def analyze_length(n: int) -> Dict[str, Any]:
    """
    Describe how well a transform length suits the FFT kernels.

    Args:
        n: Transform length

    Returns:
        Dict with the factor sequence and derived characteristics
    """
    n = _check_length(n)
    if n in _length_stats_cache:
        return dict(_length_stats_cache[n])

    factors = factorize(n)
    stats = {
        'length': n,
        'factors': factors,
        'is_power_of_two': n & (n - 1) == 0,
        'has_small_primes': largest_prime_factor(n) <= FAST_RADIX_LIMIT,
        'generic_factors': sum(1 for f in factors if FactorKind.of(f) is FactorKind.GENERIC),
        'twiddle_mem_size': required_twiddle_mem_size(factors, n),
    }
    _length_stats_cache[n] = stats
    while len(_length_stats_cache) > LENGTH_STATS_CACHE_SIZE:
        _length_stats_cache.pop(next(iter(_length_stats_cache)), None)
    return dict(stats)


def get_optimal_planner(n: int,
                        usage_count: int = 1,
                        time_critical: bool = False) -> str:
    """
    Determine the planner effort for the native backend.

    Args:
        n: Number of elements transformed
        usage_count: How many times this transform has been used
        time_critical: Whether this is in a time-sensitive context

    Returns:
        The recommended FFTW planner strategy
    """
    if time_critical:
        return PLANNER_ESTIMATE

    stats = analyze_length(n)

    # awkward lengths used repeatedly pay back a measured plan
    if not stats['has_small_primes'] and usage_count >= 3 and n >= 8192:
        return PLANNER_MEASURE

    if usage_count >= 10 and n >= 65536:
        return PLANNER_MEASURE

    return PLANNER_ESTIMATE


def get_optimal_threads(size: int, max_threads: Optional[int] = None) -> int:
    """
    Determine the optimal number of threads for an FFT operation.

    Args:
        size: Total number of elements transformed
        max_threads: Upper bound (None = number of physical cores)

    Returns:
        The recommended thread count
    """
    sys_info = get_system_info()
    cores = sys_info['physical_cores']
    if max_threads is not None:
        cores = max(1, min(cores, max_threads))

    # single-thread for small arrays - threading overhead isn't worth it
    if size < SMALL_ARRAY_THRESHOLD:
        return 1

    if size < LARGE_ARRAY_THRESHOLD:
        return max(1, cores // 2)

    return cores


def optimal_transform_size(target_size: int, max_increase: float = 0.2) -> int:
    """
    Find the smallest length >= target_size whose factors are all small.

    lengths made of 2, 3, 4, 5 and 7 avoid the generic kernels. if no such
    length exists within `max_increase` of the target, the target is returned.

    Args:
        target_size: Target size for the transform
        max_increase: Maximum allowed size increase as a fraction

    Returns:
        Optimal size for the transform
    """
    target_size = _check_length(target_size)
    if max_increase < 0:
        raise InvalidArgument(f"max_increase must be non-negative, got {max_increase}")

    max_size = int(target_size * (1 + max_increase))
    for size in range(target_size, max_size + 1):
        if analyze_length(size)['has_small_primes']:
            return size
    return target_size


def optimize_transform_shape(shape: Tuple[int, ...],
                             max_increase: float = 0.2) -> Tuple[int, ...]:
    """Apply optimal_transform_size to every dimension of a shape."""
    return tuple(optimal_transform_size(dim, max_increase=max_increase)
                 for dim in shape)


def describe_plan(plan: RealFFTPlan) -> List[Dict[str, Any]]:
    """Per-pass summary of a plan (factor, kind, l1, ido and table sizes)."""
    passes = []
    l1 = 1
    for d in plan.descriptors:
        ido = plan.length // (l1 * d.factor)
        passes.append({
            'factor': d.factor,
            'kind': d.kind.value,
            'l1': l1,
            'ido': ido,
            'twiddles': 0 if d.twiddle is None else d.twiddle[1],
            'generic_twiddles': 0 if d.generic_twiddle is None else d.generic_twiddle[1],
        })
        l1 *= d.factor
    return passes
