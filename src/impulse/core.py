"""
Core FFT functionality with plan caching and pluggable execution backends.

this module provides the caller-facing transforms of the impulse package:
complex and real FFTs over one or several axes with a normalization selector,
the packed real layout, DCT/DST of types 1 to 4, and per-length caches for
real FFT plans and native (FFTW) plans.
"""

import time
import numbers
import operator
import multiprocessing
import threading
import logging
from enum import Enum
from typing import Dict, Tuple, Optional, Union, Any, Callable, Sequence

import numpy as np
import pyfftw
import pyfftw.builders
from scipy import fftpack
from scipy import fft as scipy_fft

from . import planning, radix
from .errors import InvalidArgument, ExecutionFailure
from .packing import pack, unpack, symmetrize, half_length
from .planning import RealFFTPlan


logger = logging.getLogger("impulse.core")

# configuration constants with smart defaults
DEFAULT_THREADS = min(multiprocessing.cpu_count(), 4)
DEFAULT_PLANNER = planning.PLANNER_ESTIMATE
MEASURE_PLANNER = planning.PLANNER_MEASURE
DEFAULT_BACKEND = 'pyfftw'
BACKENDS = ('pyfftw', 'numpy', 'planned')
AUTO_ALIGN = True          # auto-align arrays for FFTW
AUTO_UPGRADE = True        # re-plan frequently used native transforms with MEASURE
MAX_CACHE_SIZE = 64        # maximum number of plans of each kind to keep

_cache_lock = threading.RLock()  # plans are published only once fully built


class Normalization(Enum):
    """
    Scaling applied to a transform.

    BACKWARD: forward unscaled, backward by 1/n
    ORTHO:    1/sqrt(n) both ways
    FORWARD:  forward by 1/n, backward unscaled
    CUSTOM:   explicit factor passed as `scale`
    """
    BACKWARD = 'backward'
    ORTHO = 'ortho'
    FORWARD = 'forward'
    CUSTOM = 'custom'

    @classmethod
    def parse(cls, value: Union['Normalization', str, None]) -> 'Normalization':
        if value is None:
            return cls.BACKWARD
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise InvalidArgument(f"Unknown normalization {value!r}") from None


def scaling_factor(normalize: Union[Normalization, str, None], n: int,
                   forward: bool, scale: Optional[float] = None) -> float:
    """
    Factor the raw transform of length n is multiplied by.

    Args:
        normalize: Normalization mode
        n: Transform length
        forward: Direction of the transform
        scale: Factor used with Normalization.CUSTOM

    Returns:
        Scaling factor as a float
    """
    mode = Normalization.parse(normalize)
    if mode is Normalization.CUSTOM:
        if scale is None:
            raise InvalidArgument("Normalization.CUSTOM requires an explicit scale")
        return float(scale)
    if scale is not None:
        raise InvalidArgument(f"scale is only accepted with Normalization.CUSTOM, not {mode.value}")
    if mode is Normalization.ORTHO:
        return 1.0 / np.sqrt(n)
    if mode is Normalization.FORWARD:
        return 1.0 / n if forward else 1.0
    return 1.0 if forward else 1.0 / n


class SmartFFT:
    """
    FFT front-end with plan caching and backend selection.

    real FFT plans are cached per (length, dtype), native FFTW plans per
    (shape, dtype). the actual transform is delegated to one of BACKENDS.
    """
    # static caches
    _real_plans: Dict[Tuple, RealFFTPlan] = {}   # real FFT plans by (length, dtype)
    _native_plans: Dict[Tuple, Any] = {}         # FFTW objects by (kind, shape, dtype, threads)
    _plan_quality: Dict[Tuple, str] = {}         # planner effort of each native plan
    _call_count: Dict[Tuple, int] = {}           # track call frequency per key
    _last_used: Dict[Tuple, float] = {}          # track when plans were last used

    # Initialize performance metrics
    _performance_metrics = {
        'calls': 0,
        'plan_hits': 0,
        'plan_misses': 0,
        'plan_upgrades': 0,
        'failures': 0,
        'execution_time': 0.0,
        'planning_time': 0.0,
    }

    # ------------------------------------------------------------------
    # caches
    # ------------------------------------------------------------------

    @classmethod
    def _touch(cls, key: Tuple) -> int:
        cls._call_count[key] = cls._call_count.get(key, 0) + 1
        cls._last_used[key] = time.time()
        return cls._call_count[key]

    @classmethod
    def _evict(cls, cache: Dict[Tuple, Any]):
        """Keep the most important half of a cache once it exceeds MAX_CACHE_SIZE."""
        if len(cache) <= MAX_CACHE_SIZE:
            return
        now = time.time()
        keys_by_importance = []
        for key in cache:
            count = cls._call_count.get(key, 0)
            age = now - cls._last_used.get(key, 0)
            # higher count and lower age = more important
            keys_by_importance.append((key, count / (age + 1)))
        keys_by_importance.sort(key=lambda x: x[1], reverse=True)

        for key, _ in keys_by_importance[max(1, MAX_CACHE_SIZE // 2):]:
            del cache[key]
            cls._call_count.pop(key, None)
            cls._last_used.pop(key, None)
            cls._plan_quality.pop(key, None)
        logger.debug(f"Evicted plans, {len(cache)} left")

    @classmethod
    def get_plan(cls, n: int, dtype=np.float64) -> RealFFTPlan:
        """
        Return the real FFT plan for length n, building it on first use.

        Args:
            n: Transform length
            dtype: Real floating type of the twiddle arena

        Returns:
            A shared, read-only RealFFTPlan
        """
        key = ('real', int(n), np.dtype(dtype).str)
        with _cache_lock:
            cls._touch(key)
            plan = cls._real_plans.get(key)
            if plan is not None:
                cls._performance_metrics['plan_hits'] += 1
                return plan

            cls._performance_metrics['plan_misses'] += 1
            start_time = time.time()
            plan = RealFFTPlan(n, dtype)
            cls._performance_metrics['planning_time'] += time.time() - start_time

            cls._real_plans[key] = plan
            cls._evict(cls._real_plans)
            return plan

    @classmethod
    def _select_threads(cls, size: int, threads: Optional[int]) -> int:
        if threads is not None:
            if threads < 1:
                raise InvalidArgument(f"threads must be at least 1, got {threads}")
            return threads
        return planning.get_optimal_threads(size, DEFAULT_THREADS)

    @classmethod
    def _native_plan(cls, kind: str, x: np.ndarray, threads: int, n: Optional[int] = None) -> Any:
        """
        Cached pyfftw.builders object for arrays shaped like x.

        Args:
            kind: 'fft', 'rfft' or 'irfft'
            x: Array the plan is built for (transform along the last axis)
            threads: Number of FFTW threads
            n: Output length, only used by 'irfft'

        Returns:
            The FFTW object, upgraded to a measured plan once used often
        """
        key = (kind, x.shape, x.dtype.str, threads, n)
        with _cache_lock:
            count = cls._touch(key)
            fft_obj = cls._native_plans.get(key)

            if fft_obj is not None:
                cls._performance_metrics['plan_hits'] += 1
                desired = planning.get_optimal_planner(x.shape[-1], usage_count=count)
                upgrade = (AUTO_UPGRADE and desired == MEASURE_PLANNER
                           and cls._plan_quality.get(key) != MEASURE_PLANNER)
                if not upgrade:
                    return fft_obj
                cls._performance_metrics['plan_upgrades'] += 1
                planner = desired
                logger.debug(f"Upgrading native {kind} plan for shape {x.shape} to {planner}")
            else:
                cls._performance_metrics['plan_misses'] += 1
                planner = DEFAULT_PLANNER

            builder = getattr(pyfftw.builders, kind)
            extra = {'n': n} if kind == 'irfft' else {}
            start_time = time.time()
            fft_obj = builder(
                x,
                axis=-1,
                threads=threads,
                planner_effort=planner,
                auto_align_input=AUTO_ALIGN,
                auto_contiguous=True,
                overwrite_input=False,
                **extra
            )
            cls._performance_metrics['planning_time'] += time.time() - start_time

            cls._native_plans[key] = fft_obj
            cls._plan_quality[key] = planner
            cls._evict(cls._native_plans)
            return fft_obj

    @classmethod
    def clear_cache(cls, older_than: Optional[float] = None):
        """
        Clear cached plans to free memory.

        Args:
            older_than: Clear plans unused for this many seconds (None = clear all)
        """
        with _cache_lock:
            if older_than is None:
                cls._real_plans.clear()
                cls._native_plans.clear()
                cls._plan_quality.clear()
                cls._call_count.clear()
                cls._last_used.clear()
                return

            now = time.time()
            stale = [key for key, last_used in cls._last_used.items()
                     if now - last_used > older_than]
            for key in stale:
                cls._real_plans.pop(key, None)
                cls._native_plans.pop(key, None)
                cls._plan_quality.pop(key, None)
                cls._call_count.pop(key, None)
                cls._last_used.pop(key, None)

    # ------------------------------------------------------------------
    # execution
    # ------------------------------------------------------------------

    @classmethod
    def _resolve_backend(cls, backend: Optional[str]) -> str:
        backend = DEFAULT_BACKEND if backend is None else backend
        if backend not in BACKENDS:
            raise InvalidArgument(f"Unknown backend {backend!r}, expected one of {BACKENDS}")
        return backend

    @classmethod
    def _run(cls, backend: str, n: int, func: Callable, *args) -> np.ndarray:
        """Run a backend call, surfacing its failures as ExecutionFailure."""
        start_time = time.time()
        try:
            result = func(*args)
        except ExecutionFailure:
            with _cache_lock:
                cls._performance_metrics['failures'] += 1
            raise
        except (ValueError, TypeError, RuntimeError, MemoryError) as e:
            with _cache_lock:
                cls._performance_metrics['failures'] += 1
            logger.error(f"{backend} backend failed for length {n}: {e}")
            raise ExecutionFailure(f"{backend} backend failed for length {n}: {e}") from e
        elapsed = time.time() - start_time
        with _cache_lock:
            cls._performance_metrics['calls'] += 1
            cls._performance_metrics['execution_time'] += elapsed
        return result

    @classmethod
    def _complex_transform(cls, x: np.ndarray, forward: bool, backend: str,
                           threads: Optional[int]) -> np.ndarray:
        """Unnormalized complex DFT along the last axis."""
        n = x.shape[-1]
        x = np.ascontiguousarray(x, dtype=np.complex128)

        if backend == 'planned':
            return cls._run(backend, n, radix.execute, cls.get_plan(n), x, forward)

        if backend == 'numpy':
            if forward:
                return cls._run(backend, n, np.fft.fft, x)
            return cls._run(backend, n, lambda a: np.fft.ifft(a, norm='forward'), x)

        fft_obj = cls._native_plan('fft', x, cls._select_threads(x.size, threads))
        if forward:
            return cls._run(backend, n, lambda a: fft_obj(a).copy(), x)
        # the inverse DFT is the conjugate of the forward DFT of the conjugate
        return cls._run(backend, n, lambda a: np.conj(fft_obj(np.conj(a))), x)

    @classmethod
    def _packed_transform(cls, x: np.ndarray, forward: bool, backend: str,
                          threads: Optional[int]) -> np.ndarray:
        """Unnormalized real transform in the packed layout along the last axis."""
        n = x.shape[-1]
        x = np.ascontiguousarray(x, dtype=np.float64)

        if backend == 'planned':
            return cls._run(backend, n, radix.execute_packed, cls.get_plan(n), x, forward)

        if backend == 'numpy':
            if forward:
                return cls._run(backend, n, fftpack.rfft, x)
            # fftpack's inverse includes 1/n
            return cls._run(backend, n, lambda a: fftpack.irfft(a) * n, x)

        nthreads = cls._select_threads(x.size, threads)
        if forward:
            fft_obj = cls._native_plan('rfft', x, nthreads)
            return cls._run(backend, n, lambda a: pack(fft_obj(a), n), x)

        half = unpack(x)
        fft_obj = cls._native_plan('irfft', half, nthreads, n)
        # FFTW objects normalise the inverse by 1/n
        return cls._run(backend, n, lambda a: fft_obj(a) * n, half)

    @classmethod
    def _complex_along(cls, x: np.ndarray, axis: int, forward: bool, backend: str,
                       threads: Optional[int]) -> np.ndarray:
        """Unnormalized complex DFT along `axis`."""
        result = cls._complex_transform(np.moveaxis(x, axis, -1), forward, backend, threads)
        return np.moveaxis(result, -1, axis)

    @staticmethod
    def _prepare(data, axis: int, axes: Optional[Sequence[int]] = None
                 ) -> Tuple[np.ndarray, Tuple[int, ...], np.dtype, np.dtype]:
        """Validate input, normalise the transformed axes and pick the output precision."""
        array = np.asarray(data)
        if array.ndim == 0:
            raise InvalidArgument("FFT input must have at least one dimension")
        if array.dtype.kind not in "iufc":
            raise InvalidArgument(f"FFT input must be numeric, got {array.dtype}")

        if axes is None:
            requested = (axis,)
        elif isinstance(axes, numbers.Integral):
            requested = (axes,)
        else:
            requested = tuple(axes)
        if not requested:
            raise InvalidArgument("At least one axis must be transformed")
        normalized = []
        for ax in requested:
            try:
                ax = operator.index(ax)
            except TypeError:
                raise InvalidArgument(f"axis must be an integer, got {ax!r}") from None
            if not -array.ndim <= ax < array.ndim:
                raise InvalidArgument(f"axis {ax} is out of bounds for array of dimension {array.ndim}")
            if array.shape[ax] == 0:
                raise InvalidArgument("Transform length must be positive, got 0")
            normalized.append(ax % array.ndim)
        if len(set(normalized)) != len(normalized):
            raise InvalidArgument(f"Repeated axis in {requested}")

        if array.dtype in (np.float32, np.complex64):
            return array, tuple(normalized), np.dtype(np.float32), np.dtype(np.complex64)
        return array, tuple(normalized), np.dtype(np.float64), np.dtype(np.complex128)

    @staticmethod
    def _finish(result: np.ndarray, fct: float, dtype: np.dtype) -> np.ndarray:
        if fct != 1.0:
            result = result * fct
        return result.astype(dtype, copy=False)

    # ------------------------------------------------------------------
    # transforms
    # ------------------------------------------------------------------

    @classmethod
    def fft(cls, data,
            forward: bool = True,
            normalize: Union[Normalization, str, None] = None,
            scale: Optional[float] = None,
            axis: int = -1,
            backend: Optional[str] = None,
            threads: Optional[int] = None,
            axes: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Compute the discrete Fourier transform of `data`.

        complex input gives a complex result of the same length. real input
        transformed forward goes through the packed real transform and is
        expanded to the full Hermitian spectrum.

        Args:
            data: Input array
            forward: Direction of the transform
            normalize: Normalization mode (None = BACKWARD)
            scale: Explicit factor for Normalization.CUSTOM
            axis: Axis to transform
            backend: 'pyfftw', 'numpy' or 'planned' (None = configured default)
            threads: Number of threads for the native backend (None = auto-select)
            axes: Several axes to transform, overrides `axis`. normalization
                uses the product of their lengths

        Returns:
            Complex transformed array
        """
        array, axes, _, cdtype = cls._prepare(data, axis, axes)
        backend = cls._resolve_backend(backend)
        n = int(np.prod([array.shape[ax] for ax in axes]))
        fct = scaling_factor(normalize, n, forward, scale)

        result = array
        for ax in axes:
            if forward and not np.iscomplexobj(result):
                packed = cls._packed_transform(np.moveaxis(result, ax, -1), True, backend, threads)
                result = np.moveaxis(symmetrize(packed), -1, ax)
            else:
                result = cls._complex_along(result, ax, forward, backend, threads)
        return cls._finish(result, fct, cdtype)

    @classmethod
    def ifft(cls, data, normalize=None, scale=None, axis=-1, backend=None, threads=None,
             axes=None) -> np.ndarray:
        """Inverse transform, same as fft(data, forward=False, ...)."""
        return cls.fft(data, False, normalize, scale, axis, backend, threads, axes)

    @classmethod
    def rfft(cls, data,
             normalize: Union[Normalization, str, None] = None,
             scale: Optional[float] = None,
             axis: int = -1,
             backend: Optional[str] = None,
             threads: Optional[int] = None,
             axes: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Forward transform of real input, returning the n//2 + 1 non-redundant terms.

        with several axes the real transform runs along the last of them and
        complex transforms along the others, as numpy.fft.rfftn does.

        Args:
            data: Real input array
            normalize: Normalization mode (None = BACKWARD)
            scale: Explicit factor for Normalization.CUSTOM
            axis: Axis to transform
            backend: Execution backend (None = configured default)
            threads: Number of threads for the native backend
            axes: Several axes to transform, overrides `axis`

        Returns:
            Complex half spectrum
        """
        array, axes, _, cdtype = cls._prepare(data, axis, axes)
        if np.iscomplexobj(array):
            raise InvalidArgument("rfft expects real input")
        backend = cls._resolve_backend(backend)
        n = int(np.prod([array.shape[ax] for ax in axes]))
        fct = scaling_factor(normalize, n, True, scale)

        *others, last = axes
        packed = cls._packed_transform(np.moveaxis(array, last, -1), True, backend, threads)
        result = np.moveaxis(unpack(packed), -1, last)
        for ax in others:
            result = cls._complex_along(result, ax, True, backend, threads)
        return cls._finish(result, fct, cdtype)

    @classmethod
    def irfft(cls, data,
              n: Optional[int] = None,
              normalize: Union[Normalization, str, None] = None,
              scale: Optional[float] = None,
              axis: int = -1,
              backend: Optional[str] = None,
              threads: Optional[int] = None,
              axes: Optional[Sequence[int]] = None) -> np.ndarray:
        """
        Inverse of rfft.

        Args:
            data: Half spectrum (complex)
            n: Length of the real output along the last transformed axis
                (None = 2*(m-1) for m input terms)
            normalize: Normalization mode (None = BACKWARD)
            scale: Explicit factor for Normalization.CUSTOM
            axis: Axis to transform
            backend: Execution backend (None = configured default)
            threads: Number of threads for the native backend
            axes: Several axes to transform, overrides `axis`. the half
                spectrum lies along the last of them

        Returns:
            Real array of length n along the last transformed axis
        """
        array, axes, rdtype, _ = cls._prepare(data, axis, axes)
        *others, last = axes
        m = array.shape[last]
        if n is None:
            n = 2 * (m - 1) if m > 1 else 1
        if n <= 0 or half_length(n) != m:
            raise InvalidArgument(f"{m} complex terms do not describe a length-{n} real transform")
        backend = cls._resolve_backend(backend)
        total = n * int(np.prod([array.shape[ax] for ax in others]))
        fct = scaling_factor(normalize, total, False, scale)

        result = array
        for ax in others:
            result = cls._complex_along(result, ax, False, backend, threads)
        packed = pack(np.moveaxis(result, last, -1), n)
        result = np.moveaxis(cls._packed_transform(packed, False, backend, threads), -1, last)
        return cls._finish(result, fct, rdtype)

    @classmethod
    def fft_packed(cls, data,
                   forward: bool = True,
                   normalize: Union[Normalization, str, None] = None,
                   scale: Optional[float] = None,
                   axis: int = -1,
                   backend: Optional[str] = None,
                   threads: Optional[int] = None) -> np.ndarray:
        """
        Real transform in the packed layout, keeping the input length.

        forward: real signal -> packed spectrum. backward: packed spectrum ->
        real signal.
        """
        array, (axis,), rdtype, _ = cls._prepare(data, axis)
        if np.iscomplexobj(array):
            raise InvalidArgument("fft_packed expects real input")
        backend = cls._resolve_backend(backend)
        fct = scaling_factor(normalize, array.shape[axis], forward, scale)

        result = cls._packed_transform(np.moveaxis(array, axis, -1), forward, backend, threads)
        return np.moveaxis(cls._finish(result, fct, rdtype), -1, axis)

    @classmethod
    def _trig_transform(cls, kind: str, data, type: int, forward: bool,
                        normalize: Union[Normalization, str, None], scale: Optional[float],
                        axis: int, axes: Optional[Sequence[int]], threads: Optional[int]) -> np.ndarray:
        """Shared body of dct and dst, run through scipy.fft."""
        array, axes, rdtype, cdtype = cls._prepare(data, axis, axes)
        if type not in (1, 2, 3, 4):
            raise InvalidArgument(f"{kind.upper()} type must be 1, 2, 3 or 4, got {type!r}")
        if kind == 'dct' and type == 1 and any(array.shape[ax] < 2 for ax in axes):
            raise InvalidArgument("DCT type 1 needs at least 2 points along each axis")

        mode = Normalization.parse(normalize)
        if mode is Normalization.CUSTOM:
            if scale is None:
                raise InvalidArgument("Normalization.CUSTOM requires an explicit scale")
            norm = Normalization.BACKWARD.value
        elif scale is not None:
            raise InvalidArgument(f"scale is only accepted with Normalization.CUSTOM, not {mode.value}")
        else:
            norm = mode.value
            scale = 1.0

        func = getattr(scipy_fft, f"{kind}n" if forward else f"i{kind}n")
        nthreads = cls._select_threads(array.size, threads)
        n = int(np.prod([array.shape[ax] for ax in axes]))
        result = cls._run('scipy', n,
                          lambda a: func(a, type=type, axes=axes, norm=norm, workers=nthreads),
                          array)
        return cls._finish(result, float(scale), cdtype if np.iscomplexobj(array) else rdtype)

    @classmethod
    def dct(cls, data,
            type: int = 2,
            forward: bool = True,
            normalize: Union[Normalization, str, None] = None,
            scale: Optional[float] = None,
            axis: int = -1,
            axes: Optional[Sequence[int]] = None,
            threads: Optional[int] = None) -> np.ndarray:
        """
        Discrete cosine transform of type 1 to 4.

        normalization follows scipy.fft: BACKWARD leaves the forward
        transform unscaled, ORTHO makes it orthonormal, FORWARD scales the
        forward transform. the inverse (forward=False) of type k undoes the
        forward type k under the same mode.

        Args:
            data: Real or complex input array
            type: DCT type, 1 to 4
            forward: False for the inverse transform
            normalize: Normalization mode (None = BACKWARD)
            scale: Explicit factor for Normalization.CUSTOM, applied to the
                unscaled transform
            axis: Axis to transform
            axes: Several axes to transform, overrides `axis`
            threads: Number of worker threads (None = auto-select)

        Returns:
            Transformed array of the same shape
        """
        return cls._trig_transform('dct', data, type, forward, normalize, scale, axis, axes, threads)

    @classmethod
    def dst(cls, data, type=2, forward=True, normalize=None, scale=None, axis=-1, axes=None,
            threads=None) -> np.ndarray:
        """Discrete sine transform of type 1 to 4, arguments as in dct."""
        return cls._trig_transform('dst', data, type, forward, normalize, scale, axis, axes, threads)

    # ------------------------------------------------------------------
    # configuration and statistics
    # ------------------------------------------------------------------

    @classmethod
    def reset_metrics(cls):
        """Reset performance metrics."""
        with _cache_lock:
            for key in cls._performance_metrics:
                cls._performance_metrics[key] = 0 if isinstance(cls._performance_metrics[key], int) else 0.0

    @classmethod
    def get_stats(cls) -> Dict:
        """Get statistics about the plan caches and executed transforms."""
        with _cache_lock:
            stats = cls._performance_metrics.copy()
            if stats['calls'] > 0:
                stats['avg_execution_time'] = stats['execution_time'] / stats['calls']
            stats.update({
                'real_plans': len(cls._real_plans),
                'native_plans': len(cls._native_plans),
                'measured_plans': sum(1 for q in cls._plan_quality.values() if q == MEASURE_PLANNER),
                'total_requests': sum(cls._call_count.values()),
                'backend': DEFAULT_BACKEND,
            })
            return stats


def set_default_backend(backend: str):
    """Set the backend used when none is passed explicitly."""
    global DEFAULT_BACKEND
    DEFAULT_BACKEND = SmartFFT._resolve_backend(backend)


def set_num_threads(threads: int):
    """Set the maximum number of threads for native FFT computations."""
    global DEFAULT_THREADS
    if not isinstance(threads, numbers.Integral) or isinstance(threads, bool) or threads < 1:
        raise InvalidArgument(f"threads must be a positive integer, got {threads!r}")
    DEFAULT_THREADS = threads


def set_planner_effort(planner: str):
    """Set the default FFTW planning strategy."""
    global DEFAULT_PLANNER
    valid = (planning.PLANNER_ESTIMATE, planning.PLANNER_MEASURE,
             planning.PLANNER_PATIENT, planning.PLANNER_EXHAUSTIVE)
    if planner not in valid:
        raise InvalidArgument(f"Unknown planner {planner!r}, expected one of {valid}")
    DEFAULT_PLANNER = planner


def set_max_cache_size(size: int = 64):
    """
    Set the maximum number of plans of each kind to keep in cache.

    Args:
        size: Maximum number of plans to keep in cache
    """
    global MAX_CACHE_SIZE
    if not isinstance(size, numbers.Integral) or isinstance(size, bool) or size < 1:
        raise InvalidArgument(f"Cache size must be a positive integer, got {size!r}")
    MAX_CACHE_SIZE = size


# Simplified function interfaces
def fft(data, forward=True, normalize=None, scale=None, axis=-1, backend=None, threads=None, axes=None):
    """FFT of real or complex data."""
    return SmartFFT.fft(data, forward, normalize, scale, axis, backend, threads, axes)


def ifft(data, normalize=None, scale=None, axis=-1, backend=None, threads=None, axes=None):
    """Inverse FFT of real or complex data."""
    return SmartFFT.ifft(data, normalize, scale, axis, backend, threads, axes)


def rfft(data, normalize=None, scale=None, axis=-1, backend=None, threads=None, axes=None):
    """FFT of real data, non-redundant half of the spectrum."""
    return SmartFFT.rfft(data, normalize, scale, axis, backend, threads, axes)


def irfft(data, n=None, normalize=None, scale=None, axis=-1, backend=None, threads=None, axes=None):
    """Inverse of rfft."""
    return SmartFFT.irfft(data, n, normalize, scale, axis, backend, threads, axes)


def fft_packed(data, forward=True, normalize=None, scale=None, axis=-1, backend=None, threads=None):
    """Real FFT in the packed real layout."""
    return SmartFFT.fft_packed(data, forward, normalize, scale, axis, backend, threads)


def dct(data, type=2, forward=True, normalize=None, scale=None, axis=-1, axes=None, threads=None):
    """Discrete cosine transform of type 1 to 4."""
    return SmartFFT.dct(data, type, forward, normalize, scale, axis, axes, threads)


def dst(data, type=2, forward=True, normalize=None, scale=None, axis=-1, axes=None, threads=None):
    """Discrete sine transform of type 1 to 4."""
    return SmartFFT.dst(data, type, forward, normalize, scale, axis, axes, threads)


def get_plan(n, dtype=np.float64):
    """Get the cached real FFT plan for length n."""
    return SmartFFT.get_plan(n, dtype)


def get_stats():
    """Get statistics about the plan caches."""
    return SmartFFT.get_stats()


def reset_metrics():
    """Zero the call, hit/miss and timing counters reported by get_stats."""
    SmartFFT.reset_metrics()


def clear_cache(older_than=None):
    """Clear the plan caches."""
    SmartFFT.clear_cache(older_than)
