"""
Packed real FFT layout.

a real-to-half-complex transform of length n is stored in n reals:

    [Re Y0, Re Y1, Im Y1, Re Y2, Im Y2, ..., (Re Y_{n/2} if n is even)]

Im Y0 and, for even n, Im Y_{n/2} are always zero for real input and are
dropped. the functions here convert between that layout, the half spectrum
(n//2 + 1 complex values) and the full Hermitian spectrum. all of them work
along the last axis.
"""

import logging
from typing import Optional

import numpy as np

from .errors import InvalidArgument

logger = logging.getLogger("impulse.packing")


def _complex_dtype(dtype) -> np.dtype:
    return np.result_type(dtype, np.complex64)


def _real_dtype(dtype) -> np.dtype:
    return np.empty(0, dtype=_complex_dtype(dtype)).real.dtype


def half_length(n: int) -> int:
    """Number of non-redundant complex terms of a length-n real transform."""
    return n // 2 + 1


def unpack(packed: np.ndarray) -> np.ndarray:
    """
    Expand a packed real spectrum into its n//2 + 1 complex terms.

    Args:
        packed: Real array, packed layout along the last axis

    Returns:
        Complex array with n//2 + 1 elements along the last axis
    """
    packed = np.asarray(packed)
    if np.iscomplexobj(packed):
        raise InvalidArgument("unpack expects a real packed array")
    if packed.ndim == 0 or packed.shape[-1] == 0:
        raise InvalidArgument("unpack expects at least one element")

    n = packed.shape[-1]
    out = np.zeros(packed.shape[:-1] + (half_length(n),), dtype=_complex_dtype(packed.dtype))
    out[..., 0] = packed[..., 0]

    pairs = (n - 1) // 2
    out.real[..., 1:1 + pairs] = packed[..., 1:2 * pairs:2]
    out.imag[..., 1:1 + pairs] = packed[..., 2:2 * pairs + 1:2]
    if n % 2 == 0:
        # lone real value at the end, its imaginary part is zero
        out[..., -1] = packed[..., -1]
    return out


def pack(half: np.ndarray, n: int) -> np.ndarray:
    """
    Store a half spectrum in the packed real layout of length n.

    the imaginary parts of term 0 and (for even n) term n/2 are discarded.

    Args:
        half: Complex array with n//2 + 1 elements along the last axis
        n: Length of the real transform

    Returns:
        Real array with n elements along the last axis
    """
    half = np.asarray(half)
    if n <= 0:
        raise InvalidArgument(f"Transform length must be positive, got {n}")
    if half.ndim == 0 or half.shape[-1] != half_length(n):
        raise InvalidArgument(
            f"A length-{n} real transform has {half_length(n)} complex terms, "
            f"got {0 if half.ndim == 0 else half.shape[-1]}")

    out = np.empty(half.shape[:-1] + (n,), dtype=_real_dtype(half.dtype))
    out[..., 0] = half[..., 0].real

    pairs = (n - 1) // 2
    out[..., 1:2 * pairs:2] = half[..., 1:1 + pairs].real
    out[..., 2:2 * pairs + 1:2] = half[..., 1:1 + pairs].imag
    if n % 2 == 0:
        out[..., -1] = half[..., -1].real
    return out


def symm_target_size(data: np.ndarray, n: Optional[int] = None) -> int:
    """
    Length of the full spectrum that `symmetrize` produces for `data`.

    packed real input always expands to its own length. a half spectrum of m
    terms comes from a real signal of length 2m-2 or 2m-1; pass `n` to say
    which. without it, an exactly zero imaginary part in the last term is
    taken to mean an even length, which is ambiguous for some inputs.
    """
    data = np.asarray(data)
    if data.ndim == 0 or data.shape[-1] == 0:
        raise InvalidArgument("Cannot symmetrize an empty array")
    m = data.shape[-1]

    if not np.iscomplexobj(data):
        if n is not None and n != m:
            raise InvalidArgument(f"Packed real input of length {m} cannot expand to {n}")
        return m

    if n is not None:
        if half_length(n) != m:
            raise InvalidArgument(f"{m} complex terms do not describe a length-{n} transform")
        return n

    logger.warning("Inferring transform length from the last imaginary part; "
                   "pass n explicitly to avoid ambiguity")
    if np.all(data[..., -1].imag == 0.0):
        return 2 * m - 2 if m > 1 else 1
    return 2 * m - 1


def symmetrize(data: np.ndarray, n: Optional[int] = None) -> np.ndarray:
    """
    Rebuild the full Hermitian spectrum from the non-redundant terms.

    Args:
        data: Packed real array, or half spectrum (complex) along the last axis
        n: Length of the original real signal (see symm_target_size)

    Returns:
        Complex array with n elements along the last axis, with
        out[n-k] == conj(out[k]) for 1 <= k < n
    """
    data = np.asarray(data)
    out_len = symm_target_size(data, n)

    half = unpack(data) if not np.iscomplexobj(data) else data
    out = np.zeros(data.shape[:-1] + (out_len,), dtype=_complex_dtype(half.dtype))
    count = min(half.shape[-1], out_len)
    out[..., :count] = half[..., :count]

    mirror = np.arange(1, (out_len + 1) // 2)
    out[..., out_len - mirror] = np.conj(out[..., mirror])
    return out
