"""
Reference mixed-radix executor driven by a RealFFTPlan.

the transform is a decimation-in-time Cooley-Tukey recursion over the plan's
factor sequence, vectorised with NumPy over the last axis. the twiddles
between passes are read from the plan's per-pass tables; generic factors
take their butterfly roots from the plan's generic kernel tables. it is
meant for checking plans and for small lengths, not as a replacement for the
native backend (a generic factor p costs an O(p^2) butterfly).
"""

import logging

import numpy as np

from .errors import ExecutionFailure
from .planning import RealFFTPlan
from .packing import pack, unpack, symmetrize

logger = logging.getLogger("impulse.radix")


def _pass_twiddles(plan: RealFFTPlan, k: int, l1: int) -> np.ndarray:
    """
    ip x ido matrix of W_n^{l1*j*i} for the k-th factor.

    the plan stores the columns 1 <= i <= (ido-1)//2. the upper columns
    follow from W_n^{l1*j*(ido-i)} = W_ip^j * conj(W_n^{l1*j*i}), and the
    middle column of an even ido comes from the root table.
    """
    ip = plan.descriptors[k].factor
    n = plan.length
    ido = n // (l1 * ip)
    out = np.ones((ip, ido), dtype=np.complex128)
    if ido == 1:
        return out

    half = (ido - 1) // 2
    rows = plan.twiddles(k).reshape(ip - 1, ido - 1).astype(np.float64)
    stored = rows[:, 0:2 * half:2] + 1j * rows[:, 1:2 * half:2]
    out[1:, 1:half + 1] = stored

    j = np.arange(1, ip)
    w_ip = plan.roots.take(j * (n // ip))[:, None]
    out[1:, ido - half:] = (w_ip * np.conj(stored))[:, ::-1]
    if ido % 2 == 0:
        out[1:, ido // 2] = plan.roots.take(j * l1 * (ido // 2))
    return out


def _butterfly_matrix(plan: RealFFTPlan, k: int) -> np.ndarray:
    """p x p DFT matrix W_p^{s*r} for the k-th factor."""
    d = plan.descriptors[k]
    p = d.factor
    exponents = np.outer(np.arange(p), np.arange(p)) % p
    generic = plan.generic_twiddles(k)
    if generic is not None:
        roots = generic[0::2] + 1j * generic[1::2]
        return roots.astype(np.complex128)[exponents]
    return plan.roots.take(exponents * (plan.length // p))


def _transform(plan: RealFFTPlan, x: np.ndarray, k: int, stride: int) -> np.ndarray:
    m = x.shape[-1]
    if m == 1:
        return x
    p = plan.descriptors[k].factor
    q = m // p
    lead = x.shape[:-1]

    # sub[..., r, j] = x[..., j*p + r]
    sub = np.swapaxes(x.reshape(lead + (q, p)), -1, -2)
    sub = _transform(plan, sub, k + 1, stride * p)

    # twiddle W_m^{r*j} = W_n^{stride*r*j}, stride being l1 of this pass
    sub = sub * _pass_twiddles(plan, k, stride)

    out = np.einsum('sr,...rj->...sj', _butterfly_matrix(plan, k), sub)
    return out.reshape(lead + (m,))


def execute(plan: RealFFTPlan, data: np.ndarray, forward: bool = True) -> np.ndarray:
    """
    Unnormalized complex DFT of `data` along its last axis.

    Args:
        plan: Plan built for the length of the last axis
        data: Real or complex input
        forward: Direction (the backward transform uses conjugate roots)

    Returns:
        complex128 array of the same shape

    Raises:
        ExecutionFailure: if the plan length does not match the data
    """
    data = np.asarray(data)
    if data.ndim == 0 or data.shape[-1] != plan.length:
        raise ExecutionFailure(
            f"Plan for length {plan.length} cannot transform data of shape {data.shape}")

    x = data.astype(np.complex128, copy=True)
    if plan.length == 1:
        return x
    if not forward:
        x = np.conj(x)
    y = _transform(plan, x, 0, 1)
    if not forward:
        y = np.conj(y)
    return y


def execute_packed(plan: RealFFTPlan, data: np.ndarray, forward: bool = True) -> np.ndarray:
    """
    Unnormalized real transform in the packed layout.

    forward maps a real signal to its packed spectrum, backward maps a packed
    spectrum back to a real signal (scaled by n).
    """
    data = np.asarray(data)
    if np.iscomplexobj(data):
        raise ExecutionFailure("Packed transforms take real input")
    n = plan.length
    if forward:
        spectrum = execute(plan, data, forward=True)
        return pack(spectrum[..., :n // 2 + 1], n)
    full = symmetrize(data)
    return execute(plan, full, forward=False).real.copy()


def execute_half(plan: RealFFTPlan, data: np.ndarray) -> np.ndarray:
    """Forward real transform returning the n//2 + 1 non-redundant terms."""
    return unpack(execute_packed(plan, data, forward=True))
