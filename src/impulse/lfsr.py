"""
Linear feedback shift registers.

an LFSR is described by its feedback polynomial, given as the list of tap
exponents in descending order (e.g. [5, 3] for x^5 + x^3 + 1). both the
Fibonacci (many-to-one) and Galois (one-to-many) configurations are
supported. a maximal length register of size m produces a sequence of
2^m - 1 bits before repeating.
"""

import logging
from enum import Enum
from typing import Iterator, List, Sequence, Union

import numpy as np

from .errors import InvalidArgument

logger = logging.getLogger("impulse.lfsr")


class LFSRType(Enum):
    FIBONACCI = 'fibonacci'
    GALOIS = 'galois'


class LFSRInitState(Enum):
    """Predefined initial states."""
    SINGLE_TRUE = 'single_true'   # all zeros except the last bit
    ALL_TRUE = 'all_true'


# maximal length polynomials for register sizes 2..24
_TAP_EXAMPLES = (
    (2, 1),
    (3, 2),
    (4, 3),
    (5, 3),
    (6, 5),
    (7, 6),
    (8, 6, 5, 4),
    (9, 5),
    (10, 7),
    (11, 9),
    (12, 11, 10, 4),
    (13, 12, 11, 8),
    (14, 13, 12, 2),
    (15, 14),
    (16, 15, 13, 4),
    (17, 14),
    (18, 11),
    (19, 18, 17, 14),
    (20, 17),
    (21, 19),
    (22, 21),
    (23, 18),
    (24, 23, 22, 17),
)


def lfsr_tap_example(size: int) -> List[int]:
    """
    Return a maximal length tap list for a register of `size` bits.

    Args:
        size: Register size, between 2 and 24

    Returns:
        Tap exponents in descending order
    """
    if not 2 <= size <= 24:
        raise InvalidArgument(
            f"LFSR tap examples are only available for sizes between 2 and 24, got {size}")
    return list(_TAP_EXAMPLES[size - 2])


class LFSR:
    """
    Linear feedback shift register.

    Args:
        taps: Tap exponents in descending order; a trailing 0 (the constant
            term of the polynomial) is ignored
        conf: LFSRType.FIBONACCI or LFSRType.GALOIS
        state: Initial state, either a boolean array of size max(taps) or
            an LFSRInitState
        verbose: Log the register state on every step
        counter_starts_at_zero: Output the bit before updating the state
            (True) or after it (False)
    """

    def __init__(self, taps: Sequence[int],
                 conf: LFSRType = LFSRType.FIBONACCI,
                 state: Union[LFSRInitState, Sequence[bool], np.ndarray] = LFSRInitState.SINGLE_TRUE,
                 verbose: bool = False,
                 counter_starts_at_zero: bool = True):
        taps = [int(t) for t in np.asarray(taps).reshape(-1)]
        if taps and taps[-1] == 0:
            taps = taps[:-1]
        if not taps or min(taps) < 1:
            raise InvalidArgument(f"LFSR taps must be positive exponents, got {taps}")
        if any(a <= b for a, b in zip(taps, taps[1:])):
            raise InvalidArgument(
                f"The LFSR polynomial must be ordered in descending exponent order, got {taps}")
        if not isinstance(conf, LFSRType):
            raise InvalidArgument(f"Unknown LFSR configuration {conf!r}")

        size = taps[0]
        if isinstance(state, LFSRInitState):
            if state is LFSRInitState.ALL_TRUE:
                state = np.ones(size, dtype=bool)
            else:
                state = np.zeros(size, dtype=bool)
                state[-1] = True
        else:
            state = np.asarray(state, dtype=bool).reshape(-1)
            if state.size != size:
                raise InvalidArgument(
                    f"The LFSR state size is {state.size} but must be {size} "
                    f"because that is the highest taps exponent ({taps})")

        self.taps = taps
        self.conf = conf
        self.state = state.copy()
        self._init_state = state.copy()
        self.verbose = verbose
        self.counter_starts_at_zero = counter_starts_at_zero
        self.outbit = False
        self.feedbackbit = False
        self.count = 0
        self._seq_bit_index = size - 1
        self._sequence: List[bool] = []

    @property
    def size(self) -> int:
        return self.state.size

    @property
    def sequence(self) -> np.ndarray:
        """Bits produced so far by calls made with store_sequence=True."""
        return np.array(self._sequence, dtype=bool)

    def reset(self):
        """Restore the initial state and zero the counter.

        Bits already stored in `sequence` are kept; later stored bits are
        appended after them.
        """
        self.state = self._init_state.copy()
        self.count = 0

    def next(self, store_sequence: bool = False) -> bool:
        """Advance the register one step and return the output bit."""
        if self.verbose:
            logger.info(f"State: {self.state.astype(int).tolist()}")

        if self.counter_starts_at_zero:
            out = bool(self.state[self._seq_bit_index])

        if self.conf is LFSRType.FIBONACCI:
            b = False
            for t in self.taps:
                b ^= bool(self.state[t - 1])
            self.state = np.roll(self.state, 1)
            self.feedbackbit = b
            self.state[0] = b
        else:
            self.feedbackbit = bool(self.state[0])
            self.state = np.roll(self.state, -1)
            for k in self.taps[1:]:
                self.state[k - 1] ^= self.feedbackbit

        if not self.counter_starts_at_zero:
            out = bool(self.state[self._seq_bit_index])

        if store_sequence:
            self._sequence.append(out)
        self.count += 1
        self.outbit = out
        return out

    def items(self, n: int = -1, store_sequence: bool = False,
              stop_on_reset: bool = False) -> Iterator[bool]:
        """
        Yield output bits.

        Args:
            n: Number of bits to produce (negative = unbounded)
            store_sequence: Keep the produced bits in `sequence`
            stop_on_reset: Stop once the register is reset while iterating
        """
        generated = 0
        while n < 0 or generated < n:
            if stop_on_reset and generated > 0 and self.count == 0:
                break
            yield self.next(store_sequence=store_sequence)
            generated += 1

    def __iter__(self) -> Iterator[bool]:
        return self.items()

    def generate(self, n: int, store_sequence: bool = False) -> np.ndarray:
        """Produce the next n bits as a boolean array."""
        if n < 0:
            raise InvalidArgument(f"Cannot generate a negative number of bits ({n})")
        return np.fromiter(self.items(n, store_sequence=store_sequence), dtype=bool, count=n)

    def __repr__(self):
        return (f"LFSR(taps={self.taps}, conf={self.conf.value}, "
                f"state={self.state.astype(int).tolist()}, count={self.count})")
