import unittest

import numpy as np
from scipy import fftpack

from impulse import radix
from impulse.errors import ExecutionFailure
from impulse.planning import RealFFTPlan


class TestRadixExecutor(unittest.TestCase):

    def setUp(self):
        np.random.seed(42)
        self.lengths = (1, 2, 3, 4, 5, 7, 8, 12, 30, 49, 97, 123, 128, 210, 1000)
        self.tol = 1e-10

    def _assert_allclose(self, a, b, msg=None):
        self.assertTrue(np.allclose(a, b, rtol=self.tol, atol=self.tol), msg)

    def test_forward_matches_numpy(self):
        for n in self.lengths:
            x = np.random.random(n) + 1j * np.random.random(n)
            self._assert_allclose(radix.execute(RealFFTPlan(n), x), np.fft.fft(x), f"n={n}")

    def test_backward_is_unnormalized(self):
        for n in self.lengths:
            x = np.random.random(n) + 1j * np.random.random(n)
            y = radix.execute(RealFFTPlan(n), x, forward=False)
            self._assert_allclose(y, np.fft.ifft(x) * n, f"n={n}")

    def test_batched_last_axis(self):
        x = np.random.random((4, 3, 30))
        self._assert_allclose(radix.execute(RealFFTPlan(30), x), np.fft.fft(x, axis=-1))

    def test_packed(self):
        for n in self.lengths:
            plan = RealFFTPlan(n)
            x = np.random.random(n)
            packed = radix.execute_packed(plan, x)
            self._assert_allclose(packed, fftpack.rfft(x), f"n={n}")
            self._assert_allclose(radix.execute_packed(plan, packed, forward=False), n * x, f"n={n}")
            self._assert_allclose(radix.execute_half(plan, x), np.fft.rfft(x), f"n={n}")

    def test_pass_twiddles_expand_plan_tables(self):
        for n in (12, 24, 60, 308, 450, 1000):
            plan = RealFFTPlan(n)
            l1 = 1
            for k, ip in enumerate(plan.factors):
                ido = n // (l1 * ip)
                expected = np.exp(-2j * np.pi * l1 * np.outer(np.arange(ip), np.arange(ido)) / n)
                self._assert_allclose(radix._pass_twiddles(plan, k, l1), expected, f"n={n}, k={k}")
                l1 *= ip

    def test_executor_reads_pass_tables(self):
        plan = RealFFTPlan(60)
        x = np.random.random(60) + 1j * np.random.random(60)
        self._assert_allclose(radix.execute(plan, x), np.fft.fft(x))

        # a damaged pass table shows up in the result
        plan.mem.flags.writeable = True
        plan.twiddles(0)[:] = 0.0
        self.assertFalse(np.allclose(radix.execute(plan, x), np.fft.fft(x)))

    def test_length_mismatch(self):
        plan = RealFFTPlan(8)
        with self.assertRaises(ExecutionFailure):
            radix.execute(plan, np.ones(5))
        with self.assertRaises(ExecutionFailure):
            radix.execute(plan, np.float64(1.0))
        with self.assertRaises(ExecutionFailure):
            radix.execute_packed(plan, np.ones(8, dtype=complex))

    def test_does_not_modify_input(self):
        x = np.random.random(12) + 0j
        original = x.copy()
        radix.execute(RealFFTPlan(12), x, forward=False)
        self.assertTrue(np.array_equal(x, original))


if __name__ == "__main__":
    unittest.main()
