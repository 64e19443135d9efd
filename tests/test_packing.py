import unittest

import numpy as np
from scipy import fftpack

from impulse.errors import InvalidArgument
from impulse.packing import pack, unpack, symmetrize, symm_target_size, half_length


class TestPacking(unittest.TestCase):

    def setUp(self):
        np.random.seed(42)

    def test_unpack_even(self):
        half = unpack(np.array([1.0, 2.0, 3.0, 4.0]))
        self.assertTrue(np.array_equal(half, [1, 2 + 3j, 4]))

    def test_unpack_odd(self):
        half = unpack(np.array([1.0, 2.0, 3.0]))
        self.assertTrue(np.array_equal(half, [1, 2 + 3j]))

    def test_unpack_single(self):
        self.assertTrue(np.array_equal(unpack(np.array([5.0])), [5.0]))

    def test_matches_fftpack_layout(self):
        for n in (1, 2, 5, 8, 33):
            x = np.random.random(n)
            self.assertTrue(np.allclose(unpack(fftpack.rfft(x)), np.fft.rfft(x), atol=1e-12), f"n={n}")

    def test_pack_inverts_unpack(self):
        for n in (1, 2, 3, 4, 7, 10):
            packed = np.random.random(n)
            self.assertEqual(half_length(n), n // 2 + 1)
            self.assertTrue(np.array_equal(pack(unpack(packed), n), packed), f"n={n}")

    def test_batched(self):
        packed = np.random.random((3, 6))
        half = unpack(packed)
        self.assertEqual(half.shape, (3, 4))
        self.assertTrue(np.array_equal(pack(half, 6), packed))

    def test_single_precision(self):
        half = unpack(np.ones(4, dtype=np.float32))
        self.assertEqual(half.dtype, np.complex64)
        self.assertEqual(pack(half, 4).dtype, np.float32)

    def test_invalid(self):
        with self.assertRaises(InvalidArgument):
            unpack(np.array([1 + 1j, 2]))
        with self.assertRaises(InvalidArgument):
            unpack(np.array([]))
        with self.assertRaises(InvalidArgument):
            pack(np.ones(3, dtype=complex), 0)
        with self.assertRaises(InvalidArgument):
            pack(np.ones(3, dtype=complex), 6)


class TestSymmetrize(unittest.TestCase):

    def setUp(self):
        np.random.seed(7)

    def test_packed_input(self):
        out = symmetrize(np.array([1.0, 2.0, 3.0, 4.0]))
        self.assertTrue(np.array_equal(out, [1, 2 + 3j, 4, 2 - 3j]))

    def test_full_spectrum(self):
        for n in (1, 2, 5, 6, 31, 64):
            x = np.random.random(n)
            out = symmetrize(fftpack.rfft(x))
            self.assertTrue(np.allclose(out, np.fft.fft(x), atol=1e-12), f"n={n}")

    def test_hermitian(self):
        for n in (5, 8, 9):
            out = symmetrize(np.random.random(n))
            for k in range(1, n):
                self.assertEqual(out[n - k], np.conj(out[k]))

    def test_half_spectrum_with_length(self):
        x = np.random.random(5)
        out = symmetrize(np.fft.rfft(x), n=5)
        self.assertTrue(np.allclose(out, np.fft.fft(x), atol=1e-12))
        self.assertEqual(symm_target_size(np.fft.rfft(np.ones(6)), n=6), 6)

    def test_half_spectrum_inferred_length(self):
        half = np.array([4.0, 1 + 1j, 2.0 + 0j])
        with self.assertLogs('impulse.packing', level='WARNING'):
            self.assertEqual(symm_target_size(half), 4)
        with self.assertLogs('impulse.packing', level='WARNING'):
            self.assertEqual(symm_target_size(np.array([4.0, 1 + 1j, 2 + 1j])), 5)

    def test_mismatched_length(self):
        with self.assertRaises(InvalidArgument):
            symm_target_size(np.ones(3, dtype=complex), n=6)
        with self.assertRaises(InvalidArgument):
            symm_target_size(np.ones(4), n=5)
        with self.assertRaises(InvalidArgument):
            symmetrize(np.array([]))


if __name__ == "__main__":
    unittest.main()
