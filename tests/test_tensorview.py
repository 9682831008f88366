import unittest
import numpy as np

from contractsum import TensorView
from contractsum.backend import strides, as_strided, contiguous, _gather_strided
from utils import backends

class TestTensorView(unittest.TestCase):

    def test_strides(self) -> None:
        for xp in backends:
            a = xp.reshape(xp.arange(24), (2, 3, 4))
            self.assertEqual(strides(a), (12, 4, 1))
            self.assertEqual(strides(a[:, ::2, :]), (12, 8, 1))
            self.assertEqual(strides(a[::-1, :, :]), (-12, 4, 1))

        rec = np.zeros((2, 3), dtype=[("x", np.int8), ("y", np.float64)])
        self.assertIsNone(strides(rec["y"]))
        self.assertIsNone(TensorView.of(rec["y"]))
        self.assertEqual(strides(rec), (3, 1))

    def test_permuted(self) -> None:
        for xp in backends:
            a = xp.reshape(xp.arange(12), (3, 4))
            view = TensorView.of(a).permuted((1, 0))
            self.assertEqual(view.shape, (4, 3))
            self.assertEqual(view.strides, (1, 4))
            self.assertTrue(np.array_equal(view.materialize(), a.T))
            with self.assertRaises(RuntimeError):
                TensorView.of(a).permuted((0, 0))

    def test_merged(self) -> None:
        for xp in backends:
            a = xp.reshape(xp.arange(27), (3, 3, 3))
            view = TensorView.of(a).merged((0, 1, 0), (3, 3))
            self.assertEqual(view.strides, (10, 3))
            res = view.materialize()
            for i in range(3):
                for j in range(3):
                    self.assertEqual(res[i, j], a[i, j, i])
            self.assertFalse(res.flags.writeable)
            self.assertTrue(np.shares_memory(res, a))
            with self.assertRaises(RuntimeError):
                TensorView.of(a[:, :2, :]).merged((0, 0, 1), (3, 3))

    def test_positive(self) -> None:
        for xp in backends:
            a = xp.reshape(xp.arange(12), (3, 4))
            self.assertTrue(TensorView.of(a).is_positive())
            self.assertFalse(TensorView.of(a[::-1, :]).is_positive())
            self.assertTrue(TensorView.of(a[::-1, :][:1, :]).is_positive())
            self.assertTrue(TensorView.of(contiguous(a[::-1, :])).is_positive())

    def test_gather(self) -> None:
        for xp in backends:
            a = xp.reshape(xp.arange(16), (4, 4))
            diag = _gather_strided(a, (4,), (5,))
            self.assertTrue(np.array_equal(diag, np.diagonal(a)))
            self.assertTrue(np.array_equal(as_strided(a, (4,), (5,)), diag))

if __name__ == "__main__":
    unittest.main()
