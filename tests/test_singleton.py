import unittest
import numpy as np
import opt_einsum as oe

from contractsum import Contraction, SizedContraction, SingletonContraction, SingletonKind, einsum
from contractsum.singletoncontraction import Identity, Permutation, Diagonalization, Summation
from contractsum.backend import strides
from utils import backends, rand_data, rand_int, squared_error

def singleton(eq: str, op) -> SingletonContraction:
    return SingletonContraction(SizedContraction.from_operands(Contraction(eq), op))

class TestSingletonContraction(unittest.TestCase):

    def compare(self, xp, eq: str, op) -> None:
        res = singleton(eq, op)(op)
        exact = oe.contract(eq, op)
        self.assertEqual(res.shape, exact.shape)
        self.assertLess(squared_error(xp, res, exact), 1e-20, eq)

    def test_selection(self) -> None:
        for xp in backends:
            a = rand_data(xp, 3, 3, 4)
            self.assertEqual(singleton("abc->abc", a).kinds, (SingletonKind.IDENTITY,))
            self.assertEqual(singleton("abc->cab", a).kinds, (SingletonKind.PERMUTATION,))
            self.assertEqual(singleton("iij->ji", a).kinds, (SingletonKind.DIAGONALIZATION,))
            self.assertEqual(singleton("abc->ab", a).kinds, (SingletonKind.SUMMATION,))
            self.assertEqual(singleton("abc->ac", a).kinds,
                             (SingletonKind.PERMUTATION, SingletonKind.SUMMATION))
            self.assertEqual(singleton("iij->", a).kinds,
                             (SingletonKind.DIAGONALIZATION, SingletonKind.SUMMATION))

    def test_operations(self) -> None:
        sc = singleton("abc->cb", rand_data(backends[0], 2, 3, 4))
        self.assertEqual(sc.operations, (Permutation((2, 1, 0)), Summation(2, 1)))
        sc = singleton("iji->ij", rand_data(backends[0], 2, 3, 2))
        self.assertEqual(sc.operations, (Diagonalization((0, 1, 0), (2, 3)),))
        self.assertEqual(Identity(), Identity())

    def test_identity_is_view(self) -> None:
        for xp in backends:
            a = rand_data(xp, 2, 3)
            sc = singleton("ij->ij", a)
            self.assertIs(sc.view_singleton(a), a)
            res = sc.contract_singleton(a)
            self.assertFalse(np.shares_memory(res, a))
            self.assertTrue(np.array_equal(res, a))

    def test_permutation(self) -> None:
        for xp in backends:
            a = rand_data(xp, 2, 3)
            sc = singleton("ij->ji", a)
            view = sc.view_singleton(a)
            self.assertTrue(np.shares_memory(view, a))
            res = sc(a)
            self.assertEqual(res.shape, (3, 2))
            for i in range(2):
                for j in range(3):
                    self.assertEqual(res[j, i], a[i, j])
            self.assertFalse(np.shares_memory(res, a))

    def test_diagonal(self) -> None:
        for xp in backends:
            a = rand_data(xp, 4, 4)
            sc = singleton("ii->i", a)
            view = sc.view_singleton(a)
            self.assertTrue(np.shares_memory(view, a))
            self.assertFalse(view.flags.writeable)
            res = sc(a)
            self.assertEqual(res.shape, (4,))
            for k in range(4):
                self.assertEqual(res[k], a[k, k])
            self.assertTrue(res.flags.writeable)

    def test_diagonal_strided(self) -> None:
        for xp in backends:
            a = rand_data(xp, 6, 5, 6)
            self.compare(xp, "iji->ji", a[:, 1:, :])
            self.compare(xp, "iji->ij", a[::2, :, ::2])
            b = a[::-1, :, :]
            view = singleton("iji->ij", b).view_singleton(b)
            self.assertFalse(np.shares_memory(view, a))
            self.compare(xp, "iji->ij", b)
            self.compare(xp, "iji->j", b)

    def test_diagonal_unaligned_strides(self) -> None:
        rec = np.zeros((3, 3), dtype=[("x", np.int8), ("y", np.float64)])
        rec["y"] = np.arange(9.0).reshape(3, 3)
        field = rec["y"]
        self.assertIsNone(strides(field))
        res = singleton("ii->i", field)(field)
        self.assertTrue(np.array_equal(res, [0.0, 4.0, 8.0]))
        cube = np.zeros((3, 2, 3), dtype=[("x", np.int8), ("y", np.float64)])
        cube["y"] = np.arange(18.0).reshape(3, 2, 3)
        res = singleton("iji->ji", cube["y"])(cube["y"])
        self.assertTrue(np.array_equal(res, np.einsum("iji->ji", np.array(cube["y"]))))
        self.assertTrue(np.array_equal(einsum("ii,i->i", field, np.ones(3)), [0.0, 4.0, 8.0]))

    def test_summation(self) -> None:
        for xp in backends:
            a = rand_data(xp, 2, 3, 4, 5)
            self.compare(xp, "abcd->", a)
            self.compare(xp, "abcd->a", a)
            self.compare(xp, "abcd->db", a)
            self.compare(xp, "abcd->ca", a)
            b = rand_data(xp, 3, 4, 3, 4)
            self.compare(xp, "ijij->", b)
            self.compare(xp, "ijij->j", b)
            self.compare(xp, "ijik->jk", rand_data(xp, 3, 4, 3, 2))

    def test_full_sum(self) -> None:
        for xp in backends:
            a = rand_int(xp, 5, 7)
            res = singleton("ij->", a)(a)
            self.assertEqual(res.shape, ())
            self.assertEqual(int(res), int(np.sum(a)))

    def test_dtype(self) -> None:
        for xp in backends:
            a = xp.asarray(np.full((4, 4), 100, dtype=np.int8))
            res = singleton("ij->i", a)(a)
            self.assertEqual(res.dtype, a.dtype)
            # 4 * 100 wraps around in int8
            self.assertEqual(int(res[0]), -112)

            b = xp.asarray(np.ones((3, 3), dtype=np.float32))
            self.assertEqual(singleton("ii->", b)(b).dtype, b.dtype)

if __name__ == "__main__":
    unittest.main()
