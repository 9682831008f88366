import unittest

from contractsum import Contraction, SizedContraction, validate, validate_and_size
from utils import backends, rand_data

class TestContraction(unittest.TestCase):

    def test_parse(self) -> None:
        contr = Contraction("ij,jk->ik")
        self.assertEqual(contr.operand_indices, ("ij", "jk"))
        self.assertEqual(contr.output_indices, "ik")
        self.assertEqual(contr.summation_indices, "j")
        self.assertEqual(str(contr), "ij,jk->ik")
        self.assertEqual(len(contr), 2)

    def test_parse_spaces_and_scalars(self) -> None:
        contr = Contraction(" i , -> i")
        self.assertEqual(contr.operand_indices, ("i", ""))
        self.assertEqual(contr.output_indices, "i")

        contr = Contraction("ii->")
        self.assertEqual(contr.summation_indices, "i")

    def test_summation_order(self) -> None:
        contr = Contraction("kij,jl,mi->l")
        self.assertEqual(contr.summation_indices, "kijm")
        self.assertEqual(contr.labels(), "kijlm")

    def test_from_indices(self) -> None:
        contr = Contraction.from_indices(["ab", "bc"], "ac")
        self.assertEqual(contr, Contraction("ab,bc->ac"))

    def test_invalid(self) -> None:
        with self.assertRaises(ValueError):
            Contraction("ij,jk")
        with self.assertRaises(ValueError):
            Contraction("ij->i->j")
        with self.assertRaises(ValueError):
            Contraction("ij,jk->ii")
        with self.assertRaises(ValueError):
            Contraction("ij,jk->iz")
        with self.assertRaises(ValueError):
            Contraction("i1,jk->i")
        with self.assertRaises(ValueError):
            Contraction.from_indices([], "")

    def test_sizes(self) -> None:
        contr = Contraction("ij,jk->ik")
        sc = SizedContraction.from_shapes(contr, (2, 3), (3, 4))
        self.assertEqual(dict(sc.output_size), {"i": 2, "j": 3, "k": 4})
        self.assertEqual(sc.output_shape(), (2, 4))
        self.assertEqual(sc.operand_shapes(), [(2, 3), (3, 4)])
        self.assertEqual(sc.shape_of("kji"), (4, 3, 2))

    def test_size_errors(self) -> None:
        contr = Contraction("ij,jk->ik")
        with self.assertRaises(ValueError):
            SizedContraction.from_shapes(contr, (2, 3), (4, 4))
        with self.assertRaises(ValueError):
            SizedContraction.from_shapes(contr, (2, 3))
        with self.assertRaises(ValueError):
            SizedContraction.from_shapes(contr, (2, 3), (3, 4, 5))
        with self.assertRaises(ValueError):
            SizedContraction.from_shapes(Contraction("ii->i"), (2, 3))
        with self.assertRaises(ValueError):
            SizedContraction(contr, {"i": 2, "j": 3})

    def test_subset(self) -> None:
        sc = SizedContraction.from_shapes(Contraction("ij,jk,kl->il"), (2, 3), (3, 4), (4, 5))
        sub = sc.subset(["jk", "kl"], "jl")
        self.assertEqual(sub.output_shape(), (3, 5))
        with self.assertRaises(RuntimeError):
            sc.subset(["jz"], "j")

    def test_validate_and_size(self) -> None:
        for xp in backends:
            a, b = rand_data(xp, 2, 3), rand_data(xp, 3, 4)
            self.assertEqual(validate("ij,jk->ik").summation_indices, "j")
            sc = validate_and_size("ij,jk->ik", a, b)
            self.assertEqual(sc.output_shape(), (2, 4))

if __name__ == "__main__":
    unittest.main()
