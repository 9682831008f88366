# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Sequence, Self
from dataclasses import dataclass

@dataclass(frozen=True, init=False)
class Contraction:
    """
    Index labels of an einsum contraction. Every operand is described by a string with
    one label character per axis; a label repeated within one operand selects the
    diagonal of those axes. Labels that are missing in the output are summed.
    """

    #: Labels of each operand, one character per axis.
    operand_indices: tuple[str, ...]
    #: Labels of the result, one character per axis.
    output_indices: str
    #: Labels that are summed over, in order of their first appearance.
    summation_indices: str

    def __init__(self, eq: str) -> None:
        op_strs, res_str = _split_equation(eq)
        self._assign(op_strs, res_str)

    @classmethod
    def from_indices(cls, operand_indices: Sequence[str], output_indices: str) -> Self:
        """Create a contraction from already separated operand and output labels."""
        obj = cls.__new__(cls)
        obj._assign([str(op) for op in operand_indices], str(output_indices))
        return obj

    def _assign(self, op_strs: Sequence[str], res_str: str) -> None:
        _check_equation(op_strs, res_str)
        summed = "".join(dict.fromkeys(c for op in op_strs for c in op if c not in res_str))
        object.__setattr__(self, "operand_indices", tuple(op_strs))
        object.__setattr__(self, "output_indices", res_str)
        object.__setattr__(self, "summation_indices", summed)

    def labels(self) -> str:
        """All distinct labels in order of their first appearance."""
        return "".join(dict.fromkeys("".join(self.operand_indices)))

    def __len__(self) -> int:
        return len(self.operand_indices)

    def __str__(self) -> str:
        return ",".join(self.operand_indices) + f"->{self.output_indices}"

def _split_equation(eq: str) -> tuple[list[str], str]:
    """Split an explicit einsum equation into operand and output label strings."""
    eq = eq.replace(" ", "")
    if eq.count("->") != 1:
        raise ValueError(f"Einsum equation requires exactly one '->', got '{eq}'.")
    lhs, res_str = eq.split("->")
    return lhs.split(","), res_str

def _check_equation(ops: Sequence[str], res: str) -> None:
    """Check the validity of the labels of an einsum equation."""
    if len(ops) == 0:
        raise ValueError("An einsum equation cannot have zero operands.")

    for op in [*ops, res]:
        if not all(char.isalpha() for char in op):
            raise ValueError(f"Labels must be alphabetic characters, got '{op}'.")

    if len(set(res)) != len(res):
        raise ValueError(f"Duplicate labels in the output are not allowed, {res}")

    if any(char not in ''.join(ops) for char in res):
        raise ValueError("Result labels must appear in at least one operand.")
