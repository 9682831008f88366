# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Mapping, Sequence, Self
from types import MappingProxyType
from dataclasses import dataclass

from .backend import ArrayLike, shape
from .contraction import Contraction

@dataclass(frozen=True, init=False)
class SizedContraction:
    """
    A contraction together with the extent of every label. The extents are checked to
    agree for every occurrence of a label, so the engine can rely on them without
    further validation.
    """

    contraction: Contraction
    #: Extent of each label.
    output_size: Mapping[str, int]

    def __init__(self, contraction: Contraction, sizes: Mapping[str, int]) -> None:
        missing = [c for c in contraction.labels() if c not in sizes]
        if len(missing) > 0:
            raise ValueError(f"No size given for the label(s) {''.join(missing)}.")
        if any(sizes[c] < 0 for c in contraction.labels()):
            raise ValueError("Label sizes cannot be negative.")
        sizes = {c: int(sizes[c]) for c in contraction.labels()}
        object.__setattr__(self, "contraction", contraction)
        object.__setattr__(self, "output_size", MappingProxyType(sizes))

    @classmethod
    def from_shapes(cls, contraction: Contraction, *shapes: Sequence[int]) -> Self:
        """Size the contraction with the shapes of its operands."""
        return cls(contraction, _size_mapping(contraction.operand_indices, shapes))

    @classmethod
    def from_operands(cls, contraction: Contraction, *ops: ArrayLike) -> Self:
        """Size the contraction with the shapes of the operand arrays."""
        return cls.from_shapes(contraction, *(shape(op) for op in ops))

    #-------------------------------------------------------------------------
    #properties

    @property
    def operand_indices(self) -> tuple[str, ...]:
        return self.contraction.operand_indices

    @property
    def output_indices(self) -> str:
        return self.contraction.output_indices

    #-------------------------------------------------------------------------
    #methods

    def shape_of(self, indices: str) -> tuple[int, ...]:
        """Shape of a tensor whose axes carry the given labels."""
        return tuple(self.output_size[c] for c in indices)

    def operand_shapes(self) -> list[tuple[int, ...]]:
        return [self.shape_of(op) for op in self.operand_indices]

    def output_shape(self) -> tuple[int, ...]:
        return self.shape_of(self.output_indices)

    def subset(self, operand_indices: Sequence[str], output_indices: str) -> "SizedContraction":
        """Sized contraction of a sub-problem that only uses labels of this contraction."""
        labels = "".join(operand_indices) + output_indices
        if any(c not in self.output_size for c in labels):
            raise RuntimeError("Sub-contraction uses labels that are unknown to the contraction.")
        contr = Contraction.from_indices(operand_indices, output_indices)
        return SizedContraction(contr, self.output_size)

    def contract_operands[T: ArrayLike](self, *ops: T) -> T:
        """Contract the operands with an optimized path."""
        from .path import EinsumPath
        return EinsumPath(self)(*ops)

    def __str__(self) -> str:
        return str(self.contraction)

def _size_mapping(op_strs: Sequence[str], shapes: Sequence[Sequence[int]]) -> dict[str, int]:
    """Check the operand shapes against the labels and map every label to its extent."""
    if len(op_strs) != len(shapes):
        raise ValueError(f"Number of provided operands in the equation "\
                         f"({len(op_strs)}) and in the function call "\
                         f"({len(shapes)}) do not match")
    sizes: dict[str, int] = {}
    for i, (op_str, shp) in enumerate(zip(op_strs, shapes)):
        if len(op_str) != len(shp):
            raise ValueError(f"Operand {i} has {len(shp)} axes but {len(op_str)} labels.")
        for char, size in zip(op_str, shp):
            if char in sizes and sizes[char] != size:
                raise ValueError(f"Dimension mismatch in dimension {char}: "\
                                 f"{sizes[char]} != {size}.")
            sizes[char] = int(size)
    return sizes
