# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Sequence, Self
from types import NoneType
from dataclasses import dataclass

from .backend import ArrayLike, shape, strides, as_strided
from .utils import is_permutation

@dataclass(frozen=True)
class TensorView[T: ArrayLike]:
    """
    Shape and element strides over the memory of a base array. A view never outlives
    its base. Merged views map several logical axes onto the same memory positions,
    so materialized NumPy views are read-only. PyTorch views stay
    writable and must be treated as read-only by the caller.
    """

    base: T
    shape: tuple[int, ...]
    strides: tuple[int, ...]

    @classmethod
    def of(cls, array: T) -> NoneType | Self:
        """View of the whole array, None if its layout has no element strides."""
        strd = strides(array)
        if strd is None:
            return None
        return cls(array, shape(array), strd)

    def permuted(self, permutation: Sequence[int]) -> Self:
        """View with the axes in the order given by `permutation`."""
        if len(permutation) != len(self.shape) or not is_permutation(permutation):
            raise RuntimeError(f"{permutation} is not a permutation of the axes.")
        return type(self)(self.base,
                          tuple(self.shape[p] for p in permutation),
                          tuple(self.strides[p] for p in permutation))

    def merged(self, input_to_output: Sequence[int], output_shape: Sequence[int]) -> Self:
        """
        View where input axis i becomes output axis input_to_output[i]. Input axes that
        land on the same output axis are read along their diagonal, the stride of an
        output axis is the sum of the strides of its input axes.
        """
        if len(input_to_output) != len(self.shape):
            raise RuntimeError("Axis mapping does not match the number of axes.")
        strd = [0] * len(output_shape)
        for idx, stride in enumerate(self.strides):
            out = input_to_output[idx]
            if self.shape[idx] != output_shape[out]:
                raise RuntimeError("Merged axes must have equal extents.")
            strd[out] += stride
        return type(self)(self.base, tuple(output_shape), tuple(strd))

    def is_positive(self) -> bool:
        """True if every axis with more than one element has a positive stride."""
        return all(stride > 0 for size, stride in zip(self.shape, self.strides) if size > 1)

    def materialize(self) -> T:
        return as_strided(self.base, self.shape, self.strides)
