# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

import logging
from typing import ClassVar
from enum import Enum
from dataclasses import dataclass

from .backend import ArrayLike, namespace_of_arrays, contiguous, owned
from .sizedcontraction import SizedContraction
from .indexclassifier import ClassifiedSingletonContraction
from .tensorview import TensorView

logger = logging.getLogger(__name__)

class SingletonKind(Enum):
    IDENTITY = 0
    PERMUTATION = 1
    DIAGONALIZATION = 2
    SUMMATION = 3

@dataclass(frozen=True)
class Identity:
    """Returns the tensor unchanged."""

    kind: ClassVar[SingletonKind] = SingletonKind.IDENTITY
    is_view: ClassVar[bool] = True

    def __call__[T: ArrayLike](self, tensor: T) -> T:
        return tensor

@dataclass(frozen=True)
class Permutation:
    """Reorders the axes without copying, output axis i is input axis permutation[i]."""

    kind: ClassVar[SingletonKind] = SingletonKind.PERMUTATION
    is_view: ClassVar[bool] = True

    permutation: tuple[int, ...]

    def __call__[T: ArrayLike](self, tensor: T) -> T:
        xp = namespace_of_arrays(tensor)
        return xp.permute_dims(tensor, self.permutation)

@dataclass(frozen=True)
class Diagonalization:
    """
    Maps input axis i onto output axis input_to_output[i]. Axes sharing an output axis
    are read along their diagonal. Tensors with non-positive strides, or with byte
    strides that are no multiple of the item size, are copied into a contiguous
    buffer first.
    """

    kind: ClassVar[SingletonKind] = SingletonKind.DIAGONALIZATION
    is_view: ClassVar[bool] = True

    input_to_output: tuple[int, ...]
    output_shape: tuple[int, ...]

    def __call__[T: ArrayLike](self, tensor: T) -> T:
        view = TensorView.of(tensor)
        if view is None or not view.is_positive():
            logger.debug("Copying tensor with strides %s before diagonalization.",
                         getattr(tensor, "strides", None))
            view = TensorView.of(contiguous(tensor))
        if view is None:
            raise RuntimeError("Contiguous copy has no element strides.")
        return view.merged(self.input_to_output, self.output_shape).materialize()

@dataclass(frozen=True)
class Summation:
    """Sums the block of `count` axes starting at axis `start`."""

    kind: ClassVar[SingletonKind] = SingletonKind.SUMMATION
    is_view: ClassVar[bool] = False

    start: int
    count: int

    def __call__[T: ArrayLike](self, tensor: T) -> T:
        xp = namespace_of_arrays(tensor)
        axes = tuple(range(self.start, self.start + self.count))
        return xp.sum(tensor, axis=axes, dtype=tensor.dtype)

SingletonOperation = Identity | Permutation | Diagonalization | Summation

class SingletonContraction:
    """
    Contraction of a single operand. The operations are chosen once from the labels:
    without summed labels a single view (identity, permutation or diagonal) produces
    the output, otherwise the view brings the output labels to the front followed by
    the summed labels, which are then summed away.
    """

    contraction: SizedContraction
    operations: tuple[SingletonOperation, ...]

    def __init__(self, sc: SizedContraction) -> None:
        csc = ClassifiedSingletonContraction(sc)
        view = _view_operation(sc, csc)
        if len(csc.summed_indices) == 0:
            ops: tuple[SingletonOperation, ...] = (view,)
        else:
            summation = Summation(len(csc.output_indices), len(csc.summed_indices))
            ops = (summation,) if isinstance(view, Identity) else (view, summation)
        self.contraction = sc
        self.operations = ops

    @property
    def kinds(self) -> tuple[SingletonKind, ...]:
        return tuple(op.kind for op in self.operations)

    def is_identity(self) -> bool:
        return self.kinds == (SingletonKind.IDENTITY,)

    def view_singleton[T: ArrayLike](self, tensor: T) -> T:
        """
        Apply the operations, the result may share memory with the tensor. Diagonal
        views of NumPy arrays are read-only, diagonal views of PyTorch tensors are
        writable aliases of overlapping memory and must not be written to. Use
        `contract_singleton` for a result that can be modified.
        """
        for op in self.operations:
            tensor = op(tensor)
        return tensor

    def contract_singleton[T: ArrayLike](self, tensor: T) -> T:
        """Apply the operations and return an array that owns its memory."""
        res = self.view_singleton(tensor)
        if self.operations[-1].is_view:
            res = owned(res)
        return res

    def __call__[T: ArrayLike](self, tensor: T) -> T:
        return self.contract_singleton(tensor)

    def __str__(self) -> str:
        kinds = ", ".join(kind.name.lower() for kind in self.kinds)
        return f"{self.contraction} [{kinds}]"

def _view_operation(sc: SizedContraction, csc: ClassifiedSingletonContraction) -> SingletonOperation:
    """View that orders the axes as output labels followed by summed labels."""
    op_str = sc.operand_indices[0]
    target = csc.output_indices + csc.summed_indices
    if csc.has_diagonal:
        return Diagonalization(tuple(csc.input_to_canonical()), sc.shape_of(target))
    permutation = tuple(op_str.index(char) for char in target)
    if permutation == tuple(range(len(op_str))):
        return Identity()
    return Permutation(permutation)
