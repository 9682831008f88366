# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Sequence, Optional
from types import NoneType
from dataclasses import dataclass
from math import prod

from .backend import ArrayLike, ArrayNamespace, namespace_of_arrays, shape
from .utils import is_permutation

@dataclass(frozen=True, init=False)
class TensordotGeneral:
    """
    Contraction of two tensors reduced to a batched matrix product. The left operand
    is permuted to [batch, free, contracted] and the right one to
    [batch, contracted, free], both blocks are flattened, multiplied with `matmul`
    and the product is reshaped into [batch, lhs free, rhs free] before the output
    permutation is applied.
    """

    lhs_shape: tuple[int, ...]
    rhs_shape: tuple[int, ...]
    lhs_permutation: NoneType | tuple[int, ...]
    rhs_permutation: NoneType | tuple[int, ...]
    #: Shape (batch, free, contracted) of the flattened left operand.
    lhs_matrix: tuple[int, int, int]
    #: Shape (batch, contracted, free) of the flattened right operand.
    rhs_matrix: tuple[int, int, int]
    #: Shape of the product before the output permutation.
    product_shape: tuple[int, ...]
    output_permutation: NoneType | tuple[int, ...]

    def __init__(self,
                 lhs_shape: Sequence[int],
                 rhs_shape: Sequence[int],
                 lhs_axes: Sequence[int],
                 rhs_axes: Sequence[int],
                 output_order: Optional[Sequence[int]] = None,
                 lhs_batch: Sequence[int] = (),
                 rhs_batch: Sequence[int] = ()) -> None:
        lhs_shape, rhs_shape = tuple(lhs_shape), tuple(rhs_shape)
        lhs_axes = _normalize_axes("lhs", lhs_axes, len(lhs_shape))
        rhs_axes = _normalize_axes("rhs", rhs_axes, len(rhs_shape))
        lhs_batch = _normalize_axes("lhs batch", lhs_batch, len(lhs_shape))
        rhs_batch = _normalize_axes("rhs batch", rhs_batch, len(rhs_shape))
        _check_pairing("contracted", lhs_axes, rhs_axes, lhs_shape, rhs_shape)
        _check_pairing("batch", lhs_batch, rhs_batch, lhs_shape, rhs_shape)
        if set(lhs_axes) & set(lhs_batch) or set(rhs_axes) & set(rhs_batch):
            raise ValueError("An axis cannot be contracted and batched at the same time.")

        lhs_free = tuple(i for i in range(len(lhs_shape)) if i not in lhs_axes and i not in lhs_batch)
        rhs_free = tuple(i for i in range(len(rhs_shape)) if i not in rhs_axes and i not in rhs_batch)
        batch_shape = [lhs_shape[i] for i in lhs_batch]
        lhs_free_shape = [lhs_shape[i] for i in lhs_free]
        rhs_free_shape = [rhs_shape[i] for i in rhs_free]
        product_shape = (*batch_shape, *lhs_free_shape, *rhs_free_shape)

        nbatch = prod(batch_shape)
        ncontr = prod(lhs_shape[i] for i in lhs_axes)
        object.__setattr__(self, "lhs_shape", lhs_shape)
        object.__setattr__(self, "rhs_shape", rhs_shape)
        object.__setattr__(self, "lhs_permutation", _permutation_or_none((*lhs_batch, *lhs_free, *lhs_axes)))
        object.__setattr__(self, "rhs_permutation", _permutation_or_none((*rhs_batch, *rhs_axes, *rhs_free)))
        object.__setattr__(self, "lhs_matrix", (nbatch, prod(lhs_free_shape), ncontr))
        object.__setattr__(self, "rhs_matrix", (nbatch, ncontr, prod(rhs_free_shape)))
        object.__setattr__(self, "product_shape", product_shape)
        object.__setattr__(self, "output_permutation", _output_permutation(output_order, len(product_shape)))

    @property
    def output_shape(self) -> tuple[int, ...]:
        if self.output_permutation is None:
            return self.product_shape
        return tuple(self.product_shape[i] for i in self.output_permutation)

    def __call__[T: ArrayLike](self, lhs: T, rhs: T) -> T:
        if shape(lhs) != self.lhs_shape or shape(rhs) != self.rhs_shape:
            raise ValueError(f"Operand shapes {shape(lhs)} and {shape(rhs)} do not match "\
                             f"the compiled shapes {self.lhs_shape} and {self.rhs_shape}.")
        xp = namespace_of_arrays(lhs, rhs)
        lhs = xp.reshape(_permute(xp, lhs, self.lhs_permutation), self.lhs_matrix)
        rhs = xp.reshape(_permute(xp, rhs, self.rhs_permutation), self.rhs_matrix)
        res = xp.reshape(xp.matmul(lhs, rhs), self.product_shape)
        return _permute(xp, res, self.output_permutation)

def pairwise_contract[T: ArrayLike](
        lhs: T,
        rhs: T,
        lhs_axes: Sequence[int],
        rhs_axes: Sequence[int],
        output_order: Optional[Sequence[int]] = None, *,
        lhs_batch: Sequence[int] = (),
        rhs_batch: Sequence[int] = ()) -> T:
    """
    Contract lhs_axes[i] of `lhs` with rhs_axes[i] of `rhs`. The result has the
    uncontracted axes of `lhs` followed by the uncontracted axes of `rhs`, each in
    their original order, unless `output_order` gives a permutation of these axes.
    Batch axes pairs are multiplied element by element without summation and precede
    all other axes of the result.
    """
    namespace_of_arrays(lhs, rhs)
    if lhs.dtype != rhs.dtype:
        raise ValueError(f"Operand dtypes must match, got {lhs.dtype} and {rhs.dtype}.")
    tdot = TensordotGeneral(shape(lhs), shape(rhs), lhs_axes, rhs_axes,
                            output_order, lhs_batch=lhs_batch, rhs_batch=rhs_batch)
    return tdot(lhs, rhs)

tensordot = pairwise_contract

def _normalize_axes(name: str, axes: Sequence[int], ndim: int) -> tuple[int, ...]:
    out = []
    for axis in axes:
        if not -ndim <= axis < ndim:
            raise ValueError(f"{name} axis {axis} out of range for {ndim} dimensions.")
        out.append(axis % ndim)
    if len(set(out)) != len(out):
        raise ValueError(f"Repeated {name} axes {tuple(axes)}.")
    return tuple(out)

def _check_pairing(name: str,
                   lhs_axes: Sequence[int],
                   rhs_axes: Sequence[int],
                   lhs_shape: Sequence[int],
                   rhs_shape: Sequence[int]) -> None:
    if len(lhs_axes) != len(rhs_axes):
        raise ValueError(f"Number of {name} axes differs: {len(lhs_axes)} != {len(rhs_axes)}.")
    for l, r in zip(lhs_axes, rhs_axes):
        if lhs_shape[l] != rhs_shape[r]:
            raise ValueError(f"Extent mismatch of {name} axes {l} and {r}: "\
                             f"{lhs_shape[l]} != {rhs_shape[r]}.")

def _output_permutation(output_order: Optional[Sequence[int]], ndim: int) -> NoneType | tuple[int, ...]:
    if output_order is None:
        return None
    order = tuple(output_order)
    if len(order) != ndim or not is_permutation(order):
        raise ValueError(f"Output order {order} is not a permutation of {ndim} axes.")
    return _permutation_or_none(order)

def _permutation_or_none(perm: tuple[int, ...]) -> NoneType | tuple[int, ...]:
    return None if perm == tuple(range(len(perm))) else perm

def _permute[T: ArrayLike](xp: ArrayNamespace[T], tensor: T, perm: NoneType | tuple[int, ...]) -> T:
    return tensor if perm is None else xp.permute_dims(tensor, perm)
