# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Sequence
from types import NoneType

from .backend import ArrayLike
from .contraction import Contraction
from .sizedcontraction import SizedContraction
from .optimizer import ContractionOrder, generate_optimized_order
from .options import OptimizationMethod
from .path import EinsumPath

def validate(eq: str) -> Contraction:
    """Parse and check the labels of an explicit einsum equation such as "ij,jk->ik"."""
    return Contraction(eq)

def validate_and_size[T: ArrayLike](eq: str, *ops: T) -> SizedContraction:
    """Parse the equation and size its labels with the shapes of the operands."""
    return SizedContraction.from_operands(validate(eq), *ops)

def validate_and_optimize_order[T: ArrayLike](
        eq: str,
        *ops: T,
        optimizer: NoneType | OptimizationMethod = None) -> ContractionOrder:
    """Plan the pairwise contractions of the equation for the given operands."""
    return generate_optimized_order(validate_and_size(eq, *ops), optimizer)

def einsum_path[T: ArrayLike](
        eq: str,
        *ops: T,
        optimizer: NoneType | OptimizationMethod = None) -> EinsumPath:
    """Compile the equation for operands with the shapes of the given ones."""
    return EinsumPath(validate_and_size(eq, *ops), optimizer)

def contract[T: ArrayLike](
        sc: SizedContraction,
        ops: Sequence[T],
        optimizer: NoneType | OptimizationMethod = None) -> T:
    """Contract operands that match an already sized contraction."""
    return EinsumPath(sc, optimizer)(*ops)

def einsum_sc[T: ArrayLike](sc: SizedContraction, *ops: T) -> T:
    return sc.contract_operands(*ops)

def einsum[T: ArrayLike](
        eq: str,
        *ops: T,
        optimizer: NoneType | OptimizationMethod = None) -> T:
    """
    Evaluate an explicit einsum equation. Labels repeated within one operand select
    its diagonal, labels missing in the output are summed. The result owns its memory
    and has the dtype of the operands.
    """
    return einsum_path(eq, *ops, optimizer=optimizer)(*ops)
