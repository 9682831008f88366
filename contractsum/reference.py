# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from .backend import ArrayLike, namespace_of_arrays, device
from .sizedcontraction import SizedContraction
from .utils import sequence_product

def reference_einsum[T: ArrayLike](sc: SizedContraction, *ops: T) -> T:
    """
    Contract by looping over every assignment of the labels. Each output element is
    the sum, over all assignments of the summed labels, of the product of the operand
    elements the assignment selects. Only meant for checking results on small tensors.
    """
    if len(ops) != len(sc.operand_indices):
        raise ValueError("Number of operands does not match the contraction.")
    xp = namespace_of_arrays(*ops)
    out_str = sc.output_indices
    summed = sc.contraction.summation_indices
    res = xp.zeros(sc.output_shape(), dtype=ops[0].dtype, device=device(ops[0]))

    for out_idx in sequence_product(sc.shape_of(out_str)):
        assignment = dict(zip(out_str, out_idx))
        total = None
        for sum_idx in sequence_product(sc.shape_of(summed)):
            assignment.update(zip(summed, sum_idx))
            term = None
            for op_str, op in zip(sc.operand_indices, ops):
                val = op[tuple(assignment[c] for c in op_str)]
                term = val if term is None else term * val
            total = term if total is None else total + term
        if total is not None:
            res[out_idx] = total
    return res
