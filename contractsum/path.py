# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

import logging
from types import NoneType

from .backend import ArrayLike, namespace_of_arrays, shape, owned
from .sizedcontraction import SizedContraction
from .singletoncontraction import SingletonContraction
from .paircontraction import PairContraction
from .optimizer import ContractionOrder, generate_optimized_order
from .options import OptimizationMethod

logger = logging.getLogger(__name__)

class EinsumPath:
    """
    Compiled contraction of a sized contraction. The order of the pairwise
    contractions is planned once and every step is compiled into a `PairContraction`.
    If the last remaining operand does not carry the output labels yet, a final
    `SingletonContraction` reduces it. Calling the path executes the plan and returns
    an array that shares no memory with the operands.
    """

    contraction: SizedContraction
    order: ContractionOrder
    steps: tuple[PairContraction, ...]
    final: NoneType | SingletonContraction

    def __init__(self,
                 sc: SizedContraction,
                 optimizer: NoneType | OptimizationMethod = None) -> None:
        order = generate_optimized_order(sc, optimizer)
        steps = []
        for i, step in enumerate(order):
            sub = sc.subset([step.lhs_indices, step.rhs_indices], step.output_indices)
            steps.append(PairContraction(sub))
            logger.debug("Step %d: contract operands %d and %d as %s.", i, step.lhs, step.rhs, sub)
        if order.output_indices != sc.output_indices:
            final = SingletonContraction(sc.subset([order.output_indices], sc.output_indices))
        else:
            final = None

        self.contraction = sc
        self.order = order
        self.steps = tuple(steps)
        self.final = final

    def __call__[T: ArrayLike](self, *ops: T) -> T:
        self._check_operands(*ops)
        live = list(ops)
        for step, pair in zip(self.order, self.steps):
            rhs = live.pop(step.rhs)
            lhs = live.pop(step.lhs)
            live.append(pair(lhs, rhs))
        res = live[0]
        if self.final is not None:
            return self.final.contract_singleton(res)
        if len(self.steps) == 0:
            return owned(res)
        return res

    def _check_operands(self, *ops: ArrayLike) -> None:
        ref_shapes = self.contraction.operand_shapes()
        if len(ref_shapes) != len(ops):
            raise ValueError(f"Contraction needs {len(ref_shapes)} operands, got {len(ops)}.")
        for i, (ref, op) in enumerate(zip(ref_shapes, ops)):
            if tuple(ref) != shape(op):
                raise ValueError(f"Operand {i} has shape {shape(op)}, the contraction expects {tuple(ref)}.")
        namespace_of_arrays(*ops)
        if not all(op.dtype == ops[0].dtype for op in ops[1:]):
            raise ValueError("All operand dtypes must match")

    def __str__(self) -> str:
        lines = [f"  Complete contraction:  {self.contraction}",
                 f"                Method:  {self.order.method}",
                 f"            Total cost:  {self.order.cost}",
                 "-" * 60,
                 f"{'step':>6}  {'pair':>8}  {'contraction':<30}{'cost':>12}",
                 "-" * 60]
        for i, step in enumerate(self.order):
            pair = f"({step.lhs}, {step.rhs})"
            lines.append(f"{i:>6}  {pair:>8}  {step.equation:<30}{step.cost:>12}")
        if self.final is not None:
            lines.append(f"{'final':>6}  {'':>8}  {str(self.final.contraction):<30}")
        return "\n".join(lines)
