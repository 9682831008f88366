# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from .backend import ArrayLike
from .sizedcontraction import SizedContraction
from .indexclassifier import ClassifiedPairContraction
from .singletoncontraction import SingletonContraction
from .tensordot import TensordotGeneral

class PairContraction:
    """
    Contraction of two operands. Each operand is reduced on its own first: repeated
    labels are merged into their diagonal and labels that neither the output nor the
    other operand uses are summed. The reduced operands are multiplied with a
    `TensordotGeneral`, shared output labels act as batch axes.
    """

    contraction: SizedContraction
    classification: ClassifiedPairContraction
    _lhs_prep: SingletonContraction
    _rhs_prep: SingletonContraction
    _tdot: TensordotGeneral

    def __init__(self, sc: SizedContraction) -> None:
        cpc = ClassifiedPairContraction(sc)
        lhs, rhs = sc.operand_indices
        lhs_kept, rhs_kept = cpc.lhs_kept, cpc.rhs_kept
        natural = cpc.natural_output
        if sorted(natural) != sorted(sc.output_indices):
            raise RuntimeError(f"Pair contraction {sc} cannot produce its output labels.")

        self.contraction = sc
        self.classification = cpc
        self._lhs_prep = SingletonContraction(sc.subset([lhs], lhs_kept))
        self._rhs_prep = SingletonContraction(sc.subset([rhs], rhs_kept))
        self._tdot = TensordotGeneral(
                sc.shape_of(lhs_kept),
                sc.shape_of(rhs_kept),
                [lhs_kept.index(c) for c in cpc.contracted_indices],
                [rhs_kept.index(c) for c in cpc.contracted_indices],
                [natural.index(c) for c in sc.output_indices],
                lhs_batch=[lhs_kept.index(c) for c in cpc.batch_indices],
                rhs_batch=[rhs_kept.index(c) for c in cpc.batch_indices])

    def __call__[T: ArrayLike](self, lhs: T, rhs: T) -> T:
        lhs = self._lhs_prep.view_singleton(lhs)
        rhs = self._rhs_prep.view_singleton(rhs)
        return self._tdot(lhs, rhs)

    def __str__(self) -> str:
        return str(self.contraction)
