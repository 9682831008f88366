# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Sequence
from enum import Enum
from dataclasses import dataclass

from .sizedcontraction import SizedContraction

class IndexRole(Enum):
    #: Label is kept in the output and appears in no other operand.
    OUTPUT = 0
    #: Label is absent from the output and appears in no other operand.
    SUMMED = 1
    #: Label is kept in the output and shared with another operand.
    BATCH = 2
    #: Label is absent from the output and shared with another operand.
    CONTRACTED = 3

@dataclass(frozen=True)
class IndexInfo:
    label: str
    role: IndexRole
    #: Number of axes of the operand carrying the label, more than one is a diagonal.
    repeats: int

    @property
    def is_diagonal(self) -> bool:
        return self.repeats > 1

def classify_operand(sc: SizedContraction, position: int) -> tuple[IndexInfo, ...]:
    """Role of every distinct label of one operand with respect to the whole contraction."""
    ops = sc.operand_indices
    if not 0 <= position < len(ops):
        raise RuntimeError(f"Operand position {position} out of range.")
    others = "".join(op for i, op in enumerate(ops) if i != position)
    out = []
    for char in dict.fromkeys(ops[position]):
        kept = char in sc.output_indices
        shared = char in others
        if kept:
            role = IndexRole.BATCH if shared else IndexRole.OUTPUT
        else:
            role = IndexRole.CONTRACTED if shared else IndexRole.SUMMED
        out.append(IndexInfo(char, role, ops[position].count(char)))
    return tuple(out)

#------------------------------------------------------------------------------------
#singleton contractions

@dataclass(frozen=True)
class KeptInfo:
    #: Axis of the output the input axis is mapped to.
    output_position: int

@dataclass(frozen=True)
class SummedInfo:
    #: Position of the label in the list of summed labels.
    summed_position: int

@dataclass(frozen=True)
class SingletonIndex:
    label: str
    info: KeptInfo | SummedInfo

@dataclass(frozen=True, init=False)
class ClassifiedSingletonContraction:
    """Per-axis classification of a contraction with a single operand."""

    #: One entry per physical axis of the operand.
    input_indices: tuple[SingletonIndex, ...]
    output_indices: str
    #: Distinct summed labels in order of their first appearance.
    summed_indices: str
    has_diagonal: bool

    def __init__(self, sc: SizedContraction) -> None:
        if len(sc.operand_indices) != 1:
            raise RuntimeError("Singleton classification needs exactly one operand.")
        op_str = sc.operand_indices[0]
        res_str = sc.output_indices
        summed = "".join(info.label for info in classify_operand(sc, 0)
                         if info.role == IndexRole.SUMMED)
        input_indices = []
        for char in op_str:
            if char in res_str:
                input_indices.append(SingletonIndex(char, KeptInfo(res_str.index(char))))
            else:
                input_indices.append(SingletonIndex(char, SummedInfo(summed.index(char))))
        object.__setattr__(self, "input_indices", tuple(input_indices))
        object.__setattr__(self, "output_indices", res_str)
        object.__setattr__(self, "summed_indices", summed)
        object.__setattr__(self, "has_diagonal", len(set(op_str)) != len(op_str))

    def input_to_canonical(self) -> list[int]:
        """Map every input axis to its axis in the order output labels, then summed labels."""
        nout = len(self.output_indices)
        return [idx.info.output_position if isinstance(idx.info, KeptInfo)
                else nout + idx.info.summed_position
                for idx in self.input_indices]

#------------------------------------------------------------------------------------
#pair contractions

@dataclass(frozen=True, init=False)
class ClassifiedPairContraction:
    """Partition of the labels of a contraction with two operands."""

    #: Distinct labels of the left operand that survive its pre-pass.
    lhs_kept: str
    #: Distinct labels of the right operand that survive its pre-pass.
    rhs_kept: str
    #: Shared labels kept in the output.
    batch_indices: str
    #: Shared labels summed by the pairwise product.
    contracted_indices: str
    #: Labels of the left operand only, kept in the output.
    lhs_only: str
    #: Labels of the right operand only, kept in the output.
    rhs_only: str
    #: Labels of the left operand only, summed before the product.
    lhs_summed: str
    #: Labels of the right operand only, summed before the product.
    rhs_summed: str

    def __init__(self, sc: SizedContraction) -> None:
        if len(sc.operand_indices) != 2:
            raise RuntimeError("Pair classification needs exactly two operands.")
        lhs, rhs = sc.operand_indices
        res = sc.output_indices
        lhs_roles = classify_operand(sc, 0)
        rhs_roles = classify_operand(sc, 1)
        batch = _labels(lhs_roles, IndexRole.BATCH)
        contracted = _labels(lhs_roles, IndexRole.CONTRACTED)
        if batch != "".join(c for c in dict.fromkeys(lhs) if c in rhs and c in res):
            raise RuntimeError("Inconsistent batch classification.")
        object.__setattr__(self, "batch_indices", batch)
        object.__setattr__(self, "contracted_indices", contracted)
        object.__setattr__(self, "lhs_only", _labels(lhs_roles, IndexRole.OUTPUT))
        object.__setattr__(self, "rhs_only", _labels(rhs_roles, IndexRole.OUTPUT))
        object.__setattr__(self, "lhs_summed", _labels(lhs_roles, IndexRole.SUMMED))
        object.__setattr__(self, "rhs_summed", _labels(rhs_roles, IndexRole.SUMMED))
        object.__setattr__(self, "lhs_kept", "".join(i.label for i in lhs_roles if i.role != IndexRole.SUMMED))
        object.__setattr__(self, "rhs_kept", "".join(i.label for i in rhs_roles if i.role != IndexRole.SUMMED))

    @property
    def natural_output(self) -> str:
        """Labels of the pairwise product before the output permutation."""
        return self.batch_indices + self.lhs_only + self.rhs_only

def _labels(infos: Sequence[IndexInfo], role: IndexRole) -> str:
    return "".join(info.label for info in infos if info.role == role)
