# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

"""
Ordering of pairwise contractions. A plan is a sequence of steps, each naming two
positions in the list of live operands. Both operands are removed from the list and
the result of the step is appended at its end, the convention of opt_einsum.

The cost of a step is the product of the extents of every distinct label touched by
the two operands, the cost of a plan is the sum over its steps. Ties are broken in
favour of the lowest positions.
"""

import logging
from typing import Sequence, Mapping, Callable, Iterator
from types import NoneType
from dataclasses import dataclass
from itertools import combinations
from math import prod
import opt_einsum as oe

from .sizedcontraction import SizedContraction
from .options import OptimizationMethod, PathOptions, get_options, check_optimizer
from .utils import symbol_generator

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class PathStep:
    """One pairwise contraction of a plan."""

    #: Position of the left operand in the live operand list.
    lhs: int
    #: Position of the right operand in the live operand list, always above lhs.
    rhs: int
    lhs_indices: str
    rhs_indices: str
    #: Labels of the result, appended to the live operand list.
    output_indices: str
    #: Shared labels that are still needed afterwards.
    batch: str
    #: Shared labels that are summed by this step.
    contracted: str
    #: Labels of the left operand only that are still needed afterwards.
    lhs_only: str
    #: Labels of the right operand only that are still needed afterwards.
    rhs_only: str
    #: Labels of one operand only that are summed by this step.
    summed: str
    cost: int

    @property
    def equation(self) -> str:
        return f"{self.lhs_indices},{self.rhs_indices}->{self.output_indices}"

@dataclass(frozen=True)
class ContractionOrder:
    """Plan of pairwise contractions produced by `generate_optimized_order`."""

    #: Method that produced the plan, "auto" is resolved to the method it chose.
    method: OptimizationMethod
    steps: tuple[PathStep, ...]
    #: Labels of the single operand left after all steps.
    output_indices: str

    @property
    def cost(self) -> int:
        return sum(step.cost for step in self.steps)

    @property
    def pairs(self) -> list[tuple[int, int]]:
        return [(step.lhs, step.rhs) for step in self.steps]

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[PathStep]:
        return iter(self.steps)

def pair_step(lhs: int,
              rhs: int,
              labels: Sequence[str],
              output: str,
              sizes: Mapping[str, int]) -> PathStep:
    """
    Describe the contraction of the live operands at positions lhs and rhs. Labels are
    kept if the output or another live operand uses them. The last step produces the
    labels in output order, every other step orders them batch, lhs only, rhs only.
    """
    if not 0 <= lhs < rhs < len(labels):
        raise RuntimeError(f"Invalid operand pair ({lhs}, {rhs}) for {len(labels)} operands.")
    lhs_str, rhs_str = labels[lhs], labels[rhs]
    remaining = "".join(op for k, op in enumerate(labels) if k != lhs and k != rhs)
    keep = set(output) | set(remaining)
    lhs_d, rhs_d = dict.fromkeys(lhs_str), dict.fromkeys(rhs_str)

    batch = "".join(c for c in lhs_d if c in rhs_d and c in keep)
    contracted = "".join(c for c in lhs_d if c in rhs_d and c not in keep)
    lhs_only = "".join(c for c in lhs_d if c not in rhs_d and c in keep)
    rhs_only = "".join(c for c in rhs_d if c not in lhs_d and c in keep)
    summed = "".join(c for c in [*lhs_d, *rhs_d] if c not in keep and not (c in lhs_d and c in rhs_d))
    out = output if len(labels) == 2 else batch + lhs_only + rhs_only
    cost = prod(sizes[c] for c in dict.fromkeys(lhs_str + rhs_str))
    return PathStep(lhs, rhs, lhs_str, rhs_str, out,
                    batch, contracted, lhs_only, rhs_only, summed, cost)

def apply_step(labels: Sequence[str], step: PathStep) -> list[str]:
    """Live operand labels after the step."""
    out = [op for k, op in enumerate(labels) if k != step.lhs and k != step.rhs]
    out.append(step.output_indices)
    return out

def generate_optimized_order(
        sc: SizedContraction,
        method: NoneType | OptimizationMethod = None) -> ContractionOrder:
    """
    Plan the pairwise contractions of a sized contraction. Without an explicit method
    the one of the current `PathOptions` is used. A single operand needs no steps.
    """
    opts = get_options()
    method = opts.optimizer if method is None else method
    check_optimizer(method)
    labels = list(sc.operand_indices)
    output = sc.output_indices

    if method == "auto":
        method = "exhaustive" if len(labels) <= opts.exhaustive_limit else "greedy"
    steps = [] if len(labels) < 2 else _STRATEGIES[method](labels, output, sc.output_size, opts)

    for step in steps:
        labels = apply_step(labels, step)
    if len(labels) != 1:
        raise RuntimeError(f"Contraction plan leaves {len(labels)} operands.")
    order = ContractionOrder(method, tuple(steps), labels[0])
    logger.debug("Planned %s with method '%s': %s, total cost %d.",
                 sc, method, order.pairs, order.cost)
    return order

#------------------------------------------------------------------------------------
#strategies

type Strategy = Callable[[list[str], str, Mapping[str, int], PathOptions], list[PathStep]]

def _naive(labels: list[str], output: str, sizes: Mapping[str, int], _: PathOptions) -> list[PathStep]:
    """Left to right, the running result is contracted with the next operand."""
    steps = [pair_step(0, 1, labels, output, sizes)]
    labels = apply_step(labels, steps[-1])
    while len(labels) > 1:
        steps.append(pair_step(0, len(labels)-1, labels, output, sizes))
        labels = apply_step(labels, steps[-1])
    return steps

def _reverse(labels: list[str], output: str, sizes: Mapping[str, int], _: PathOptions) -> list[PathStep]:
    """Right to left, the running result is contracted with the previous operand."""
    steps = []
    while len(labels) > 1:
        steps.append(pair_step(len(labels)-2, len(labels)-1, labels, output, sizes))
        labels = apply_step(labels, steps[-1])
    return steps

def _greedy(labels: list[str], output: str, sizes: Mapping[str, int], _: PathOptions) -> list[PathStep]:
    """
    Contract the cheapest pair until one operand is left. Outer products are
    candidates like any other pair.
    """
    steps = []
    while len(labels) > 1:
        candidates = [pair_step(i, j, labels, output, sizes)
                      for i, j in combinations(range(len(labels)), 2)]
        best = min(candidates, key=lambda step: step.cost)
        steps.append(best)
        labels = apply_step(labels, best)
    return steps

def _exhaustive(labels: list[str], output: str, sizes: Mapping[str, int], _: PathOptions) -> list[PathStep]:
    """
    Depth first search over every sequence of pairs. Partial plans that already cost
    as much as the best complete plan are pruned, so the first plan found among plans
    of equal cost is kept.
    """
    best: list[PathStep] = []
    best_cost: NoneType | int = None

    def search(live: list[str], steps: list[PathStep], cost: int) -> None:
        nonlocal best, best_cost
        if best_cost is not None and cost >= best_cost:
            return
        if len(live) == 1:
            best, best_cost = steps, cost
            return
        for i, j in combinations(range(len(live)), 2):
            step = pair_step(i, j, live, output, sizes)
            search(apply_step(live, step), [*steps, step], cost + step.cost)

    search(labels, [], 0)
    return best

def _opt_einsum(labels: list[str], output: str, sizes: Mapping[str, int], opts: PathOptions) -> list[PathStep]:
    """Take the path from opt_einsum, which follows the same position convention."""
    sgen = symbol_generator()
    symbols = {c: next(sgen) for c in dict.fromkeys("".join(labels) + output)}
    eq = ",".join("".join(symbols[c] for c in op) for op in labels)
    eq += "->" + "".join(symbols[c] for c in output)
    shapes = [tuple(sizes[c] for c in op) for op in labels]
    path, _ = oe.contract_path(eq, *shapes, optimize=opts.opt_einsum_kind, shapes=True)

    steps = []
    for pair in path:
        if len(pair) != 2:
            raise RuntimeError(f"opt_einsum returned the non-pairwise step {pair}.")
        i, j = sorted(pair)
        steps.append(pair_step(i, j, labels, output, sizes))
        labels = apply_step(labels, steps[-1])
    return steps

_STRATEGIES: dict[str, Strategy] = {
    "naive": _naive,
    "reverse": _reverse,
    "greedy": _greedy,
    "exhaustive": _exhaustive,
    "opt_einsum": _opt_einsum,
}
