# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Sequence, Generator
from itertools import product
import opt_einsum as oe

def symbol_generator() -> Generator[str, None, None]:
    idx = 0
    while True:
        yield oe.get_symbol(idx)
        idx += 1

def sequence_product(seq: Sequence[int]) -> Generator[tuple[int, ...], None, None]:
    ranges = [range(s) for s in seq]
    for idxs in product(*ranges):
        yield idxs

def is_permutation(seq: Sequence[int]) -> bool:
    return sorted(seq) == list(range(len(seq)))
