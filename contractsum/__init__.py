# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

"""Einstein summation over Array API tensors with planned pairwise contractions."""

from .contraction import Contraction
from .sizedcontraction import SizedContraction
from .indexclassifier import IndexRole, IndexInfo, classify_operand
from .indexclassifier import ClassifiedSingletonContraction, ClassifiedPairContraction
from .tensorview import TensorView
from .singletoncontraction import SingletonContraction, SingletonKind
from .tensordot import TensordotGeneral, pairwise_contract, tensordot
from .paircontraction import PairContraction
from .optimizer import ContractionOrder, PathStep, generate_optimized_order
from .options import PathOptions, OptimizationMethod, get_options, set_options
from .path import EinsumPath
from .reference import reference_einsum
from .einsum import (
    einsum,
    einsum_sc,
    einsum_path,
    contract,
    validate,
    validate_and_size,
    validate_and_optimize_order,
)
