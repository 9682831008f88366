# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from typing import Hashable, Literal, Any, Self, get_args
from types import NoneType
import threading

OptimizationMethod = Literal["naive", "reverse", "greedy", "exhaustive", "auto", "opt_einsum"]
OptimizeKind = Literal["optimal", "dp", "greedy", "random-greedy", "random-greedy-128", "branch-all", "branch-2", "auto", "auto-hq"]

DEFAULT_OPTIMIZER: OptimizationMethod = "auto"
DEFAULT_EXHAUSTIVE_LIMIT = 5

class PathOptions:
    """
    Context manager for the contraction path options of the current thread.
    Nested contexts restore the enclosing options on exit.
    """

    #: Method for ordering the pairwise contractions.
    optimizer: OptimizationMethod
    #: Largest number of operands that "auto" still searches exhaustively.
    exhaustive_limit: int
    #: Path finder of opt_einsum used by the "opt_einsum" method.
    opt_einsum_kind: OptimizeKind

    key: Hashable
    _tmp: NoneType | Self

    def __init__(
            self, *,
            optimizer: OptimizationMethod = DEFAULT_OPTIMIZER,
            exhaustive_limit: int = DEFAULT_EXHAUSTIVE_LIMIT,
            opt_einsum_kind: OptimizeKind = "auto-hq"):
        check_optimizer(optimizer)
        if exhaustive_limit < 2:
            raise ValueError(f"exhaustive_limit must be at least 2, got {exhaustive_limit}")
        if opt_einsum_kind not in get_args(OptimizeKind):
            raise ValueError(f"Unknown opt_einsum path finder '{opt_einsum_kind}'.")
        self.optimizer = optimizer
        self.exhaustive_limit = exhaustive_limit
        self.opt_einsum_kind = opt_einsum_kind
        self.key = threading.get_ident()
        self._tmp = None

    def __enter__(self) -> Self:
        global _opts
        self._tmp = _opts.get(self.key, None)
        _opts[self.key] = self
        return self

    def __exit__(self, *_) -> None:
        global _opts
        if self._tmp is not None:
            _opts[self.key] = self._tmp
        else:
            del _opts[self.key]

    def __repr__(self) -> str:
        return f"PathOptions(optimizer={self.optimizer!r}, "\
               f"exhaustive_limit={self.exhaustive_limit}, "\
               f"opt_einsum_kind={self.opt_einsum_kind!r})"

def check_optimizer(optimizer: Any) -> None:
    if optimizer not in get_args(OptimizationMethod):
        raise ValueError(f"Unknown optimization method '{optimizer}', "\
                         f"expected one of {get_args(OptimizationMethod)}.")

_opts: dict[Any, PathOptions] = {}

def get_options() -> PathOptions:
    """Options of the current thread, the defaults if none are set."""
    global _opts
    key = threading.get_ident()
    if key in _opts:
        return _opts[key]
    return PathOptions()

def set_options(opts: PathOptions) -> None:
    global _opts
    _opts[opts.key] = opts
