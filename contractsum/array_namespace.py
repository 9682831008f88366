# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

"""Structural types for the parts of the Array API used by contractsum."""

from typing import Protocol, Any, Sequence

Device = Any
DType = Any

class ArrayLike(Protocol):

    @property
    def shape(self) -> tuple[int | None, ...]: ...
    @property
    def dtype(self) -> DType: ...
    @property
    def ndim(self) -> int: ...
    @property
    def device(self) -> Device: ...
    def __getitem__(self, key: Any, /) -> Any: ...

class ArrayNamespace[T: ArrayLike](Protocol):

    def asarray(self, obj: Any, /, *, dtype: DType = None, device: Device = None, copy: bool | None = None) -> T: ...
    def zeros(self, shape: int | Sequence[int], *, dtype: DType = None, device: Device = None) -> T: ...
    def arange(self, start: int, /, stop: int | None = None, step: int = 1, *, dtype: DType = None, device: Device = None) -> T: ...
    def reshape(self, x: T, /, shape: Sequence[int], *, copy: bool | None = None) -> T: ...
    def permute_dims(self, x: T, /, axes: Sequence[int]) -> T: ...
    def matmul(self, x1: T, x2: T, /) -> T: ...
    def sum(self, x: T, /, *, axis: int | Sequence[int] | None = None, dtype: DType = None, keepdims: bool = False) -> T: ...
    def take(self, x: T, indices: T, /, *, axis: int | None = None) -> T: ...
    def __array_namespace_info__(self) -> Any: ...
