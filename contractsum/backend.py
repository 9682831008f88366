# Copyright© 2025-2026 Gesellschaft zur Förderung der angewandten Forschung e.V.
# acting on behalf of its Fraunhofer Institut für Graphische Datenverarbeitung.
# Licensed under the EUPL. See LICENSE.txt.

from math import prod
from typing import Any, Sequence
from types import NoneType
import numpy as np
import array_api_compat as api
from array_api_compat import device

from .array_namespace import ArrayNamespace, ArrayLike

def namespace_of_arrays[T: ArrayLike](*arrays: T) -> ArrayNamespace[T]:
    try:
        return api.array_namespace(*arrays) # type: ignore
    except TypeError as err:
        raise ValueError("Operands must be arrays of one common array namespace.") from err

def get_index_dtype(xp: ArrayNamespace) -> Any:
    info = xp.__array_namespace_info__()
    dtypes = info.dtypes(kind=None)
    for name in ["int64", "int32", "int16"]:
        if name in dtypes:
            return dtypes[name]
    raise ValueError("No suitable index dtype found")

def shape(array: ArrayLike) -> tuple[int, ...]:
    shp = array.shape
    if any(s is None for s in shp):
        raise ValueError("Array shape contains None dimension(s).")
    return tuple(shp)  # type: ignore

def contiguous_strides(shp: Sequence[int]) -> tuple[int, ...]:
    """Element strides of a C-contiguous array with the given shape."""
    return tuple(prod(shp[i+1:]) for i in range(len(shp)))

#------------------------------------------------------------------------------------
#strided memory access

def strides(array: ArrayLike) -> NoneType | tuple[int, ...]:
    """
    Element strides of the array. Namespaces without access to the memory layout
    report the strides of the C-contiguous layout, which is what `as_strided` assumes
    for them. None if a byte stride is not a multiple of the item size, as for the
    field views of structured NumPy arrays.
    """
    if api.is_numpy_array(array):
        itemsize = array.itemsize # type: ignore
        if any(s % itemsize != 0 for s in array.strides): # type: ignore
            return None
        return tuple(s // itemsize for s in array.strides) # type: ignore
    if api.is_torch_array(array):
        return tuple(array.stride()) # type: ignore
    return contiguous_strides(shape(array))

def as_strided[T: ArrayLike](array: T, shp: Sequence[int], strd: Sequence[int]) -> T:
    """
    Read the memory of `array` with a new shape and new element strides. NumPy
    results are read-only views. PyTorch results are views as well, writing to them
    is not supported. Other namespaces gather the elements into a new array.
    """
    if len(shp) != len(strd):
        raise RuntimeError("Shape and strides differ in length.")
    if api.is_numpy_array(array):
        itemsize = array.itemsize # type: ignore
        return np.lib.stride_tricks.as_strided(
                array, # type: ignore
                shape=tuple(shp),
                strides=tuple(s * itemsize for s in strd),
                writeable=False)
    if api.is_torch_array(array):
        return array.as_strided(tuple(shp), tuple(strd)) # type: ignore
    return _gather_strided(array, shp, strd)

def _gather_strided[T: ArrayLike](array: T, shp: Sequence[int], strd: Sequence[int]) -> T:
    xp = namespace_of_arrays(array)
    index_dtype = get_index_dtype(xp)
    dev = device(array)
    flat = xp.reshape(array, (-1,))
    idxs = xp.zeros(tuple(shp), dtype=index_dtype, device=dev)
    for i, (size, stride) in enumerate(zip(shp, strd)):
        axis = xp.arange(size, dtype=index_dtype, device=dev) * stride
        idxs = idxs + xp.reshape(axis, tuple(size if j == i else 1 for j in range(len(shp))))
    data = xp.take(flat, xp.reshape(idxs, (-1,)), axis=0)
    return xp.reshape(data, tuple(shp))

def contiguous[T: ArrayLike](array: T) -> T:
    """Copy the array into a new C-contiguous buffer."""
    if api.is_numpy_array(array):
        return np.array(array, order="C", copy=True) # type: ignore
    if api.is_torch_array(array):
        return array.clone() if array.is_contiguous() else array.contiguous() # type: ignore
    xp = namespace_of_arrays(array)
    return xp.asarray(array, copy=True)

def owned[T: ArrayLike](array: T) -> T:
    """Copy of the array that shares no memory with any operand."""
    xp = namespace_of_arrays(array)
    return xp.asarray(array, copy=True)

