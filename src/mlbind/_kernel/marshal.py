"""Conversion between numpy values and native parameter-set entries.

Matrices cross the ABI column-major. A host matrix of shape ``(n, d)`` is
bound with ``rows=n, cols=d`` and the ``points_are_rows`` flag; when the
flag is set the native side transposes it into its (dimensions x points)
layout. Output matrices come back in that native layout and are transposed
here under the same flag, so input and output conventions always agree.

Input buffers are lent zero-copy and held in an :class:`OwnedBuffers` set
until the call returns. Output buffers are copied and then freed, except
when the native side handed back one of the lent buffers.
"""

import operator
from ctypes import c_void_p
from typing import Any, List, Optional, Sequence

import numpy as np

from . import memory
from .params import ParameterSet
from .._ownership import ModelRegistry, OwnedBuffers

__all__ = [
    'as_matrix', 'as_vector',
    'set_bool', 'set_int', 'set_double', 'set_string',
    'set_matrix', 'set_index_matrix', 'set_matrix_with_info',
    'set_vector', 'set_vector_int', 'set_vector_str',
    'set_model', 'set_raw_model', 'raw_pointer',
    'get_matrix', 'get_index_matrix', 'get_vector', 'get_vector_int',
    'get_vector_str', 'get_model', 'get_raw_model',
]

# Element type per vector kind
_VECTOR_DTYPES = {
    'Row': np.float64,
    'Col': np.float64,
    'URow': np.uintp,
    'UCol': np.uintp,
}

_C_INT = np.iinfo(np.intc)
_INT64 = np.iinfo(np.int64)


# =============================================================================
# Array Preparation
# =============================================================================

def _densify(value: Any) -> Any:
    """Convert a scipy.sparse matrix to a dense array (scipy imported lazily)."""
    if type(value).__module__.startswith('scipy.sparse'):
        import scipy.sparse
        if scipy.sparse.issparse(value):
            return value.toarray()
    return value


def _check_unsigned(arr: np.ndarray, key: str) -> None:
    if arr.size and np.issubdtype(arr.dtype, np.signedinteger) and arr.min() < 0:
        raise ValueError(f"'{key}': index values must be non-negative")
    if arr.size and np.issubdtype(arr.dtype, np.floating):
        if not np.all(np.mod(arr, 1) == 0) or arr.min() < 0:
            raise ValueError(f"'{key}': index values must be non-negative integers")


def _check_int64(arr: np.ndarray, key: str) -> None:
    if np.issubdtype(arr.dtype, np.floating):
        if not np.all(np.isfinite(arr)) or not np.all(np.mod(arr, 1) == 0):
            raise ValueError(f"'{key}': values must be integers")
        # 2**63 is exact in float64, int64 max is not
        if arr.max() >= 2.0 ** 63 or arr.min() < -2.0 ** 63:
            raise OverflowError(f"'{key}': values are out of range for int64")
    elif np.issubdtype(arr.dtype, np.integer):
        if arr.max() > _INT64.max:
            raise OverflowError(f"'{key}': values are out of range for int64")
    else:
        raise TypeError(f"'{key}': expected integer elements, got {arr.dtype}")


def as_matrix(value: Any, dtype, key: str = 'matrix', copy: bool = False) -> np.ndarray:
    """Prepare a 2-D column-major array of ``dtype``.

    Args:
        value: Array-like or scipy.sparse matrix.
        dtype: ``np.float64`` or ``np.uintp``.
        key: Parameter name, used in error messages.
        copy: Always return a private copy.

    Raises:
        ValueError: If ``value`` is not two-dimensional, or holds negative
            values for an index matrix.
    """
    arr = np.asarray(_densify(value))
    if arr.ndim != 2:
        raise ValueError(f"'{key}': expected a 2-D matrix, got {arr.ndim}-D")
    if np.dtype(dtype) == np.dtype(np.uintp):
        _check_unsigned(arr, key)
    if copy:
        return np.array(arr, dtype=dtype, order='F', copy=True)
    return np.asfortranarray(arr, dtype=dtype)


def as_vector(value: Any, dtype, key: str = 'vector', copy: bool = False) -> np.ndarray:
    """Prepare a contiguous 1-D array; ``(n, 1)`` and ``(1, n)`` are flattened."""
    arr = np.asarray(_densify(value))
    if arr.ndim == 2 and 1 in arr.shape:
        arr = arr.reshape(-1)
    if arr.ndim != 1:
        raise ValueError(f"'{key}': expected a 1-D vector, got shape {arr.shape}")
    if np.dtype(dtype) == np.dtype(np.uintp):
        _check_unsigned(arr, key)
    if copy:
        return np.array(arr, dtype=dtype, copy=True)
    return np.ascontiguousarray(arr, dtype=dtype)


# =============================================================================
# Setters
# =============================================================================

def set_bool(params: ParameterSet, key: str, value: Any) -> None:
    if not isinstance(value, (bool, np.bool_)):
        raise TypeError(f"'{key}': expected bool, got {type(value).__name__}")
    params.set_scalar(key, bool(value))


def set_int(params: ParameterSet, key: str, value: Any) -> None:
    """Bind a C ``int``.

    Raises:
        OverflowError: If ``value`` does not fit in a C ``int``; ctypes
            would otherwise truncate it silently.
    """
    if isinstance(value, (bool, np.bool_)):
        raise TypeError(f"'{key}': expected int, got bool")
    try:
        value = operator.index(value)
    except TypeError:
        raise TypeError(f"'{key}': expected int, got {type(value).__name__}") from None
    if not _C_INT.min <= value <= _C_INT.max:
        raise OverflowError(f"'{key}': {value} is out of range for a C int")
    params.set_scalar(key, value)


def set_double(params: ParameterSet, key: str, value: Any) -> None:
    if isinstance(value, (bool, np.bool_, str, bytes)):
        raise TypeError(f"'{key}': expected float, got {type(value).__name__}")
    params.set_scalar(key, float(value))


def set_string(params: ParameterSet, key: str, value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"'{key}': expected str, got {type(value).__name__}")
    params.set_string(key, value)


def set_matrix(params: ParameterSet, key: str, value: Any, owned: OwnedBuffers,
               points_are_rows: bool = True, copy: bool = False) -> None:
    """Bind a float64 matrix."""
    arr = as_matrix(value, np.float64, key, copy)
    address = owned.hold(arr)
    params.set_matrix(key, address, arr.shape[0], arr.shape[1], points_are_rows)


def set_index_matrix(params: ParameterSet, key: str, value: Any, owned: OwnedBuffers,
                     points_are_rows: bool = True, copy: bool = False) -> None:
    """Bind a size_t matrix (labels, neighbor indices)."""
    arr = as_matrix(value, np.uintp, key, copy)
    address = owned.hold(arr)
    params.set_index_matrix(key, address, arr.shape[0], arr.shape[1], points_are_rows)


def set_matrix_with_info(params: ParameterSet, key: str, value: Any, owned: OwnedBuffers,
                         points_are_rows: bool = True, copy: bool = False) -> None:
    """Bind a ``(dimension_info, matrix)`` pair.

    ``dimension_info`` holds one bool per dimension; True marks the
    dimension as categorical.
    """
    if not isinstance(value, tuple) or len(value) != 2:
        raise TypeError(f"'{key}': expected a (dimension_info, matrix) tuple")
    info, matrix = value
    arr = as_matrix(matrix, np.float64, key, copy)
    dims = np.ascontiguousarray(info, dtype=np.bool_).reshape(-1)
    n_dims = arr.shape[1] if points_are_rows else arr.shape[0]
    if dims.shape[0] != n_dims:
        raise ValueError(
            f"'{key}': dimension info has {dims.shape[0]} entries for {n_dims} dimensions"
        )
    info_address = owned.hold(dims)
    address = owned.hold(arr)
    params.set_matrix_with_info(key, info_address, address, arr.shape[0], arr.shape[1],
                                points_are_rows)


def set_vector(params: ParameterSet, kind: str, key: str, value: Any,
               owned: OwnedBuffers, copy: bool = False) -> None:
    """Bind a 1-D vector; ``kind`` is one of Row, Col, URow, UCol."""
    arr = as_vector(value, _VECTOR_DTYPES[kind], key, copy)
    address = owned.hold(arr)
    params.set_vector(kind, key, address, arr.shape[0])


def set_vector_int(params: ParameterSet, key: str, value: Any, owned: OwnedBuffers) -> None:
    """Bind a vector of int64.

    Raises:
        TypeError: If the elements are not numbers.
        ValueError: If an element is not integral.
        OverflowError: If an element does not fit in int64.
    """
    raw = np.asarray(value).reshape(-1)
    if raw.size:
        _check_int64(raw, key)
    arr = np.array(raw, dtype=np.int64, copy=True)
    address = owned.hold(arr)
    params.set_vector_int(key, address, arr.shape[0])


def set_vector_str(params: ParameterSet, key: str, value: Sequence[str]) -> None:
    if isinstance(value, (str, bytes)):
        raise TypeError(f"'{key}': expected a sequence of str, got a single string")
    values = list(value)
    for item in values:
        if not isinstance(item, str):
            raise TypeError(f"'{key}': expected str elements, got {type(item).__name__}")
    params.set_vector_str(key, values)


def set_model(params: ParameterSet, key: str, model: Any, model_type: type,
              registry: ModelRegistry, transfer: bool = False) -> None:
    """Bind a typed model handle.

    Args:
        transfer: Hand ownership of the pointer to the native side. The
            handle is released and never deletes the model afterwards.
    """
    if not isinstance(model, model_type):
        raise TypeError(
            f"'{key}': expected {model_type.__name__}, got {type(model).__name__}"
        )
    if transfer:
        ptr = model.release()
    else:
        ptr = model.ptr
        registry.register(ptr, model)
    params.set_model_pointer(model_type.type_name, key, ptr)


def raw_pointer(value: Any) -> int:
    """Extract an address from an int, ``ctypes.c_void_p`` or model handle."""
    from ..models import ModelHandle

    if isinstance(value, ModelHandle):
        return value.ptr
    if isinstance(value, c_void_p):
        value = value.value
    if isinstance(value, (bool, np.bool_)) or value is None:
        raise TypeError("expected a model pointer")
    ptr = operator.index(value)
    if ptr == 0:
        raise ValueError("NULL model pointer")
    return ptr


def set_raw_model(params: ParameterSet, type_name: str, key: str, value: Any) -> None:
    """Bind an untyped model pointer; ownership stays with the caller."""
    params.set_model_pointer(type_name, key, raw_pointer(value))


# =============================================================================
# Getters
# =============================================================================

def _reshape(flat: np.ndarray, rows: int, cols: int, points_are_rows: bool) -> np.ndarray:
    mat = flat.reshape((rows, cols), order='F')
    return mat.T if points_are_rows else mat


def get_matrix(params: ParameterSet, key: str, owned: OwnedBuffers,
               points_are_rows: bool = True) -> np.ndarray:
    address, rows, cols = params.get_matrix(key)
    flat = memory.take_array(address, rows * cols, np.float64, owned)
    return _reshape(flat, rows, cols, points_are_rows)


def get_index_matrix(params: ParameterSet, key: str, owned: OwnedBuffers,
                     points_are_rows: bool = True) -> np.ndarray:
    address, rows, cols = params.get_index_matrix(key)
    flat = memory.take_array(address, rows * cols, np.uintp, owned)
    return _reshape(flat, rows, cols, points_are_rows)


def get_vector(params: ParameterSet, kind: str, key: str, owned: OwnedBuffers) -> np.ndarray:
    address, length = params.get_vector(kind, key)
    return memory.take_array(address, length, _VECTOR_DTYPES[kind], owned)


def get_vector_int(params: ParameterSet, key: str, owned: OwnedBuffers) -> np.ndarray:
    address, length = params.get_vector_int(key)
    return memory.take_array(address, length, np.int64, owned)


def get_vector_str(params: ParameterSet, key: str) -> List[str]:
    return params.get_vector_str(key)


def get_model(params: ParameterSet, key: str, model_type: type,
              registry: ModelRegistry) -> Optional[Any]:
    """Read a typed model output.

    A pointer that belongs to a model passed into this call (or to an
    earlier output) is returned as that same handle, so one native model
    never gets two owners.
    """
    ptr = params.get_model_pointer(model_type.type_name, key)
    if not ptr:
        return None
    existing = registry.lookup(ptr)
    if existing is not None:
        return existing
    model = model_type(ptr, finalize=True)
    registry.register(ptr, model)
    return model


def get_raw_model(params: ParameterSet, type_name: str, key: str) -> Optional[int]:
    """Read an untyped model output as a bare address (no finalizer)."""
    ptr = params.get_model_pointer(type_name, key)
    return int(ptr) if ptr else None
