"""Native parameter sets and timers.

Every binding invocation owns exactly one parameter set and one timer object.
Both are context managers so they are destroyed on every exit path.

All functions here work with raw addresses and Python scalars; conversion
from numpy lives in :mod:`mlbind._kernel.marshal`.
"""

import logging
import weakref
from ctypes import c_bool, c_char_p, c_double, c_int, c_void_p
from typing import List, Optional, Tuple

from . import lib_loader
from .types import c_size

__all__ = [
    'ParameterSet', 'Timers', 'declare', 'enable_verbose', 'disable_verbose',
]

logger = logging.getLogger("mlbind.kernel")


# =============================================================================
# ABI Signatures
# =============================================================================

_P = c_void_p
_S = c_char_p

_SIGNATURES = {
    # lifecycle
    'GetParameters': ([_S], c_void_p),
    'DeleteParameters': ([_P], None),
    'Timers': ([], c_void_p),
    'DeleteTimers': ([_P], None),
    'SetPassed': ([_P, _S], None),
    'EnableVerbose': ([], None),
    'DisableVerbose': ([], None),
    # setters
    'SetParamBool': ([_P, _S, c_bool], None),
    'SetParamInt': ([_P, _S, c_int], None),
    'SetParamDouble': ([_P, _S, c_double], None),
    'SetParamString': ([_P, _S, _S], None),
    'SetParamVectorStrLen': ([_P, _S, c_size], None),
    'SetParamVectorStrStr': ([_P, _S, _S, c_size], None),
    'SetParamVectorInt': ([_P, _S, c_void_p, c_size], None),
    'SetParamMat': ([_P, _S, c_void_p, c_size, c_size, c_bool], None),
    'SetParamUMat': ([_P, _S, c_void_p, c_size, c_size, c_bool], None),
    'SetParamRow': ([_P, _S, c_void_p, c_size], None),
    'SetParamCol': ([_P, _S, c_void_p, c_size], None),
    'SetParamURow': ([_P, _S, c_void_p, c_size], None),
    'SetParamUCol': ([_P, _S, c_void_p, c_size], None),
    'SetParamMatWithInfo': ([_P, _S, c_void_p, c_void_p, c_size, c_size, c_bool], None),
    # getters
    'GetParamBool': ([_P, _S], c_bool),
    'GetParamInt': ([_P, _S], c_int),
    'GetParamDouble': ([_P, _S], c_double),
    'GetParamString': ([_P, _S], c_char_p),
    'GetParamVectorStrLen': ([_P, _S], c_size),
    'GetParamVectorStrStr': ([_P, _S, c_size], c_char_p),
    'GetParamVectorIntLen': ([_P, _S], c_size),
    'GetParamVectorIntPtr': ([_P, _S], c_void_p),
    'GetParamMatRows': ([_P, _S], c_size),
    'GetParamMatCols': ([_P, _S], c_size),
    'GetParamMat': ([_P, _S], c_void_p),
    'GetParamUMatRows': ([_P, _S], c_size),
    'GetParamUMatCols': ([_P, _S], c_size),
    'GetParamUMat': ([_P, _S], c_void_p),
    'GetParamRowSize': ([_P, _S], c_size),
    'GetParamRow': ([_P, _S], c_void_p),
    'GetParamColSize': ([_P, _S], c_size),
    'GetParamCol': ([_P, _S], c_void_p),
    'GetParamURowSize': ([_P, _S], c_size),
    'GetParamURow': ([_P, _S], c_void_p),
    'GetParamUColSize': ([_P, _S], c_size),
    'GetParamUCol': ([_P, _S], c_void_p),
}

_declared = weakref.WeakSet()

_VECTOR_KINDS = ('Row', 'Col', 'URow', 'UCol')


def declare(lib):
    """Set argtypes/restype for the parameter-set ABI once per library."""
    if lib in _declared:
        return lib
    for name, (argtypes, restype) in _SIGNATURES.items():
        func = getattr(lib, name)
        func.argtypes = argtypes
        func.restype = restype
    _declared.add(lib)
    return lib


def _util_lib():
    return declare(lib_loader.get_lib(None))


def enable_verbose() -> None:
    """Turn on the native library's informational output."""
    _util_lib().EnableVerbose()


def disable_verbose() -> None:
    """Turn off the native library's informational output."""
    _util_lib().DisableVerbose()


def _key(name: str) -> bytes:
    return name.encode('utf-8')


# =============================================================================
# Timers
# =============================================================================

class Timers:
    """Native timer object for one binding invocation.

    Example:
        >>> with Timers() as timers:
        ...     lib.mlpack_kmeans(params.handle, timers.handle)
    """

    __slots__ = ('_lib', '_handle')

    def __init__(self):
        self._lib = _util_lib()
        self._handle = self._lib.Timers()

    @property
    def handle(self) -> int:
        if self._handle is None:
            raise ValueError("Timers already destroyed")
        return self._handle

    @property
    def destroyed(self) -> bool:
        return self._handle is None

    def destroy(self) -> None:
        if self._handle is not None:
            self._lib.DeleteTimers(self._handle)
            self._handle = None

    def __enter__(self) -> "Timers":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.destroy()


# =============================================================================
# Parameter Set
# =============================================================================

class ParameterSet:
    """Native parameter set for one binding invocation.

    Keys are the binding's parameter names. Nothing is validated here beyond
    the type implied by the setter that is called; semantic checks happen in
    native code and surface as a failed call.

    Model pointer accessors resolve ``GetParam<T>Ptr``/``SetParam<T>Ptr``
    from the binding's own library, everything else from the utility
    library.

    Example:
        >>> with ParameterSet('kmeans') as params:
        ...     params.set_int('clusters', 3)
        ...     params.mark_passed('centroid')
    """

    __slots__ = ('_lib', '_binding_lib', '_binding', '_handle')

    def __init__(self, binding: str):
        self._binding = binding
        self._lib = _util_lib()
        self._binding_lib = lib_loader.get_lib(binding)
        self._handle = self._lib.GetParameters(_key(binding))

    @property
    def binding(self) -> str:
        return self._binding

    @property
    def handle(self) -> int:
        """Raw parameter-set pointer.

        Raises:
            ValueError: If the parameter set was destroyed.
        """
        if self._handle is None:
            raise ValueError(f"Parameter set for '{self._binding}' already destroyed")
        return self._handle

    @property
    def binding_lib(self):
        return self._binding_lib

    @property
    def destroyed(self) -> bool:
        return self._handle is None

    def destroy(self) -> None:
        """Release the native parameter set. Safe to call twice."""
        if self._handle is not None:
            self._lib.DeleteParameters(self._handle)
            self._handle = None

    def __enter__(self) -> "ParameterSet":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.destroy()

    def mark_passed(self, key: str) -> None:
        """Flag ``key`` as passed so the native side populates or uses it."""
        self._lib.SetPassed(self.handle, _key(key))

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_bool(self, key: str, value: bool) -> None:
        self._lib.SetParamBool(self.handle, _key(key), bool(value))

    def set_int(self, key: str, value: int) -> None:
        self._lib.SetParamInt(self.handle, _key(key), int(value))

    def set_double(self, key: str, value: float) -> None:
        self._lib.SetParamDouble(self.handle, _key(key), float(value))

    def set_scalar(self, key: str, value) -> None:
        """Dispatch on the Python type of ``value``."""
        if isinstance(value, bool):
            self.set_bool(key, value)
        elif isinstance(value, int):
            self.set_int(key, value)
        elif isinstance(value, float):
            self.set_double(key, value)
        else:
            raise TypeError(f"'{key}': expected bool, int or float, got {type(value).__name__}")

    def set_string(self, key: str, value: str) -> None:
        self._lib.SetParamString(self.handle, _key(key), value.encode('utf-8'))

    def set_vector_str(self, key: str, values: List[str]) -> None:
        self._lib.SetParamVectorStrLen(self.handle, _key(key), len(values))
        for i, value in enumerate(values):
            self._lib.SetParamVectorStrStr(self.handle, _key(key), value.encode('utf-8'), i)

    def set_vector_int(self, key: str, address: int, length: int) -> None:
        self._lib.SetParamVectorInt(self.handle, _key(key), address, length)

    def set_matrix(self, key: str, address: int, rows: int, cols: int,
                   points_are_rows: bool) -> None:
        """Bind a column-major float64 buffer of shape ``(rows, cols)``."""
        self._lib.SetParamMat(self.handle, _key(key), address, rows, cols, points_are_rows)

    def set_index_matrix(self, key: str, address: int, rows: int, cols: int,
                         points_are_rows: bool) -> None:
        """Bind a column-major size_t buffer of shape ``(rows, cols)``."""
        self._lib.SetParamUMat(self.handle, _key(key), address, rows, cols, points_are_rows)

    def set_vector(self, kind: str, key: str, address: int, length: int) -> None:
        """Bind a 1-D buffer; ``kind`` is one of Row, Col, URow, UCol."""
        if kind not in _VECTOR_KINDS:
            raise ValueError(f"Unknown vector kind: {kind}")
        getattr(self._lib, f'SetParam{kind}')(self.handle, _key(key), address, length)

    def set_matrix_with_info(self, key: str, info_address: int, address: int,
                             rows: int, cols: int, points_are_rows: bool) -> None:
        self._lib.SetParamMatWithInfo(self.handle, _key(key), info_address, address,
                                      rows, cols, points_are_rows)

    def set_model_pointer(self, type_name: str, key: str, ptr: int) -> None:
        """Bind a model pointer through ``SetParam<type_name>Ptr``."""
        func = getattr(self._binding_lib, f'SetParam{type_name}Ptr')
        func.argtypes = [_P, _S, c_void_p]
        func.restype = None
        func(self.handle, _key(key), ptr)

    # -------------------------------------------------------------------------
    # Getters
    # -------------------------------------------------------------------------

    def get_bool(self, key: str) -> bool:
        return bool(self._lib.GetParamBool(self.handle, _key(key)))

    def get_int(self, key: str) -> int:
        return int(self._lib.GetParamInt(self.handle, _key(key)))

    def get_double(self, key: str) -> float:
        return float(self._lib.GetParamDouble(self.handle, _key(key)))

    def get_scalar(self, key: str, kind: type):
        """Read a scalar of Python type ``kind`` (bool, int or float)."""
        if kind is bool:
            return self.get_bool(key)
        elif kind is int:
            return self.get_int(key)
        elif kind is float:
            return self.get_double(key)
        raise TypeError(f"Unsupported scalar kind: {kind!r}")

    def get_string(self, key: str) -> str:
        value = self._lib.GetParamString(self.handle, _key(key))
        if value is None:
            return ""
        return value.decode('utf-8')

    def get_vector_str(self, key: str) -> List[str]:
        length = self._lib.GetParamVectorStrLen(self.handle, _key(key))
        return [
            self._lib.GetParamVectorStrStr(self.handle, _key(key), i).decode('utf-8')
            for i in range(length)
        ]

    def get_vector_int(self, key: str) -> Tuple[int, int]:
        """Return ``(address, length)`` of a native long long buffer."""
        length = self._lib.GetParamVectorIntLen(self.handle, _key(key))
        return self._lib.GetParamVectorIntPtr(self.handle, _key(key)), length

    def get_matrix(self, key: str) -> Tuple[int, int, int]:
        """Return ``(address, rows, cols)`` of a column-major float64 buffer."""
        rows = self._lib.GetParamMatRows(self.handle, _key(key))
        cols = self._lib.GetParamMatCols(self.handle, _key(key))
        return self._lib.GetParamMat(self.handle, _key(key)), rows, cols

    def get_index_matrix(self, key: str) -> Tuple[int, int, int]:
        """Return ``(address, rows, cols)`` of a column-major size_t buffer."""
        rows = self._lib.GetParamUMatRows(self.handle, _key(key))
        cols = self._lib.GetParamUMatCols(self.handle, _key(key))
        return self._lib.GetParamUMat(self.handle, _key(key)), rows, cols

    def get_vector(self, kind: str, key: str) -> Tuple[int, int]:
        """Return ``(address, length)``; ``kind`` is one of Row, Col, URow, UCol."""
        if kind not in _VECTOR_KINDS:
            raise ValueError(f"Unknown vector kind: {kind}")
        length = getattr(self._lib, f'GetParam{kind}Size')(self.handle, _key(key))
        return getattr(self._lib, f'GetParam{kind}')(self.handle, _key(key)), length

    def get_model_pointer(self, type_name: str, key: str) -> Optional[int]:
        """Read a model pointer through ``GetParam<type_name>Ptr``."""
        func = getattr(self._binding_lib, f'GetParam{type_name}Ptr')
        func.argtypes = [_P, _S]
        func.restype = c_void_p
        return func(self.handle, _key(key))
