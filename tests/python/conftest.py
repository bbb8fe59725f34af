"""
Pytest configuration and shared fixtures for mlbind tests.

No native mlpack library is needed: ``FakeNativeLibrary`` stands in for the
binding ABI at the ctypes boundary. It reads the buffers the bindings lend
it through their raw addresses, emulates the native transposition of
``points_are_rows`` matrices, and hands back buffers for outputs the way
the native getters do.
"""

import ctypes
import gc
import itertools
import sys
from pathlib import Path

import numpy as np
import pytest

# Add src to path for imports
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root / "src"))

import mlbind
from mlbind._kernel import lib_loader, memory


# =============================================================================
# Fake Native Library
# =============================================================================

def _read(address, count, dtype):
    """Copy ``count`` elements of ``dtype`` from a raw address."""
    dtype = np.dtype(dtype)
    if count == 0:
        return np.empty(0, dtype=dtype)
    raw = (ctypes.c_char * (count * dtype.itemsize)).from_address(address)
    return np.frombuffer(raw, dtype=dtype).copy()


def _read_matrix(address, rows, cols, dtype, points_are_rows):
    """Read a column-major host matrix into the native (dims x points) layout."""
    mat = _read(address, rows * cols, dtype).reshape((rows, cols), order='F')
    return mat.T.copy() if points_are_rows else mat


class StubFunction:
    """Recording stand-in for a ctypes function pointer."""

    def __init__(self, name, impl):
        self.__name__ = name
        self.impl = impl
        self.argtypes = None
        self.restype = None
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args)
        return self.impl(*args)


class FakeParams:
    """Contents of one native parameter set."""

    def __init__(self, binding):
        self.binding = binding
        self.values = {}
        self.passed = set()

    def set(self, key, value):
        self.values[key] = value
        self.passed.add(key)


class FakeNativeLibrary:
    """Pure-Python implementation of the mlpack binding ABI.

    Attributes:
        success: Value returned by every ``mlpack_<name>`` entry point.
        handlers: Binding name -> ``handler(params, lib)`` run by the entry
            point to produce outputs (native layout).
        invocations: ``(binding, FakeParams)`` per entry point call.
        models: Live model pointer -> ``(type_name, payload)``.
        deleted: ``(type_name, ptr)`` per ``Delete<T>Ptr`` call.
    """

    def __init__(self):
        self.success = True
        self.handlers = {}
        self.invocations = []
        self.params = {}
        self.deleted_params = []
        self.timers = set()
        self.deleted_timers = []
        self.verbose = None
        self.models = {}
        self.deleted = []
        self._stubs = {}
        self._buffers = []
        self._handles = itertools.count(1)
        self._pointers = itertools.count(0x1000, 0x10)

    # -------------------------------------------------------------------------
    # Harness helpers
    # -------------------------------------------------------------------------

    def on(self, binding, handler):
        self.handlers[binding] = handler

    def new_model(self, type_name, payload=b'model'):
        ptr = next(self._pointers)
        self.models[ptr] = (type_name, payload)
        return ptr

    def calls(self, name):
        stub = self._stubs.get(name)
        return stub.calls if stub is not None else []

    def called(self, prefix):
        """Names of every stub starting with ``prefix`` that was called."""
        return sorted(n for n, s in self._stubs.items() if n.startswith(prefix) and s.calls)

    @property
    def last(self):
        return self.invocations[-1][1]

    def _keep(self, array):
        self._buffers.append(array)
        return array.ctypes.data

    # -------------------------------------------------------------------------
    # Symbol lookup
    # -------------------------------------------------------------------------

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        stub = self._stubs.get(name)
        if stub is None:
            stub = StubFunction(name, self._resolve(name))
            self._stubs[name] = stub
        return stub

    def _resolve(self, name):
        impl = getattr(type(self), f'abi_{name}', None)
        if impl is not None:
            return impl.__get__(self)
        if name.startswith('mlpack_'):
            return lambda p, t: self._run(name[len('mlpack_'):], p, t)
        for prefix, factory in (('SetParam', self._set_model),
                                ('GetParam', self._get_model),
                                ('Delete', self._delete_model),
                                ('Serialize', self._serialize_model),
                                ('Deserialize', self._deserialize_model)):
            if name.startswith(prefix) and name.endswith('Ptr'):
                return factory(name[len(prefix):-len('Ptr')])
        raise AttributeError(name)

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def abi_GetParameters(self, name):
        handle = next(self._handles)
        self.params[handle] = FakeParams(name.decode())
        return handle

    def abi_DeleteParameters(self, handle):
        self.deleted_params.append(handle)
        del self.params[handle]

    def abi_Timers(self):
        handle = next(self._handles)
        self.timers.add(handle)
        return handle

    def abi_DeleteTimers(self, handle):
        self.deleted_timers.append(handle)
        self.timers.remove(handle)

    def abi_SetPassed(self, handle, key):
        self.params[handle].passed.add(key.decode())

    def abi_EnableVerbose(self):
        self.verbose = True

    def abi_DisableVerbose(self):
        self.verbose = False

    def _run(self, binding, handle, timers):
        params = self.params[handle]
        assert timers in self.timers
        self.invocations.append((binding, params))
        handler = self.handlers.get(binding)
        if handler is not None and self.success:
            handler(params, self)
        return self.success

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def abi_SetParamBool(self, handle, key, value):
        self.params[handle].set(key.decode(), bool(value))

    def abi_SetParamInt(self, handle, key, value):
        self.params[handle].set(key.decode(), int(value))

    def abi_SetParamDouble(self, handle, key, value):
        self.params[handle].set(key.decode(), float(value))

    def abi_SetParamString(self, handle, key, value):
        self.params[handle].set(key.decode(), value.decode())

    def abi_SetParamVectorStrLen(self, handle, key, length):
        self.params[handle].set(key.decode(), [None] * length)

    def abi_SetParamVectorStrStr(self, handle, key, value, index):
        self.params[handle].values[key.decode()][index] = value.decode()

    def abi_SetParamVectorInt(self, handle, key, address, length):
        self.params[handle].set(key.decode(), _read(address, length, np.int64))

    def abi_SetParamMat(self, handle, key, address, rows, cols, points_are_rows):
        self.params[handle].set(
            key.decode(), _read_matrix(address, rows, cols, np.float64, points_are_rows))

    def abi_SetParamUMat(self, handle, key, address, rows, cols, points_are_rows):
        self.params[handle].set(
            key.decode(), _read_matrix(address, rows, cols, np.uintp, points_are_rows))

    def abi_SetParamMatWithInfo(self, handle, key, info_address, address, rows, cols,
                                points_are_rows):
        dims = cols if points_are_rows else rows
        info = _read(info_address, dims, np.bool_)
        mat = _read_matrix(address, rows, cols, np.float64, points_are_rows)
        self.params[handle].set(key.decode(), (info, mat))

    def abi_SetParamRow(self, handle, key, address, length):
        self.params[handle].set(key.decode(), _read(address, length, np.float64))

    abi_SetParamCol = abi_SetParamRow

    def abi_SetParamURow(self, handle, key, address, length):
        self.params[handle].set(key.decode(), _read(address, length, np.uintp))

    abi_SetParamUCol = abi_SetParamURow

    def _set_model(self, type_name):
        def impl(handle, key, ptr):
            self.params[handle].set(key.decode(), ptr)
        return impl

    # -------------------------------------------------------------------------
    # Getters
    # -------------------------------------------------------------------------

    def _value(self, handle, key, default=None):
        return self.params[handle].values.get(key.decode(), default)

    def abi_GetParamBool(self, handle, key):
        return bool(self._value(handle, key, False))

    def abi_GetParamInt(self, handle, key):
        return int(self._value(handle, key, 0))

    def abi_GetParamDouble(self, handle, key):
        return float(self._value(handle, key, 0.0))

    def abi_GetParamString(self, handle, key):
        value = self._value(handle, key)
        return None if value is None else value.encode()

    def abi_GetParamVectorStrLen(self, handle, key):
        return len(self._value(handle, key, []))

    def abi_GetParamVectorStrStr(self, handle, key, index):
        return self._value(handle, key)[index].encode()

    def abi_GetParamVectorIntLen(self, handle, key):
        return len(self._value(handle, key, ()))

    def abi_GetParamVectorIntPtr(self, handle, key):
        value = self._value(handle, key)
        if value is None or len(value) == 0:
            return None
        return self._keep(np.ascontiguousarray(value, dtype=np.int64))

    def _matrix(self, handle, key, dtype):
        value = self._value(handle, key)
        if value is None:
            return None
        return np.asfortranarray(value, dtype=dtype)

    def abi_GetParamMatRows(self, handle, key):
        mat = self._matrix(handle, key, np.float64)
        return 0 if mat is None else mat.shape[0]

    def abi_GetParamMatCols(self, handle, key):
        mat = self._matrix(handle, key, np.float64)
        return 0 if mat is None else mat.shape[1]

    def abi_GetParamMat(self, handle, key):
        mat = self._matrix(handle, key, np.float64)
        return None if mat is None or mat.size == 0 else self._keep(mat)

    def abi_GetParamUMatRows(self, handle, key):
        mat = self._matrix(handle, key, np.uintp)
        return 0 if mat is None else mat.shape[0]

    def abi_GetParamUMatCols(self, handle, key):
        mat = self._matrix(handle, key, np.uintp)
        return 0 if mat is None else mat.shape[1]

    def abi_GetParamUMat(self, handle, key):
        mat = self._matrix(handle, key, np.uintp)
        return None if mat is None or mat.size == 0 else self._keep(mat)

    def _vector_size(self, handle, key):
        return len(self._value(handle, key, ()))

    def _vector(self, dtype):
        def impl(handle, key):
            value = self._value(handle, key)
            if value is None or len(value) == 0:
                return None
            return self._keep(np.ascontiguousarray(value, dtype=dtype))
        return impl

    abi_GetParamRowSize = _vector_size
    abi_GetParamColSize = _vector_size
    abi_GetParamURowSize = _vector_size
    abi_GetParamUColSize = _vector_size

    def abi_GetParamRow(self, handle, key):
        return self._vector(np.float64)(handle, key)

    abi_GetParamCol = abi_GetParamRow

    def abi_GetParamURow(self, handle, key):
        return self._vector(np.uintp)(handle, key)

    abi_GetParamUCol = abi_GetParamURow

    def _get_model(self, type_name):
        def impl(handle, key):
            return self._value(handle, key) or None
        return impl

    # -------------------------------------------------------------------------
    # Models
    # -------------------------------------------------------------------------

    def _delete_model(self, type_name):
        def impl(ptr):
            self.deleted.append((type_name, ptr))
            self.models.pop(ptr, None)
        return impl

    def _serialize_model(self, type_name):
        def impl(ptr, length):
            _, payload = self.models[ptr]
            buffer = ctypes.create_string_buffer(payload, len(payload))
            self._buffers.append(buffer)
            length[0] = len(payload)
            return ctypes.addressof(buffer)
        return impl

    def _deserialize_model(self, type_name):
        def impl(buffer, length):
            return self.new_model(type_name, bytes(buffer)[:length])
        return impl


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Every test starts from default call options."""
    monkeypatch.delenv('MLBIND_VERBOSE', raising=False)
    monkeypatch.delenv('MLBIND_COPY_INPUTS', raising=False)
    mlbind.config.reset()
    yield
    mlbind.config.reset()


@pytest.fixture
def freed(monkeypatch):
    """Addresses passed to ``free``, which is never really called."""
    addresses = []
    monkeypatch.setattr(memory, 'free', addresses.append)
    return addresses


@pytest.fixture
def fake_lib(freed):
    """Install a FakeNativeLibrary for every binding."""
    lib = FakeNativeLibrary()
    lib_loader.use_library(lib)
    yield lib
    # Run pending model finalizers while the fake is still installed
    gc.collect()
    lib_loader.reset()


@pytest.fixture
def points():
    """100 points in 4 dimensions, one per row."""
    rng = np.random.default_rng(42)
    return rng.random((100, 4))
