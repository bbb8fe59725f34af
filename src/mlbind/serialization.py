"""
Model serialization.

Models are persisted in the native library's binary format, which is opaque
here. A stream holds one model as a native ``size_t`` length (4 or 8 bytes,
native byte order) followed by exactly the bytes produced by
``Serialize<Type>Ptr``.

Example:
    >>> model, _, _ = mlbind.logistic_regression(training=x, labels=y)
    >>> with open("model.bin", "wb") as f:
    ...     mlbind.serialize_bin(f, model)
    >>> with open("model.bin", "rb") as f:
    ...     model = mlbind.deserialize_bin(f, mlbind.LogisticRegression)

Blobs written this way can also be read by mlpack bindings in other
languages. Models additionally support :mod:`pickle`, which stores the same
blob.
"""

from __future__ import annotations

import ctypes
import struct
from ctypes import POINTER, c_void_p
from typing import BinaryIO, Type, TypeVar, Union

from ._kernel import lib_loader, memory
from ._kernel.types import c_byte, c_size
from .models import ModelHandle, get_model_type

__all__ = ['serialize', 'deserialize', 'serialize_bin', 'deserialize_bin']

M = TypeVar('M', bound=ModelHandle)

# size_t length prefix in native byte order and width
_LENGTH = struct.Struct('N')


def serialize(model: ModelHandle) -> bytes:
    """Serialize ``model`` to the native binary format.

    Args:
        model: Open model handle.

    Returns:
        The blob produced by ``Serialize<Type>Ptr``.
    """
    lib = lib_loader.get_lib(model.binding)
    func = getattr(lib, f'Serialize{model.type_name}Ptr')
    func.argtypes = [c_void_p, POINTER(c_size)]
    func.restype = c_void_p

    length = c_size(0)
    address = func(model.ptr, ctypes.pointer(length))
    return memory.take_bytes(address, length.value)


def deserialize(model_type: Union[Type[M], str], data: bytes) -> M:
    """Rebuild a model from a blob produced by :func:`serialize`.

    Args:
        model_type: Handle class (or its native type name).
        data: Serialized blob, passed to the native side unchanged.

    Returns:
        A new handle that owns the deserialized model.
    """
    if isinstance(model_type, str):
        model_type = get_model_type(model_type)
    lib = lib_loader.get_lib(model_type.binding)
    func = getattr(lib, f'Deserialize{model_type.type_name}Ptr')
    func.argtypes = [POINTER(c_byte), c_size]
    func.restype = c_void_p

    buffer = (c_byte * len(data)).from_buffer_copy(data)
    ptr = func(buffer, len(data))
    return model_type(ptr, finalize=True)


def serialize_bin(stream: BinaryIO, model: ModelHandle) -> None:
    """Write ``model`` to ``stream`` as a length-prefixed blob."""
    data = serialize(model)
    stream.write(_LENGTH.pack(len(data)))
    stream.write(data)


def deserialize_bin(stream: BinaryIO, model_type: Union[Type[M], str]) -> M:
    """Read one length-prefixed blob from ``stream`` and deserialize it.

    Raises:
        EOFError: If the stream ends before the full blob was read.
    """
    header = stream.read(_LENGTH.size)
    if len(header) != _LENGTH.size:
        raise EOFError("truncated model stream: missing length prefix")
    (length,) = _LENGTH.unpack(header)
    data = stream.read(length)
    if len(data) != length:
        raise EOFError(f"truncated model stream: expected {length} bytes, got {len(data)}")
    return deserialize(model_type, data)


def _restore(type_name: str, data: bytes) -> ModelHandle:
    """Unpickle hook for :meth:`ModelHandle.__reduce__`."""
    return deserialize(type_name, data)
