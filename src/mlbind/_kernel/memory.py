"""Native memory helpers.

Buffers handed out by the binding getters and serializers are allocated with
the C runtime ``malloc`` and become the caller's responsibility.
"""
import ctypes
import ctypes.util
import logging
import sys
from functools import lru_cache
from typing import Container, Optional

import numpy as np

__all__ = ['free', 'copy_array', 'take_array', 'take_bytes']

logger = logging.getLogger("mlbind.kernel")


@lru_cache(maxsize=1)
def _libc():
    if sys.platform == 'win32':
        return ctypes.cdll.msvcrt
    return ctypes.CDLL(ctypes.util.find_library('c'))


def free(address: int) -> None:
    """Free a buffer allocated by the native library."""
    libc = _libc()
    libc.free.argtypes = [ctypes.c_void_p]
    libc.free.restype = None
    libc.free(address)


def copy_array(address: int, count: int, dtype) -> np.ndarray:
    """Copy ``count`` elements of ``dtype`` starting at ``address``."""
    dtype = np.dtype(dtype)
    if count == 0:
        return np.empty(0, dtype=dtype)
    if not address:
        raise ValueError(f"native library returned NULL for {count} elements")
    raw = (ctypes.c_char * (count * dtype.itemsize)).from_address(address)
    return np.frombuffer(raw, dtype=dtype).copy()


def take_array(address: int, count: int, dtype,
               owned: Optional[Container[int]] = None) -> np.ndarray:
    """Copy a native buffer into numpy and release it.

    Buffers still registered in ``owned`` belong to the host and are left
    alone; this happens when the native side hands back an input alias.
    """
    result = copy_array(address, count, dtype)
    if address and (owned is None or address not in owned):
        free(address)
    return result


def take_bytes(address: int, length: int) -> bytes:
    """Copy a native byte buffer and release it."""
    if not address:
        raise ValueError("native library returned a NULL buffer")
    data = ctypes.string_at(address, length)
    free(address)
    return data
