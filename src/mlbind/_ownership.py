"""Ownership and Reference Management for a single binding call.

Key Concepts:
    - Owned buffers: numpy arrays whose memory was handed to the native
      parameter set. They are kept alive until the call returns, and their
      addresses are never passed to ``free``.
    - Model registry: model pointers already owned by a Python wrapper.
      An output pointer found here is returned as the existing wrapper
      instead of a second owner.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    'OwnedBuffers',
    'ModelRegistry',
]


# =============================================================================
# Owned Buffers
# =============================================================================

@dataclass
class OwnedBuffers:
    """Host buffers lent to the native side for the duration of one call.

    Attributes:
        _arrays: Strong references to every lent array.
        _addresses: Data addresses of those arrays.

    Example:
        >>> with OwnedBuffers() as owned:
        ...     owned.hold(arr)
        ...     lib.SetParamMat(params, b"input", arr.ctypes.data, ...)
        >>> # arrays released here
    """
    _arrays: List[Any] = field(default_factory=list)
    _addresses: set = field(default_factory=set)

    def hold(self, array: Any) -> int:
        """Keep ``array`` alive and return its data address."""
        address = array.ctypes.data
        self._arrays.append(array)
        self._addresses.add(address)
        return address

    def __contains__(self, address: int) -> bool:
        return address in self._addresses

    def clear(self) -> None:
        self._arrays.clear()
        self._addresses.clear()

    @property
    def count(self) -> int:
        """Number of held buffers."""
        return len(self._arrays)

    def __enter__(self) -> "OwnedBuffers":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.clear()

    def __repr__(self) -> str:
        return f"OwnedBuffers(count={self.count})"


# =============================================================================
# Model Registry
# =============================================================================

class ModelRegistry:
    """Pointers of the model wrappers passed into the current call."""

    def __init__(self):
        self._models: Dict[int, Any] = {}

    def register(self, ptr: int, model: Any) -> None:
        self._models[ptr] = model

    def lookup(self, ptr: int) -> Optional[Any]:
        return self._models.get(ptr)
