"""C type definitions and error handling for the mlpack bindings.

Maps Python types to the C types of the binding ABI. No external dependencies.
"""

import ctypes
import logging


__all__ = [
    'c_size', 'c_byte',
    'BindingError', 'check_success', 'BINDING_ERROR_MESSAGE',
]

logger = logging.getLogger("mlbind.binding")


# =============================================================================
# C Type Aliases
# =============================================================================

# Lengths, dimensions and the serialized length prefix
c_size = ctypes.c_size_t
c_byte = ctypes.c_uint8


# =============================================================================
# Error Handling
# =============================================================================

BINDING_ERROR_MESSAGE = "mlpack binding error; see output"


class BindingError(RuntimeError):
    """A native binding entry point reported failure.

    The native library prints its own diagnostics before returning, so the
    only structured information available here is the binding's name.
    """

    def __init__(self, binding: str):
        self.binding = binding
        super().__init__(BINDING_ERROR_MESSAGE)

    def __reduce__(self):
        return (type(self), (self.binding,))


def check_success(success: bool, binding: str) -> None:
    """Check the boolean returned by ``mlpack_<binding>``.

    Args:
        success: Return value of the native entry point.
        binding: Binding name, kept on the raised error.

    Raises:
        BindingError: If the native call returned false.
    """
    if not success:
        logger.warning("binding %s failed in native code", binding)
        raise BindingError(binding)
