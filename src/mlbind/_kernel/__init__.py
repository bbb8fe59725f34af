"""mlbind Private Kernel Bindings (_kernel).

Low-level ctypes access to mlpack's native binding ABI.

Architecture:
    - Direct ctypes bindings to the per-binding libraries and the
      utility library holding the parameter-set functions
    - Minimal Python wrapper (close to the C API)
    - Used as foundation for the public binding functions

Modules:
    - lib_loader: Dynamic library loading
    - types: C type definitions and error handling
    - params: Parameter set and timer objects
    - memory: Copying and freeing native buffers
    - marshal: numpy <-> parameter-set conversion

Usage (Internal only):
    >>> from mlbind._kernel.params import ParameterSet
    >>> with ParameterSet('pca') as params:
    ...     params.set_int('new_dimensionality', 2)
"""

from . import lib_loader
from . import types
from . import memory
from . import params
from . import marshal
