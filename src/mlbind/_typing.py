"""
mlbind type aliases used in binding signatures.

Example:
    >>> from mlbind._typing import MatrixInput
    >>> def fit(training: MatrixInput) -> None: ...
"""

from __future__ import annotations

from ctypes import c_void_p
from typing import TYPE_CHECKING, Any, Sequence, Tuple, Union

import numpy as np

if TYPE_CHECKING:
    from scipy import sparse as sp
    from .models import ModelHandle


# Dense float64 matrix, nested sequence, or scipy.sparse matrix (densified)
MatrixInput = Union[np.ndarray, Sequence[Sequence[float]], "sp.spmatrix"]

# Non-negative integer matrix (labels, indices), sent as size_t
IndexMatrixInput = Union[np.ndarray, Sequence[Sequence[int]]]

# 1-D float64 or size_t vector
VectorInput = Union[np.ndarray, Sequence[float]]
IndexVectorInput = Union[np.ndarray, Sequence[int]]

# (one bool per dimension, True = categorical; matrix)
MatrixWithInfo = Tuple[Sequence[bool], MatrixInput]

# Untyped model pointer
RawModel = Union[int, c_void_p, "ModelHandle"]

Outputs = Any
