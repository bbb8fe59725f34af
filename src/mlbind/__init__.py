"""
mlbind - Python bindings for mlpack's native machine learning programs.

Every mlpack program (k-means, PCA, random forests, k-NN, ...) is exposed as
one function that marshals numpy arrays into the native parameter system,
runs the program, and returns its outputs. Trained models stay inside the
native library and come back as owning handles.

Models:
    ModelHandle subclasses, one per native model type (``KNNModel``,
    ``RandomForestModel``, ...). Deleted exactly once, on ``close()`` or
    garbage collection.

Serialization:
    serialize / deserialize: model <-> bytes
    serialize_bin / deserialize_bin: length-prefixed stream I/O
    Model handles also pickle.

Library Selection:
    The native libraries are found through MLBIND_LIBRARY_PATH, the
    package's ``libs/`` directory, or a local ``build/`` tree.

Usage:
    >>> import numpy as np
    >>> import mlbind
    >>> data = np.random.rand(100, 4)

    # One point per row, like the rest of numpy
    >>> centroids, labeled = mlbind.kmeans(3, data)
    >>> centroids.shape
    (3, 4)

    # Train once, reuse the model
    >>> _, _, model = mlbind.knn(reference=data, k=5)
    >>> distances, neighbors, _ = mlbind.knn(input_model=model, query=data[:10], k=5)

    # Persist it
    >>> blob = mlbind.serialize(model)
    >>> restored = mlbind.deserialize(mlbind.KNNModel, blob)
"""

import logging

__version__ = "0.1.0"

from ._kernel.lib_loader import LibraryNotFoundError, use_library
from ._kernel.params import ParameterSet, Timers
from ._kernel.types import BindingError
from .bindings import *  # noqa: F401,F403
from .bindings import __all__ as _binding_names
from ._config import CallConfig, config
from .models import *  # noqa: F401,F403
from .models import __all__ as _model_names
from .serialization import deserialize, deserialize_bin, serialize, serialize_bin

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Serialization
    "serialize",
    "deserialize",
    "serialize_bin",
    "deserialize_bin",
    # Errors
    "BindingError",
    "LibraryNotFoundError",
    # Configuration
    "config",
    "CallConfig",
    "use_library",
    # Low-level
    "ParameterSet",
    "Timers",
] + list(_binding_names) + list(_model_names)
