"""
Model handles - owning wrappers around opaque native model pointers.

A model trained by a binding lives entirely inside the native library. The
Python side only holds its address, wrapped in a :class:`ModelHandle`
subclass named after the native type. The handle owns the pointer: when
it is closed or garbage collected, ``Delete<Type>Ptr`` runs exactly once.

Typical usage:
    model, predictions, _ = mlbind.logistic_regression(training=x, labels=y)
    _, predictions, _ = mlbind.logistic_regression(input_model=model, test=x2)

    with model:
        blob = mlbind.serialize(model)
    # model deleted here
"""

from __future__ import annotations

import logging
import weakref
from ctypes import c_void_p
from typing import Dict, Optional, Type

from ._kernel import lib_loader

__all__ = [
    'ModelHandle',
    'model_types',
    'get_model_type',
    'AdaBoostModel',
    'ApproxKFNModel',
    'BayesianLinearRegression',
    'CFModel',
    'DSModel',
    'DecisionTreeModel',
    'DTree',
    'FastMKSModel',
    'GMM',
    'HMMModel',
    'HoeffdingTreeModel',
    'KDEModel',
    'KFNModel',
    'KNNModel',
    'LARS',
    'LinearRegression',
    'LinearSVMModel',
    'LocalCoordinateCoding',
    'LogisticRegression',
    'LSHSearch',
    'NBCModel',
    'PerceptronModel',
    'RandomForestModel',
    'RANNModel',
    'ScalingModel',
    'SoftmaxRegression',
    'SparseCoding',
]

logger = logging.getLogger("mlbind.kernel")

_registry: Dict[str, Type["ModelHandle"]] = {}


def _delete(binding: str, type_name: str, ptr: int) -> None:
    """Finalizer body; must not reference the handle itself."""
    lib = lib_loader.get_lib(binding)
    func = getattr(lib, f'Delete{type_name}Ptr')
    func.argtypes = [c_void_p]
    func.restype = None
    func(ptr)
    logger.debug("deleted %s at 0x%x", type_name, ptr)


class ModelHandle:
    """
    Owning reference to an opaque native model.

    Subclasses set two class attributes:
        type_name: Native type stem used in symbol names
            (``Delete<type_name>Ptr``, ``Serialize<type_name>Ptr``, ...).
        binding: Binding whose library exports those symbols.

    Args:
        ptr: Raw native pointer.
        finalize: Register a finalizer that deletes the native model. Only
            the first owner of a pointer may pass True.
    """

    __slots__ = ('_ptr', '_finalizer', '__weakref__')

    type_name: str = ''
    binding: str = ''

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        if cls.type_name:
            _registry[cls.type_name] = cls

    def __init__(self, ptr: int, finalize: bool = False):
        if isinstance(ptr, c_void_p):
            ptr = ptr.value
        if not ptr:
            raise ValueError(f"{type(self).__name__}: NULL model pointer")
        self._ptr = int(ptr)
        self._finalizer = None
        if finalize:
            self._finalizer = weakref.finalize(
                self, _delete, self.binding, self.type_name, self._ptr
            )

    @property
    def ptr(self) -> int:
        """
        Raw native pointer.

        Raises:
            ValueError: If the handle was closed or released.
        """
        if self._ptr is None:
            raise ValueError(f"{type(self).__name__} handle has been closed")
        return self._ptr

    @property
    def closed(self) -> bool:
        return self._ptr is None

    @property
    def owns(self) -> bool:
        """Whether closing this handle deletes the native model."""
        return self._finalizer is not None and self._finalizer.alive

    def close(self) -> None:
        """Delete the native model now (if owned) and invalidate the handle."""
        if self._finalizer is not None:
            self._finalizer()
        self._ptr = None

    def release(self) -> int:
        """
        Transfer ownership of the pointer to the caller.

        The finalizer is detached, so this handle will never delete the
        native model.

        Returns:
            The raw pointer.
        """
        ptr = self.ptr
        if self._finalizer is not None:
            self._finalizer.detach()
        self._ptr = None
        return ptr

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __reduce__(self):
        from .serialization import serialize, _restore
        return (_restore, (self.type_name, serialize(self)))

    def __repr__(self) -> str:
        if self._ptr is None:
            return f"<{type(self).__name__} closed>"
        return f"<{type(self).__name__} at 0x{self._ptr:x}>"


def model_types() -> Dict[str, Type[ModelHandle]]:
    """All model handle classes keyed by native type name."""
    return dict(_registry)


def get_model_type(type_name: str) -> Type[ModelHandle]:
    try:
        return _registry[type_name]
    except KeyError:
        raise KeyError(f"Unknown model type: {type_name}") from None


# =============================================================================
# Model Types
# =============================================================================

class AdaBoostModel(ModelHandle):
    __slots__ = ()
    type_name = 'AdaBoostModel'
    binding = 'adaboost'


class ApproxKFNModel(ModelHandle):
    __slots__ = ()
    type_name = 'ApproxKFNModel'
    binding = 'approx_kfn'


class BayesianLinearRegression(ModelHandle):
    __slots__ = ()
    type_name = 'BayesianLinearRegression'
    binding = 'bayesian_linear_regression'


class CFModel(ModelHandle):
    __slots__ = ()
    type_name = 'CFModel'
    binding = 'cf'


class DSModel(ModelHandle):
    """Decision stump."""
    __slots__ = ()
    type_name = 'DSModel'
    binding = 'decision_stump'


class DecisionTreeModel(ModelHandle):
    __slots__ = ()
    type_name = 'DecisionTreeModel'
    binding = 'decision_tree'


class DTree(ModelHandle):
    """Density estimation tree."""
    __slots__ = ()
    type_name = 'DTree'
    binding = 'det'


class FastMKSModel(ModelHandle):
    __slots__ = ()
    type_name = 'FastMKSModel'
    binding = 'fastmks'


class GMM(ModelHandle):
    """Gaussian mixture model.

    ``gmm_train`` and ``gmm_probability`` exchange GMMs as untyped pointers;
    wrap such a pointer with ``GMM(ptr, finalize=True)`` to take ownership.
    """
    __slots__ = ()
    type_name = 'GMM'
    binding = 'gmm_train'


class HMMModel(ModelHandle):
    __slots__ = ()
    type_name = 'HMMModel'
    binding = 'hmm_train'


class HoeffdingTreeModel(ModelHandle):
    __slots__ = ()
    type_name = 'HoeffdingTreeModel'
    binding = 'hoeffding_tree'


class KDEModel(ModelHandle):
    __slots__ = ()
    type_name = 'KDEModel'
    binding = 'kde'


class KFNModel(ModelHandle):
    __slots__ = ()
    type_name = 'KFNModel'
    binding = 'kfn'


class KNNModel(ModelHandle):
    __slots__ = ()
    type_name = 'KNNModel'
    binding = 'knn'


class LARS(ModelHandle):
    __slots__ = ()
    type_name = 'LARS'
    binding = 'lars'


class LinearRegression(ModelHandle):
    __slots__ = ()
    type_name = 'LinearRegression'
    binding = 'linear_regression'


class LinearSVMModel(ModelHandle):
    __slots__ = ()
    type_name = 'LinearSVMModel'
    binding = 'linear_svm'


class LocalCoordinateCoding(ModelHandle):
    __slots__ = ()
    type_name = 'LocalCoordinateCoding'
    binding = 'local_coordinate_coding'


class LogisticRegression(ModelHandle):
    __slots__ = ()
    type_name = 'LogisticRegression'
    binding = 'logistic_regression'


class LSHSearch(ModelHandle):
    __slots__ = ()
    type_name = 'LSHSearch'
    binding = 'lsh'


class NBCModel(ModelHandle):
    """Naive Bayes classifier."""
    __slots__ = ()
    type_name = 'NBCModel'
    binding = 'nbc'


class PerceptronModel(ModelHandle):
    """Single-layer perceptron.

    ``perceptron`` returns its model as an untyped pointer; wrap it with
    ``PerceptronModel(ptr, finalize=True)`` to take ownership.
    """
    __slots__ = ()
    type_name = 'PerceptronModel'
    binding = 'perceptron'


class RandomForestModel(ModelHandle):
    __slots__ = ()
    type_name = 'RandomForestModel'
    binding = 'random_forest'


class RANNModel(ModelHandle):
    """Rank-approximate nearest neighbor model, untyped in ``krann``."""
    __slots__ = ()
    type_name = 'RANNModel'
    binding = 'krann'


class ScalingModel(ModelHandle):
    __slots__ = ()
    type_name = 'ScalingModel'
    binding = 'preprocess_scale'


class SoftmaxRegression(ModelHandle):
    __slots__ = ()
    type_name = 'SoftmaxRegression'
    binding = 'softmax_regression'


class SparseCoding(ModelHandle):
    __slots__ = ()
    type_name = 'SparseCoding'
    binding = 'sparse_coding'
