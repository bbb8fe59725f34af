"""
Tests for model handles: ownership, exactly-once deletion and the type
registry.
"""

import gc
from ctypes import c_void_p

import pytest

import mlbind
from mlbind.models import ModelHandle, get_model_type, model_types


EXPECTED_TYPES = {
    'AdaBoostModel': 'adaboost',
    'ApproxKFNModel': 'approx_kfn',
    'BayesianLinearRegression': 'bayesian_linear_regression',
    'CFModel': 'cf',
    'DSModel': 'decision_stump',
    'DecisionTreeModel': 'decision_tree',
    'DTree': 'det',
    'FastMKSModel': 'fastmks',
    'GMM': 'gmm_train',
    'HMMModel': 'hmm_train',
    'HoeffdingTreeModel': 'hoeffding_tree',
    'KDEModel': 'kde',
    'KFNModel': 'kfn',
    'KNNModel': 'knn',
    'LARS': 'lars',
    'LinearRegression': 'linear_regression',
    'LinearSVMModel': 'linear_svm',
    'LocalCoordinateCoding': 'local_coordinate_coding',
    'LogisticRegression': 'logistic_regression',
    'LSHSearch': 'lsh',
    'NBCModel': 'nbc',
    'PerceptronModel': 'perceptron',
    'RandomForestModel': 'random_forest',
    'RANNModel': 'krann',
    'ScalingModel': 'preprocess_scale',
    'SoftmaxRegression': 'softmax_regression',
    'SparseCoding': 'sparse_coding',
}


class TestRegistry:
    """Test the model type registry."""

    def test_all_types_registered(self):
        types = model_types()
        assert {name: cls.binding for name, cls in types.items()} == EXPECTED_TYPES

    def test_exported(self):
        """Every handle class is reachable from the package."""
        for name in EXPECTED_TYPES:
            assert getattr(mlbind, name) is get_model_type(name)

    def test_unknown_type(self):
        with pytest.raises(KeyError, match="Unknown model type"):
            get_model_type('NoSuchModel')

    def test_registry_is_a_copy(self):
        types = model_types()
        types.clear()
        assert model_types()


class TestModelHandle:
    """Test pointer ownership."""

    def test_null_rejected(self):
        with pytest.raises(ValueError, match="NULL"):
            mlbind.KNNModel(0)
        with pytest.raises(ValueError, match="NULL"):
            mlbind.KNNModel(None)

    def test_accepts_c_void_p(self):
        model = mlbind.KNNModel(c_void_p(0x1230))
        assert model.ptr == 0x1230

    def test_borrowed_handle_never_deletes(self, fake_lib):
        """Handles created without finalize do not own their pointer."""
        model = mlbind.KNNModel(fake_lib.new_model('KNNModel'))
        assert not model.owns
        model.close()
        assert model.closed
        assert fake_lib.deleted == []

    def test_close_deletes_once(self, fake_lib):
        ptr = fake_lib.new_model('KNNModel')
        model = mlbind.KNNModel(ptr, finalize=True)
        assert model.owns
        model.close()
        model.close()
        assert fake_lib.deleted == [('KNNModel', ptr)]
        assert ptr not in fake_lib.models

    def test_ptr_after_close(self, fake_lib):
        model = mlbind.KNNModel(fake_lib.new_model('KNNModel'), finalize=True)
        model.close()
        with pytest.raises(ValueError, match="closed"):
            model.ptr

    def test_context_manager(self, fake_lib):
        ptr = fake_lib.new_model('GMM')
        with mlbind.GMM(ptr, finalize=True) as model:
            assert model.ptr == ptr
        assert model.closed
        assert fake_lib.deleted == [('GMM', ptr)]

    def test_garbage_collection_deletes(self, fake_lib):
        """Dropping the last reference deletes the native model."""
        ptr = fake_lib.new_model('HMMModel')
        model = mlbind.HMMModel(ptr, finalize=True)
        del model
        gc.collect()
        assert fake_lib.deleted == [('HMMModel', ptr)]

    def test_close_then_collect(self, fake_lib):
        ptr = fake_lib.new_model('HMMModel')
        model = mlbind.HMMModel(ptr, finalize=True)
        model.close()
        del model
        gc.collect()
        assert fake_lib.deleted == [('HMMModel', ptr)]

    def test_release(self, fake_lib):
        """Released pointers are never deleted by the handle."""
        ptr = fake_lib.new_model('LARS')
        model = mlbind.LARS(ptr, finalize=True)
        assert model.release() == ptr
        assert model.closed
        model.close()
        del model
        gc.collect()
        assert fake_lib.deleted == []
        assert ptr in fake_lib.models

    def test_delete_resolved_in_home_library(self, fake_lib):
        """Deletion uses the Delete<Type>Ptr symbol of the model's type."""
        ptr = fake_lib.new_model('ScalingModel')
        mlbind.ScalingModel(ptr, finalize=True).close()
        assert fake_lib.calls('DeleteScalingModelPtr') == [(ptr,)]
        assert fake_lib.DeleteScalingModelPtr.argtypes == [c_void_p]

    def test_repr(self, fake_lib):
        model = mlbind.KNNModel(0x1a0)
        assert repr(model) == "<KNNModel at 0x1a0>"
        model.close()
        assert repr(model) == "<KNNModel closed>"

    def test_is_model_handle(self):
        assert all(issubclass(cls, ModelHandle) for cls in model_types().values())


class TestModelSymbols:
    """Test the native symbol set of every model type."""

    @pytest.mark.parametrize("type_name", sorted(EXPECTED_TYPES))
    def test_quadruple_roundtrip(self, fake_lib, type_name):
        """Set, get, serialize and deserialize all reach the type's own symbols."""
        from mlbind._kernel.params import ParameterSet

        cls = get_model_type(type_name)
        ptr = fake_lib.new_model(type_name, type_name.encode() + b'-state')
        with ParameterSet(cls.binding) as params:
            params.set_model_pointer(type_name, 'input_model', ptr)
            assert params.get_model_pointer(type_name, 'input_model') == ptr

        model = cls(ptr, finalize=True)
        restored = mlbind.deserialize(cls, mlbind.serialize(model))
        assert type(restored) is cls
        assert fake_lib.models[restored.ptr] == (type_name, type_name.encode() + b'-state')

        restored_ptr = restored.ptr
        model.close()
        restored.close()
        assert fake_lib.deleted == [(type_name, ptr), (type_name, restored_ptr)]
        assert fake_lib.called('Serialize') == [f'Serialize{type_name}Ptr']
        assert fake_lib.called('Deserialize') == [f'Deserialize{type_name}Ptr']
