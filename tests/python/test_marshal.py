"""
Tests for numpy <-> parameter-set conversion.

Values are bound into a real ParameterSet backed by the fake native
library, which records them in the native (dimensions x points) layout.
"""

import ctypes

import numpy as np
import pytest

from mlbind._kernel import marshal
from mlbind._kernel.params import ParameterSet
from mlbind._ownership import ModelRegistry, OwnedBuffers
from mlbind.models import GMM, KNNModel


@pytest.fixture
def params(fake_lib):
    with ParameterSet('test_julia_binding') as p:
        yield p


@pytest.fixture
def stored(fake_lib, params):
    """Values recorded by the fake for the open parameter set."""
    return fake_lib.params[params.handle].values


@pytest.fixture
def owned():
    with OwnedBuffers() as buffers:
        yield buffers


class TestArrayPreparation:
    """Test as_matrix and as_vector."""

    def test_matrix_is_fortran(self):
        arr = marshal.as_matrix(np.arange(6.0).reshape(2, 3), np.float64)
        assert arr.flags['F_CONTIGUOUS']
        assert arr.dtype == np.float64

    def test_matrix_zero_copy(self):
        """A column-major float64 matrix is lent without copying."""
        source = np.asfortranarray(np.ones((4, 3)))
        assert np.shares_memory(marshal.as_matrix(source, np.float64), source)

    def test_matrix_copy(self):
        source = np.asfortranarray(np.ones((4, 3)))
        result = marshal.as_matrix(source, np.float64, copy=True)
        assert not np.shares_memory(result, source)
        np.testing.assert_array_equal(result, source)

    def test_matrix_from_lists(self):
        arr = marshal.as_matrix([[1, 2], [3, 4]], np.float64)
        assert arr.shape == (2, 2)
        assert arr.dtype == np.float64

    def test_matrix_rejects_1d(self):
        with pytest.raises(ValueError, match="2-D"):
            marshal.as_matrix(np.ones(5), np.float64, 'input')

    def test_index_matrix_rejects_negative(self):
        with pytest.raises(ValueError, match="non-negative"):
            marshal.as_matrix(np.array([[1, -1]]), np.uintp, 'labels')

    def test_index_matrix_rejects_fractions(self):
        with pytest.raises(ValueError, match="non-negative integers"):
            marshal.as_matrix(np.array([[0.5, 1.0]]), np.uintp, 'labels')

    def test_index_matrix_accepts_integral_floats(self):
        arr = marshal.as_matrix(np.array([[0.0, 2.0]]), np.uintp)
        assert arr.dtype == np.uintp
        np.testing.assert_array_equal(arr, [[0, 2]])

    def test_vector_flattens_column(self):
        """(n, 1) and (1, n) arrays are accepted as vectors."""
        assert marshal.as_vector(np.ones((5, 1)), np.float64).shape == (5,)
        assert marshal.as_vector(np.ones((1, 5)), np.float64).shape == (5,)

    def test_vector_rejects_matrix(self):
        with pytest.raises(ValueError, match="1-D"):
            marshal.as_vector(np.ones((2, 3)), np.float64, 'responses')

    def test_vector_labels(self):
        arr = marshal.as_vector([0, 1, 2, 1], np.uintp)
        assert arr.dtype == np.uintp
        assert arr.flags['C_CONTIGUOUS']

    def test_sparse_is_densified(self):
        sparse = pytest.importorskip('scipy.sparse')
        mat = sparse.csr_matrix(np.eye(3))
        arr = marshal.as_matrix(mat, np.float64)
        assert isinstance(arr, np.ndarray)
        np.testing.assert_array_equal(arr, np.eye(3))


class TestScalarSetters:
    """Test the type checks on scalar setters."""

    def test_int(self, params, stored):
        marshal.set_int(params, 'int_in', np.int64(12))
        assert stored['int_in'] == 12

    def test_int_rejects_bool(self, params):
        with pytest.raises(TypeError, match="got bool"):
            marshal.set_int(params, 'int_in', True)

    def test_int_rejects_float(self, params):
        with pytest.raises(TypeError, match="expected int"):
            marshal.set_int(params, 'int_in', 1.5)

    def test_int_limits(self, params, stored):
        limits = np.iinfo(np.intc)
        marshal.set_int(params, 'int_in', int(limits.max))
        assert stored['int_in'] == limits.max
        marshal.set_int(params, 'int_in', int(limits.min))
        assert stored['int_in'] == limits.min

    @pytest.mark.parametrize("value", [2 ** 32 + 5, 2 ** 31, -2 ** 31 - 1])
    def test_int_out_of_range(self, fake_lib, params, value):
        """Values a C int cannot hold are rejected, not truncated."""
        with pytest.raises(OverflowError, match="'int_in'"):
            marshal.set_int(params, 'int_in', value)
        assert fake_lib.calls('SetParamInt') == []

    def test_scalars_dispatch_through_set_scalar(self, params, stored, monkeypatch):
        seen = []
        original = ParameterSet.set_scalar
        monkeypatch.setattr(ParameterSet, 'set_scalar',
                            lambda self, key, value: (seen.append(key), original(self, key, value)))
        marshal.set_int(params, 'int_in', 3)
        marshal.set_double(params, 'double_in', 0.5)
        marshal.set_bool(params, 'flag1', False)
        assert seen == ['int_in', 'double_in', 'flag1']
        assert stored == {'int_in': 3, 'double_in': 0.5, 'flag1': False}

    def test_double_accepts_int(self, params, stored):
        marshal.set_double(params, 'double_in', 4)
        assert stored['double_in'] == 4.0

    def test_double_rejects_string(self, params):
        with pytest.raises(TypeError):
            marshal.set_double(params, 'double_in', '4.0')

    def test_bool_rejects_int(self, params):
        with pytest.raises(TypeError, match="expected bool"):
            marshal.set_bool(params, 'flag1', 1)

    def test_bool_accepts_numpy(self, params, stored):
        marshal.set_bool(params, 'flag1', np.bool_(True))
        assert stored['flag1'] is True

    def test_string_rejects_bytes(self, params):
        with pytest.raises(TypeError, match="expected str"):
            marshal.set_string(params, 'string_in', b'hello')

    def test_vector_str(self, params, stored):
        marshal.set_vector_str(params, 'str_vector_in', ('a', 'b'))
        assert stored['str_vector_in'] == ['a', 'b']

    def test_vector_str_rejects_single_string(self, params):
        """A bare string is not silently split into characters."""
        with pytest.raises(TypeError, match="single string"):
            marshal.set_vector_str(params, 'str_vector_in', 'abc')

    def test_vector_str_rejects_non_str(self, params):
        with pytest.raises(TypeError):
            marshal.set_vector_str(params, 'str_vector_in', ['a', 1])

    def test_vector_int(self, params, stored, owned):
        marshal.set_vector_int(params, 'vector_in', [1, 2, 3], owned)
        np.testing.assert_array_equal(stored['vector_in'], [1, 2, 3])
        assert owned.count == 1

    def test_vector_int_accepts_integral_floats(self, params, stored, owned):
        marshal.set_vector_int(params, 'vector_in', np.array([1.0, -2.0]), owned)
        assert stored['vector_in'].dtype == np.int64
        np.testing.assert_array_equal(stored['vector_in'], [1, -2])

    def test_vector_int_empty(self, params, stored, owned):
        marshal.set_vector_int(params, 'vector_in', [], owned)
        assert len(stored['vector_in']) == 0

    @pytest.mark.parametrize("value", [[1.7, 2.2], [1.0, np.nan]])
    def test_vector_int_rejects_fractions(self, fake_lib, params, owned, value):
        """Non-integral values are rejected, not rounded toward zero."""
        with pytest.raises(ValueError, match="must be integers"):
            marshal.set_vector_int(params, 'vector_in', value, owned)
        assert fake_lib.calls('SetParamVectorInt') == []

    def test_vector_int_out_of_range(self, params, owned):
        with pytest.raises(OverflowError):
            marshal.set_vector_int(params, 'vector_in', np.array([2 ** 63], dtype=np.uint64), owned)
        with pytest.raises(OverflowError):
            marshal.set_vector_int(params, 'vector_in', [2.0 ** 63], owned)

    def test_vector_int_rejects_strings(self, params, owned):
        with pytest.raises(TypeError, match="integer elements"):
            marshal.set_vector_int(params, 'vector_in', ['1', '2'], owned)


class TestMatrixSetters:
    """Test matrix layout and buffer lending."""

    def test_points_as_rows_are_transposed(self, params, stored, owned):
        """Host rows become native columns."""
        data = np.arange(6.0).reshape(3, 2)
        marshal.set_matrix(params, 'matrix_in', data, owned, points_are_rows=True)
        np.testing.assert_array_equal(stored['matrix_in'], data.T)

    def test_points_as_columns_are_kept(self, params, stored, owned):
        data = np.arange(6.0).reshape(3, 2)
        marshal.set_matrix(params, 'matrix_in', data, owned, points_are_rows=False)
        np.testing.assert_array_equal(stored['matrix_in'], data)

    def test_lends_caller_buffer(self, fake_lib, params, owned):
        """Without copying, the native side sees the caller's memory."""
        data = np.asfortranarray(np.ones((3, 2)))
        marshal.set_matrix(params, 'matrix_in', data, owned)
        address = fake_lib.calls('SetParamMat')[-1][2]
        assert address == data.ctypes.data
        assert address in owned

    def test_copy_lends_private_buffer(self, fake_lib, params, owned):
        data = np.asfortranarray(np.ones((3, 2)))
        marshal.set_matrix(params, 'matrix_in', data, owned, copy=True)
        address = fake_lib.calls('SetParamMat')[-1][2]
        assert address != data.ctypes.data

    def test_index_matrix(self, params, stored, owned):
        labels = np.array([[0, 1, 2], [2, 1, 0]])
        marshal.set_index_matrix(params, 'umatrix_in', labels, owned, points_are_rows=False)
        assert stored['umatrix_in'].dtype == np.uintp
        np.testing.assert_array_equal(stored['umatrix_in'], labels)

    def test_matrix_with_info(self, params, stored, owned):
        """Dimension info has one entry per dimension (column on the host)."""
        data = np.arange(12.0).reshape(4, 3)
        marshal.set_matrix_with_info(params, 'matrix_and_info_in',
                                     ([True, False, False], data), owned)
        info, mat = stored['matrix_and_info_in']
        np.testing.assert_array_equal(info, [True, False, False])
        np.testing.assert_array_equal(mat, data.T)

    def test_matrix_with_info_length_mismatch(self, params, owned):
        with pytest.raises(ValueError, match="dimension info"):
            marshal.set_matrix_with_info(params, 'matrix_and_info_in',
                                         ([True, False], np.ones((4, 3))), owned)

    def test_matrix_with_info_requires_tuple(self, params, owned):
        with pytest.raises(TypeError, match="tuple"):
            marshal.set_matrix_with_info(params, 'matrix_and_info_in',
                                         np.ones((4, 3)), owned)

    @pytest.mark.parametrize("kind,dtype", [
        ('Row', np.float64),
        ('Col', np.float64),
        ('URow', np.uintp),
        ('UCol', np.uintp),
    ])
    def test_vectors(self, params, stored, owned, kind, dtype):
        marshal.set_vector(params, kind, 'v', [0, 1, 2], owned)
        assert stored['v'].dtype == dtype
        np.testing.assert_array_equal(stored['v'], [0, 1, 2])


class TestGetters:
    """Test reading outputs back."""

    def test_matrix_is_transposed_back(self, params, stored, owned, freed):
        """Native (dims x points) output returns as (points x dims)."""
        native = np.arange(12.0).reshape(4, 3)
        stored['matrix_out'] = native
        result = marshal.get_matrix(params, 'matrix_out', owned, points_are_rows=True)
        np.testing.assert_array_equal(result, native.T)
        assert len(freed) == 1

    def test_matrix_native_layout(self, params, stored, owned):
        native = np.arange(12.0).reshape(4, 3)
        stored['matrix_out'] = native
        result = marshal.get_matrix(params, 'matrix_out', owned, points_are_rows=False)
        np.testing.assert_array_equal(result, native)

    def test_missing_matrix_is_empty(self, params, owned, freed):
        result = marshal.get_matrix(params, 'matrix_out', owned)
        assert result.shape == (0, 0)
        assert freed == []

    def test_aliased_input_not_freed(self, params, stored, owned, freed):
        """An output that aliases a lent input buffer stays with the host."""
        data = np.asfortranarray(np.arange(6.0).reshape(2, 3))
        owned.hold(data)
        stored['matrix_out'] = data
        result = marshal.get_matrix(params, 'matrix_out', owned, points_are_rows=False)
        assert freed == []
        np.testing.assert_array_equal(result, data)
        assert not np.shares_memory(result, data)

    def test_index_matrix(self, params, stored, owned):
        stored['umatrix_out'] = np.array([[1, 2], [3, 4]], dtype=np.uintp)
        result = marshal.get_index_matrix(params, 'umatrix_out', owned, points_are_rows=False)
        assert result.dtype == np.uintp
        np.testing.assert_array_equal(result, [[1, 2], [3, 4]])

    def test_vector(self, params, stored, owned):
        stored['urow_out'] = np.array([2, 4, 6], dtype=np.uintp)
        result = marshal.get_vector(params, 'URow', 'urow_out', owned)
        assert result.dtype == np.uintp
        np.testing.assert_array_equal(result, [2, 4, 6])

    def test_vector_int(self, params, stored, owned):
        stored['vector_out'] = np.array([1, 2, 3, 4, 5])
        result = marshal.get_vector_int(params, 'vector_out', owned)
        np.testing.assert_array_equal(result, [1, 2, 3, 4, 5])

    def test_missing_vector_int(self, params, owned):
        assert marshal.get_vector_int(params, 'vector_out', owned).shape == (0,)


class TestModels:
    """Test binding and reading model pointers."""

    def test_set_model_registers(self, fake_lib, params, stored):
        model = KNNModel(fake_lib.new_model('KNNModel'))
        registry = ModelRegistry()
        marshal.set_model(params, 'input_model', model, KNNModel, registry)
        assert stored['input_model'] == model.ptr
        assert registry.lookup(model.ptr) is model

    def test_set_model_wrong_type(self, fake_lib, params):
        model = GMM(fake_lib.new_model('GMM'))
        with pytest.raises(TypeError, match="expected KNNModel"):
            marshal.set_model(params, 'input_model', model, KNNModel, ModelRegistry())

    def test_set_model_transfer(self, fake_lib, params, stored):
        """Transferring ownership releases the handle."""
        model = KNNModel(fake_lib.new_model('KNNModel'), finalize=True)
        ptr = model.ptr
        marshal.set_model(params, 'input_model', model, KNNModel, ModelRegistry(),
                          transfer=True)
        assert stored['input_model'] == ptr
        assert model.closed
        assert not model.owns

    def test_get_model_null(self, params):
        assert marshal.get_model(params, 'output_model', KNNModel, ModelRegistry()) is None

    def test_get_model_new_owner(self, fake_lib, params, stored):
        ptr = fake_lib.new_model('KNNModel')
        stored['output_model'] = ptr
        registry = ModelRegistry()
        model = marshal.get_model(params, 'output_model', KNNModel, registry)
        assert isinstance(model, KNNModel)
        assert model.ptr == ptr
        assert model.owns
        assert registry.lookup(ptr) is model
        model.close()

    def test_get_model_existing_owner(self, fake_lib, params, stored):
        """A pointer already owned by a handle is not wrapped twice."""
        model = KNNModel(fake_lib.new_model('KNNModel'), finalize=True)
        registry = ModelRegistry()
        registry.register(model.ptr, model)
        stored['output_model'] = model.ptr
        assert marshal.get_model(params, 'output_model', KNNModel, registry) is model
        model.close()

    def test_raw_model_roundtrip(self, fake_lib, params, stored):
        ptr = fake_lib.new_model('GaussianKernel')
        marshal.set_raw_model(params, 'GaussianKernel', 'model_in', ptr)
        assert stored['model_in'] == ptr
        stored['model_out'] = ptr
        assert marshal.get_raw_model(params, 'GaussianKernel', 'model_out') == ptr

    def test_raw_model_missing(self, params):
        assert marshal.get_raw_model(params, 'GaussianKernel', 'model_out') is None


class TestRawPointer:
    """Test raw pointer extraction."""

    def test_int(self):
        assert marshal.raw_pointer(0x1000) == 0x1000

    def test_c_void_p(self):
        assert marshal.raw_pointer(ctypes.c_void_p(0x2000)) == 0x2000

    def test_handle(self):
        assert marshal.raw_pointer(GMM(0x3000)) == 0x3000

    def test_null(self):
        with pytest.raises(ValueError, match="NULL"):
            marshal.raw_pointer(0)

    @pytest.mark.parametrize("value", [None, True, 'abc'])
    def test_rejects(self, value):
        with pytest.raises(TypeError):
            marshal.raw_pointer(value)
