"""
Tests for model serialization: raw blobs, length-prefixed streams and pickle.
"""

import ctypes
import io
import pickle
import struct
import sys

import pytest

import mlbind
from mlbind import deserialize, deserialize_bin, serialize, serialize_bin


@pytest.fixture
def knn_model(fake_lib):
    ptr = fake_lib.new_model('KNNModel', b'\x01knn-tree\x00data')
    model = mlbind.KNNModel(ptr, finalize=True)
    yield model
    model.close()


class TestSerialize:
    """Test blob serialization."""

    def test_serialize(self, fake_lib, knn_model, freed):
        """The native buffer is copied out and freed."""
        assert serialize(knn_model) == b'\x01knn-tree\x00data'
        assert len(freed) == 1
        assert fake_lib.calls('SerializeKNNModelPtr')[0][0] == knn_model.ptr

    def test_serialize_closed(self, knn_model):
        knn_model.close()
        with pytest.raises(ValueError, match="closed"):
            serialize(knn_model)

    def test_deserialize(self, fake_lib):
        """Deserialized models are new owned handles."""
        model = deserialize(mlbind.KNNModel, b'blob')
        assert isinstance(model, mlbind.KNNModel)
        assert model.owns
        assert fake_lib.models[model.ptr] == ('KNNModel', b'blob')
        ptr = model.ptr
        model.close()
        assert fake_lib.deleted == [('KNNModel', ptr)]

    def test_deserialize_by_name(self, fake_lib):
        model = deserialize('GMM', b'gaussians')
        assert isinstance(model, mlbind.GMM)
        model.close()

    def test_deserialize_unknown_name(self, fake_lib):
        with pytest.raises(KeyError):
            deserialize('NoSuchModel', b'')

    def test_roundtrip(self, fake_lib, knn_model):
        restored = deserialize(mlbind.KNNModel, serialize(knn_model))
        assert restored.ptr != knn_model.ptr
        assert serialize(restored) == serialize(knn_model)
        restored.close()


class TestStreams:
    """Test length-prefixed stream I/O."""

    def test_layout(self, knn_model):
        """The stream holds a native size_t length, then the blob."""
        stream = io.BytesIO()
        serialize_bin(stream, knn_model)
        payload = b'\x01knn-tree\x00data'
        data = stream.getvalue()
        width = ctypes.sizeof(ctypes.c_size_t)
        assert len(data) == width + len(payload)
        assert int.from_bytes(data[:width], sys.byteorder) == len(payload)
        assert data[width:] == payload

    def test_roundtrip(self, fake_lib, knn_model):
        stream = io.BytesIO()
        serialize_bin(stream, knn_model)
        stream.seek(0)
        restored = deserialize_bin(stream, mlbind.KNNModel)
        assert fake_lib.models[restored.ptr][1] == b'\x01knn-tree\x00data'
        restored.close()

    def test_multiple_models(self, fake_lib):
        """Blobs are consumed one at a time."""
        first = mlbind.GMM(fake_lib.new_model('GMM', b'first'))
        second = mlbind.GMM(fake_lib.new_model('GMM', b'second-model'))
        stream = io.BytesIO()
        serialize_bin(stream, first)
        serialize_bin(stream, second)
        stream.seek(0)
        a = deserialize_bin(stream, 'GMM')
        b = deserialize_bin(stream, 'GMM')
        assert fake_lib.models[a.ptr][1] == b'first'
        assert fake_lib.models[b.ptr][1] == b'second-model'
        assert stream.read() == b''
        a.close()
        b.close()

    def test_missing_prefix(self, fake_lib):
        with pytest.raises(EOFError, match="length prefix"):
            deserialize_bin(io.BytesIO(b'\x01\x02'), mlbind.KNNModel)

    def test_truncated_blob(self, fake_lib):
        stream = io.BytesIO(struct.pack('N', 10) + b'short')
        with pytest.raises(EOFError, match="expected 10 bytes"):
            deserialize_bin(stream, mlbind.KNNModel)


class TestPickle:
    """Test pickle support on model handles."""

    def test_pickle_roundtrip(self, fake_lib, knn_model):
        restored = pickle.loads(pickle.dumps(knn_model))
        assert isinstance(restored, mlbind.KNNModel)
        assert restored.ptr != knn_model.ptr
        assert restored.owns
        assert fake_lib.models[restored.ptr][1] == b'\x01knn-tree\x00data'
        restored.close()

    def test_pickle_closed(self, knn_model):
        knn_model.close()
        with pytest.raises(ValueError):
            pickle.dumps(knn_model)
