"""Tests for array views over float64 buffers."""

import array

import numpy as np
import pytest

from imgcore.core.errors import InvalidShapeError, OutOfBoundsError
from imgcore.core.view import ArrayView, MutableArrayView, as_array, row_major_strides, validate_shape


class TestValidateShape:
    def test_int_becomes_tuple(self):
        assert validate_shape(4) == (4,)

    def test_sequence(self):
        assert validate_shape([2, 3, 4]) == (2, 3, 4)

    def test_empty_shape_raises(self):
        with pytest.raises(InvalidShapeError):
            validate_shape(())

    def test_negative_dimension_raises(self):
        with pytest.raises(InvalidShapeError, match="non-negative"):
            validate_shape((3, -1))

    def test_zero_dimension_allowed_by_default(self):
        assert validate_shape((0, 3)) == (0, 3)

    def test_zero_dimension_rejected(self):
        with pytest.raises(InvalidShapeError, match="positive"):
            validate_shape((0, 3), allow_empty=False)

    def test_non_integer_shape_raises(self):
        with pytest.raises(InvalidShapeError):
            validate_shape(None)


def test_row_major_strides():
    assert row_major_strides((2, 3, 4)) == (12, 4, 1)
    assert row_major_strides((5,)) == (1,)


class TestArrayView:
    def test_wraps_numpy_without_copy(self):
        buf = np.arange(12, dtype=np.float64)
        view = ArrayView(buf, (3, 4))
        assert np.shares_memory(view.buffer, buf)
        assert view.shape == (3, 4)
        assert view.strides == (4, 1)
        assert view.ndim == 2
        assert view.size == 12
        assert len(view) == 3

    def test_wraps_array_module_buffer(self):
        buf = array.array("d", [1.0, 2.0, 3.0, 4.0])
        view = ArrayView(buf, (2, 2))
        assert view[1, 0] == 3.0

    def test_length_mismatch_raises(self):
        with pytest.raises(OutOfBoundsError):
            ArrayView(np.zeros(10), (3, 4))

    def test_out_of_bounds_is_index_error(self):
        with pytest.raises(IndexError):
            ArrayView(np.zeros(5), (2, 3))

    def test_bad_shape_raises(self):
        with pytest.raises(InvalidShapeError):
            ArrayView(np.zeros(4), ())

    def test_explicit_strides(self):
        buf = np.arange(12, dtype=np.float64)
        view = ArrayView(buf, (3, 2), strides=(4, 2))
        np.testing.assert_array_equal(view.to_numpy(), [[0, 2], [4, 6], [8, 10]])

    def test_explicit_strides_past_buffer_raise(self):
        with pytest.raises(OutOfBoundsError):
            ArrayView(np.zeros(6), (3, 2), strides=(3, 2))

    def test_strides_length_mismatch_raises(self):
        with pytest.raises(InvalidShapeError):
            ArrayView(np.zeros(6), (3, 2), strides=(2,))

    def test_negative_strides_raise(self):
        with pytest.raises(InvalidShapeError):
            ArrayView(np.zeros(6), (3, 2), strides=(2, -1))

    def test_flat_and_multi_index_reads(self):
        arr = np.arange(24, dtype=np.float64).reshape(2, 3, 4)
        view = ArrayView.from_numpy(arr)
        assert view[5] == 5.0
        assert view[1, 2, 3] == arr[1, 2, 3]
        assert view.flat_index((1, 2, 3)) == 23
        assert view.unravel(23) == (1, 2, 3)

    def test_to_numpy_is_read_only_view(self):
        buf = np.arange(6, dtype=np.float64)
        arr = ArrayView(buf, (2, 3)).to_numpy()
        assert np.shares_memory(arr, buf)
        assert not arr.flags.writeable
        with pytest.raises(ValueError):
            arr[0, 0] = 1.0

    def test_from_numpy_scalar(self):
        view = ArrayView.from_numpy(np.float64(3.5))
        assert view.shape == (1,)

    def test_array_protocol(self):
        arr = np.arange(6, dtype=np.float64).reshape(2, 3)
        np.testing.assert_array_equal(np.asarray(ArrayView.from_numpy(arr)), arr)

    def test_repr(self):
        assert repr(ArrayView(np.zeros(6), (2, 3))) == "ArrayView(shape=(2, 3), strides=(3, 1))"


class TestMutableArrayView:
    def test_zeros(self):
        view = MutableArrayView.zeros((2, 3))
        assert view.shape == (2, 3)
        np.testing.assert_array_equal(view.to_numpy(), np.zeros((2, 3)))

    def test_setitem(self):
        view = MutableArrayView.zeros((2, 3))
        view[1, 2] = 7.0
        view[0] = 1.0
        assert view[1, 2] == 7.0
        assert view[0] == 1.0
        assert view.to_numpy().flags.writeable


class TestAsArray:
    def test_from_list(self):
        arr = as_array([1, 2, 3])
        assert arr.dtype == np.float64
        assert not arr.flags.writeable

    def test_scalar_becomes_1d(self):
        assert as_array(2.0).shape == (1,)

    def test_from_view(self):
        buf = np.arange(4, dtype=np.float64)
        arr = as_array(ArrayView(buf, (2, 2)))
        assert arr.shape == (2, 2)
        assert np.shares_memory(arr, buf)

    def test_caller_array_stays_writeable(self):
        data = np.zeros(3)
        as_array(data)
        assert data.flags.writeable
