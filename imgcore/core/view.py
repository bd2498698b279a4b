"""Shape-aware, non-owning views over contiguous float64 sample buffers."""

from __future__ import annotations

import math

import numpy as np

from .errors import InvalidShapeError, OutOfBoundsError

__all__ = [
    "ArrayView",
    "MutableArrayView",
    "as_array",
    "row_major_strides",
    "validate_shape",
]

_ITEMSIZE = np.dtype(np.float64).itemsize


def validate_shape(shape, allow_empty=True):
    """Normalize a shape descriptor into a tuple of ints.

    Parameters
    ----------
    shape : int or sequence of int
        Dimension sizes.
    allow_empty : bool, default True
        Whether zero-length dimensions are accepted. Generators that must
        produce at least one sample pass ``False``.

    Returns
    -------
    tuple of int
        The validated shape.

    Raises
    ------
    InvalidShapeError
        If the shape has no dimensions or holds a negative (or, when
        ``allow_empty`` is ``False``, zero) dimension.
    """
    if isinstance(shape, (int, np.integer)):
        shape = (shape,)
    try:
        shape = tuple(int(s) for s in shape)
    except TypeError as e:
        raise InvalidShapeError(f"shape must be a sequence of integers, got {shape!r}.") from e
    if len(shape) == 0:
        raise InvalidShapeError("shape must have at least one dimension.")
    lower = 0 if allow_empty else 1
    if any(s < lower for s in shape):
        kind = "non-negative" if allow_empty else "positive"
        raise InvalidShapeError(f"All dimensions of shape must be {kind}, got {shape}.")
    return shape


def row_major_strides(shape):
    """Return element strides for a row-major (last axis fastest) layout."""
    strides = [1] * len(shape)
    for d in range(len(shape) - 2, -1, -1):
        strides[d] = strides[d + 1] * max(shape[d + 1], 1)
    return tuple(strides)


class ArrayView:
    """Read-only, shape-aware view over a contiguous float64 buffer.

    The buffer is wrapped without copying whenever it already is a
    contiguous float64 buffer (a numpy array, ``array.array('d')``, a
    memoryview, ...). All shape and stride arithmetic is validated once
    at construction; element reads are plain numpy indexing.

    Parameters
    ----------
    buffer : buffer or sequence of float
        The backing samples.
    shape : sequence of int
        Dimension sizes, 1 to N dimensions.
    strides : sequence of int, optional
        Per-dimension strides counted in elements. Derived in row-major
        order when omitted.

    Raises
    ------
    InvalidShapeError
        If ``shape`` or ``strides`` is malformed.
    OutOfBoundsError
        If ``shape`` and ``strides`` address samples beyond the buffer, or
        if derived strides do not cover the buffer exactly.
    """

    __slots__ = ("_buffer", "_shape", "_strides")
    _writeable = False

    def __init__(self, buffer, shape, strides=None):
        buf = np.ascontiguousarray(buffer, dtype=np.float64).reshape(-1)
        shape = validate_shape(shape)
        size = math.prod(shape)

        if strides is None:
            if size != buf.size:
                raise OutOfBoundsError(
                    f"shape {shape} describes {size} samples but the buffer holds {buf.size}."
                )
            strides = row_major_strides(shape)
        else:
            strides = tuple(int(s) for s in strides)
            if len(strides) != len(shape):
                raise InvalidShapeError(
                    f"strides {strides} must have one entry per dimension of shape {shape}."
                )
            if any(s < 0 for s in strides):
                raise InvalidShapeError(f"strides must be non-negative, got {strides}.")
            if size > 0:
                last = sum((n - 1) * s for n, s in zip(shape, strides, strict=True))
                if last >= buf.size:
                    raise OutOfBoundsError(
                        f"shape {shape} with strides {strides} reaches offset {last} "
                        f"but the buffer holds {buf.size} samples."
                    )

        self._buffer = buf
        self._shape = shape
        self._strides = strides

    @classmethod
    def from_numpy(cls, arr):
        """Wrap an ndarray, copying only when it is not contiguous float64."""
        arr = np.asarray(arr)
        if arr.ndim == 0:
            arr = arr.reshape(1)
        return cls(arr.ravel(), arr.shape)

    @property
    def shape(self):
        return self._shape

    @property
    def strides(self):
        return self._strides

    @property
    def ndim(self):
        return len(self._shape)

    @property
    def size(self):
        return math.prod(self._shape)

    @property
    def buffer(self):
        """The wrapped one-dimensional buffer."""
        return self._buffer

    def __len__(self):
        return self._shape[0]

    def __repr__(self):
        return f"{type(self).__name__}(shape={self._shape}, strides={self._strides})"

    def to_numpy(self):
        """Return an ndarray view (no copy) sharing the wrapped buffer."""
        arr = np.lib.stride_tricks.as_strided(
            self._buffer,
            shape=self._shape,
            strides=tuple(s * _ITEMSIZE for s in self._strides),
            writeable=self._writeable,
        )
        return arr

    def flat_index(self, index):
        """Map a multi-index to its offset in the backing buffer."""
        return sum(int(i) * s for i, s in zip(index, self._strides, strict=True))

    def unravel(self, flat):
        """Map a logical row-major position to its multi-index."""
        return tuple(int(i) for i in np.unravel_index(int(flat), self._shape))

    def __getitem__(self, index):
        arr = self.to_numpy()
        if isinstance(index, (int, np.integer)):
            return float(arr.flat[index])
        return arr[index]

    def __array__(self, dtype=None, copy=None):
        arr = self.to_numpy()
        if dtype is not None:
            arr = arr.astype(dtype, copy=False)
        return arr


class MutableArrayView(ArrayView):
    """Writable view used by generators to fill a freshly allocated buffer."""

    __slots__ = ()
    _writeable = True

    @classmethod
    def zeros(cls, shape):
        """Allocate a zero-filled buffer of ``shape`` and wrap it."""
        shape = validate_shape(shape)
        return cls(np.zeros(math.prod(shape), dtype=np.float64), shape)

    def __setitem__(self, index, value):
        arr = self.to_numpy()
        if isinstance(index, (int, np.integer)):
            arr.flat[index] = value
        else:
            arr[index] = value


def as_array(data):
    """Return ``data`` as a read-only float64 ndarray.

    Accepts an :class:`ArrayView` (returned as a zero-copy view) or any
    array-like. The caller's own array is never made read-only; a new
    view object carries the flag.

    Parameters
    ----------
    data : ArrayView or array_like
        Input samples.

    Returns
    -------
    ndarray
        Read-only float64 array with at least one dimension.
    """
    if isinstance(data, ArrayView):
        arr = data.to_numpy()
    else:
        arr = np.asarray(data, dtype=np.float64)
    if arr.ndim == 0:
        arr = arr.reshape(1)
    arr = arr.view()
    arr.flags.writeable = False
    return arr
