"""Synthetic linear gradient images."""

import math

import numpy as np

from imgcore.core.errors import InvalidShapeError
from imgcore.core.view import MutableArrayView, validate_shape

__all__ = [
    "flat_index_gradient",
    "linear_gradient_2d",
    "linear_gradient_3d",
    "linear_gradient_nd",
]


def linear_gradient_nd(offset, scale, shape):
    """Create an N-dimensional linear gradient along the first axis.

    Every sample at index ``(i0, i1, ...)`` holds
    ``max(i0 - offset, 0) * scale``, so the first ``offset + 1`` slices
    along axis 0 are zero and the values rise by ``scale`` per slice after
    that.

    Parameters
    ----------
    offset : int
        Number of leading axis-0 positions before the ramp starts.
    scale : float
        Increment per axis-0 step.
    shape : sequence of int
        Output shape; every dimension must be positive.

    Returns
    -------
    ndarray of float64
        Newly allocated gradient image.

    Raises
    ------
    InvalidShapeError
        If ``shape`` is empty or holds a non-positive dimension.
    """
    shape = validate_shape(shape, allow_empty=False)
    out = MutableArrayView.zeros(shape)
    ramp = np.maximum(np.arange(shape[0], dtype=np.float64) - offset, 0.0) * scale
    out[...] = ramp.reshape((shape[0],) + (1,) * (len(shape) - 1))
    return out.to_numpy()


def _fixed_rank(shape, ndim):
    shape = validate_shape(shape, allow_empty=False)
    if len(shape) != ndim:
        raise InvalidShapeError(f"Expected a {ndim}-dimensional shape, got {shape}.")
    return shape


def linear_gradient_2d(offset, scale, shape):
    """Create a 2-dimensional linear gradient. See :func:`linear_gradient_nd`."""
    return linear_gradient_nd(offset, scale, _fixed_rank(shape, 2))


def linear_gradient_3d(offset, scale, shape):
    """Create a 3-dimensional linear gradient. See :func:`linear_gradient_nd`."""
    return linear_gradient_nd(offset, scale, _fixed_rank(shape, 3))


def flat_index_gradient(offset, scale, shape):
    """Create a gradient over the first-axis-fastest flat index.

    The sample at ``(i0, i1, i2, ...)`` holds
    ``offset + scale * (i0 + i1 * shape[0] + i2 * shape[0] * shape[1] + ...)``.
    Every sample is therefore distinct, which makes the image useful for
    checking index arithmetic.

    Parameters
    ----------
    offset : float
        Value of the origin sample.
    scale : float
        Increment per flat index step.
    shape : sequence of int
        Output shape; every dimension must be positive.

    Returns
    -------
    ndarray of float64
        Newly allocated gradient image.
    """
    shape = validate_shape(shape, allow_empty=False)
    out = MutableArrayView.zeros(shape)
    flat = np.zeros(shape, dtype=np.float64)
    for axis, idx in enumerate(np.indices(shape, dtype=np.float64)):
        flat += idx * math.prod(shape[:axis])
    out[...] = offset + scale * flat
    return out.to_numpy()
