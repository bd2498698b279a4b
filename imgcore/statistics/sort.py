"""Weighted sorting with inversion counts."""

import numpy as np

from imgcore.core.errors import InvalidParameterError, ShapeMismatchError

from .numba import weighted_inversions_1d
from .reductions import flatten

__all__ = ["weighted_merge_sort"]


def weighted_merge_sort(data, weights):
    """Sort samples together with their weights and count weighted inversions.

    An inversion is a pair of positions ``i < j`` whose values are out of
    order, ``data[i] > data[j]``. Each one adds ``weights[i] * weights[j]``
    to the count, so with unit weights the count is the number of adjacent
    swaps a bubble sort would need. Equal values are never inverted.

    Parameters
    ----------
    data : ArrayView or array_like
        Samples to sort, flattened in row-major order.
    weights : array_like
        Non-negative weight of each sample.

    Returns
    -------
    sorted_data : ndarray of float64
        ``data`` in ascending order. Equal values keep their input order.
    sorted_weights : ndarray of float64
        ``weights`` permuted alongside ``data``.
    inversions : float
        Weighted inversion count, computed in O(n log n).

    Raises
    ------
    ShapeMismatchError
        If ``data`` and ``weights`` differ in length.
    InvalidParameterError
        If a weight is negative.

    References
    ----------

    .. [1] Knight, W. R. (1966). "A computer method for calculating
        Kendall's tau with ungrouped data." Journal of the American
        Statistical Association, 61(314), 436-439.
    """
    values = flatten(data)
    w = flatten(weights)
    if values.shape != w.shape:
        raise ShapeMismatchError("data", values.shape, "weights", w.shape)
    if np.any(w < 0):
        raise InvalidParameterError("weights must be non-negative.")
    order = np.argsort(values, kind="stable")
    return values[order], w[order], weighted_inversions_1d(values, w)
