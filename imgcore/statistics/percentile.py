"""Percentiles with linear interpolation."""

import numpy as np

from imgcore.core.errors import EmptyInputError, InvalidParameterError
from imgcore.core.view import as_array

__all__ = ["linear_percentile"]


def linear_percentile(data, p, axis=None):
    """Compute the ``p``-th percentile using linear interpolation.

    The rank ``h = (n - 1) * p / 100`` is split into its integer part ``k``
    and fraction ``f``; the result is ``x[k] + f * (x[k + 1] - x[k])`` over
    the sorted samples.

    Parameters
    ----------
    data : ArrayView or array_like
        Input samples.
    p : float
        Percentile, clamped to [0, 100].
    axis : int, optional
        Axis to compute along. The flattened data is used when omitted.

    Returns
    -------
    float or ndarray
        A scalar for ``axis=None``, otherwise an array with ``axis``
        removed from the input shape.

    Raises
    ------
    EmptyInputError
        If ``data`` has no elements.
    InvalidParameterError
        If ``axis`` is out of range.
    """
    arr = as_array(data)
    if arr.size == 0:
        raise EmptyInputError("data")
    q = float(np.clip(p, 0.0, 100.0))

    if axis is None:
        return float(np.percentile(arr, q, method="linear"))

    if not -arr.ndim <= axis < arr.ndim:
        raise InvalidParameterError(f"axis {axis} is out of bounds for data with {arr.ndim} dimension(s).")
    return np.percentile(arr, q, axis=axis, method="linear")
