"""Intensity normalization."""

import numpy as np

from imgcore.core.errors import InvalidParameterError
from imgcore.core.view import as_array
from imgcore.statistics.percentile import linear_percentile

__all__ = ["percentile_normalize"]


def percentile_normalize(data, low, high, clip=False, epsilon=1e-20):
    """Rescale an image by two of its percentiles.

    Every sample becomes ``(x - P_low) / (P_high - P_low + epsilon)``, where
    ``P_q`` is the linear-interpolated ``q``-th percentile of the
    flattened image.

    Parameters
    ----------
    data : ArrayView or array_like
        Input image of any dimensionality.
    low, high : float
        Percentiles mapped to 0 and 1, in [0, 100].
    clip : bool, default False
        Clamp the output to [0, 1].
    epsilon : float, default 1e-20
        Added to the denominator so that flat images do not divide by zero.

    Returns
    -------
    ndarray of float64
        Normalized image with the input's shape.

    Raises
    ------
    InvalidParameterError
        If ``low`` or ``high`` lies outside [0, 100].
    """
    for name, value in (("low", low), ("high", high)):
        if not 0.0 <= value <= 100.0:
            raise InvalidParameterError(f"{name} must lie within [0, 100], got {value}.")

    arr = as_array(data)
    p_low = linear_percentile(arr, low)
    p_high = linear_percentile(arr, high)
    out = (arr - p_low) / (p_high - p_low + epsilon)
    if clip:
        np.clip(out, 0.0, 1.0, out=out)
    return out
