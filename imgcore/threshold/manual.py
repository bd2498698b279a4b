"""Fixed-value thresholding."""

import numpy as np

from imgcore.core.view import as_array

__all__ = ["manual_mask"]


def manual_mask(data, threshold):
    """Create a boolean mask from a threshold value.

    Parameters
    ----------
    data : ArrayView or array_like
        Input image of any dimensionality.
    threshold : float
        Pixel threshold value.

    Returns
    -------
    ndarray of bool
        Same shape as ``data``; ``True`` where ``pixel >= threshold``.
    """
    return np.greater_equal(as_array(data), threshold)
