"""Otsu's global threshold."""

import logging
import warnings

import numpy as np

from imgcore.core.config import DEFAULT_BIN_COUNT
from imgcore.core.errors import EmptyInputError
from imgcore.core.view import as_array
from imgcore.statistics.histogram import histogram

from .manual import manual_mask

log = logging.getLogger("imgcore.threshold.otsu")

__all__ = ["otsu_mask", "otsu_value"]


def _between_class_variance(counts, centers):
    counts = counts.astype(np.float64)
    w0 = np.cumsum(counts)[:-1]
    s0 = np.cumsum(counts * centers)[:-1]
    total = counts.sum()
    w1 = total - w0
    s1 = np.dot(counts, centers) - s0

    bcv = np.zeros_like(w0)
    split = (w0 > 0) & (w1 > 0)
    mu0 = s0[split] / w0[split]
    mu1 = s1[split] / w1[split]
    bcv[split] = w0[split] * w1[split] * (mu0 - mu1) ** 2
    return bcv


def otsu_value(data, bin_count=DEFAULT_BIN_COUNT, n_jobs=1):
    """Compute an image threshold with Otsu's method.

    The threshold maximizes the between-class variance
    ``w0 * w1 * (mu0 - mu1)**2`` of the two classes obtained by splitting
    the image histogram after bin ``t``. Class weights and means come from
    running sums over the histogram, so the search is linear in the number
    of bins. When several consecutive splits score the same (empty bins at
    the optimum), the highest one is used.

    Parameters
    ----------
    data : ArrayView or array_like
        Input image of any dimensionality.
    bin_count : int, default 256
        Number of histogram bins.
    n_jobs : int, default 1
        Workers used to build the histogram.

    Returns
    -------
    float
        Centre of the histogram bin that closes the lower class.

    Raises
    ------
    EmptyInputError
        If ``data`` holds no finite sample.
    InvalidBinCountError
        If ``bin_count`` is not positive.

    References
    ----------

    .. [1] Otsu, N. (1979). "A threshold selection method from gray-level
        histograms." IEEE Transactions on Systems, Man, and Cybernetics,
        9(1), 62-66. https://doi.org/10.1109/TSMC.1979.4310076
    """
    hist = histogram(data, bin_count=bin_count, n_jobs=n_jobs)
    if hist.total == 0:
        raise EmptyInputError("data")

    centers = hist.bin_centers
    if hist.bin_count == 1:
        return float(centers[0])

    bcv = _between_class_variance(hist.counts, centers)
    if not np.any(bcv > 0):
        warnings.warn(
            "All samples fall into a single histogram bin; Otsu's threshold is the centre of that bin.",
            UserWarning,
            stacklevel=2,
        )
        return float(centers[int(np.argmax(hist.counts))])

    t = int(np.flatnonzero(bcv == bcv.max())[-1])
    log.debug("otsu: split after bin %d of %d, threshold %g", t, hist.bin_count, centers[t])
    return float(centers[t])


def otsu_mask(data, bin_count=DEFAULT_BIN_COUNT, n_jobs=1):
    """Create a boolean mask using Otsu's method.

    Parameters
    ----------
    data : ArrayView or array_like
        Input image of any dimensionality.
    bin_count : int, default 256
        Number of histogram bins.
    n_jobs : int, default 1
        Workers used to build the histogram.

    Returns
    -------
    ndarray of bool
        Same shape as ``data``; ``True`` where a pixel is at or above the
        Otsu threshold.
    """
    arr = as_array(data)
    return manual_mask(arr, otsu_value(arr, bin_count=bin_count, n_jobs=n_jobs))
