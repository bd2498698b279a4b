"""Correlation coefficients and weight diagnostics."""

import warnings

import numpy as np

from imgcore.core.errors import EmptyInputError, InvalidParameterError, ShapeMismatchError

from .numba import weighted_tau_b_1d
from .reductions import flatten

__all__ = [
    "effective_sample_size",
    "pearson_correlation",
    "weighted_kendall_tau_b",
]


def effective_sample_size(weights):
    r"""Compute the effective sample size (ESS) of a weighted sample set.

    .. math::

        n_{eff} = \frac{\left(\sum_i w_i\right)^2}{\sum_i w_i^2}

    The ESS equals the number of samples for uniform weights and drops
    toward 1 as a single weight comes to dominate.

    Parameters
    ----------
    weights : array_like
        Sample weights.

    Returns
    -------
    float
        The effective sample size, or 0.0 when every weight is zero.
    """
    w = flatten(weights)
    sum_w = np.sum(w)
    sum_sq = np.sum(w * w)
    if sum_sq == 0.0:
        return 0.0
    return float(sum_w * sum_w / sum_sq)


def _paired(a, b, a_name="a", b_name="b"):
    a = flatten(a)
    b = flatten(b)
    if a.shape != b.shape:
        raise ShapeMismatchError(a_name, a.shape, b_name, b.shape)
    return a, b


def weighted_kendall_tau_b(a, b, weights):
    r"""Compute the weighted Kendall tau-b rank correlation.

    Every pair of observations ``(i, j)`` contributes the product weight
    :math:`w_i w_j`. Concordant pairs add it to the numerator, discordant
    pairs subtract it, and ties in either variable contribute nothing. The
    denominator only counts pairs that are untied in each variable

    .. math::

        \tau_b = \frac{\sum_{i<j} w_i w_j \operatorname{sgn}(a_i - a_j)
        \operatorname{sgn}(b_i - b_j)}{\sqrt{\sum_{a_i \ne a_j} w_i w_j
        \sum_{b_i \ne b_j} w_i w_j}}

    With unit weights this is the classic tau-b. Discordant pairs are
    counted as weighted inversions of ``b`` in ``a`` order with a merge sort
    (see :func:`weighted_merge_sort`), so the cost is O(n log n).

    Parameters
    ----------
    a, b : array_like
        Paired observations of equal length.
    weights : array_like
        Non-negative weight of each observation.

    Returns
    -------
    float
        Coefficient clamped to [-1, 1]. 0.0 for fewer than two samples or
        when either variable is constant over the weighted samples.

    Raises
    ------
    ShapeMismatchError
        If the inputs differ in length.
    InvalidParameterError
        If a weight is negative.

    References
    ----------

    .. [1] Wang, S., et al. (2019). "Spatially adaptive colocalization
        analysis in dual-color fluorescence microscopy." IEEE Transactions
        on Image Processing, 28(9), 4471-4485.
    """
    a, b = _paired(a, b)
    w = flatten(weights)
    if w.shape != a.shape:
        raise ShapeMismatchError("weights", w.shape, "a", a.shape)
    if np.any(w < 0):
        raise InvalidParameterError("weights must be non-negative.")
    return weighted_tau_b_1d(a, b, w)


def pearson_correlation(a, b):
    """Compute the Pearson correlation coefficient of two samples.

    Parameters
    ----------
    a, b : array_like
        Paired observations of equal length.

    Returns
    -------
    float
        Coefficient in [-1, 1], or NaN (with a warning) when either sample
        has zero variance.

    Raises
    ------
    ShapeMismatchError
        If the inputs differ in length.
    EmptyInputError
        If the inputs are empty.
    """
    a, b = _paired(a, b)
    if a.size == 0:
        raise EmptyInputError("a")

    da = a - np.mean(a)
    db = b - np.mean(b)
    denom = np.sqrt(np.dot(da, da) * np.dot(db, db))
    if denom == 0.0:
        warnings.warn(
            "Pearson correlation is undefined for a sample with zero variance; returning NaN.",
            UserWarning,
            stacklevel=2,
        )
        return float("nan")
    r = np.dot(da, db) / denom
    return float(np.clip(r, -1.0, 1.0))
