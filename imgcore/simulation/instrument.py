"""Sampled Gaussian profiles and instrument response functions."""

import math

import numpy as np

from imgcore.core.errors import InvalidParameterError
from imgcore.statistics.reductions import sum as _sum

__all__ = ["gaussian_irf_1d", "normalized_gaussian"]

# sigma = FWHM / (2 * sqrt(2 * ln 2))
_FWHM_TO_SIGMA = 1.0 / (2.0 * math.sqrt(2.0 * math.log(2.0)))


def normalized_gaussian(sigma, bins, span, center):
    """Sample a Gaussian on an even grid and normalize it to unit sum.

    The grid holds ``bins`` points from 0 to ``span`` inclusive, and point
    ``x`` gets ``exp(-(x - center)**2 / (2 * sigma**2))`` before the
    normalization.

    Parameters
    ----------
    sigma : float
        Standard deviation (width) of the Gaussian.
    bins : int
        Number of sample points, at least 2.
    span : float
        Length of the sampled interval.
    center : float
        Position of the peak on the grid.

    Returns
    -------
    ndarray of float64
        Weights summing to 1.0.

    Raises
    ------
    InvalidParameterError
        If ``sigma`` or ``span`` is not positive, or ``bins`` is below 2.
    """
    if sigma <= 0:
        raise InvalidParameterError(f"sigma must be positive, got {sigma}.")
    if span <= 0:
        raise InvalidParameterError(f"span must be positive, got {span}.")
    if int(bins) < 2:
        raise InvalidParameterError(f"bins must be at least 2, got {bins}.")
    x = np.arange(int(bins), dtype=np.float64) * (span / (int(bins) - 1))
    d = x - center
    values = np.exp(-(d * d) / (2.0 * sigma * sigma))
    total = _sum(values)
    if total == 0.0:
        raise InvalidParameterError(f"center {center} lies too far outside [0, {span}] for sigma {sigma}.")
    return values / total


def gaussian_irf_1d(samples, period, irf_center, irf_width):
    """Create a Gaussian instrument response function.

    Parameters
    ----------
    samples : int
        Number of time bins.
    period : float
        Time span covered by the bins.
    irf_center : float
        Time of the IRF peak.
    irf_width : float
        Full width at half maximum of the IRF.

    Returns
    -------
    ndarray of float64
        Unit-sum IRF of length ``samples``.
    """
    if irf_width <= 0:
        raise InvalidParameterError(f"irf_width must be positive, got {irf_width}.")
    return normalized_gaussian(irf_width * _FWHM_TO_SIGMA, samples, period, irf_center)
