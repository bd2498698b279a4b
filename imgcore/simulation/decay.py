"""Simulated fluorescence lifetime decay curves."""

import numpy as np
from scipy import signal

from imgcore.core.errors import EmptyInputError, InvalidParameterError, ShapeMismatchError
from imgcore.statistics.reductions import sum as _sum

from .gradient import _fixed_rank
from .instrument import gaussian_irf_1d

__all__ = [
    "gaussian_exponential_decay_1d",
    "gaussian_exponential_decay_3d",
    "ideal_exponential_decay_1d",
    "ideal_exponential_decay_3d",
    "irf_exponential_decay_1d",
    "irf_exponential_decay_3d",
]

_FRACTION_SUM_TOL = 1e-9


def _components(taus, fractions):
    taus = np.atleast_1d(np.asarray(taus, dtype=np.float64))
    fractions = np.atleast_1d(np.asarray(fractions, dtype=np.float64))
    if taus.shape != fractions.shape:
        raise ShapeMismatchError("taus", taus.shape, "fractions", fractions.shape)
    if np.any(taus < 0) or np.any(fractions < 0):
        raise InvalidParameterError("taus and fractions must be non-negative.")
    total = float(np.sum(fractions))
    if abs(total - 1.0) > _FRACTION_SUM_TOL:
        raise InvalidParameterError(f"fractions must sum to 1.0, got {total}.")
    keep = (taus > 0) & (fractions > 0)
    return taus[keep], fractions[keep]


def _convolve_irf(curve, irf):
    irf = np.ravel(np.asarray(irf, dtype=np.float64))
    if irf.size == 0:
        raise EmptyInputError("irf")
    return signal.fftconvolve(curve, irf)[: curve.size]


def _broadcast(curve, shape):
    shape = _fixed_rank(shape, 2)
    return np.broadcast_to(curve, (*shape, curve.size)).copy()


def ideal_exponential_decay_1d(samples, period, taus, fractions, total_counts):
    r"""Simulate an ideal mono- or multi-exponential decay curve.

    .. math::

        I(t) = \sum_i \alpha_i \exp(-t / \tau_i), \qquad \alpha_i = f_i / \tau_i

    sampled at ``samples`` evenly spaced times from 0 to ``period`` and
    scaled so that the curve sums to ``total_counts``.

    Parameters
    ----------
    samples : int
        Number of time bins.
    period : float
        Time span covered by the bins.
    taus : array_like
        Component lifetimes. Components with a zero lifetime are skipped.
    fractions : array_like
        Fractional intensity of each component, summing to 1.0. Components
        with a zero fraction are skipped.
    total_counts : float
        Total photon count of the curve.

    Returns
    -------
    ndarray of float64
        Decay curve of length ``samples``.

    Raises
    ------
    ShapeMismatchError
        If ``taus`` and ``fractions`` differ in length.
    InvalidParameterError
        If ``fractions`` does not sum to 1.0 or no usable component is left.
        Also raised for a negative lifetime or fraction.
    """
    samples = int(samples)
    if samples < 1:
        raise InvalidParameterError(f"samples must be positive, got {samples}.")
    if period <= 0:
        raise InvalidParameterError(f"period must be positive, got {period}.")
    taus, fractions = _components(taus, fractions)
    if taus.size == 0:
        raise InvalidParameterError("At least one component needs a non-zero tau and fraction.")

    t = np.linspace(0.0, period, samples)
    curve = np.zeros(samples)
    for tau, fraction in zip(taus, fractions, strict=True):
        curve += (fraction / tau) * np.exp(-t / tau)
    return curve * (total_counts / _sum(curve))


def ideal_exponential_decay_3d(samples, period, taus, fractions, total_counts, shape):
    """Broadcast an ideal decay curve over a ``(rows, cols)`` grid.

    See :func:`ideal_exponential_decay_1d` for the curve parameters.

    Returns
    -------
    ndarray of float64
        Array of shape ``(rows, cols, samples)``.
    """
    return _broadcast(ideal_exponential_decay_1d(samples, period, taus, fractions, total_counts), shape)


def irf_exponential_decay_1d(irf, samples, period, taus, fractions, total_counts):
    """Simulate a decay curve convolved with a measured IRF.

    The ideal curve of :func:`ideal_exponential_decay_1d` is convolved
    with ``irf`` and truncated to ``samples`` bins.

    Parameters
    ----------
    irf : array_like
        Instrument response function, one value per time bin.
    samples, period, taus, fractions, total_counts
        See :func:`ideal_exponential_decay_1d`.

    Returns
    -------
    ndarray of float64
        Convolved decay curve of length ``samples``.
    """
    curve = ideal_exponential_decay_1d(samples, period, taus, fractions, total_counts)
    return _convolve_irf(curve, irf)


def irf_exponential_decay_3d(irf, samples, period, taus, fractions, total_counts, shape):
    """Broadcast an IRF-convolved decay curve over a ``(rows, cols)`` grid."""
    return _broadcast(irf_exponential_decay_1d(irf, samples, period, taus, fractions, total_counts), shape)


def gaussian_exponential_decay_1d(samples, period, taus, fractions, total_counts, irf_center, irf_width):
    """Simulate a decay curve convolved with a Gaussian IRF.

    Parameters
    ----------
    samples, period, taus, fractions, total_counts
        See :func:`ideal_exponential_decay_1d`.
    irf_center : float
        Time of the IRF peak.
    irf_width : float
        Full width at half maximum of the IRF.

    Returns
    -------
    ndarray of float64
        Convolved decay curve of length ``samples``.
    """
    irf = gaussian_irf_1d(samples, period, irf_center, irf_width)
    return irf_exponential_decay_1d(irf, samples, period, taus, fractions, total_counts)


def gaussian_exponential_decay_3d(samples, period, taus, fractions, total_counts, irf_center, irf_width, shape):
    """Broadcast a Gaussian-IRF decay curve over a ``(rows, cols)`` grid."""
    curve = gaussian_exponential_decay_1d(samples, period, taus, fractions, total_counts, irf_center, irf_width)
    return _broadcast(curve, shape)
