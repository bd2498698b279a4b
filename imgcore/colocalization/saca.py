"""Spatially Adaptive Colocalization Analysis (SACA)."""

import logging

import numpy as np
from scipy import stats

from imgcore.core.config import DEFAULT_ALPHA, SacaConfig
from imgcore.core.errors import (
    EmptyInputError,
    InvalidParameterError,
    InvalidShapeError,
    InvalidThresholdError,
    ShapeMismatchError,
)
from imgcore.core.parallel import parallel_map, partition_range, resolve_n_jobs
from imgcore.core.view import as_array, row_major_strides
from imgcore.kernel.neighborhood import neighborhood_offsets
from imgcore.statistics.reductions import min_max

from .numba import saca_sweep
from .saca_obj import saca_result

log = logging.getLogger("imgcore.colocalization.saca")

__all__ = [
    "saca",
    "saca_2d",
    "saca_3d",
    "saca_significance_mask",
]

# Scale linking a weighted Kendall tau to its approximate standard normal
# statistic, z = 1.5 * tau * sqrt(n).
_TAU_Z_SCALE = 1.5


def _check_alpha(alpha):
    if not 0.0 < alpha < 1.0:
        raise InvalidParameterError(f"alpha must lie in (0, 1), got {alpha}.")


def _bonferroni_z_critical(n_tests, alpha):
    return float(stats.norm.ppf(1.0 - alpha / (2.0 * n_tests)))


def saca_significance_mask(zscore_map, alpha=DEFAULT_ALPHA):
    """Mark pixels with significant colocalization.

    Applies a two-sided Bonferroni correction over all pixels of the map,
    ``z_crit = Phi^-1(1 - alpha / (2 * N))``, and keeps pixels with
    ``|z| > z_crit``.

    Parameters
    ----------
    zscore_map : ArrayView or array_like
        Per-pixel SACA z-scores.
    alpha : float, default 0.05
        Family-wise significance level, in (0, 1).

    Returns
    -------
    ndarray of bool
        Same shape as ``zscore_map``.

    Raises
    ------
    InvalidParameterError
        If ``alpha`` lies outside (0, 1).
    EmptyInputError
        If ``zscore_map`` is empty.
    """
    _check_alpha(alpha)
    z = as_array(zscore_map)
    if z.size == 0:
        raise EmptyInputError("zscore_map")
    return np.abs(z) > _bonferroni_z_critical(z.size, alpha)


def _validate_channels(channel_a, channel_b, threshold_a, threshold_b):
    a = as_array(channel_a)
    b = as_array(channel_b)
    if a.shape != b.shape:
        raise ShapeMismatchError("channel_a", a.shape, "channel_b", b.shape)
    if a.size == 0:
        raise EmptyInputError("channel_a")
    for name, data, threshold in (("threshold_a", a, threshold_a), ("threshold_b", b, threshold_b)):
        low, high = min_max(data)
        if not low <= threshold <= high:
            raise InvalidThresholdError(name, threshold, low, high)
    return a, b


def _neighbourhood(radius, ndim, strides, falloff_scale):
    offsets, distances = neighborhood_offsets(radius, ndim)
    flat_offsets = offsets @ np.asarray(strides, dtype=np.int64)
    spatial = np.exp(-distances / (radius * falloff_scale))
    return offsets, flat_offsets, spatial


def _sweep(
    a_flat, b_flat, coords, shape_arr, neighbourhood, gate, tau, sqrt_n, active, similarity_scale, chunks, n_jobs
):
    offsets, flat_offsets, spatial = neighbourhood
    parts = parallel_map(
        saca_sweep,
        [
            (
                a_flat,
                b_flat,
                coords,
                shape_arr,
                offsets,
                flat_offsets,
                spatial,
                gate,
                tau,
                sqrt_n,
                active,
                similarity_scale,
                start,
                stop,
            )
            for start, stop in chunks
        ],
        n_jobs=n_jobs,
    )
    return tuple(np.concatenate([p[i] for p in parts]) for i in range(4))


def _local_zscores(a_flat, b_flat, coords, shape_arr, strides, gate, radius_map, falloff_scale, chunks, n_jobs):
    """Kendall z-score of every pixel over its accepted neighbourhood.

    Uses the spatial kernel and the gate only. With all previous estimates
    at zero every similarity weight is exactly 1.
    """
    n = a_flat.shape[0]
    zeros = np.zeros(n)
    tau = np.zeros(n)
    sqrt_n = np.zeros(n)
    for radius in np.unique(radius_map):
        selected = radius_map == radius
        neighbourhood = _neighbourhood(int(radius), coords.shape[1], strides, falloff_scale)
        r_tau, r_sqrt_n, _, _ = _sweep(
            a_flat, b_flat, coords, shape_arr, neighbourhood, gate, zeros, zeros, selected, 1.0, chunks, n_jobs
        )
        tau[selected] = r_tau[selected]
        sqrt_n[selected] = r_sqrt_n[selected]
    return _TAU_Z_SCALE * tau * sqrt_n


def saca(channel_a, channel_b, threshold_a, threshold_b, alpha=DEFAULT_ALPHA, config=None, n_jobs=1):
    r"""Run a spatially adaptive colocalization analysis on two channels.

    Every pixel gets a local weighted Kendall tau-b between the two
    channels, estimated over a neighbourhood that grows over a sequence of
    iterations (propagation-separation). Neighbour weights combine

    - a spatial kernel ``exp(-d / (radius * falloff_scale))`` inside the
      current radius,
    - a gate that drops neighbours below both channel thresholds,
    - a similarity weight
      ``exp(-(1.5 * sqrt_n_p * (tau_p - tau_q))**2 / similarity_scale)``
      computed from the previous iteration's estimates.

    A pixel stops growing, keeping its previous estimate and radius, when
    its neighbourhood variance in either channel exceeds
    ``variance_multiple`` times the global variance, or when its estimate
    drifts by more than ``stop_bound`` on the z scale from the estimate
    recorded at ``lower_bound_iteration``.

    The reported z-score is :math:`z = 1.5 \tau \sqrt{n_{eff}}`, with
    :math:`\tau` the weighted Kendall tau-b over the pixel's final
    neighbourhood under the spatial kernel and the gate alone, and
    :math:`n_{eff}` the effective sample size of those weights. The
    similarity weights only steer the growth.

    Each iteration reads only the previous iteration's estimates, so the
    result does not depend on ``n_jobs``.

    Parameters
    ----------
    channel_a, channel_b : ArrayView or array_like
        Co-registered channel images of identical shape.
    threshold_a, threshold_b : float
        Per-channel background thresholds. Each must lie within the data
        range of its channel.
    alpha : float, default 0.05
        Family-wise significance level for the Bonferroni-corrected mask.
    config : SacaConfig, optional
        Adaptive-growth parameters. Defaults to ``SacaConfig()``.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many workers.

    Returns
    -------
    SacaResult
        Z-score map, significance mask and run diagnostics.

    Raises
    ------
    ShapeMismatchError
        If the channels differ in shape.
    EmptyInputError
        If the channels are empty.
    InvalidThresholdError
        If a threshold lies outside its channel's data range.
    InvalidParameterError
        If ``alpha`` lies outside (0, 1).

    References
    ----------

    .. [1] Wang, S., Arena, E. T., Becker, J. T., Bement, W. M., Sahai, N.,
        Eliceiri, K. W., & Yuan, M. (2019). "Spatially adaptive
        colocalization analysis in dual-color fluorescence microscopy."
        IEEE Transactions on Image Processing, 28(9), 4471-4485.
        https://doi.org/10.1109/TIP.2019.2909194
    """
    a, b = _validate_channels(channel_a, channel_b, threshold_a, threshold_b)
    _check_alpha(alpha)
    if config is None:
        config = SacaConfig()

    shape = a.shape
    ndim = a.ndim
    n = a.size
    a_flat = a.reshape(-1).copy()
    b_flat = b.reshape(-1).copy()
    gate = ((a_flat >= threshold_a) | (b_flat >= threshold_b)).astype(np.float64)
    coords = np.ascontiguousarray(np.indices(shape).reshape(ndim, n).T.astype(np.int64))
    shape_arr = np.asarray(shape, dtype=np.int64)
    strides = row_major_strides(shape)

    var_limit_a = var_limit_b = None
    if config.variance_multiple is not None:
        var_limit_a = config.variance_multiple * float(np.var(a_flat))
        var_limit_b = config.variance_multiple * float(np.var(b_flat))
    stop_bound = config.resolve_stop_bound(n)

    tau = np.zeros(n)
    sqrt_n = np.zeros(n)
    ref_tau = ref_sqrt_n = None
    radius_map = np.zeros(n, dtype=np.int64)
    active = np.ones(n, dtype=bool)

    chunks = partition_range(n, resolve_n_jobs(n_jobs))
    iterations = 0
    for s in range(config.max_iterations):
        radius = config.radius_at(s)
        neighbourhood = _neighbourhood(radius, ndim, strides, config.falloff_scale)
        new_tau, new_sqrt_n, var_a, var_b = _sweep(
            a_flat,
            b_flat,
            coords,
            shape_arr,
            neighbourhood,
            gate,
            tau,
            sqrt_n,
            active,
            config.similarity_scale,
            chunks,
            n_jobs,
        )

        accept = active.copy()
        if s > 0 and var_limit_a is not None:
            accept &= (var_a <= var_limit_a) & (var_b <= var_limit_b)
        if ref_tau is not None:
            drift = _TAU_Z_SCALE * ref_sqrt_n * np.abs(new_tau - ref_tau)
            accept &= drift <= stop_bound

        tau = np.where(accept, new_tau, tau)
        sqrt_n = np.where(accept, new_sqrt_n, sqrt_n)
        radius_map[accept] = radius
        frozen = int(np.count_nonzero(active & ~accept))
        active = accept
        iterations = s + 1

        if s == config.lower_bound_iteration:
            ref_tau = tau.copy()
            ref_sqrt_n = sqrt_n.copy()

        log.debug(
            "saca iteration %d: radius=%d active=%d frozen=%d",
            s,
            radius,
            int(np.count_nonzero(active)),
            frozen,
        )
        if not active.any():
            break

    zscore_map = _local_zscores(
        a_flat, b_flat, coords, shape_arr, strides, gate, radius_map, config.falloff_scale, chunks, n_jobs
    ).reshape(shape)
    z_critical = _bonferroni_z_critical(n, alpha)
    mask = np.abs(zscore_map) > z_critical

    log.info(
        "saca: %d pixels, %d iterations, %d significant at alpha=%g (z_crit=%.4f)",
        n,
        iterations,
        int(np.count_nonzero(mask)),
        alpha,
        z_critical,
    )
    return saca_result(
        zscore_map=zscore_map,
        significance_mask=mask,
        z_critical=z_critical,
        alpha=alpha,
        radius_map=radius_map.reshape(shape),
        iterations=iterations,
        config=config.to_dict(),
    )


def _fixed_rank_saca(ndim, channel_a, channel_b, threshold_a, threshold_b, config, n_jobs):
    a = as_array(channel_a)
    b = as_array(channel_b)
    for name, arr in (("channel_a", a), ("channel_b", b)):
        if arr.ndim != ndim:
            raise InvalidShapeError(f"{name} must be {ndim}-dimensional, got shape {arr.shape}.")
    return saca(a, b, threshold_a, threshold_b, config=config, n_jobs=n_jobs).zscore_map


def saca_2d(channel_a, channel_b, threshold_a, threshold_b, config=None, n_jobs=1):
    """Compute the SACA z-score map of two 2-dimensional channels.

    See :func:`saca` for the parameters.

    Returns
    -------
    ndarray of float64
        Per-pixel z-scores.
    """
    return _fixed_rank_saca(2, channel_a, channel_b, threshold_a, threshold_b, config, n_jobs)


def saca_3d(channel_a, channel_b, threshold_a, threshold_b, config=None, n_jobs=1):
    """Compute the SACA z-score map of two 3-dimensional channels.

    See :func:`saca` for the parameters.

    Returns
    -------
    ndarray of float64
        Per-voxel z-scores.
    """
    return _fixed_rank_saca(3, channel_a, channel_b, threshold_a, threshold_b, config, n_jobs)
