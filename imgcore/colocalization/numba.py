# pylint: disable=function-redefined
"""Numba-accelerated neighbourhood sweep for SACA."""

import numpy as np

from imgcore.statistics.numba import HAS_NUMBA, _weighted_tau_b_impl

if HAS_NUMBA:
    import numba as nb


__all__ = ["saca_sweep"]


def _saca_sweep_impl(
    a,
    b,
    coords,
    shape,
    offsets,
    flat_offsets,
    spatial,
    gate,
    old_tau,
    old_sqrt_n,
    active,
    similarity_scale,
    start,
    stop,
):
    m = stop - start
    tau_out = np.empty(m)
    sqrt_n_out = np.empty(m)
    var_a_out = np.zeros(m)
    var_b_out = np.zeros(m)

    for i in range(m):
        p = start + i
        if not active[p]:
            tau_out[i] = old_tau[p]
            sqrt_n_out[i] = old_sqrt_n[p]
            continue

        pos = coords[p] + offsets
        inside = np.all((pos >= 0) & (pos < shape), axis=1)
        q = p + flat_offsets[inside]
        diff = 1.5 * old_sqrt_n[p] * (old_tau[p] - old_tau[q])
        w = spatial[inside] * gate[q] * np.exp(-(diff * diff) / similarity_scale)

        qa = a[q]
        qb = b[q]
        tau_out[i] = _weighted_tau_b_impl(qa, qb, w)

        sw = np.sum(w)
        sw2 = np.dot(w, w)
        if sw2 > 0.0:
            sqrt_n_out[i] = np.sqrt(sw * sw / sw2)
            da = qa - np.dot(w, qa) / sw
            db = qb - np.dot(w, qb) / sw
            var_a_out[i] = np.dot(w, da * da) / sw
            var_b_out[i] = np.dot(w, db * db) / sw
        else:
            sqrt_n_out[i] = 0.0

    return tau_out, sqrt_n_out, var_a_out, var_b_out


if HAS_NUMBA:

    @nb.njit(cache=True, nogil=True)
    def _saca_sweep_impl(
        a,
        b,
        coords,
        shape,
        offsets,
        flat_offsets,
        spatial,
        gate,
        old_tau,
        old_sqrt_n,
        active,
        similarity_scale,
        start,
        stop,
    ):
        m = stop - start
        k = offsets.shape[0]
        ndim = offsets.shape[1]
        tau_out = np.empty(m)
        sqrt_n_out = np.empty(m)
        var_a_out = np.zeros(m)
        var_b_out = np.zeros(m)
        qa = np.empty(k)
        qb = np.empty(k)
        qw = np.empty(k)

        for i in range(m):
            p = start + i
            if not active[p]:
                tau_out[i] = old_tau[p]
                sqrt_n_out[i] = old_sqrt_n[p]
                continue

            cnt = 0
            for j in range(k):
                inside = True
                for d in range(ndim):
                    c = coords[p, d] + offsets[j, d]
                    if c < 0 or c >= shape[d]:
                        inside = False
                        break
                if not inside:
                    continue
                q = p + flat_offsets[j]
                diff = 1.5 * old_sqrt_n[p] * (old_tau[p] - old_tau[q])
                qa[cnt] = a[q]
                qb[cnt] = b[q]
                qw[cnt] = spatial[j] * gate[q] * np.exp(-(diff * diff) / similarity_scale)
                cnt += 1

            tau_out[i] = _weighted_tau_b_impl(qa[:cnt], qb[:cnt], qw[:cnt])

            sw = 0.0
            sw2 = 0.0
            swa = 0.0
            swb = 0.0
            for j in range(cnt):
                sw += qw[j]
                sw2 += qw[j] * qw[j]
                swa += qw[j] * qa[j]
                swb += qw[j] * qb[j]
            if sw2 > 0.0:
                sqrt_n_out[i] = np.sqrt(sw * sw / sw2)
                mean_a = swa / sw
                mean_b = swb / sw
                va = 0.0
                vb = 0.0
                for j in range(cnt):
                    va += qw[j] * (qa[j] - mean_a) ** 2
                    vb += qw[j] * (qb[j] - mean_b) ** 2
                var_a_out[i] = va / sw
                var_b_out[i] = vb / sw
            else:
                sqrt_n_out[i] = 0.0

        return tau_out, sqrt_n_out, var_a_out, var_b_out


def saca_sweep(
    a,
    b,
    coords,
    shape,
    offsets,
    flat_offsets,
    spatial,
    gate,
    old_tau,
    old_sqrt_n,
    active,
    similarity_scale,
    start,
    stop,
):
    """Re-estimate the local statistics of pixels ``start:stop``.

    Reads only the arrays of the previous iteration, so disjoint pixel
    ranges can be evaluated concurrently.

    Parameters
    ----------
    a, b : ndarray of float64, shape (n,)
        Flattened channel samples.
    coords : ndarray of int64, shape (n, ndim)
        Multi-index of every pixel.
    shape : ndarray of int64, shape (ndim,)
        Image shape.
    offsets : ndarray of int64, shape (k, ndim)
        Neighbourhood lattice offsets.
    flat_offsets : ndarray of int64, shape (k,)
        Row-major flat equivalent of ``offsets``.
    spatial : ndarray of float64, shape (k,)
        Spatial kernel weight of each offset.
    gate : ndarray of float64, shape (n,)
        0.0 for pixels below both channel thresholds, else 1.0.
    old_tau, old_sqrt_n : ndarray of float64, shape (n,)
        Estimates of the previous iteration.
    active : ndarray of bool, shape (n,)
        Pixels still growing. Frozen pixels keep their previous estimate.
    similarity_scale : float
        Scale of the similarity penalty.
    start, stop : int
        Pixel range to evaluate.

    Returns
    -------
    tau : ndarray
        Weighted Kendall tau-b of each pixel's neighbourhood.
    sqrt_n : ndarray
        Square root of the effective neighbourhood size.
    var_a, var_b : ndarray
        Weighted local variance of each channel.
    """
    return _saca_sweep_impl(
        a,
        b,
        coords,
        shape,
        offsets,
        flat_offsets,
        spatial,
        gate,
        old_tau,
        old_sqrt_n,
        active,
        float(similarity_scale),
        int(start),
        int(stop),
    )
