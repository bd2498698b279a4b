# pylint: disable=function-redefined
"""Numba-accelerated kernels for compensated sums and weighted rank correlation."""

import numpy as np

try:
    import numba as nb

    HAS_NUMBA = True
except ImportError:
    HAS_NUMBA = False
    nb = None


__all__ = [
    "HAS_NUMBA",
    "kahan_sum_1d",
    "weighted_inversions_1d",
    "weighted_tau_b_1d",
]

# Fraction of untied weighted pairs below which a variable counts as constant.
_TIE_TOL = 1e-12


def _kahan_sum_impl(values):
    total = 0.0
    comp = 0.0
    for v in values.tolist():
        adj = v - comp
        new_total = total + adj
        comp = (new_total - total) - adj
        total = new_total
    return total


def _weighted_inversions_impl(values, weights):
    """Weighted inversion count by a bottom-up merge over dense ranks."""
    n = values.shape[0]
    if n < 2:
        return 0.0
    rank = np.unique(values, return_inverse=True)[1].reshape(-1).astype(np.int64)
    w = weights.astype(np.float64)
    pos = np.arange(n)
    swaps = 0.0
    step = 1
    while step < n:
        block = pos // (2 * step)
        right = (pos % (2 * step)) >= step
        key = block * n + rank
        left_w = w[~right]
        cum = np.concatenate(([0.0], np.cumsum(left_w)))
        # left runs are sorted, so left keys are sorted across all blocks
        end = np.searchsorted(block[~right], block[right], side="right")
        first_greater = np.searchsorted(key[~right], key[right], side="right")
        swaps += float(np.dot(w[right], cum[end] - cum[first_greater]))
        order = np.argsort(key, kind="stable")
        rank = rank[order]
        w = w[order]
        step *= 2
    return swaps


def _tied_pair_weight(w_sorted, new_group):
    starts = np.flatnonzero(new_group)
    group = np.add.reduceat(w_sorted, starts)
    group_sq = np.add.reduceat(w_sorted * w_sorted, starts)
    return 0.5 * (np.sum(group * group) - np.sum(group_sq))


def _tau_from_pairs(total, tie_a, tie_b, tie_ab, discordant):
    untied_a = total - tie_a
    untied_b = total - tie_b
    if not (untied_a > _TIE_TOL * total and untied_b > _TIE_TOL * total):
        return 0.0
    concordant = total - tie_a - tie_b + tie_ab - discordant
    tau = (concordant - discordant) / np.sqrt(untied_a * untied_b)
    if tau > 1.0:
        return 1.0
    if tau < -1.0:
        return -1.0
    return tau


def _weighted_tau_b_impl(a, b, w):
    """Weighted Kendall tau-b from tie groups and a weighted inversion count."""
    n = a.shape[0]
    if n < 2:
        return 0.0
    order = np.lexsort((b, a))
    a_s = a[order]
    b_s = b[order]
    w_s = w[order]
    new_a = np.ones(n, dtype=bool)
    new_a[1:] = a_s[1:] != a_s[:-1]
    new_ab = new_a.copy()
    new_ab[1:] |= b_s[1:] != b_s[:-1]

    b_order = np.argsort(b, kind="stable")
    b_sorted = b[b_order]
    new_b = np.ones(n, dtype=bool)
    new_b[1:] = b_sorted[1:] != b_sorted[:-1]

    total = 0.5 * (np.sum(w) ** 2 - np.sum(w * w))
    return float(
        _tau_from_pairs(
            total,
            _tied_pair_weight(w_s, new_a),
            _tied_pair_weight(w[b_order], new_b),
            _tied_pair_weight(w_s, new_ab),
            _weighted_inversions_impl(b_s, w_s),
        )
    )


if HAS_NUMBA:

    @nb.njit(cache=True, nogil=True)
    def _kahan_sum_impl(values):
        total = 0.0
        comp = 0.0
        for i in range(values.shape[0]):
            adj = values[i] - comp
            new_total = total + adj
            comp = (new_total - total) - adj
            total = new_total
        return total

    @nb.njit(cache=True, nogil=True)
    def _weighted_inversions_impl(values, weights):
        """Weighted inversion count by a bottom-up merge sort (loop form)."""
        n = values.shape[0]
        src_v = values.copy()
        src_w = weights.copy()
        dst_v = np.empty(n)
        dst_w = np.empty(n)
        cum = np.empty(n + 1)
        swaps = 0.0
        step = 1
        while step < n:
            cum[0] = 0.0
            for i in range(n):
                cum[i + 1] = cum[i] + src_w[i]
            left = 0
            while left < n:
                mid = min(left + step, n)
                end = min(left + 2 * step, n)
                lo = left
                hi = mid
                k = left
                while lo < mid and hi < end:
                    if src_v[lo] > src_v[hi]:
                        swaps += src_w[hi] * (cum[mid] - cum[lo])
                        dst_v[k] = src_v[hi]
                        dst_w[k] = src_w[hi]
                        hi += 1
                    else:
                        dst_v[k] = src_v[lo]
                        dst_w[k] = src_w[lo]
                        lo += 1
                    k += 1
                while lo < mid:
                    dst_v[k] = src_v[lo]
                    dst_w[k] = src_w[lo]
                    lo += 1
                    k += 1
                while hi < end:
                    dst_v[k] = src_v[hi]
                    dst_w[k] = src_w[hi]
                    hi += 1
                    k += 1
                left = end
            src_v, dst_v = dst_v, src_v
            src_w, dst_w = dst_w, src_w
            step *= 2
        return swaps

    @nb.njit(cache=True, nogil=True)
    def _tied_pair_weight(w_sorted, new_group):
        pairs = 0.0
        group = 0.0
        group_sq = 0.0
        for i in range(w_sorted.shape[0]):
            if new_group[i] and i > 0:
                pairs += 0.5 * (group * group - group_sq)
                group = 0.0
                group_sq = 0.0
            group += w_sorted[i]
            group_sq += w_sorted[i] * w_sorted[i]
        return pairs + 0.5 * (group * group - group_sq)

    @nb.njit(cache=True, nogil=True)
    def _tau_from_pairs(total, tie_a, tie_b, tie_ab, discordant):
        untied_a = total - tie_a
        untied_b = total - tie_b
        if not (untied_a > _TIE_TOL * total and untied_b > _TIE_TOL * total):
            return 0.0
        concordant = total - tie_a - tie_b + tie_ab - discordant
        tau = (concordant - discordant) / np.sqrt(untied_a * untied_b)
        if tau > 1.0:
            return 1.0
        if tau < -1.0:
            return -1.0
        return tau

    @nb.njit(cache=True, nogil=True)
    def _weighted_tau_b_impl(a, b, w):
        """Weighted Kendall tau-b from tie groups and a weighted inversion count (loop form)."""
        n = a.shape[0]
        if n < 2:
            return 0.0
        b_order = np.argsort(b, kind="mergesort")
        order = b_order[np.argsort(a[b_order], kind="mergesort")]
        a_s = a[order]
        b_s = b[order]
        w_s = w[order]
        b_sorted = b[b_order]
        w_b = w[b_order]

        new_a = np.empty(n, dtype=np.bool_)
        new_ab = np.empty(n, dtype=np.bool_)
        new_b = np.empty(n, dtype=np.bool_)
        new_a[0] = True
        new_ab[0] = True
        new_b[0] = True
        total = w[0]
        total_sq = w[0] * w[0]
        for i in range(1, n):
            new_a[i] = a_s[i] != a_s[i - 1]
            new_ab[i] = new_a[i] or b_s[i] != b_s[i - 1]
            new_b[i] = b_sorted[i] != b_sorted[i - 1]
            total += w[i]
            total_sq += w[i] * w[i]

        return _tau_from_pairs(
            0.5 * (total * total - total_sq),
            _tied_pair_weight(w_s, new_a),
            _tied_pair_weight(w_b, new_b),
            _tied_pair_weight(w_s, new_ab),
            _weighted_inversions_impl(b_s, w_s),
        )


def kahan_sum_1d(values):
    """Compensated (Kahan) sum of a 1-D float64 array.

    Parameters
    ----------
    values : ndarray
        One-dimensional samples.

    Returns
    -------
    float
        The compensated sum.
    """
    return float(_kahan_sum_impl(np.ascontiguousarray(values, dtype=np.float64)))


def weighted_inversions_1d(values, weights):
    """Total weight of the inversions in a 1-D sequence.

    An inversion is a pair ``i < j`` with ``values[i] > values[j]``; it
    contributes ``weights[i] * weights[j]``. Equal values never count.

    Parameters
    ----------
    values : ndarray
        Sequence to be sorted.
    weights : ndarray
        Non-negative weight of each element.

    Returns
    -------
    float
        Weighted inversion count, computed in O(n log n).
    """
    return float(
        _weighted_inversions_impl(
            np.ascontiguousarray(values, dtype=np.float64),
            np.ascontiguousarray(weights, dtype=np.float64),
        )
    )


def weighted_tau_b_1d(a, b, w):
    """Weighted Kendall tau-b of two aligned 1-D samples.

    Parameters
    ----------
    a, b : ndarray
        Paired observations.
    w : ndarray
        Non-negative weight of each observation pair.

    Returns
    -------
    float
        Coefficient in [-1, 1]; 0.0 when fewer than two observations carry
        weight or either variable is constant.
    """
    return float(
        _weighted_tau_b_impl(
            np.ascontiguousarray(a, dtype=np.float64),
            np.ascontiguousarray(b, dtype=np.float64),
            np.ascontiguousarray(w, dtype=np.float64),
        )
    )
