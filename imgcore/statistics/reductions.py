# pylint: disable=redefined-builtin
"""Sum and extrema reductions with thread-count-independent results."""

import logging

import numpy as np

from imgcore.core.config import SUM_BLOCK_SIZE
from imgcore.core.errors import EmptyInputError
from imgcore.core.parallel import parallel_map, partition_range, resolve_n_jobs
from imgcore.core.view import as_array

from .numba import kahan_sum_1d

log = logging.getLogger("imgcore.statistics.reductions")

__all__ = [
    "flatten",
    "kahan_sum",
    "max",
    "min",
    "min_max",
    "sum",
]


def flatten(data):
    """Return the samples of ``data`` as a 1-D float64 array in row-major order."""
    return np.ravel(as_array(data))


def _block_bounds(n, block_size):
    if n == 0:
        return []
    starts = range(0, n, block_size)
    stops = [*range(block_size, n, block_size), n]
    return list(zip(starts, stops, strict=True))


def _block_partials(flat, bounds):
    return [float(np.add.reduce(flat[start:stop])) for start, stop in bounds]


def sum(data, n_jobs=1):
    """Compute the sum of an n-dimensional array.

    The samples are cut into fixed blocks of ``SUM_BLOCK_SIZE`` elements,
    each block is reduced with NumPy's pairwise summation and the block
    partials are accumulated in index order. The parallel variant hands
    contiguous runs of blocks to each worker and merges the partials in
    the same order, so the result is bit-identical for every ``n_jobs``.

    Parameters
    ----------
    data : ArrayView or array_like
        Input samples of any dimensionality.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many workers.

    Returns
    -------
    float
        The sum; 0.0 for an empty input.
    """
    flat = flatten(data)
    blocks = _block_bounds(flat.size, SUM_BLOCK_SIZE)
    workers = resolve_n_jobs(n_jobs)

    if workers == 1 or len(blocks) <= 1:
        partials = _block_partials(flat, blocks)
    else:
        groups = partition_range(len(blocks), workers)
        log.debug("sum: %d blocks over %d workers", len(blocks), len(groups))
        chunked = parallel_map(
            _block_partials,
            [(flat, blocks[start:stop]) for start, stop in groups],
            n_jobs=workers,
        )
        partials = [p for chunk in chunked for p in chunk]

    total = 0.0
    for p in partials:
        total += p
    return total


def kahan_sum(data):
    """Compute the sum of an n-dimensional array using Kahan compensated summation.

    A running error residual is subtracted from every incoming value, which
    recovers most of the precision lost when adding values of very
    different magnitude.

    Parameters
    ----------
    data : ArrayView or array_like
        Input samples.

    Returns
    -------
    float
        The compensated sum; 0.0 for an empty input.
    """
    return kahan_sum_1d(flatten(data))


def _chunk_min_max(flat, start, stop):
    seg = flat[start:stop]
    return np.min(seg), np.max(seg)


def min_max(data, n_jobs=1):
    """Find the minimum and maximum values of an n-dimensional array.

    Parameters
    ----------
    data : ArrayView or array_like
        Input samples.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many workers. Chunk
        results are merged in chunk order.

    Returns
    -------
    tuple of float
        ``(min, max)``. NaN samples propagate into both values.

    Raises
    ------
    EmptyInputError
        If ``data`` has no elements.
    """
    flat = flatten(data)
    if flat.size == 0:
        raise EmptyInputError("data")

    chunks = partition_range(flat.size, resolve_n_jobs(n_jobs))
    results = parallel_map(_chunk_min_max, [(flat, start, stop) for start, stop in chunks], n_jobs=n_jobs)

    lo, hi = results[0]
    for chunk_lo, chunk_hi in results[1:]:
        lo = np.minimum(lo, chunk_lo)
        hi = np.maximum(hi, chunk_hi)
    return float(lo), float(hi)


def min(data, n_jobs=1):
    """Find the minimum value of an n-dimensional array."""
    return min_max(data, n_jobs=n_jobs)[0]


def max(data, n_jobs=1):
    """Find the maximum value of an n-dimensional array."""
    return min_max(data, n_jobs=n_jobs)[1]
