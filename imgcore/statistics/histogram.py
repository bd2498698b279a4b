# pylint: disable=redefined-builtin
"""Fixed-width image histograms."""

from typing import NamedTuple

import numpy as np
import polars as pl

from imgcore.core.config import DEFAULT_BIN_COUNT
from imgcore.core.errors import EmptyInputError, InvalidBinCountError, InvalidParameterError
from imgcore.core.parallel import parallel_map, partition_range, resolve_n_jobs

from .reductions import flatten

__all__ = [
    "Histogram",
    "histogram",
    "histogram_bin_midpoint",
    "histogram_bin_range",
]


class Histogram(NamedTuple):
    """Discretized frequency distribution of sample values.

    Attributes
    ----------
    counts : ndarray of int64, shape (bin_count,)
        Number of samples falling into each bin.
    bin_edges : ndarray of float64, shape (bin_count + 1,)
        Strictly increasing bin boundaries. Every bin is half-open except
        the last, which also holds the upper edge.
    """

    counts: np.ndarray
    bin_edges: np.ndarray

    @property
    def bin_count(self):
        return int(self.counts.shape[0])

    @property
    def bin_width(self):
        return float((self.bin_edges[-1] - self.bin_edges[0]) / self.bin_count)

    @property
    def bin_centers(self):
        return (self.bin_edges[:-1] + self.bin_edges[1:]) / 2.0

    @property
    def total(self):
        return int(self.counts.sum())

    def to_dataframe(self) -> pl.DataFrame:
        """Convert to Polars DataFrame."""
        return pl.DataFrame(
            {
                "bin_start": self.bin_edges[:-1],
                "bin_end": self.bin_edges[1:],
                "bin_center": self.bin_centers,
                "count": self.counts,
            }
        )


def _chunk_counts(samples, start, stop, low, high, bin_count):
    seg = samples[start:stop]
    idx = np.floor((seg - low) / (high - low) * bin_count).astype(np.int64)
    # The sample equal to ``high`` lands one past the last bin.
    np.clip(idx, 0, bin_count - 1, out=idx)
    return np.bincount(idx, minlength=bin_count).astype(np.int64)


def histogram(data, bin_count=DEFAULT_BIN_COUNT, range=None, n_jobs=1):
    """Create an image histogram from an n-dimensional array.

    The bin of a sample ``v`` is ``floor((v - low) / (high - low) * bin_count)``
    clamped to ``[0, bin_count - 1]``. Only finite samples are counted.

    Parameters
    ----------
    data : ArrayView or array_like
        Input samples.
    bin_count : int, default 256
        Number of bins.
    range : tuple of float, optional
        ``(low, high)``. Defaults to the finite minimum and maximum of
        ``data``. With an explicit range, samples outside ``[low, high]``
        are not counted. A degenerate range ``low == high`` is widened by
        0.5 on both sides.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many workers. Per-chunk
        counts are exactly additive.

    Returns
    -------
    Histogram
        Counts and bin edges.

    Raises
    ------
    InvalidBinCountError
        If ``bin_count`` is not a positive integer.
    EmptyInputError
        If ``data`` is empty, or holds no finite sample and ``range`` is
        omitted.
    InvalidParameterError
        If ``range`` is not a finite, ordered pair.
    """
    if isinstance(bin_count, bool) or not isinstance(bin_count, (int, np.integer)) or bin_count <= 0:
        raise InvalidBinCountError(bin_count)
    bin_count = int(bin_count)

    flat = flatten(data)
    if flat.size == 0:
        raise EmptyInputError("data")
    samples = flat[np.isfinite(flat)]

    if range is None:
        if samples.size == 0:
            raise EmptyInputError("data")
        low, high = float(samples.min()), float(samples.max())
    else:
        low, high = (float(v) for v in range)
        if not (np.isfinite(low) and np.isfinite(high)) or low > high:
            raise InvalidParameterError(f"range must be a finite (low, high) pair with low <= high, got {range}.")
        samples = samples[(samples >= low) & (samples <= high)]

    if low == high:
        low, high = low - 0.5, high + 0.5

    chunks = partition_range(samples.size, resolve_n_jobs(n_jobs))
    partial_counts = parallel_map(
        _chunk_counts,
        [(samples, start, stop, low, high, bin_count) for start, stop in chunks],
        n_jobs=n_jobs,
    )
    counts = np.zeros(bin_count, dtype=np.int64)
    for c in partial_counts:
        counts += c

    return Histogram(counts=counts, bin_edges=np.linspace(low, high, bin_count + 1))


def histogram_bin_midpoint(index, low, high, bin_count):
    """Compute the midpoint value of histogram bin ``index``.

    Parameters
    ----------
    index : int
        The histogram bin index.
    low, high : float
        Value range the histogram was built over.
    bin_count : int
        Number of bins in the histogram.

    Returns
    -------
    float
        Centre of the bin's value range.
    """
    if bin_count <= 0:
        raise InvalidBinCountError(bin_count)
    width = (high - low) / bin_count
    return low + (index + 0.5) * width


def histogram_bin_range(index, low, high, bin_count):
    """Compute the ``(start, end)`` value range of histogram bin ``index``."""
    if bin_count <= 0:
        raise InvalidBinCountError(bin_count)
    width = (high - low) / bin_count
    start = low + index * width
    return start, start + width
