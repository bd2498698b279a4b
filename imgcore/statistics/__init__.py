# pylint: disable=redefined-builtin
"""Pixel statistics: reductions, histograms, percentiles and correlation."""

from . import format as _format  # noqa: F401
from .correlation import effective_sample_size, pearson_correlation, weighted_kendall_tau_b
from .histogram import Histogram, histogram, histogram_bin_midpoint, histogram_bin_range
from .numba import HAS_NUMBA
from .percentile import linear_percentile
from .reductions import kahan_sum, max, min, min_max, sum
from .sort import weighted_merge_sort

__all__ = [
    "HAS_NUMBA",
    "Histogram",
    "effective_sample_size",
    "histogram",
    "histogram_bin_midpoint",
    "histogram_bin_range",
    "kahan_sum",
    "linear_percentile",
    "max",
    "min",
    "min_max",
    "pearson_correlation",
    "sum",
    "weighted_kendall_tau_b",
    "weighted_merge_sort",
]
