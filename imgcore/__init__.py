"""Numeric image-algorithm core: statistics, thresholds, kernels, simulation and colocalization."""

from imgcore import colocalization, core, image, kernel, simulation, statistics, threshold
from imgcore.colocalization import (
    SacaResult,
    pearson_roi_coloc,
    saca,
    saca_2d,
    saca_3d,
    saca_significance_mask,
)
from imgcore.core import (
    ArrayView,
    EmptyInputError,
    ImgcoreError,
    InvalidBinCountError,
    InvalidParameterError,
    InvalidRadiusError,
    InvalidShapeError,
    InvalidThresholdError,
    MutableArrayView,
    OutOfBoundsError,
    SacaConfig,
    ShapeMismatchError,
    as_array,
)
from imgcore.image import percentile_normalize
from imgcore.kernel import ball, circle, neighborhood_offsets, sphere, weighted_circle, weighted_sphere
from imgcore.simulation import (
    flat_index_gradient,
    gaussian_exponential_decay_1d,
    gaussian_metaballs,
    ideal_exponential_decay_1d,
    irf_exponential_decay_1d,
    linear_gradient_2d,
    linear_gradient_3d,
    linear_gradient_nd,
    logistic_metaballs,
)
from imgcore.statistics import (
    Histogram,
    effective_sample_size,
    histogram,
    histogram_bin_midpoint,
    histogram_bin_range,
    kahan_sum,
    linear_percentile,
    min_max,
    pearson_correlation,
    weighted_kendall_tau_b,
    weighted_merge_sort,
)
from imgcore.threshold import manual_mask, otsu_mask, otsu_value

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Subpackages
    "colocalization",
    "core",
    "image",
    "kernel",
    "simulation",
    "statistics",
    "threshold",
    # Array views
    "ArrayView",
    "MutableArrayView",
    "as_array",
    # Configuration
    "SacaConfig",
    # Errors
    "EmptyInputError",
    "ImgcoreError",
    "InvalidBinCountError",
    "InvalidParameterError",
    "InvalidRadiusError",
    "InvalidShapeError",
    "InvalidThresholdError",
    "OutOfBoundsError",
    "ShapeMismatchError",
    # Statistics
    "Histogram",
    "effective_sample_size",
    "histogram",
    "histogram_bin_midpoint",
    "histogram_bin_range",
    "kahan_sum",
    "linear_percentile",
    "min_max",
    "pearson_correlation",
    "weighted_kendall_tau_b",
    "weighted_merge_sort",
    # Thresholds
    "manual_mask",
    "otsu_mask",
    "otsu_value",
    # Kernels
    "ball",
    "circle",
    "neighborhood_offsets",
    "sphere",
    "weighted_circle",
    "weighted_sphere",
    # Simulation
    "flat_index_gradient",
    "gaussian_exponential_decay_1d",
    "gaussian_metaballs",
    "ideal_exponential_decay_1d",
    "irf_exponential_decay_1d",
    "linear_gradient_2d",
    "linear_gradient_3d",
    "linear_gradient_nd",
    "logistic_metaballs",
    # Image utilities
    "percentile_normalize",
    # Colocalization
    "SacaResult",
    "pearson_roi_coloc",
    "saca",
    "saca_2d",
    "saca_3d",
    "saca_significance_mask",
]
