"""Synthetic image and decay-curve generators."""

from .blob import gaussian_metaballs, logistic_metaballs
from .decay import (
    gaussian_exponential_decay_1d,
    gaussian_exponential_decay_3d,
    ideal_exponential_decay_1d,
    ideal_exponential_decay_3d,
    irf_exponential_decay_1d,
    irf_exponential_decay_3d,
)
from .gradient import flat_index_gradient, linear_gradient_2d, linear_gradient_3d, linear_gradient_nd
from .instrument import gaussian_irf_1d, normalized_gaussian

__all__ = [
    "flat_index_gradient",
    "gaussian_exponential_decay_1d",
    "gaussian_exponential_decay_3d",
    "gaussian_irf_1d",
    "gaussian_metaballs",
    "ideal_exponential_decay_1d",
    "ideal_exponential_decay_3d",
    "irf_exponential_decay_1d",
    "irf_exponential_decay_3d",
    "linear_gradient_2d",
    "linear_gradient_3d",
    "linear_gradient_nd",
    "logistic_metaballs",
    "normalized_gaussian",
]
