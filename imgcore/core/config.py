"""Defaults and configuration classes."""

import math
from dataclasses import asdict, dataclass
from typing import Any

from .errors import InvalidParameterError

__all__ = [
    "DEFAULT_ALPHA",
    "DEFAULT_BIN_COUNT",
    "DEFAULT_SIMILARITY_SCALE",
    "SUM_BLOCK_SIZE",
    "SacaConfig",
]

DEFAULT_BIN_COUNT = 256
DEFAULT_ALPHA = 0.05

# Fixed block length for the reproducible summation order; never derived
# from the worker count.
SUM_BLOCK_SIZE = 8192

# 0.99 quantile of the chi-square distribution with one degree of freedom.
DEFAULT_SIMILARITY_SCALE = 6.634896601021214


@dataclass(frozen=True)
class SacaConfig:
    """Parameters of the adaptive neighbourhood growth in SACA.

    Attributes
    ----------
    initial_size : float, default 1.0
        Neighbourhood size at the first iteration. The radius used at
        iteration ``s`` is ``floor(initial_size * growth**s)``.
    growth : float, default 1.15
        Multiplicative size growth per iteration.
    max_iterations : int, default 15
        Hard bound on the number of adaptive iterations.
    lower_bound_iteration : int, default 8
        Iteration whose estimates become the reference for the drift test.
    max_radius : int, default 7
        Largest neighbourhood radius a pixel can reach.
    falloff_scale : float, default sqrt(2)
        Spatial kernel falloff as a multiple of the current radius.
    similarity_scale : float
        Scale of the propagation-separation similarity penalty on the
        squared z-distance between neighbouring estimates.
    variance_multiple : float or None, default 4.0
        A neighbourhood stops growing once its local weighted variance in
        either channel exceeds this multiple of the channel's global
        variance. ``None`` disables the test.
    stop_bound : float or None, default None
        Largest z-scale drift from the reference estimate tolerated before
        a pixel freezes. ``None`` selects ``sqrt(2 * ln(n_pixels))``.
    """

    initial_size: float = 1.0
    growth: float = 1.15
    max_iterations: int = 15
    lower_bound_iteration: int = 8
    max_radius: int = 7
    falloff_scale: float = math.sqrt(2.0)
    similarity_scale: float = DEFAULT_SIMILARITY_SCALE
    variance_multiple: float | None = 4.0
    stop_bound: float | None = None

    def __post_init__(self):
        if self.initial_size < 1.0:
            raise InvalidParameterError(f"initial_size must be >= 1.0, got {self.initial_size}.")
        if self.growth < 1.0:
            raise InvalidParameterError(f"growth must be >= 1.0, got {self.growth}.")
        if self.max_iterations < 1:
            raise InvalidParameterError(f"max_iterations must be >= 1, got {self.max_iterations}.")
        if not 0 <= self.lower_bound_iteration < self.max_iterations:
            raise InvalidParameterError(
                f"lower_bound_iteration must be in [0, {self.max_iterations}), got {self.lower_bound_iteration}."
            )
        if self.max_radius < 1:
            raise InvalidParameterError(f"max_radius must be >= 1, got {self.max_radius}.")
        if self.falloff_scale <= 0:
            raise InvalidParameterError(f"falloff_scale must be positive, got {self.falloff_scale}.")
        if self.similarity_scale <= 0:
            raise InvalidParameterError(f"similarity_scale must be positive, got {self.similarity_scale}.")
        if self.variance_multiple is not None and self.variance_multiple <= 0:
            raise InvalidParameterError(f"variance_multiple must be positive, got {self.variance_multiple}.")
        if self.stop_bound is not None and self.stop_bound <= 0:
            raise InvalidParameterError(f"stop_bound must be positive, got {self.stop_bound}.")

    def radius_at(self, iteration):
        """Return the neighbourhood radius used at ``iteration``."""
        size = self.initial_size * self.growth**iteration
        return min(int(math.floor(size)), self.max_radius)

    def resolve_stop_bound(self, n_pixels):
        """Return the drift bound for an image with ``n_pixels`` pixels."""
        if self.stop_bound is not None:
            return float(self.stop_bound)
        return math.sqrt(2.0 * math.log(max(n_pixels, 2)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)
