"""Array views, errors, configuration and parallel helpers."""

from .config import DEFAULT_ALPHA, DEFAULT_BIN_COUNT, SUM_BLOCK_SIZE, SacaConfig
from .errors import (
    EmptyInputError,
    ImgcoreError,
    InvalidBinCountError,
    InvalidParameterError,
    InvalidRadiusError,
    InvalidShapeError,
    InvalidThresholdError,
    OutOfBoundsError,
    ShapeMismatchError,
)
from .parallel import parallel_map, partition_range
from .view import ArrayView, MutableArrayView, as_array

__all__ = [
    "ArrayView",
    "MutableArrayView",
    "as_array",
    "parallel_map",
    "partition_range",
    "SacaConfig",
    "DEFAULT_ALPHA",
    "DEFAULT_BIN_COUNT",
    "SUM_BLOCK_SIZE",
    "ImgcoreError",
    "EmptyInputError",
    "InvalidBinCountError",
    "InvalidParameterError",
    "InvalidRadiusError",
    "InvalidShapeError",
    "InvalidThresholdError",
    "OutOfBoundsError",
    "ShapeMismatchError",
]
