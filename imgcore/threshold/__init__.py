"""Global image thresholding."""

from .manual import manual_mask
from .otsu import otsu_mask, otsu_value

__all__ = [
    "manual_mask",
    "otsu_mask",
    "otsu_value",
]
