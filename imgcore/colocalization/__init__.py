"""Colocalization analysis of two-channel images."""

from . import format as _format  # noqa: F401
from .roi import pearson_roi_coloc
from .saca import saca, saca_2d, saca_3d, saca_significance_mask
from .saca_obj import SacaResult, saca_result

__all__ = [
    "SacaResult",
    "pearson_roi_coloc",
    "saca",
    "saca_2d",
    "saca_3d",
    "saca_result",
    "saca_significance_mask",
]
