"""Spatially adaptive colocalization result object."""

from typing import NamedTuple

import numpy as np
import polars as pl


class SacaResult(NamedTuple):
    """Container for a spatially adaptive colocalization analysis.

    Attributes
    ----------
    zscore_map : ndarray of float64
        Per-pixel colocalization z-score, same shape as the input channels.
        Positive values indicate colocalization, negative values
        anti-colocalization.
    significance_mask : ndarray of bool
        ``abs(zscore_map) > z_critical``.
    z_critical : float
        Two-sided Bonferroni-corrected critical value.
    alpha : float
        Family-wise significance level.
    radius_map : ndarray of int64
        Last neighbourhood radius accepted for each pixel.
    iterations : int
        Number of adaptive iterations executed.
    config : dict or None
        Adaptive-growth parameters used for the run.
    """

    zscore_map: np.ndarray
    significance_mask: np.ndarray
    z_critical: float
    alpha: float
    radius_map: np.ndarray
    iterations: int
    config: dict | None = None

    @property
    def n_significant(self):
        return int(np.count_nonzero(self.significance_mask))

    def to_dataframe(self) -> pl.DataFrame:
        """Convert to a per-pixel Polars DataFrame.

        One row per pixel in row-major order, with one integer index
        column per axis (``axis_0``, ``axis_1``, ...).
        """
        shape = self.zscore_map.shape
        index = np.indices(shape).reshape(len(shape), -1)
        columns = {f"axis_{d}": index[d] for d in range(len(shape))}
        columns["zscore"] = self.zscore_map.reshape(-1)
        columns["significant"] = self.significance_mask.reshape(-1)
        columns["radius"] = self.radius_map.reshape(-1)
        return pl.DataFrame(columns)


def saca_result(zscore_map, significance_mask, z_critical, alpha, radius_map, iterations, config=None):
    """Create a SACA result object.

    Parameters
    ----------
    zscore_map : ndarray
        Per-pixel z-scores.
    significance_mask : ndarray of bool
        Pixels whose z-score exceeds the critical value in magnitude.
    z_critical : float
        Bonferroni-corrected critical value.
    alpha : float
        Family-wise significance level.
    radius_map : ndarray
        Final accepted radius of each pixel.
    iterations : int
        Number of adaptive iterations executed.
    config : dict, optional
        Adaptive-growth parameters used for the run.

    Returns
    -------
    SacaResult
        NamedTuple containing the analysis results.
    """
    return SacaResult(
        zscore_map=zscore_map,
        significance_mask=significance_mask,
        z_critical=float(z_critical),
        alpha=float(alpha),
        radius_map=radius_map,
        iterations=int(iterations),
        config=config if config is not None else {},
    )
