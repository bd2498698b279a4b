"""Per-region Pearson colocalization."""

import numpy as np

from imgcore.core.errors import InvalidShapeError, OutOfBoundsError, ShapeMismatchError
from imgcore.core.parallel import parallel_map
from imgcore.core.view import as_array
from imgcore.statistics.correlation import pearson_correlation

__all__ = ["pearson_roi_coloc"]


def _roi_pearson(a, b, coords):
    index = tuple(coords.T)
    return pearson_correlation(a[index], b[index])


def pearson_roi_coloc(data_a, data_b, rois, n_jobs=1):
    """Compute the Pearson correlation of two channels inside each ROI.

    Parameters
    ----------
    data_a, data_b : ArrayView or array_like
        Co-registered channel images of identical shape.
    rois : dict
        Maps an ROI label to an integer array of shape ``(n_points, ndim)``
        holding the pixel coordinates of that region.
    n_jobs : int, default 1
        1 = sequential, -1 = all cores, >1 = that many workers. ROIs are
        evaluated independently.

    Returns
    -------
    dict
        ROI label to Pearson coefficient, in the iteration order of
        ``rois``. A region where either channel is constant maps to NaN.

    Raises
    ------
    ShapeMismatchError
        If the channels differ in shape.
    InvalidShapeError
        If an ROI coordinate array does not have ``ndim`` columns.
    OutOfBoundsError
        If an ROI coordinate lies outside the image.
    """
    a = as_array(data_a)
    b = as_array(data_b)
    if a.shape != b.shape:
        raise ShapeMismatchError("data_a", a.shape, "data_b", b.shape)

    labels = list(rois)
    args_list = []
    for label in labels:
        coords = np.asarray(rois[label], dtype=np.int64)
        if coords.ndim != 2 or coords.shape[0] == 0 or coords.shape[1] != a.ndim:
            raise InvalidShapeError(f"ROI {label!r} must be a non-empty (n_points, {a.ndim}) coordinate array.")
        if np.any(coords < 0) or np.any(coords >= np.asarray(a.shape)):
            raise OutOfBoundsError(f"ROI {label!r} has coordinates outside the image shape {a.shape}.")
        args_list.append((a, b, coords))

    values = parallel_map(_roi_pearson, args_list, n_jobs=n_jobs)
    return dict(zip(labels, values, strict=True))
