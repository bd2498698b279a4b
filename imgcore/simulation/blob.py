"""Synthetic blob (metaball) images."""

import numpy as np

from imgcore.core.errors import InvalidShapeError, ShapeMismatchError
from imgcore.core.view import validate_shape

__all__ = ["gaussian_metaballs", "logistic_metaballs"]

_MIN_FALLOFF = 1e-12


def _blob_params(centers, radii, intensities, falloffs, shape):
    shape = validate_shape(shape, allow_empty=False)
    centers = np.atleast_2d(np.asarray(centers, dtype=np.float64))
    n_blobs = centers.shape[0]
    params = []
    for name, values in (("radii", radii), ("intensities", intensities), ("falloffs", falloffs)):
        values = np.atleast_1d(np.asarray(values, dtype=np.float64))
        if values.shape[0] != n_blobs:
            raise ShapeMismatchError("centers", (n_blobs,), name, values.shape)
        params.append(values)
    if centers.shape[1] != len(shape):
        raise InvalidShapeError(
            f"centers have {centers.shape[1]} coordinates but the output shape {shape} has {len(shape)} dimensions."
        )
    return shape, centers, *params


def _squared_distance(grid, center):
    dist_sq = np.zeros(grid.shape[1:], dtype=np.float64)
    for axis, c in enumerate(center):
        diff = grid[axis] - c
        dist_sq += diff * diff
    return dist_sq


def gaussian_metaballs(centers, radii, intensities, falloffs, background, shape):
    """Create an image of additive Gaussian blobs.

    Every sample holds ``background`` plus, for each blob,
    ``intensity * exp(-dist**2 / (falloff * radius**2))``. Overlapping
    blobs merge smoothly.

    Parameters
    ----------
    centers : array_like, shape (n_blobs, ndim)
        Blob centre coordinates.
    radii, intensities, falloffs : array_like, shape (n_blobs,)
        Per-blob radius, peak intensity and falloff factor.
    background : float
        Constant background value.
    shape : sequence of int
        Output image shape.

    Returns
    -------
    ndarray of float64
        Newly allocated image.

    Raises
    ------
    ShapeMismatchError
        If the per-blob arrays differ in length from ``centers``.
    InvalidShapeError
        If ``shape`` is invalid or does not match the centre dimensionality.
    """
    shape, centers, radii, intensities, falloffs = _blob_params(centers, radii, intensities, falloffs, shape)
    grid = np.indices(shape, dtype=np.float64)
    out = np.full(shape, float(background), dtype=np.float64)
    for center, radius, intensity, falloff in zip(centers, radii, intensities, falloffs, strict=True):
        out += intensity * np.exp(-_squared_distance(grid, center) / (falloff * radius * radius))
    return out


def logistic_metaballs(centers, radii, intensities, falloffs, background, shape):
    """Create an image of flat-topped logistic blobs.

    Each blob contributes ``intensity / (1 + exp((dist - radius) / falloff))``,
    a plateau that drops off around ``radius`` with an edge width set by
    ``falloff``. A sample holds the largest contribution, never less than
    ``background``.

    Parameters
    ----------
    centers : array_like, shape (n_blobs, ndim)
        Blob centre coordinates.
    radii, intensities, falloffs : array_like, shape (n_blobs,)
        Per-blob radius, peak intensity and edge width.
    background : float
        Constant background value.
    shape : sequence of int
        Output image shape.

    Returns
    -------
    ndarray of float64
        Newly allocated image.
    """
    shape, centers, radii, intensities, falloffs = _blob_params(centers, radii, intensities, falloffs, shape)
    grid = np.indices(shape, dtype=np.float64)
    out = np.full(shape, float(background), dtype=np.float64)
    for center, radius, intensity, falloff in zip(centers, radii, intensities, falloffs, strict=True):
        dist = np.sqrt(_squared_distance(grid, center))
        k = max(falloff, _MIN_FALLOFF)
        with np.errstate(over="ignore"):
            soft = 1.0 / (1.0 + np.exp((dist - radius) / k))
        np.maximum(out, intensity * soft, out=out)
    return out
