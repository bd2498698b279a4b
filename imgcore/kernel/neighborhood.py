"""Neighbourhood kernels on the integer lattice."""

import numpy as np

from imgcore.core.errors import InvalidParameterError, InvalidRadiusError

__all__ = [
    "ball",
    "circle",
    "neighborhood_offsets",
    "sphere",
    "weighted_circle",
    "weighted_sphere",
]


def _check_radius(radius):
    if isinstance(radius, bool) or not isinstance(radius, (int, np.integer)) or radius <= 0:
        raise InvalidRadiusError(radius)
    return int(radius)


def _check_ndim(ndim):
    if isinstance(ndim, bool) or not isinstance(ndim, (int, np.integer)) or ndim < 1:
        raise InvalidParameterError(f"ndim must be a positive integer, got {ndim!r}.")
    return int(ndim)


def _distance_grid(radius, ndim):
    """Euclidean distance of every point of the ``(2r+1,)*ndim`` cube to its centre."""
    coords = np.arange(-radius, radius + 1, dtype=np.float64)
    grids = np.meshgrid(*([coords] * ndim), indexing="ij")
    return np.sqrt(sum(g * g for g in grids))


def ball(radius, ndim=3):
    """Create a boolean N-dimensional ball kernel.

    Parameters
    ----------
    radius : int
        Ball radius in pixels, greater than 0.
    ndim : int, default 3
        Number of dimensions.

    Returns
    -------
    ndarray of bool
        Cube with side ``2 * radius + 1``; ``True`` on points whose
        Euclidean distance to the centre is at most ``radius``.
    """
    radius = _check_radius(radius)
    ndim = _check_ndim(ndim)
    return _distance_grid(radius, ndim) <= radius


def circle(radius):
    """Create a 2-dimensional square kernel holding a filled circle."""
    return ball(radius, ndim=2)


def sphere(radius):
    """Create a 3-dimensional cube kernel holding a filled sphere."""
    return ball(radius, ndim=3)


def weighted_sphere(radius, falloff, weight_fn=None, ndim=3, initial_value=1.0):
    """Create a kernel with weights decaying away from its centre.

    Points farther than ``radius`` from the centre get weight 0. Points
    inside get ``initial_value * exp(-d / falloff)``, or
    ``weight_fn(d, falloff)`` when a custom weight function is given.

    Parameters
    ----------
    radius : int
        Neighbourhood radius, greater than 0.
    falloff : float
        Decay scale. Larger values give a slower falloff and a broader
        neighbourhood.
    weight_fn : callable, optional
        ``weight_fn(distances, falloff) -> weights``, applied to the array
        of distances of every in-radius point.
    ndim : int, default 3
        Number of kernel dimensions.
    initial_value : float, default 1.0
        Weight at the kernel centre for the default exponential decay.

    Returns
    -------
    ndarray of float64
        Kernel of shape ``(2 * radius + 1,) * ndim``.

    Raises
    ------
    InvalidRadiusError
        If ``radius`` is not a positive integer.
    InvalidParameterError
        If ``falloff`` is not positive.
    """
    radius = _check_radius(radius)
    ndim = _check_ndim(ndim)
    if not falloff > 0:
        raise InvalidParameterError(f"falloff must be positive, got {falloff}.")

    d = _distance_grid(radius, ndim)
    inside = d <= radius
    kernel = np.zeros_like(d)
    if weight_fn is None:
        kernel[inside] = initial_value * np.exp(-d[inside] / falloff)
    else:
        kernel[inside] = np.asarray(weight_fn(d[inside], falloff), dtype=np.float64)
    return kernel


def weighted_circle(radius, falloff, weight_fn=None, initial_value=1.0):
    """Create a 2-dimensional weighted circle kernel.

    See :func:`weighted_sphere` for the parameters.
    """
    return weighted_sphere(radius, falloff, weight_fn=weight_fn, ndim=2, initial_value=initial_value)


def neighborhood_offsets(radius, ndim):
    """List the lattice offsets inside a ball and their distances.

    Parameters
    ----------
    radius : int
        Ball radius, greater than 0.
    ndim : int
        Number of dimensions.

    Returns
    -------
    offsets : ndarray of int64, shape (k, ndim)
        Offsets relative to the centre, in row-major order of the
        enclosing cube. The zero offset is included.
    distances : ndarray of float64, shape (k,)
        Euclidean length of each offset.
    """
    radius = _check_radius(radius)
    ndim = _check_ndim(ndim)
    d = _distance_grid(radius, ndim)
    inside = d <= radius
    offsets = np.argwhere(inside).astype(np.int64) - radius
    return offsets, d[inside]
