"""Spatial kernel synthesis."""

from .neighborhood import ball, circle, neighborhood_offsets, sphere, weighted_circle, weighted_sphere

__all__ = [
    "ball",
    "circle",
    "neighborhood_offsets",
    "sphere",
    "weighted_circle",
    "weighted_sphere",
]
