"""Whole-image utilities."""

from .normalize import percentile_normalize

__all__ = ["percentile_normalize"]
