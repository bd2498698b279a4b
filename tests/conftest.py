"""Shared test fixtures for imgcore."""

import numpy as np
import pytest


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def gradient_3d():
    from imgcore.simulation import linear_gradient_3d

    return linear_gradient_3d(5, 20.0, (50, 50, 50))


@pytest.fixture
def gradient_2d():
    from imgcore.simulation import linear_gradient_2d

    return linear_gradient_2d(5, 20.0, (20, 20))
