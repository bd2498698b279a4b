"""Tests for neighbourhood kernels."""

import numpy as np
import pytest

from imgcore.core.errors import InvalidParameterError, InvalidRadiusError
from imgcore.kernel import ball, circle, neighborhood_offsets, sphere, weighted_circle, weighted_sphere


class TestBooleanKernels:
    def test_circle(self):
        k = circle(2)
        assert k.shape == (5, 5)
        assert k.dtype == np.bool_
        assert k[2, 2]
        assert k[0, 2] and k[2, 4]
        assert not k[0, 0]

    def test_sphere(self):
        k = sphere(3)
        assert k.shape == (7, 7, 7)
        assert k[3, 3, 0]
        assert not k[0, 0, 0]

    def test_ball_4d_is_symmetric(self):
        k = ball(2, ndim=4)
        assert k.shape == (5, 5, 5, 5)
        np.testing.assert_array_equal(k, k[::-1, ::-1, ::-1, ::-1])

    @pytest.mark.parametrize("radius", [0, -1, 1.5])
    def test_invalid_radius(self, radius):
        with pytest.raises(InvalidRadiusError):
            circle(radius)

    def test_invalid_ndim(self):
        with pytest.raises(InvalidParameterError):
            ball(2, ndim=0)


class TestWeightedKernels:
    @pytest.mark.parametrize("radius", [1, 3, 5])
    def test_weighted_sphere_properties(self, radius):
        k = weighted_sphere(radius, 2.0)
        assert k.shape == (2 * radius + 1,) * 3
        assert k[radius, radius, radius] == k.max() == 1.0
        np.testing.assert_array_equal(k > 0, sphere(radius))

    def test_decays_with_distance(self):
        k = weighted_circle(4, 2.0)
        row = k[4, 4:]
        assert np.all(np.diff(row) < 0)
        assert row[2] == pytest.approx(np.exp(-1.0))

    def test_zero_beyond_radius(self):
        k = weighted_circle(3, 10.0)
        assert k[0, 0] == 0.0

    def test_initial_value_scales(self):
        np.testing.assert_allclose(weighted_circle(3, 2.0, initial_value=5.0), 5.0 * weighted_circle(3, 2.0))

    def test_custom_weight_function(self):
        k = weighted_circle(2, 1.0, weight_fn=lambda d, f: 1.0 / (1.0 + d / f))
        assert k[2, 2] == 1.0
        assert k[2, 4] == pytest.approx(1.0 / 3.0)

    @pytest.mark.parametrize("falloff", [0.0, -1.0])
    def test_invalid_falloff(self, falloff):
        with pytest.raises(InvalidParameterError):
            weighted_sphere(2, falloff)

    def test_invalid_radius(self):
        with pytest.raises(InvalidRadiusError):
            weighted_sphere(0, 1.0)


class TestNeighborhoodOffsets:
    def test_matches_ball(self):
        offsets, distances = neighborhood_offsets(2, 2)
        assert offsets.shape == (int(circle(2).sum()), 2)
        assert distances.shape == (offsets.shape[0],)
        np.testing.assert_allclose(distances, np.sqrt((offsets**2).sum(axis=1)))
        assert np.all(distances <= 2)

    def test_contains_origin(self):
        offsets, distances = neighborhood_offsets(1, 3)
        assert len(offsets) == 7
        assert [0, 0, 0] in offsets.tolist()
        assert distances.min() == 0.0
