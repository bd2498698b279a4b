"""Tests for spatially adaptive colocalization analysis."""

import logging

import numpy as np
import polars as pl
import pytest
from scipy import stats

from imgcore.colocalization import SacaResult, saca, saca_2d, saca_3d, saca_significance_mask
from imgcore.colocalization.saca_obj import saca_result
from imgcore.core.config import SacaConfig
from imgcore.core.errors import (
    EmptyInputError,
    InvalidParameterError,
    InvalidShapeError,
    InvalidThresholdError,
    ShapeMismatchError,
)
from imgcore.core.view import ArrayView

SHAPE = (16, 16)


@pytest.fixture
def correlated(rng):
    a = rng.standard_normal(SHAPE)
    b = a + 0.2 * rng.standard_normal(SHAPE)
    return a, b


@pytest.fixture
def independent(rng):
    return rng.standard_normal(SHAPE), rng.standard_normal(SHAPE)


def _run(a, b, **kwargs):
    return saca(a, b, a.min(), b.min(), **kwargs)


class TestSacaSignal:
    def test_correlated_channels_are_significant(self, correlated):
        result = _run(*correlated)
        assert isinstance(result, SacaResult)
        assert result.zscore_map.shape == SHAPE
        assert result.zscore_map.mean() > 3.0
        assert result.significance_mask.mean() > 0.5

    def test_anti_correlated_channels_are_negative(self, rng):
        a = rng.standard_normal(SHAPE)
        b = -a + 0.2 * rng.standard_normal(SHAPE)
        result = _run(a, b)
        assert result.zscore_map.mean() < -3.0

    @pytest.mark.parametrize("seed", [0, 1, 2, 3])
    def test_independent_channels_are_calibrated(self, seed):
        a, b = np.random.default_rng(seed).standard_normal((2, 32, 32))
        result = _run(a, b)
        assert result.n_significant <= 1
        assert result.zscore_map.std() < 1.3

    def test_correlated_exceeds_independent(self, correlated, independent):
        z_corr = _run(*correlated).zscore_map
        z_ind = _run(*independent).zscore_map
        assert np.abs(z_corr).mean() > np.abs(z_ind).mean()


class TestSacaResultInvariants:
    def test_mask_matches_critical_value(self, correlated):
        result = _run(*correlated)
        np.testing.assert_array_equal(result.significance_mask, np.abs(result.zscore_map) > result.z_critical)

    def test_bonferroni_critical_value(self, correlated):
        result = _run(*correlated, alpha=0.01)
        n = np.prod(SHAPE)
        assert result.alpha == 0.01
        assert result.z_critical == pytest.approx(stats.norm.ppf(1 - 0.01 / (2 * n)))

    def test_radius_map_and_iterations(self, correlated):
        config = SacaConfig()
        result = _run(*correlated, config=config)
        assert result.radius_map.shape == SHAPE
        assert result.radius_map.min() >= 1
        assert result.radius_map.max() <= config.max_radius
        assert 1 <= result.iterations <= config.max_iterations

    def test_single_iteration(self, correlated):
        result = _run(*correlated, config=SacaConfig(max_iterations=1, lower_bound_iteration=0))
        assert result.iterations == 1
        assert np.all(result.radius_map == 1)
        assert np.all(np.isfinite(result.zscore_map))

    def test_config_recorded(self, correlated):
        result = _run(*correlated, config=SacaConfig(max_radius=3))
        assert result.config["max_radius"] == 3

    def test_variance_test_disabled(self, correlated):
        result = _run(*correlated, config=SacaConfig(variance_multiple=None))
        assert np.all(np.isfinite(result.zscore_map))

    def test_accepts_array_view(self, correlated):
        a, b = correlated
        view_a = ArrayView.from_numpy(a)
        view_b = ArrayView.from_numpy(b)
        result = saca(view_a, view_b, a.min(), b.min())
        np.testing.assert_array_equal(result.zscore_map, _run(a, b).zscore_map)

    def test_gated_background_has_no_support(self):
        a = np.zeros(SHAPE)
        b = np.zeros(SHAPE)
        a[4:12, 4:12] = np.arange(64).reshape(8, 8)
        b[4:12, 4:12] = np.arange(64).reshape(8, 8)
        result = saca(a, b, 1.0, 1.0, config=SacaConfig(max_iterations=1, lower_bound_iteration=0))
        assert result.zscore_map[0, 0] == 0.0
        assert result.zscore_map[8, 8] > 0.0


class TestSacaStability:
    @pytest.fixture
    def step_edge(self, rng):
        a = np.zeros((16, 16))
        a[:, 8:] = 10.0
        a += rng.normal(0.0, 0.1, size=a.shape)
        return a, a.copy()

    @pytest.fixture
    def single_iteration(self):
        return SacaConfig(max_iterations=1, lower_bound_iteration=0)

    def test_variance_criterion_freezes_edge(self, step_edge, single_iteration):
        config = SacaConfig(variance_multiple=0.25, stop_bound=1e6)
        result = _run(*step_edge, config=config)
        np.testing.assert_array_equal(result.radius_map[:, 7:9], 1)
        np.testing.assert_array_equal(result.radius_map[:, 0], config.max_radius)
        first = _run(*step_edge, config=single_iteration)
        np.testing.assert_allclose(result.zscore_map[:, 7:9], first.zscore_map[:, 7:9])

    def test_frozen_edge_zscore(self, step_edge):
        result = _run(*step_edge, config=SacaConfig(variance_multiple=0.25, stop_bound=1e6))
        w = np.array([1.0] + [np.exp(-1.0 / np.sqrt(2.0))] * 4)
        expected = 1.5 * np.sqrt(w.sum() ** 2 / (w**2).sum())
        assert result.zscore_map[8, 7] == pytest.approx(expected)

    def test_edge_grows_without_variance_criterion(self, step_edge):
        config = SacaConfig(variance_multiple=None, stop_bound=1e6)
        result = _run(*step_edge, config=config)
        np.testing.assert_array_equal(result.radius_map, config.max_radius)
        assert np.all(np.isfinite(result.zscore_map))

    def test_default_variance_criterion_stops_at_spot(self, rng, single_iteration):
        a = rng.normal(0.0, 0.1, size=(32, 32))
        a[14:18, 14:18] += 10.0
        b = a.copy()
        result = _run(a, b)
        assert result.radius_map[13, 15] == 1
        assert result.radius_map[2, 2] == SacaConfig().max_radius
        first = _run(a, b, config=single_iteration)
        assert result.zscore_map[13, 15] == pytest.approx(first.zscore_map[13, 15])

    def test_drift_criterion_freezes_pixels(self, independent, single_iteration):
        config = SacaConfig(variance_multiple=None, lower_bound_iteration=2, stop_bound=1e-9)
        result = _run(*independent, config=config)
        np.testing.assert_array_equal(result.radius_map, 1)
        assert result.iterations < config.max_iterations
        first = _run(*independent, config=single_iteration)
        np.testing.assert_allclose(result.zscore_map, first.zscore_map)


class TestSacaParallel:
    @pytest.mark.parametrize("n_jobs", [2, 3, -1])
    def test_parallel_matches_sequential(self, correlated, n_jobs):
        seq = _run(*correlated)
        par = _run(*correlated, n_jobs=n_jobs)
        np.testing.assert_array_equal(par.zscore_map, seq.zscore_map)
        np.testing.assert_array_equal(par.radius_map, seq.radius_map)
        assert par.iterations == seq.iterations


class TestSacaValidation:
    def test_shape_mismatch(self, rng):
        with pytest.raises(ShapeMismatchError):
            saca(rng.random((4, 4)), rng.random((4, 5)), 0.0, 0.0)

    def test_shape_checked_before_thresholds(self, rng):
        with pytest.raises(ShapeMismatchError):
            saca(rng.random((4, 4)), rng.random((4, 5)), 99.0, 99.0)

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            saca(np.zeros((0, 4)), np.zeros((0, 4)), 0.0, 0.0)

    @pytest.mark.parametrize("ta,tb", [(-1.0, 0.5), (0.5, 2.0)])
    def test_threshold_outside_range(self, rng, ta, tb):
        a = rng.random((4, 4))
        b = rng.random((4, 4))
        with pytest.raises(InvalidThresholdError):
            saca(a, b, ta, tb)

    @pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1])
    def test_invalid_alpha(self, correlated, alpha):
        with pytest.raises(InvalidParameterError):
            _run(*correlated, alpha=alpha)


class TestFixedRankWrappers:
    def test_saca_2d(self, correlated):
        a, b = correlated
        z = saca_2d(a, b, a.min(), b.min())
        np.testing.assert_array_equal(z, _run(a, b).zscore_map)

    def test_saca_2d_rejects_3d(self, rng):
        data = rng.random((4, 4, 4))
        with pytest.raises(InvalidShapeError):
            saca_2d(data, data, 0.5, 0.5)

    def test_saca_3d(self, rng):
        a = rng.standard_normal((6, 6, 6))
        b = a + 0.2 * rng.standard_normal((6, 6, 6))
        config = SacaConfig(max_iterations=4, lower_bound_iteration=2, max_radius=2)
        z = saca_3d(a, b, a.min(), b.min(), config=config)
        assert z.shape == (6, 6, 6)
        assert z.mean() > 0.0

    def test_saca_3d_rejects_2d(self, correlated):
        a, b = correlated
        with pytest.raises(InvalidShapeError):
            saca_3d(a, b, a.min(), b.min())


class TestSignificanceMask:
    def test_two_sided_bonferroni(self):
        z = np.array([0.0, 3.0, -3.0, 1.0])
        np.testing.assert_array_equal(saca_significance_mask(z), [False, True, True, False])

    def test_stricter_with_more_pixels(self):
        z = np.full(10_000, 3.0)
        assert not saca_significance_mask(z).any()

    def test_keeps_shape(self, rng):
        z = rng.standard_normal((5, 6))
        assert saca_significance_mask(z).shape == (5, 6)

    @pytest.mark.parametrize("alpha", [0.0, 1.0, 1.5])
    def test_invalid_alpha(self, alpha):
        with pytest.raises(InvalidParameterError):
            saca_significance_mask(np.zeros(4), alpha=alpha)

    def test_empty(self):
        with pytest.raises(EmptyInputError):
            saca_significance_mask([])


class TestSacaResultOutput:
    def test_to_dataframe(self, correlated):
        result = _run(*correlated)
        df = result.to_dataframe()
        assert isinstance(df, pl.DataFrame)
        assert df.height == np.prod(SHAPE)
        assert df.columns == ["axis_0", "axis_1", "zscore", "significant", "radius"]
        assert df["significant"].sum() == result.n_significant

    def test_results_do_not_share_config(self):
        z = np.zeros((2, 2))
        bare = SacaResult(z, z > 0, 3.0, 0.05, np.ones((2, 2), dtype=np.int64), 1)
        assert bare.config is None
        first = saca_result(z, z > 0, 3.0, 0.05, np.ones((2, 2), dtype=np.int64), 1)
        second = saca_result(z, z > 0, 3.0, 0.05, np.ones((2, 2), dtype=np.int64), 1)
        first.config["max_radius"] = 2
        assert second.config == {}

    def test_repr(self, correlated):
        text = repr(_run(*correlated))
        assert "Spatially Adaptive Colocalization Analysis" in text
        assert "Significant pixels" in text

    def test_logs_summary(self, correlated, caplog):
        caplog.set_level(logging.DEBUG, logger="imgcore.colocalization.saca")
        _run(*correlated)
        messages = [r.getMessage() for r in caplog.records]
        assert any(m.startswith("saca iteration 0:") for m in messages)
        assert any(m.startswith("saca:") for m in messages)
