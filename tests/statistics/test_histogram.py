"""Tests for fixed-width histograms."""

import numpy as np
import polars as pl
import pytest

from imgcore.core.errors import EmptyInputError, InvalidBinCountError, InvalidParameterError
from imgcore.statistics import Histogram, histogram, histogram_bin_midpoint, histogram_bin_range


class TestHistogram:
    def test_counts_every_finite_sample(self, rng):
        data = rng.standard_normal((30, 40))
        hist = histogram(data, bin_count=64)
        assert isinstance(hist, Histogram)
        assert hist.total == data.size
        assert hist.bin_count == 64
        assert hist.bin_edges.shape == (65,)
        assert np.all(np.diff(hist.bin_edges) > 0)

    def test_default_bin_count(self, rng):
        assert histogram(rng.random(100)).bin_count == 256

    def test_matches_numpy(self, rng):
        data = rng.integers(0, 50, size=2000).astype(np.float64)
        hist = histogram(data, bin_count=10)
        expected, edges = np.histogram(data, bins=10)
        np.testing.assert_array_equal(hist.counts, expected)
        np.testing.assert_allclose(hist.bin_edges, edges)

    def test_maximum_lands_in_last_bin(self):
        hist = histogram([0.0, 1.0, 2.0, 3.0, 4.0], bin_count=4)
        np.testing.assert_array_equal(hist.counts, [1, 1, 1, 2])

    def test_non_finite_samples_ignored(self):
        hist = histogram([0.0, np.nan, 1.0, np.inf, -np.inf, 2.0], bin_count=2)
        assert hist.total == 3
        assert hist.bin_edges[0] == 0.0
        assert hist.bin_edges[-1] == 2.0

    def test_explicit_range_excludes_outside(self):
        hist = histogram([-5.0, 0.0, 0.5, 1.0, 10.0], bin_count=2, range=(0.0, 1.0))
        np.testing.assert_array_equal(hist.counts, [1, 2])

    def test_degenerate_range_widened(self):
        hist = histogram(np.full(10, 3.0), bin_count=4)
        assert hist.bin_edges[0] == 2.5
        assert hist.bin_edges[-1] == 3.5
        assert hist.total == 10

    @pytest.mark.parametrize("n_jobs", [2, 4, -1])
    def test_parallel_matches_sequential(self, rng, n_jobs):
        data = rng.gamma(2.0, size=(50, 60))
        seq = histogram(data, bin_count=128)
        par = histogram(data, bin_count=128, n_jobs=n_jobs)
        np.testing.assert_array_equal(par.counts, seq.counts)
        np.testing.assert_array_equal(par.bin_edges, seq.bin_edges)

    @pytest.mark.parametrize("bin_count", [0, -3, 2.5, True])
    def test_invalid_bin_count(self, bin_count):
        with pytest.raises(InvalidBinCountError):
            histogram([1.0, 2.0], bin_count=bin_count)

    def test_empty_raises(self):
        with pytest.raises(EmptyInputError):
            histogram([])

    def test_all_nan_raises(self):
        with pytest.raises(EmptyInputError):
            histogram([np.nan, np.nan])

    @pytest.mark.parametrize("bad_range", [(1.0, 0.0), (0.0, np.inf), (np.nan, 1.0)])
    def test_invalid_range(self, bad_range):
        with pytest.raises(InvalidParameterError):
            histogram([0.5], range=bad_range)


class TestHistogramProperties:
    def test_centers_and_width(self):
        hist = histogram([0.0, 10.0], bin_count=5)
        assert hist.bin_width == pytest.approx(2.0)
        np.testing.assert_allclose(hist.bin_centers, [1.0, 3.0, 5.0, 7.0, 9.0])

    def test_to_dataframe(self):
        hist = histogram([0.0, 1.0, 1.0, 2.0], bin_count=2)
        df = hist.to_dataframe()
        assert isinstance(df, pl.DataFrame)
        assert df.columns == ["bin_start", "bin_end", "bin_center", "count"]
        assert df.height == 2
        assert df["count"].sum() == 4

    def test_repr(self):
        text = repr(histogram([0.0, 1.0, 1.0, 2.0], bin_count=4))
        assert "Histogram" in text
        assert "Bins: 4" in text
        assert "Samples: 4" in text


def test_bin_midpoint():
    assert histogram_bin_midpoint(0, 0.0, 10.0, 5) == pytest.approx(1.0)
    assert histogram_bin_midpoint(4, 0.0, 10.0, 5) == pytest.approx(9.0)


def test_bin_range():
    start, end = histogram_bin_range(2, 0.0, 10.0, 5)
    assert start == pytest.approx(4.0)
    assert end == pytest.approx(6.0)


def test_bin_helpers_reject_zero_bins():
    with pytest.raises(InvalidBinCountError):
        histogram_bin_midpoint(0, 0.0, 1.0, 0)
    with pytest.raises(InvalidBinCountError):
        histogram_bin_range(0, 0.0, 1.0, 0)
