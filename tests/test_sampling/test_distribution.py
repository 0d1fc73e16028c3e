"""Tests for build_distribution and distribution_entropy."""

from __future__ import annotations

import math

import numpy as np
import pytest

from temperature_playground.sampling.distribution import (
    TEMPERATURE_FLOOR,
    build_distribution,
    distribution_entropy,
)


class TestBuildDistribution:
    """Tests for the temperature-scaled softmax."""

    def test_worked_example(self, worked_example_scores: np.ndarray) -> None:
        dist = build_distribution(worked_example_scores, 1.0)
        np.testing.assert_allclose(dist, [0.6590, 0.2424, 0.0986], atol=1e-3)

    @pytest.mark.parametrize("temperature", [0.001, 0.1, 0.7, 1.0, 2.5, 50.0, 1e4])
    def test_sums_to_one(self, random_scores: np.ndarray, temperature: float) -> None:
        dist = build_distribution(random_scores, temperature)
        assert abs(float(np.sum(dist)) - 1.0) < 1e-6
        assert (dist >= 0.0).all()

    def test_output_length_matches_input(self, random_scores: np.ndarray) -> None:
        assert build_distribution(random_scores, 0.8).shape == random_scores.shape

    def test_shift_invariance(self, worked_example_scores: np.ndarray) -> None:
        """Adding a constant to every score must not change the distribution."""
        base = build_distribution(worked_example_scores, 0.7)
        for shift in (-1000.0, -3.5, 42.0, 1e5):
            shifted = build_distribution(worked_example_scores + shift, 0.7)
            np.testing.assert_allclose(shifted, base, atol=1e-9)

    def test_large_scores_do_not_overflow(self) -> None:
        dist = build_distribution(np.array([1000.0, 999.0, 998.0]), 1.0)
        assert np.isfinite(dist).all()
        assert abs(float(np.sum(dist)) - 1.0) < 1e-9

    def test_equal_scores_uniform(self) -> None:
        dist = build_distribution(np.full(5, 3.14), 0.5)
        np.testing.assert_allclose(dist, np.full(5, 0.2))

    def test_high_temperature_flattens(self, worked_example_scores: np.ndarray) -> None:
        dist = build_distribution(worked_example_scores, 50.0)
        assert float(dist.max()) <= float(dist.min()) * 1.05

    def test_low_temperature_sharpens_but_not_one_hot(self) -> None:
        dist = build_distribution(np.array([1.0, 0.9999]), 0.0)
        assert int(np.argmax(dist)) == 0
        assert dist[1] > 0.0

    @pytest.mark.parametrize("temperature", [0.0, -1.0, -100.0])
    def test_non_positive_temperature_is_floored(
        self, worked_example_scores: np.ndarray, temperature: float
    ) -> None:
        dist = build_distribution(worked_example_scores, temperature)
        floored = build_distribution(worked_example_scores, TEMPERATURE_FLOOR)
        np.testing.assert_array_equal(dist, floored)

    def test_custom_floor(self, worked_example_scores: np.ndarray) -> None:
        dist = build_distribution(worked_example_scores, 0.0, floor=1.0)
        np.testing.assert_allclose(dist, build_distribution(worked_example_scores, 1.0))

    def test_accepts_python_lists(self) -> None:
        dist = build_distribution([2.0, 1.0, 0.1], 1.0)
        assert dist.dtype == np.float64
        assert dist.shape == (3,)

    def test_result_is_read_only(self, worked_example_scores: np.ndarray) -> None:
        dist = build_distribution(worked_example_scores, 1.0)
        with pytest.raises(ValueError):
            dist[0] = 1.0

    def test_input_not_modified(self, worked_example_scores: np.ndarray) -> None:
        before = worked_example_scores.copy()
        build_distribution(worked_example_scores, 0.3)
        np.testing.assert_array_equal(worked_example_scores, before)

    def test_negative_infinity_is_masked(self) -> None:
        dist = build_distribution(np.array([1.0, -np.inf, 1.0]), 1.0)
        np.testing.assert_allclose(dist, [0.5, 0.0, 0.5])

    def test_all_masked_is_uniform(self) -> None:
        dist = build_distribution(np.full(4, -np.inf), 1.0)
        np.testing.assert_allclose(dist, np.full(4, 0.25))

    @pytest.mark.parametrize("bad", [np.nan, np.inf])
    def test_nan_and_positive_infinity_rejected(self, bad: float) -> None:
        with pytest.raises(ValueError, match="NaN or \\+inf"):
            build_distribution(np.array([1.0, bad]), 1.0)

    def test_empty_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty 1-D"):
            build_distribution(np.array([]), 1.0)

    def test_two_dimensional_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-empty 1-D"):
            build_distribution(np.zeros((2, 3)), 1.0)


class TestDistributionEntropy:
    """Tests for Shannon entropy of a distribution."""

    def test_uniform(self) -> None:
        assert distribution_entropy(np.full(8, 0.125)) == pytest.approx(math.log(8))

    def test_one_hot_is_zero(self) -> None:
        assert distribution_entropy(np.array([0.0, 1.0, 0.0])) == 0.0

    def test_temperature_raises_entropy(self, worked_example_scores: np.ndarray) -> None:
        cold = distribution_entropy(build_distribution(worked_example_scores, 0.2))
        hot = distribution_entropy(build_distribution(worked_example_scores, 5.0))
        assert cold < hot
