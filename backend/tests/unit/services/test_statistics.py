"""
Tests for statistical primitives.
"""

import math

import pytest

from expense_forecast.services import statistics as stats
from expense_forecast.services.statistics import LinearTrend
from expense_forecast.utils.exceptions import InsufficientDataError


@pytest.mark.unit
class TestDescriptiveStatistics:
    """Test mean, variance, median and quantiles."""

    def test_mean(self):
        assert stats.mean([1, 2, 3]) == 2.0

    def test_population_variance(self):
        """Variance divides by n, not n - 1."""
        assert stats.variance([1, 2, 3, 4]) == pytest.approx(1.25)

    def test_median_odd_and_even(self):
        assert stats.median([3, 1, 2]) == 2.0
        assert stats.median([4, 1, 3, 2]) == 2.5

    def test_quantile_averages_when_position_is_whole(self):
        assert stats.quantile([1, 2, 3, 4], 0.25) == pytest.approx(1.5)
        assert stats.quantile([1, 2, 3, 4], 0.75) == pytest.approx(3.5)

    def test_quantile_takes_next_value_when_position_is_fractional(self):
        assert stats.quantile([1, 2, 3, 4, 5], 0.25) == 2.0
        assert stats.quantile([1, 2, 3, 4, 5], 0.75) == 4.0

    def test_quartiles_of_flat_series_with_spike(self):
        values = [100] * 7 + [5000]

        assert stats.quantile(values, 0.25) == 100.0
        assert stats.quantile(values, 0.75) == 100.0

    @pytest.mark.parametrize("func", [stats.mean, stats.variance, stats.median])
    def test_empty_input_raises(self, func):
        with pytest.raises(InsufficientDataError):
            func([])


@pytest.mark.unit
class TestLinearRegression:
    """Test regression and goodness of fit."""

    def test_fits_exact_line(self):
        trend = stats.linear_regression([(0, 1), (1, 3), (2, 5)])

        assert trend.slope == pytest.approx(2.0)
        assert trend.intercept == pytest.approx(1.0)
        assert trend.predict(3) == pytest.approx(7.0)

    def test_two_points_are_enough(self):
        trend = stats.linear_regression([(0, 100), (1, 200)])

        assert trend.slope == pytest.approx(100.0)
        assert trend.intercept == pytest.approx(100.0)

    @pytest.mark.parametrize("points", [[], [(0, 42.0)]])
    def test_fewer_than_two_points_raises(self, points):
        with pytest.raises(InsufficientDataError) as exc_info:
            stats.linear_regression(points)

        assert exc_info.value.code == "INSUFFICIENT_DATA"
        assert "Required data points: 2" in exc_info.value.details

    def test_flat_trend(self):
        trend = LinearTrend.flat(250)

        assert trend.predict(0) == 250.0
        assert trend.predict(99) == 250.0

    def test_r_squared_perfect_fit(self):
        points = [(0, 1), (1, 3), (2, 5)]
        trend = stats.linear_regression(points)

        assert stats.r_squared(points, trend) == pytest.approx(1.0)

    def test_r_squared_of_mean_line_is_zero(self):
        points = [(0, 1), (1, 2), (2, 3)]

        assert stats.r_squared(points, LinearTrend.flat(2.0)) == pytest.approx(0.0)

    def test_r_squared_can_be_negative(self):
        points = [(0, 1), (1, 2), (2, 3)]

        assert stats.r_squared(points, LinearTrend.flat(100.0)) < 0

    def test_r_squared_undefined_for_constant_series(self):
        points = [(0, 5), (1, 5), (2, 5)]

        with pytest.raises(InsufficientDataError):
            stats.r_squared(points, LinearTrend.flat(5.0))


@pytest.mark.unit
class TestAutocorrelation:
    """Test lag autocorrelation."""

    def test_repeating_annual_pattern(self):
        values = [10 * month for month in range(1, 13)] * 2

        assert stats.autocorrelation(values, 12) == pytest.approx(1.0)

    def test_returns_plain_float(self):
        value = stats.autocorrelation([10 * month for month in range(1, 13)] * 2, 12)

        assert type(value) is float

    def test_series_not_longer_than_lag(self):
        assert stats.autocorrelation(list(range(12)), 12) == 0.0

    def test_constant_series(self):
        assert stats.autocorrelation([7.0] * 24, 12) == 0.0

    def test_steady_trend_is_negatively_correlated(self):
        assert stats.autocorrelation(list(range(1, 25)), 12) < 0


@pytest.mark.unit
class TestHelpers:
    """Test rounding and indexing helpers."""

    @pytest.mark.parametrize("value,decimals,expected", [
        (0.125, 2, 0.13),
        (2.5, 0, 3.0),
        (3.5, 0, 4.0),
        (-0.5, 0, 0.0),
        (1234.5678, 2, 1234.57),
    ])
    def test_round_half_up(self, value, decimals, expected):
        assert stats.round_half_up(value, decimals) == expected

    def test_indexed_points(self):
        assert stats.indexed_points([5, 7]) == [(0.0, 5.0), (1.0, 7.0)]

    @pytest.mark.parametrize("value", [1e307, -1e307, float("inf")])
    def test_round_half_up_leaves_unscalable_values_alone(self, value):
        assert stats.round_half_up(value, 2) == value

    def test_round_half_up_nan(self):
        assert math.isnan(stats.round_half_up(float("nan"), 2))
