"""
Statistical primitives used by the forecasting engine.

Thin wrappers over numpy and scikit-learn that give the engine the exact
semantics it relies on (population variance, quartiles that average at
discontinuities, lag autocorrelation normalised by the full-series variance)
and raise ``InsufficientDataError`` where a statistic is undefined.
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np
from sklearn.linear_model import LinearRegression
from sklearn.metrics import r2_score

from expense_forecast.utils.exceptions import InsufficientDataError

Point = Tuple[float, float]


@dataclass(frozen=True)
class LinearTrend:
    """Fitted line ``y = slope * x + intercept``."""
    slope: float
    intercept: float

    def predict(self, x: float) -> float:
        return self.slope * x + self.intercept

    @classmethod
    def flat(cls, level: float) -> "LinearTrend":
        """A trend with no slope, projecting ``level`` forever."""
        return cls(slope=0.0, intercept=float(level))


def _as_array(values: Sequence[float]) -> np.ndarray:
    array = np.asarray(list(values), dtype=float)
    if array.size == 0:
        raise InsufficientDataError("Statistic requires at least one value", required=1, available=0)
    return array


def mean(values: Sequence[float]) -> float:
    return float(np.mean(_as_array(values)))


def variance(values: Sequence[float]) -> float:
    """Population variance (divides by n)."""
    return float(np.var(_as_array(values), ddof=0))


def median(values: Sequence[float]) -> float:
    return float(np.median(_as_array(values)))


def quantile(values: Sequence[float], probability: float) -> float:
    """Sample quantile that averages the two neighbours when ``n * p`` is whole."""
    return float(np.quantile(_as_array(values), probability, method="averaged_inverted_cdf"))


def linear_regression(points: Sequence[Point]) -> LinearTrend:
    """Ordinary least squares fit over ``(x, y)`` points."""
    if len(points) < 2:
        raise InsufficientDataError(
            "Linear regression requires at least two points",
            required=2,
            available=len(points)
        )

    X = np.array([[x] for x, _ in points], dtype=float)
    y = np.array([y for _, y in points], dtype=float)

    model = LinearRegression()
    model.fit(X, y)

    return LinearTrend(slope=float(model.coef_[0]), intercept=float(model.intercept_))


def r_squared(points: Sequence[Point], trend: LinearTrend) -> float:
    """Coefficient of determination of ``trend`` against the observed points."""
    if len(points) < 2:
        raise InsufficientDataError("R-squared requires at least two points", required=2, available=len(points))

    actual = [y for _, y in points]
    predicted = [trend.predict(x) for x, _ in points]

    score = r2_score(actual, predicted, force_finite=False)
    if not math.isfinite(score):
        # Constant series: total variance is zero and R-squared is undefined
        raise InsufficientDataError("R-squared is undefined for a constant series")
    return float(score)


def autocorrelation(values: Sequence[float], lag: int) -> float:
    """Lag-``lag`` autocorrelation normalised by the population variance.

    Returns 0.0 when the series is not longer than the lag or has no variance.
    """
    data = np.asarray(list(values), dtype=float)
    n = data.size
    if n <= lag:
        return 0.0

    series_mean = data.mean()
    series_variance = data.var(ddof=0)
    if series_variance == 0:
        return 0.0

    deviations = data - series_mean
    covariance = float(np.sum(deviations[:n - lag] * deviations[lag:]))
    return float(covariance / ((n - lag) * series_variance))


def round_half_up(value: float, decimals: int = 0) -> float:
    """Round with halves going up (0.125 -> 0.13, -0.5 -> 0), not to even.

    Non-finite values, and values too large to scale, are returned unchanged.
    """
    factor = 10 ** decimals
    scaled = value * factor
    if not math.isfinite(scaled):
        # Floats this large have no fractional digits left to round
        return float(value)
    return math.floor(scaled + 0.5) / factor


def indexed_points(values: Sequence[float]) -> List[Point]:
    """Pair each value with its position: ``[(0, v0), (1, v1), ...]``."""
    return [(float(index), float(value)) for index, value in enumerate(values)]
