"""
Expense Forecasting Service.
Projects future monthly expense totals from historical financial records using
monthly aggregation, IQR outlier substitution, lag-12 seasonality detection and
linear (optionally seasonal-adjusted) regression, with a basic linear/average
forecaster as an always-available fallback.
"""

import math
import sys
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

import pandas as pd
import structlog

from expense_forecast.config import ForecastSettings, get_forecast_settings
from expense_forecast.services import statistics as stats
from expense_forecast.services.records import (
    month_key,
    resolve_amount,
    resolve_category,
    resolve_date,
)
from expense_forecast.services.statistics import LinearTrend, Point

logger = structlog.get_logger()

MonthlyAggregate = Dict[str, float]
CategorizedMonthlyAggregate = Dict[str, MonthlyAggregate]
ForecastPoint = Dict[str, Any]


class ForecastMethodology(str, Enum):
    """Model that produced a forecast."""
    SEASONAL_ADJUSTED = "seasonal-adjusted"
    LINEAR_REGRESSION = "linear-regression"
    BASIC_LINEAR = "basic-linear"


@dataclass
class TotalForecast:
    """Projection of the overall monthly total."""
    forecast: List[ForecastPoint] = field(default_factory=list)
    confidence: int = 50


@dataclass
class CategoryForecast:
    """Projection for a single category."""
    category: str
    forecast: List[ForecastPoint] = field(default_factory=list)
    confidence: int = 50


class ExpenseForecaster:
    """Stateless expense forecasting engine."""

    def __init__(self, config: Optional[ForecastSettings] = None,
                 clock: Optional[Callable[[], date]] = None):
        self.config = config or get_forecast_settings()
        self.clock = clock or date.today

    def forecast(self, historical_data: Optional[Iterable[Any]],
                 months: Optional[int] = None) -> Dict[str, Any]:
        """Forecast the next ``months`` monthly totals.

        Never raises: short histories and any failure in the advanced pipeline
        are answered by ``basic_forecast`` on the original input.
        """
        months = self.config.default_months if months is None else int(months)
        records = _as_records(historical_data)

        if len(records) < self.config.min_history_records:
            result = self.basic_forecast(records, months)
        else:
            try:
                result = self._advanced_forecast(records, months)
            except Exception as e:
                logger.error(
                    "Advanced forecasting failed, falling back to basic forecast",
                    error=str(e),
                    error_type=type(e).__name__
                )
                result = self.basic_forecast(records, months)

        logger.info(
            "Forecast generated",
            methodology=result["methodology"],
            months=months,
            record_count=len(records),
            confidence=result["confidence"]
        )
        return result

    def _advanced_forecast(self, records: List[Any], months: int) -> Dict[str, Any]:
        monthly_data = self.aggregate_monthly_data(records)
        categorized_data = self.aggregate_by_category_and_month(records)

        # Seasonality is judged on the raw totals, before outlier substitution
        seasonality_detected = self.detect_seasonality(monthly_data)
        cleaned_monthly_data = self.remove_outliers(monthly_data)

        total_forecast = self.generate_total_forecast(cleaned_monthly_data, months, seasonality_detected)
        category_forecasts = self.generate_category_forecasts(categorized_data, months)

        confidence = self.calculate_overall_confidence(total_forecast.confidence, category_forecasts)

        methodology = (
            ForecastMethodology.SEASONAL_ADJUSTED if seasonality_detected
            else ForecastMethodology.LINEAR_REGRESSION
        )

        return {
            "forecast": total_forecast.forecast,
            "categoryForecasts": [cf.forecast for cf in category_forecasts],
            "confidence": confidence,
            "seasonalityDetected": seasonality_detected,
            "methodology": methodology.value
        }

    def basic_forecast(self, historical_data: Optional[Iterable[Any]],
                       months: Optional[int] = None) -> Dict[str, Any]:
        """Linear projection of monthly totals, or a flat average when no line fits."""
        months = self.config.default_months if months is None else int(months)
        monthly_totals = self.aggregate_monthly_data(_as_records(historical_data))
        points = stats.indexed_points(monthly_totals.values())

        try:
            trend = stats.linear_regression(points)
        except Exception as e:
            if points:
                level = stats.mean([total for _, total in points])
            else:
                level = self.config.fallback_amount
            logger.debug("Basic regression unavailable, projecting flat level", level=level, error=str(e))
            trend = LinearTrend.flat(level)

        last_index = max(0, len(points) - 1)
        forecast = self._project(trend, last_index, months)

        return {
            "forecast": forecast,
            "categoryForecasts": [],
            "confidence": self.calculate_confidence(points, trend),
            "seasonalityDetected": False,
            "methodology": ForecastMethodology.BASIC_LINEAR.value
        }

    def aggregate_monthly_data(self, records: Iterable[Any]) -> MonthlyAggregate:
        """Sum valid record amounts per ``YYYY-MM`` key, in calendar order."""
        frame = pd.DataFrame(
            [(month, amount) for month, _, amount in self._entries(records)],
            columns=["month", "amount"]
        )
        totals = frame.groupby("month", sort=True)["amount"].sum()
        return {str(month): float(total) for month, total in totals.items()}

    def aggregate_by_category_and_month(self, records: Iterable[Any]) -> CategorizedMonthlyAggregate:
        """Sum valid record amounts per category, then per ``YYYY-MM`` key."""
        frame = pd.DataFrame(list(self._entries(records)), columns=["month", "category", "amount"])
        totals = frame.groupby(["category", "month"], sort=True)["amount"].sum()

        categorized: CategorizedMonthlyAggregate = {}
        for (category, month), total in totals.items():
            categorized.setdefault(str(category), {})[str(month)] = float(total)
        return categorized

    def _entries(self, records: Iterable[Any]) -> Iterable[Tuple[str, str, float]]:
        """Yield ``(month, category, amount)`` for every usable record."""
        for record in records:
            moment = resolve_date(record)
            if moment is None:
                logger.debug("Skipping malformed record", reason="no parseable date")
                continue

            amount = resolve_amount(record)
            if math.isnan(amount):
                logger.debug("Skipping malformed record", reason="unparseable amount")
                continue

            category = resolve_category(record, self.config.default_category)
            yield month_key(moment), category, amount

    def remove_outliers(self, monthly_data: MonthlyAggregate) -> MonthlyAggregate:
        """Replace months outside the IQR fences with the median month."""
        values = list(monthly_data.values())
        if len(values) < self.config.min_outlier_months:
            return monthly_data

        q1 = stats.quantile(values, 0.25)
        q3 = stats.quantile(values, 0.75)
        iqr = q3 - q1
        upper_bound = q3 + self.config.outlier_iqr_multiplier * iqr
        lower_bound = max(0.0, q1 - self.config.outlier_iqr_multiplier * iqr)
        median = stats.median(values)

        cleaned = {}
        for month, value in monthly_data.items():
            if lower_bound <= value <= upper_bound:
                cleaned[month] = value
            else:
                cleaned[month] = median
        return cleaned

    def detect_seasonality(self, monthly_data: MonthlyAggregate) -> bool:
        """True when the lag-12 autocorrelation of the monthly totals is strong."""
        if len(monthly_data) < self.config.min_seasonal_months:
            return False

        values = [monthly_data[month] for month in sorted(monthly_data)]
        autocorrelation = stats.autocorrelation(values, self.config.seasonality_lag)
        return bool(autocorrelation > self.config.seasonality_threshold)

    def generate_total_forecast(self, monthly_data: MonthlyAggregate, months: int,
                                use_seasonality: bool) -> TotalForecast:
        points = stats.indexed_points(monthly_data[month] for month in sorted(monthly_data))

        if use_seasonality and len(points) >= self.config.min_seasonal_months:
            return TotalForecast(
                forecast=self.seasonal_forecast(points, months),
                confidence=self.config.seasonal_confidence
            )

        trend = stats.linear_regression(points)
        return TotalForecast(
            forecast=self._project(trend, len(points) - 1, months),
            confidence=self.calculate_confidence(points, trend)
        )

    def seasonal_forecast(self, points: List[Point], months: int) -> List[ForecastPoint]:
        """Trend projection scaled by the seasonal factor of each target calendar month.

        Factors come from the first twelve observations (actual / trend); slots
        without an observation, or whose trend is not positive, stay neutral.
        """
        trend = stats.linear_regression(points)

        seasonal_factors = []
        for x, actual in points[:12]:
            trend_value = trend.predict(x)
            seasonal_factors.append(actual / trend_value if trend_value > 0 else 1.0)
        seasonal_factors.extend([1.0] * (12 - len(seasonal_factors)))

        current_month = self.clock().month - 1
        last_index = len(points) - 1

        forecast = []
        for i in range(1, months + 1):
            seasonal_factor = seasonal_factors[(current_month + i) % 12]
            trend_prediction = trend.predict(last_index + i)
            forecast.append({
                "month": self.get_next_month(i),
                "amount": _to_amount(trend_prediction * seasonal_factor)
            })
        return forecast

    def generate_category_forecasts(self, categorized_data: CategorizedMonthlyAggregate,
                                    months: int) -> List[CategoryForecast]:
        """Independent linear projections for categories with enough months."""
        category_forecasts = []

        for category, monthly_data in categorized_data.items():
            points = stats.indexed_points(monthly_data[month] for month in sorted(monthly_data))
            if len(points) < self.config.min_category_points:
                continue

            try:
                trend = stats.linear_regression(points)
                category_forecasts.append(CategoryForecast(
                    category=category,
                    forecast=self._project(trend, len(points) - 1, months, category=category),
                    confidence=self.calculate_confidence(points, trend)
                ))
            except Exception as e:
                logger.warning("Category forecast failed", category=category, error=str(e))

        return category_forecasts

    def calculate_confidence(self, points: List[Point], trend: LinearTrend) -> int:
        """R-squared of the fit as a 0-100 percentage."""
        if len(points) < self.config.min_confidence_points:
            return self.config.default_confidence

        try:
            r_squared = stats.r_squared(points, trend)
            return int(min(100, max(0, stats.round_half_up(r_squared * 100))))
        except Exception as e:
            logger.warning("Confidence calculation failed", error=str(e))
            return self.config.default_confidence

    def calculate_overall_confidence(self, total_confidence: int,
                                     category_forecasts: List[CategoryForecast]) -> int:
        if not category_forecasts:
            return total_confidence

        category_average = stats.mean([cf.confidence for cf in category_forecasts])
        blended = (
            total_confidence * self.config.total_confidence_weight
            + category_average * self.config.category_confidence_weight
        )
        return int(stats.round_half_up(blended))

    def get_next_month(self, months_ahead: int) -> str:
        """``YYYY-MM`` of the calendar month ``months_ahead`` after today."""
        today = self.clock()
        period = pd.Period(year=today.year, month=today.month, freq="M") + months_ahead
        return str(period)

    def _project(self, trend: LinearTrend, last_index: int, months: int,
                 category: Optional[str] = None) -> List[ForecastPoint]:
        forecast = []
        for i in range(1, months + 1):
            point = {"month": self.get_next_month(i)}
            if category is not None:
                point["category"] = category
            point["amount"] = _to_amount(trend.predict(last_index + i))
            forecast.append(point)
        return forecast


def _to_amount(value: float) -> float:
    """Round to cents, floor at zero and cap at the largest finite float."""
    if math.isnan(value):
        return 0.0
    return min(max(0.0, stats.round_half_up(value, 2)), sys.float_info.max)


def _as_records(historical_data: Optional[Iterable[Any]]) -> List[Any]:
    if historical_data is None:
        return []
    if isinstance(historical_data, list):
        return historical_data
    if isinstance(historical_data, (str, bytes, dict)):
        return []
    try:
        return list(historical_data)
    except TypeError:
        return []


# Global forecaster
_expense_forecaster = None


def get_expense_forecaster() -> ExpenseForecaster:
    """Get global expense forecaster."""
    global _expense_forecaster
    if _expense_forecaster is None:
        _expense_forecaster = ExpenseForecaster()
    return _expense_forecaster


def forecast(historical_data: Optional[Iterable[Any]], months: Optional[int] = None) -> Dict[str, Any]:
    """Forecast monthly expense totals with the global forecaster."""
    return get_expense_forecaster().forecast(historical_data, months)
