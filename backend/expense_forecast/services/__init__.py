"""
Business logic services.
"""
from .forecasting import ExpenseForecaster, forecast, get_expense_forecaster

__all__ = [
    "ExpenseForecaster",
    "forecast",
    "get_expense_forecaster",
]
