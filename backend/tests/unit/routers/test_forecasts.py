"""
Tests for the forecasting router.
"""

import pytest
from starlette.requests import Request

from expense_forecast.models.forecast import ForecastRequest
from expense_forecast.routers.forecasts import generate_forecast


@pytest.mark.unit
class TestGenerateForecast:
    """Test the forecast endpoint handler."""

    def test_leaves_summary_for_request_logging(self):
        http_request = Request({"type": "http", "method": "POST", "path": "/api/v1/ai/forecast", "headers": []})
        body = ForecastRequest(historicalData=[{"date": "2024-01-10", "amount": 100}], months=2)

        result = generate_forecast(body, http_request)

        assert len(result["forecast"]) == 2
        assert http_request.state.forecast_summary == {
            "record_count": 1,
            "months": 2,
            "methodology": "basic-linear",
            "confidence": 50,
            "seasonality_detected": False,
            "category_count": 0,
        }
