"""
Tests for custom exceptions.
"""

import pytest

from expense_forecast.utils.exceptions import (
    AppException,
    ForecastingError,
    InsufficientDataError,
)


@pytest.mark.unit
class TestExceptions:
    """Test custom exceptions."""

    def test_app_exception_base(self):
        """Test base AppException."""
        exc = AppException(
            message="Test error",
            code="TEST_ERROR",
            status_code=400,
            details=["Detail 1", "Detail 2"]
        )

        assert str(exc) == "Test error"
        assert exc.message == "Test error"
        assert exc.code == "TEST_ERROR"
        assert exc.status_code == 400
        assert exc.details == ["Detail 1", "Detail 2"]

    def test_app_exception_defaults(self):
        """Test AppException with default values."""
        exc = AppException("Simple error")

        assert exc.message == "Simple error"
        assert exc.code == "UNKNOWN_ERROR"
        assert exc.status_code == 500
        assert exc.details == []

    def test_forecasting_error_defaults(self):
        exc = ForecastingError()

        assert exc.message == "Forecasting failed"
        assert exc.code == "FORECASTING_ERROR"
        assert exc.status_code == 500

    def test_insufficient_data_error(self):
        exc = InsufficientDataError("Need more months", required=2, available=1)

        assert exc.message == "Need more months"
        assert exc.code == "INSUFFICIENT_DATA"
        assert exc.status_code == 422
        assert exc.details == ["Required data points: 2", "Available data points: 1"]

    def test_insufficient_data_error_defaults(self):
        exc = InsufficientDataError()

        assert exc.message == "Insufficient data"
        assert exc.details == []

    def test_exception_inheritance(self):
        """Test exception inheritance."""
        exc = InsufficientDataError()

        assert isinstance(exc, ForecastingError)
        assert isinstance(exc, AppException)
        assert isinstance(exc, Exception)

    def test_exception_can_be_raised_and_caught(self):
        with pytest.raises(ForecastingError) as exc_info:
            raise InsufficientDataError("Empty series", required=1, available=0)

        assert exc_info.value.message == "Empty series"
