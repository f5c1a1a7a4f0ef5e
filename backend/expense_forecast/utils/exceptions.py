"""
Custom exceptions for the application.
All business logic and technical exceptions are defined here.
"""

from typing import List, Optional


class AppException(Exception):
    """Base exception for all application exceptions."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        status_code: int = 500,
        details: Optional[List[str]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or []
        super().__init__(self.message)


class ForecastingError(AppException):
    """Raised when a forecasting computation cannot be completed."""

    def __init__(
        self,
        message: str = "Forecasting failed",
        details: Optional[List[str]] = None
    ):
        super().__init__(
            message=message,
            code="FORECASTING_ERROR",
            status_code=500,
            details=details
        )


class InsufficientDataError(ForecastingError):
    """Raised when a statistic is undefined for the data it was given."""

    def __init__(
        self,
        message: str = "Insufficient data",
        required: Optional[int] = None,
        available: Optional[int] = None
    ):
        details = []
        if required is not None:
            details.append(f"Required data points: {required}")
        if available is not None:
            details.append(f"Available data points: {available}")

        super().__init__(message=message, details=details)
        self.code = "INSUFFICIENT_DATA"
        self.status_code = 422
