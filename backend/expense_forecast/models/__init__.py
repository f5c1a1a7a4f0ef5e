"""
Pydantic models for the Expense Forecast API.
"""
from .api_responses import (
    DetailedHealthResponse,
    HealthCheckResponse,
    LivenessResponse,
    ReadinessResponse,
)
from .forecast import ForecastPointResponse, ForecastRequest, ForecastResponse

__all__ = [
    "DetailedHealthResponse",
    "HealthCheckResponse",
    "LivenessResponse",
    "ReadinessResponse",
    "ForecastPointResponse",
    "ForecastRequest",
    "ForecastResponse",
]
