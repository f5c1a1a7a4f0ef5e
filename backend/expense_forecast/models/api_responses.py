"""
Pydantic models for API responses to improve OpenAPI documentation.
"""

from typing import Any, Dict
from pydantic import BaseModel, Field


class HealthCheckResponse(BaseModel):
    """Response model for basic health check."""
    status: str = Field(..., description="Service health status", example="healthy")
    timestamp: str = Field(..., description="Current timestamp in ISO format", example="2024-01-15T10:30:00Z")
    version: str = Field(..., description="Application version", example="1.0.0")
    environment: str = Field(..., description="Current environment", example="production")
    app_name: str = Field(..., description="Application name", example="expense-forecast-api")


class DetailedHealthResponse(BaseModel):
    """Response model for detailed health check."""
    status: str = Field(..., description="Overall service health status", example="healthy")
    timestamp: str = Field(..., description="Current timestamp in ISO format", example="2024-01-15T10:30:00Z")
    version: str = Field(..., description="Application version", example="1.0.0")
    environment: str = Field(..., description="Current environment", example="production")
    checks: Dict[str, Any] = Field(..., description="Detailed component checks")


class ReadinessResponse(BaseModel):
    """Response model for readiness probe."""
    status: str = Field(..., description="Readiness status", example="ready")


class LivenessResponse(BaseModel):
    """Response model for liveness probe."""
    status: str = Field(..., description="Liveness status", example="alive")
