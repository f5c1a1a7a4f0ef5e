"""
Health check endpoints.
"""

from datetime import datetime, timedelta

from fastapi import APIRouter, status
import structlog

from expense_forecast.config import settings
from expense_forecast.models.api_responses import (
    DetailedHealthResponse,
    HealthCheckResponse,
    LivenessResponse,
    ReadinessResponse,
)
from expense_forecast.services.forecasting import get_expense_forecaster

logger = structlog.get_logger()
router = APIRouter()


@router.get(
    "/health",
    status_code=status.HTTP_200_OK,
    summary="Basic Health Check",
    description="Returns the basic health status of the API service",
    response_model=HealthCheckResponse,
    tags=["Health Checks"]
)
async def health_check() -> HealthCheckResponse:
    """
    **Basic health check endpoint**

    Used for basic monitoring and load balancer health checks.
    """
    return HealthCheckResponse(
        status="healthy",
        timestamp=datetime.utcnow().isoformat(),
        version=settings.version,
        environment=settings.environment,
        app_name=settings.app_name
    )


@router.get(
    "/health/detailed",
    status_code=status.HTTP_200_OK,
    summary="Detailed Health Check",
    description="Runs a small forecast to verify the engine end to end",
    response_model=DetailedHealthResponse,
    tags=["Health Checks"]
)
def detailed_health_check() -> DetailedHealthResponse:
    """
    **Detailed health check with a forecasting smoke test**

    Forecasts one month from a synthetic three-month history. The engine never
    raises, so the check verifies that a structurally valid result comes back.
    """
    checks = {}
    overall_status = "healthy"

    today = datetime.utcnow()
    probe = [
        {"date": (today - timedelta(days=31 * offset)).date().isoformat(), "amount": 100.0 * offset}
        for offset in (1, 2, 3)
    ]

    started = datetime.utcnow()
    result = get_expense_forecaster().forecast(probe, 1)
    response_time = (datetime.utcnow() - started).total_seconds() * 1000

    if len(result.get("forecast", [])) == 1:
        checks["forecasting"] = {
            "status": "healthy",
            "methodology": result["methodology"],
            "response_time_ms": round(response_time, 2)
        }
    else:
        checks["forecasting"] = {"status": "unhealthy", "error": "Unexpected forecast shape"}
        overall_status = "unhealthy"
        logger.error("Forecasting health check failed", result=result)

    return DetailedHealthResponse(
        status=overall_status,
        timestamp=datetime.utcnow().isoformat(),
        version=settings.version,
        environment=settings.environment,
        checks=checks
    )


@router.get("/ready", status_code=status.HTTP_200_OK, response_model=ReadinessResponse)
async def readiness_check() -> ReadinessResponse:
    """Readiness probe for Kubernetes."""
    # No external dependencies to wait for
    return ReadinessResponse(status="ready")


@router.get("/live", status_code=status.HTTP_200_OK, response_model=LivenessResponse)
async def liveness_check() -> LivenessResponse:
    """Liveness probe for Kubernetes."""
    return LivenessResponse(status="alive")
