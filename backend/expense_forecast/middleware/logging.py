"""
Request logging middleware.

Every request is logged on entry and exit. Forecast requests also log the
summary the forecasting router leaves on ``request.state``: horizon, input
size, chosen methodology, confidence and how many categories were projected.
"""

import time
from typing import Any, Callable, Dict

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

logger = structlog.get_logger()


class LoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log HTTP requests and forecast outcomes."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = getattr(request.state, "request_id", "unknown")

        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            client_ip=self._get_client_ip(request),
            request_id=request_id
        )

        response = await call_next(request)
        process_time = time.time() - start_time

        logger.info(
            "Request completed",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round(process_time * 1000, 2),
            request_id=request_id,
            **forecast_log_fields(request)
        )

        response.headers["x-process-time"] = f"{process_time:.4f}"
        return response

    def _get_client_ip(self, request: Request) -> str:
        """Extract client IP address from request."""
        # X-Forwarded-For can contain multiple IPs, take the first one
        forwarded_for = request.headers.get("x-forwarded-for")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()

        real_ip = request.headers.get("x-real-ip")
        if real_ip:
            return real_ip

        if request.client:
            return request.client.host

        return "unknown"


def forecast_log_fields(request: Request) -> Dict[str, Any]:
    """Forecast summary left by the forecasting router, prefixed for the log event."""
    summary = getattr(request.state, "forecast_summary", None)
    if not summary:
        return {}
    return {f"forecast_{key}": value for key, value in summary.items()}
