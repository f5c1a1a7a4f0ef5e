"""
Error handling middleware for the application.
"""

import time
import traceback
import uuid
from typing import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import structlog

from expense_forecast.utils.exceptions import AppException

logger = structlog.get_logger()


def error_response(request: Request, request_id: str, status_code: int,
                   code: str, message: str, details=None) -> JSONResponse:
    """Build the JSON error envelope shared by middleware and exception handlers."""
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or []
            },
            "meta": {
                "timestamp": time.time(),
                "request_id": request_id,
                "path": str(request.url.path)
            }
        },
        headers={"x-request-id": request_id}
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware to handle exceptions and format error responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and handle any exceptions."""
        # Generate request ID if not present
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["x-request-id"] = request_id
            return response

        except AppException as exc:
            logger.warning(
                "Application exception occurred",
                request_id=request_id,
                error_code=exc.code,
                error_message=exc.message,
                status_code=exc.status_code,
                path=request.url.path,
                method=request.method
            )
            return error_response(request, request_id, exc.status_code, exc.code, exc.message, exc.details)

        except Exception as exc:
            logger.error(
                "Unexpected exception occurred",
                request_id=request_id,
                error_type=type(exc).__name__,
                error_message=str(exc),
                traceback=traceback.format_exc(),
                path=request.url.path,
                method=request.method
            )
            return error_response(
                request, request_id, 500,
                "INTERNAL_SERVER_ERROR", "An unexpected error occurred"
            )
