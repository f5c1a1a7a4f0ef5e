"""
FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import structlog

from expense_forecast.config import Settings, settings
from expense_forecast.logging_config import configure_logging
from expense_forecast.middleware.error_handler import ErrorHandlerMiddleware, error_response
from expense_forecast.middleware.logging import LoggingMiddleware
from expense_forecast.routers import forecasts, health
from expense_forecast.services.forecasting import get_expense_forecaster
from expense_forecast.utils.exceptions import AppException


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    app_settings = app.state.settings
    configure_logging(app_settings)
    logger = structlog.get_logger()

    logger.info(
        "Application starting up",
        app_name=app_settings.app_name,
        version=app_settings.version,
        environment=app_settings.environment,
        debug=app_settings.debug
    )

    forecaster = get_expense_forecaster()
    logger.info(
        "Expense forecaster initialized",
        min_history_records=forecaster.config.min_history_records,
        seasonality_threshold=forecaster.config.seasonality_threshold
    )

    yield

    # Shutdown
    logger.info("Application shutting down")


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application."""
    app_settings = app_settings or settings

    app = FastAPI(
        title="Expense Forecast API",
        version=app_settings.version,
        description="""
**Expense Forecast API** - Monthly expense projections for small businesses

## Features

- **Forecasting**: Linear and seasonal-adjusted projections of monthly totals
- **Categories**: Independent projections for every category with enough history
- **Resilience**: Sparse or malformed history degrades to a basic forecast instead of failing
        """,
        debug=app_settings.debug,
        docs_url=app_settings.docs_url,
        redoc_url=app_settings.redoc_url,
        openapi_url=app_settings.openapi_url,
        lifespan=lifespan
    )
    app.state.settings = app_settings

    # CORS middleware - Configure allowed origins based on environment
    cors_origins = app_settings.get_cors_origins_list()
    if app_settings.debug and not cors_origins:
        # Default CORS for development
        cors_origins = [
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173"
        ]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Request-ID", "Accept"],
        expose_headers=["X-Request-ID", "X-Process-Time"]
    )

    # Custom middleware (order matters - last added is executed first)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(ErrorHandlerMiddleware)

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        """Handle application exceptions."""
        request_id = getattr(request.state, "request_id", "unknown")
        return error_response(request, request_id, exc.status_code, exc.code, exc.message, exc.details)

    # Include routers
    app.include_router(
        health.router,
        prefix=app_settings.api_prefix,
        tags=["health"]
    )

    app.include_router(
        forecasts.router,
        prefix=app_settings.api_prefix,
        tags=["forecasting"]
    )

    # Root endpoint
    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint."""
        return {
            "message": f"Welcome to {app_settings.app_name}",
            "version": app_settings.version,
            "docs_url": app_settings.docs_url,
            "health_check": f"{app_settings.api_prefix}/health"
        }

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "expense_forecast.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower()
    )
