"""
Configuration module using Pydantic Settings.
Handles application settings and the forecasting engine's tuning constants.
"""

from typing import List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # App settings
    app_name: str = Field(default="expense-forecast-api", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Debug mode")
    environment: str = Field(default="production", description="Environment name")

    # API
    api_prefix: str = Field(default="/api/v1", description="API path prefix")
    cors_origins: str = Field(default="", description="CORS allowed origins (comma-separated)")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Log renderer (json or console)")

    # Server settings
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, ge=1, le=65535, description="Server port")

    def get_cors_origins_list(self) -> List[str]:
        """Get CORS origins as a list."""
        if not self.cors_origins:
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @validator("log_level")
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level. Must be one of: {valid_levels}")
        return v.upper()

    @validator("log_format")
    def validate_log_format(cls, v):
        """Validate log renderer."""
        valid_formats = ["json", "console"]
        if v.lower() not in valid_formats:
            raise ValueError(f"Invalid log format. Must be one of: {valid_formats}")
        return v.lower()

    @validator("environment")
    def validate_environment(cls, v):
        """Validate environment."""
        valid_envs = ["development", "testing", "staging", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Invalid environment. Must be one of: {valid_envs}")
        return v.lower()

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def docs_url(self) -> Optional[str]:
        """Get docs URL based on environment."""
        return "/docs" if self.debug or self.is_development else None

    @property
    def redoc_url(self) -> Optional[str]:
        """Get ReDoc URL based on environment."""
        return "/redoc" if self.debug or self.is_development else None

    @property
    def openapi_url(self) -> Optional[str]:
        """Get OpenAPI URL based on environment."""
        return "/openapi.json" if self.debug or self.is_development else None


class ForecastSettings(BaseSettings):
    """Tuning constants for the expense forecasting engine.

    Every threshold and default the engine relies on lives here, so it can be
    overridden through ``FORECAST_*`` environment variables or passed
    explicitly to ``ExpenseForecaster``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FORECAST_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Horizon
    default_months: int = Field(default=3, ge=1, description="Months projected when none are requested")
    max_months: int = Field(default=60, ge=1, description="Largest horizon accepted over HTTP")

    # Routing and fallback
    min_history_records: int = Field(default=6, ge=1, description="Records required for the advanced pipeline")
    fallback_amount: float = Field(default=1000.0, ge=0, description="Flat projection used when there is no data")

    # Confidence
    default_confidence: int = Field(default=50, ge=0, le=100, description="Confidence when it cannot be computed")
    seasonal_confidence: int = Field(default=70, ge=0, le=100, description="Fixed confidence of the seasonal model")
    min_confidence_points: int = Field(default=3, ge=2, description="Points required for an R-squared confidence")
    total_confidence_weight: float = Field(default=0.7, ge=0, le=1, description="Weight of the total forecast confidence")
    category_confidence_weight: float = Field(default=0.3, ge=0, le=1, description="Weight of the category average confidence")

    # Seasonality
    seasonality_lag: int = Field(default=12, ge=1, description="Autocorrelation lag in months")
    min_seasonal_months: int = Field(default=12, ge=1, description="Distinct months required to look for seasonality")
    seasonality_threshold: float = Field(default=0.4, description="Autocorrelation above which data is seasonal")

    # Outliers
    min_outlier_months: int = Field(default=4, ge=1, description="Months required before outliers are judged")
    outlier_iqr_multiplier: float = Field(default=1.5, gt=0, description="IQR multiplier for the outlier fences")

    # Categories
    min_category_points: int = Field(default=3, ge=2, description="Months a category needs to be forecast")
    default_category: str = Field(default="Miscellaneous", description="Category for uncategorised records")

    @validator("category_confidence_weight")
    def validate_confidence_weights(cls, v, values):
        """Blend weights must add up to one."""
        total_weight = values.get("total_confidence_weight")
        if total_weight is not None and abs(total_weight + v - 1.0) > 1e-9:
            raise ValueError("Confidence weights must sum to 1.0")
        return v


# Global settings instances
settings = Settings()
forecast_settings = ForecastSettings()


def get_settings() -> Settings:
    """Get settings instance. Useful for dependency injection."""
    return settings


def get_forecast_settings() -> ForecastSettings:
    """Get forecasting settings instance."""
    return forecast_settings
