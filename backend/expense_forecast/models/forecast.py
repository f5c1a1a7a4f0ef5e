"""
Pydantic models for the forecasting API.
"""

from typing import Any, List, Optional
from pydantic import BaseModel, Field, validator

from expense_forecast.config import get_forecast_settings


class ForecastPointResponse(BaseModel):
    """One projected month."""
    month: str = Field(..., description="Target month (YYYY-MM)", example="2024-07")
    amount: float = Field(..., ge=0, description="Projected amount, rounded to cents", example=1520.75)
    category: Optional[str] = Field(None, description="Category, for category forecasts", example="Travel")


class ForecastRequest(BaseModel):
    """Forecast request model."""
    historicalData: Optional[List[Any]] = Field(
        default=None,
        description="Historical expense or income records"
    )
    months: int = Field(default=3, ge=1, description="Number of future months to project")

    @validator("months")
    def validate_months(cls, v):
        max_months = get_forecast_settings().max_months
        if v > max_months:
            raise ValueError(f"months must not exceed {max_months}")
        return v


class ForecastResponse(BaseModel):
    """Forecast response model."""
    forecast: List[ForecastPointResponse] = Field(..., description="Projected monthly totals")
    categoryForecasts: List[List[ForecastPointResponse]] = Field(
        ...,
        description="Per-category projections, one list per category"
    )
    confidence: int = Field(..., ge=0, le=100, description="Heuristic confidence (0-100)", example=82)
    seasonalityDetected: bool = Field(..., description="Whether an annual pattern was found")
    methodology: str = Field(..., description="Model used", example="linear-regression")
