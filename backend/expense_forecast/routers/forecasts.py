"""
Expense forecasting endpoints.
"""

from typing import Any, Dict

from fastapi import APIRouter, Request, status
import structlog

from expense_forecast.models.forecast import ForecastRequest, ForecastResponse
from expense_forecast.services import forecasting

logger = structlog.get_logger()
router = APIRouter()


@router.post(
    "/ai/forecast",
    status_code=status.HTTP_200_OK,
    summary="Forecast Monthly Expenses",
    description="Projects monthly expense totals and per-category totals from historical records",
    response_model=ForecastResponse,
    response_model_exclude_none=True,
    tags=["Forecasting"]
)
def generate_forecast(request: ForecastRequest, http_request: Request) -> Dict[str, Any]:
    """
    **Forecast future monthly expenses**

    Records may carry their date in `date`, `paymentDate` or `invoiceDate`,
    their amount in `amount`, `amountPaid`, `salary` or `amountInclGST`, and
    their category in `suggestedCategory` or `category`.

    - Six or more records: seasonal-adjusted or linear regression with
      outlier substitution and per-category projections
    - Fewer records, or any failure: basic linear/average projection

    Always returns a valid forecast; malformed records are skipped.
    """
    record_count = len(request.historicalData or [])
    logger.info("Forecast requested", record_count=record_count, months=request.months)

    result = forecasting.forecast(request.historicalData, request.months)

    # Read back by the request logging middleware
    http_request.state.forecast_summary = {
        "record_count": record_count,
        "months": request.months,
        "methodology": result["methodology"],
        "confidence": result["confidence"],
        "seasonality_detected": result["seasonalityDetected"],
        "category_count": len(result["categoryForecasts"])
    }
    return result
