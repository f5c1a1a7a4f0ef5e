"""
Global pytest configuration and fixtures.
"""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient

from expense_forecast.config import ForecastSettings, Settings
from expense_forecast.services.forecasting import ExpenseForecaster

# Wall-clock anchor used by every forecaster built in tests
FIXED_TODAY = date(2024, 6, 15)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Test settings configuration."""
    return Settings(
        app_name="expense-forecast-api-test",
        version="1.0.0-test",
        debug=True,
        environment="testing",
        api_prefix="/api/v1",
        cors_origins="http://localhost:3000",
        log_level="DEBUG",
        log_format="console",
        host="127.0.0.1",
        port=8081
    )


@pytest.fixture
def forecast_settings() -> ForecastSettings:
    """Forecasting constants at their defaults."""
    return ForecastSettings()


@pytest.fixture
def fixed_clock():
    """Clock pinned to ``FIXED_TODAY``."""
    return lambda: FIXED_TODAY


@pytest.fixture
def forecaster(forecast_settings, fixed_clock) -> ExpenseForecaster:
    """Forecaster with default constants and a pinned clock."""
    return ExpenseForecaster(config=forecast_settings, clock=fixed_clock)


@pytest.fixture(scope="session")
def app_with_test_settings(test_settings):
    """FastAPI app with test settings."""
    from expense_forecast.main import create_app
    return create_app(test_settings)


@pytest.fixture
def client(app_with_test_settings) -> TestClient:
    """Synchronous test client."""
    with TestClient(app_with_test_settings) as test_client:
        yield test_client


@pytest.fixture
def monthly_records():
    """Build one record per month starting January 2023."""
    def build(amounts, category="Office", field="amount", start_year=2023, start_month=1):
        records = []
        for offset, amount in enumerate(amounts):
            year = start_year + (start_month - 1 + offset) // 12
            month = (start_month - 1 + offset) % 12 + 1
            records.append({
                "date": f"{year:04d}-{month:02d}-10",
                field: amount,
                "category": category
            })
        return records
    return build


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables after each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Pytest markers
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests (>1s)")
