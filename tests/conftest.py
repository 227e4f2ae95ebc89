# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from holdwise.api.http import app  # ensures imports resolve; run tests from repo root


@pytest.fixture(scope="session")
def client():
    return TestClient(app)


@pytest.fixture
def baseline_params() -> dict:
    """
    300k single family, 80% LTV at 7% over 30 years, 30k gross rent.

    Every assumption is spelled out so results do not depend on the
    environment's HOLDWISE_* defaults.
      - payment ~ 1596.73/mo
      - EGI = 28,500
      - operating expenses = 10,080, NOI = 18,420
      - closing costs 3% = 9,000, cash to close = 69,000
    """
    return {
        "purchase_price": 300_000,
        "fair_market_value": 300_000,
        "closing_cost_percent": 3,
        "gross_annual_rent": 30_000,
        "vacancy_rate_percent": 5,
        "operating_expenses": {
            "property_tax": 3_600,
            "insurance": 1_200,
            "management_percent": 8,
            "maintenance_percent": 5,
            "capex_percent": 5,
        },
        "financing": {
            "loan_to_value_percent": 80,
            "interest_rate_percent": 7,
            "amortization_years": 30,
        },
        "growth": {
            "appreciation_rate_percent": 3,
            "rent_growth_rate_percent": 2,
            "expense_growth_rate_percent": 2,
            "selling_cost_percent": 6,
        },
    }


@pytest.fixture
def cashflow_params() -> dict:
    """
    100k house renting for 2,000/mo: passes the 1% and 2% rules,
    DCR ~2.6, cap rate ~16.6%, cash invested 23,000.
    """
    return {
        "purchase_price": 100_000,
        "closing_cost_percent": 3,
        "gross_annual_rent": 24_000,
        "vacancy_rate_percent": 5,
        "operating_expenses": {
            "property_tax": 1_200,
            "insurance": 800,
            "management_percent": 8,
            "maintenance_percent": 5,
            "capex_percent": 5,
        },
        "financing": {
            "loan_to_value_percent": 80,
            "interest_rate_percent": 7,
            "amortization_years": 30,
        },
    }
