# src/holdwise/api/schemas.py
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# --------------------------------------------
# Analysis / projection
# --------------------------------------------

class AnalysisResponse(BaseModel):
    """
    Response for /analysis.

    year_one is the nested snapshot (property_info, purchase, financing,
    income, expenses, noi, cash_requirements, cashflow, quick_analysis).
    """
    model_config = ConfigDict(extra="allow")

    year_one: dict[str, Any]
    rules: dict[str, Any]
    purchase_criteria: dict[str, Any]


class ProjectionResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    years: int
    rows: list[dict[str, Any]]


class CannotCalculate(BaseModel):
    status: Literal["cannot_calculate"] = "cannot_calculate"
    field: str
    message: str


# --------------------------------------------
# Quick score (listing cards)
# --------------------------------------------

class QuickScoreRequest(BaseModel):
    purchase_price: float = Field(ge=0)
    monthly_rent: float | None = Field(default=None, ge=0)

    annual_property_tax: float | None = Field(default=None, ge=0)
    annual_insurance: float | None = Field(default=None, ge=0)
    vacancy_rate_percent: float | None = Field(default=None, ge=0, le=100)
    hoa_monthly: float = Field(default=0.0, ge=0)
    interest_rate_percent: float | None = Field(default=None, ge=0)


class QuickScoreResponse(BaseModel):
    label: Literal["good", "okay", "poor", "unknown"]
    reasons: list[str]
    monthly_rent: float
    monthly_expenses: float
    monthly_mortgage: float
    monthly_cash_flow: float
    annual_cash_flow: float
    cap_rate: float
    cash_on_cash: float
    passes_one_percent: bool
    one_percent_target: float
