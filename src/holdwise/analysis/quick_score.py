from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Literal

import numpy as np
import pandas as pd

from holdwise.adapters.config import config
from holdwise.domain.errors import InvalidInputError
from holdwise.domain.finance import monthly_payment, pct, safe_divide

QuickLabel = Literal["good", "okay", "poor", "unknown"]

# Listing-card shortcuts (percent of monthly rent unless noted)
DOWN_PAYMENT_PCT = 20.0
LOAN_TERM_YEARS = 30
MANAGEMENT_PCT = 10.0
REPAIRS_PCT = 5.0
CAPEX_PCT = 5.0

GOOD_MIN_CASH_FLOW = 200.0
GOOD_MIN_CAP_RATE = 8.0
OKAY_MIN_CAP_RATE = 5.0


def estimate_property_tax(purchase_price: float) -> float:
    """Annual tax at the 1.1% national average."""
    return purchase_price * 0.011


def estimate_insurance(purchase_price: float) -> float:
    """Annual premium: $1,200 base plus $3.50 per $1,000 of price."""
    return 1200.0 + (purchase_price / 1000.0) * 3.5


@dataclass(frozen=True)
class QuickScore:
    label: QuickLabel
    reasons: tuple[str, ...]
    monthly_rent: float
    monthly_expenses: float
    monthly_mortgage: float
    monthly_cash_flow: float
    annual_cash_flow: float
    cap_rate: float
    cash_on_cash: float
    passes_one_percent: bool
    one_percent_target: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _label(passes_one_percent: bool, monthly_cash_flow: float, cap_rate: float) -> QuickLabel:
    if passes_one_percent and monthly_cash_flow > GOOD_MIN_CASH_FLOW and cap_rate > GOOD_MIN_CAP_RATE:
        return "good"
    if monthly_cash_flow > 0 and cap_rate > OKAY_MIN_CAP_RATE:
        return "okay"
    return "poor"


def quick_score(
    purchase_price: float,
    monthly_rent: float | None,
    *,
    annual_property_tax: float | None = None,
    annual_insurance: float | None = None,
    vacancy_rate_percent: float | None = None,
    hoa_monthly: float = 0.0,
    interest_rate_percent: float | None = None,
) -> QuickScore:
    """
    Fast screen for a listing given only price and rent.

    Tax and insurance fall back to the estimators above. Vacancy and
    interest fall back to the configured defaults.
    """
    if purchase_price is None or not math.isfinite(purchase_price) or purchase_price < 0:
        raise InvalidInputError("purchase_price", "must be a non-negative number")

    if not monthly_rent:
        return QuickScore(
            label="unknown",
            reasons=("Rent data unavailable",),
            monthly_rent=0.0,
            monthly_expenses=0.0,
            monthly_mortgage=0.0,
            monthly_cash_flow=0.0,
            annual_cash_flow=0.0,
            cap_rate=0.0,
            cash_on_cash=0.0,
            passes_one_percent=False,
            one_percent_target=purchase_price * 0.01,
        )

    tax = estimate_property_tax(purchase_price) if annual_property_tax is None else annual_property_tax
    insurance = estimate_insurance(purchase_price) if annual_insurance is None else annual_insurance
    vacancy = config.VACANCY_RATE if vacancy_rate_percent is None else vacancy_rate_percent
    rate = config.INTEREST_RATE if interest_rate_percent is None else interest_rate_percent

    down_payment = purchase_price * pct(DOWN_PAYMENT_PCT)
    mortgage = monthly_payment(purchase_price - down_payment, rate, LOAN_TERM_YEARS)

    expenses = (
        tax / 12.0
        + insurance / 12.0
        + monthly_rent * pct(vacancy)
        + monthly_rent * pct(MANAGEMENT_PCT)
        + monthly_rent * pct(REPAIRS_PCT)
        + monthly_rent * pct(CAPEX_PCT)
        + hoa_monthly
    )

    monthly_noi = monthly_rent - expenses
    monthly_cash_flow = monthly_noi - mortgage
    annual_cash_flow = monthly_cash_flow * 12.0
    cap_rate = safe_divide(monthly_noi * 12.0, purchase_price) * 100
    coc = safe_divide(annual_cash_flow, down_payment) * 100

    target = purchase_price * 0.01
    passes = monthly_rent >= target
    label = _label(passes, monthly_cash_flow, cap_rate)

    if label == "poor":
        reasons: tuple[str, ...] = ("Low returns", "May not cash flow")
    else:
        reasons = tuple(
            reason
            for ok, reason in (
                (passes, "Passes 1% rule"),
                (monthly_cash_flow > GOOD_MIN_CASH_FLOW, "Positive cash flow"),
                (cap_rate > GOOD_MIN_CAP_RATE, "High cap rate"),
                (coc > 8, "Good CoC return"),
            )
            if ok
        )

    return QuickScore(
        label=label,
        reasons=reasons,
        monthly_rent=float(monthly_rent),
        monthly_expenses=expenses,
        monthly_mortgage=mortgage,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=annual_cash_flow,
        cap_rate=cap_rate,
        cash_on_cash=coc,
        passes_one_percent=passes,
        one_percent_target=target,
    )


def quick_score_df(
    df: pd.DataFrame,
    *,
    vacancy_rate_percent: float | None = None,
    interest_rate_percent: float | None = None,
) -> pd.DataFrame:
    """
    Vectorized quick score over a DataFrame of listings.

    Expected columns on df:
      - purchase_price
      - monthly_rent
    Optional (NaN or missing falls back to the estimators):
      - taxes_annual
      - insurance_annual
      - hoa_monthly

    Returns a copy of df with the score columns appended.
    """
    out = df.copy()
    price = out["purchase_price"].to_numpy(dtype=float)
    bad = ~np.isfinite(price) | (price < 0)
    if bad.any():
        row = int(np.flatnonzero(bad)[0])
        raise InvalidInputError(f"purchase_price.{row}", "must be a non-negative number")
    rent = out["monthly_rent"].fillna(0.0).to_numpy(dtype=float)

    def _col(name: str, fallback: np.ndarray) -> np.ndarray:
        if name not in out.columns:
            return fallback
        values = out[name].to_numpy(dtype=float)
        return np.where(np.isnan(values), fallback, values)

    taxes = _col("taxes_annual", price * 0.011)
    insurance = _col("insurance_annual", 1200.0 + (price / 1000.0) * 3.5)
    hoa = _col("hoa_monthly", np.zeros_like(price))

    vacancy = pct(config.VACANCY_RATE if vacancy_rate_percent is None else vacancy_rate_percent)
    rate = config.INTEREST_RATE if interest_rate_percent is None else interest_rate_percent

    # --- Financing ---
    down_payment = price * pct(DOWN_PAYMENT_PCT)
    loan_amount = price - down_payment
    r_monthly = pct(rate) / 12.0
    n_months = LOAN_TERM_YEARS * 12

    mortgage = np.zeros_like(price, dtype=float)
    mask_loan = loan_amount > 0
    if mask_loan.any():
        la = loan_amount[mask_loan]
        if r_monthly > 0:
            mortgage[mask_loan] = la * r_monthly / -np.expm1(-n_months * np.log1p(r_monthly))
        else:
            mortgage[mask_loan] = la / n_months

    # --- Expenses ---
    expenses = (
        taxes / 12.0
        + insurance / 12.0
        + hoa
        + rent * (vacancy + pct(MANAGEMENT_PCT) + pct(REPAIRS_PCT) + pct(CAPEX_PCT))
    )

    noi_monthly = rent - expenses
    cash_flow = noi_monthly - mortgage

    cap_rate = np.zeros_like(price, dtype=float)
    mask_price = price > 0
    cap_rate[mask_price] = noi_monthly[mask_price] * 12.0 / price[mask_price] * 100

    coc = np.zeros_like(price, dtype=float)
    mask_cash = down_payment > 0
    coc[mask_cash] = cash_flow[mask_cash] * 12.0 / down_payment[mask_cash] * 100

    passes = rent >= price * 0.01
    has_rent = rent > 0

    labels = np.select(
        [
            ~has_rent,
            passes & (cash_flow > GOOD_MIN_CASH_FLOW) & (cap_rate > GOOD_MIN_CAP_RATE),
            (cash_flow > 0) & (cap_rate > OKAY_MIN_CAP_RATE),
        ],
        ["unknown", "good", "okay"],
        default="poor",
    )

    out["monthly_mortgage"] = np.where(has_rent, mortgage, 0.0)
    out["monthly_expenses"] = np.where(has_rent, expenses, 0.0)
    out["monthly_cash_flow"] = np.where(has_rent, cash_flow, 0.0)
    out["cap_rate"] = np.where(has_rent, cap_rate, 0.0)
    out["cash_on_cash"] = np.where(has_rent, coc, 0.0)
    out["passes_one_percent"] = passes & has_rent
    out["label"] = labels
    return out
