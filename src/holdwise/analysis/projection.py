from __future__ import annotations

from typing import Any, Sequence

import pandas as pd

from holdwise.adapters.logging_utils import get_logger
from holdwise.analysis.operations import aggregate_expenses, aggregate_income
from holdwise.analysis.year_one import build_year_one
from holdwise.domain.analysis import ProjectionRow, YearOneAnalysis
from holdwise.domain.assumptions import DefaultAssumptions, ResolvedParameters
from holdwise.domain.finance import amortize_one_year, pct, safe_divide
from holdwise.domain.parameters import PropertyParameters
from holdwise.services.validation import prepare_parameters

logger = get_logger(__name__)

PROJECTION_YEARS = 30

# Simplified tax model
DEPRECIATION_PERIOD_YEARS = 27.5
DEPRECIABLE_SHARE = 0.85      # non-land share of value
TAX_RATE = 0.25


def _irr_lump_sum(sale_proceeds: float, cumulative_cash_flow: float, cash_invested: float, year: int) -> float:
    """
    Simplified IRR: every interim cash flow is treated as if received with
    the sale at the end of `year`, so the return is the annualized growth of
    one lump sum. Not a discounted-cash-flow solve.
    """
    multiple = safe_divide(sale_proceeds + cumulative_cash_flow, cash_invested)
    if multiple <= 0:
        return 0.0
    return (multiple ** (1.0 / year) - 1.0) * 100


def build_projection(params: ResolvedParameters, year_one: YearOneAnalysis) -> list[ProjectionRow]:
    """
    Left-to-right fold over years 1..30.

    Carried state: property value, one balance per lien, cumulative cash flow.
    Property value compounds starting in year 1; rent and expenses compound
    with exponent (year - 1), i.e. year 1 is the base year.

    The payment column stays at the scheduled debt service for all 30 years,
    so a lien shorter than the horizon keeps contributing its payment (and
    principal) after payoff; this keeps principal + interest == payment every
    year.
    """
    financing = year_one.financing
    liens = financing.liens
    cash_invested = year_one.cash_requirements.total_cash_required
    purchase_basis = year_one.purchase.real_purchase_price

    appreciation = pct(params.appreciation_rate)
    rent_growth = pct(params.rent_growth_rate)
    expense_growth = pct(params.expense_growth_rate)
    selling_rate = pct(params.selling_cost_pct)

    base_rent = params.gross_annual_rent
    base_other = params.other_annual_income
    loan_payments = financing.monthly_debt_service * 12

    property_value = params.fair_market_value
    balances = [lien.total_principal for lien in liens]
    cumulative_cash_flow = 0.0

    rows: list[ProjectionRow] = []
    for year in range(1, PROJECTION_YEARS + 1):
        # 1. value
        property_value *= 1 + appreciation

        # 2-3. income and expenses
        rent_factor = (1 + rent_growth) ** (year - 1)
        income = aggregate_income(base_rent * rent_factor, base_other * rent_factor, params.vacancy_rate)
        expenses = aggregate_expenses(
            params,
            gross_rent=income.gross_rents,
            operating_income=income.effective_gross_income,
            growth_factor=(1 + expense_growth) ** (year - 1),
        )

        # 4. NOI and cash flow
        noi = income.effective_gross_income - expenses.total_expenses
        cash_flow = noi - loan_payments

        # 5. amortization
        starting_balance = sum(balances)
        yearly_principal = 0.0
        yearly_interest = 0.0
        for i, lien in enumerate(liens):
            step = amortize_one_year(balances[i], lien.monthly_rate, lien.monthly_payment)
            balances[i] = step.end_balance
            yearly_principal += step.yearly_principal
            yearly_interest += step.yearly_interest
        loan_balance = sum(balances)

        # 6-7. tax shield
        if year <= DEPRECIATION_PERIOD_YEARS:
            depreciation = (property_value * DEPRECIABLE_SHARE) / DEPRECIATION_PERIOD_YEARS
        else:
            depreciation = 0.0
        total_deductions = expenses.total_expenses + yearly_interest + depreciation
        tax_savings = total_deductions * TAX_RATE

        # 8-10. equity and exit
        total_equity = property_value - loan_balance
        selling_costs = property_value * selling_rate
        sale_proceeds = property_value - selling_costs - loan_balance
        cumulative_cash_flow += cash_flow
        total_profit = sale_proceeds + cumulative_cash_flow - cash_invested

        rows.append(
            ProjectionRow(
                year=year,
                gross_rent=income.gross_rents,
                other_income=income.other_income,
                vacancy_loss=income.vacancy_loss,
                operating_income=income.effective_gross_income,
                property_tax=expenses.property_tax,
                insurance=expenses.insurance,
                management=expenses.management,
                maintenance=expenses.maintenance,
                capex=expenses.capex,
                hoa=expenses.hoa,
                utilities=expenses.utilities,
                other_expenses=expenses.other,
                total_expenses=expenses.total_expenses,
                noi=noi,
                loan_payment=loan_payments,
                cash_flow=cash_flow,
                depreciation=depreciation,
                total_deductions=total_deductions,
                tax_savings=tax_savings,
                post_tax_cash_flow=cash_flow + tax_savings,
                property_value=property_value,
                loan_balance=loan_balance,
                yearly_principal=yearly_principal,
                yearly_interest=yearly_interest,
                total_equity=total_equity,
                selling_costs=selling_costs,
                sale_proceeds=sale_proceeds,
                cumulative_cash_flow=cumulative_cash_flow,
                total_cash_invested=cash_invested,
                total_profit=total_profit,
                # 11. returns
                cap_rate_purchase=safe_divide(noi, purchase_basis) * 100,
                cap_rate_market=safe_divide(noi, property_value) * 100,
                cash_on_cash=safe_divide(cash_flow, cash_invested) * 100,
                return_on_equity=safe_divide(cash_flow, total_equity) * 100 if total_equity > 0 else 0.0,
                roi=safe_divide(cash_flow + yearly_principal, cash_invested) * 100,
                # 12. IRR
                irr=_irr_lump_sum(sale_proceeds, cumulative_cash_flow, cash_invested, year),
                expense_ratio=safe_divide(expenses.total_expenses, income.effective_gross_income) * 100,
                ltv_ratio=safe_divide(loan_balance, property_value) * 100,
                rent_to_value=safe_divide(income.gross_rents / 12.0, property_value) * 100,
                gross_rent_multiplier=safe_divide(property_value, income.gross_rents),
                debt_coverage_ratio=safe_divide(noi, loan_payments),
                break_even_ratio=safe_divide(
                    expenses.total_expenses + loan_payments, income.effective_gross_income
                ) * 100,
                debt_yield=safe_divide(noi, starting_balance) * 100,
                equity_multiple=safe_divide(sale_proceeds + cumulative_cash_flow, cash_invested),
            )
        )

    return rows


def get_thirty_year_projection(
    params: dict[str, Any] | PropertyParameters,
    defaults: DefaultAssumptions | None = None,
) -> list[ProjectionRow]:
    """
    Exactly 30 rows, index 0 = year 1.

    Raises InvalidInputError before the loop starts if the parameters
    cannot produce a projection.
    """
    resolved = prepare_parameters(params, defaults)
    rows = build_projection(resolved, build_year_one(resolved))
    logger.debug(
        "thirty_year_projection",
        extra={"context": {"year30_equity": rows[-1].total_equity, "year30_irr": rows[-1].irr}},
    )
    return rows


def analyze(
    params: dict[str, Any] | PropertyParameters,
    defaults: DefaultAssumptions | None = None,
) -> tuple[YearOneAnalysis, list[ProjectionRow]]:
    """Year-one snapshot and projection from one validation pass."""
    resolved = prepare_parameters(params, defaults)
    year_one = build_year_one(resolved)
    return year_one, build_projection(resolved, year_one)


def projection_to_frame(rows: Sequence[ProjectionRow]) -> pd.DataFrame:
    """Projection as a table indexed by year, one column per row field."""
    df = pd.DataFrame([r.to_dict() for r in rows])
    if df.empty:
        return df
    return df.set_index("year")
