from __future__ import annotations

from typing import Any

from holdwise.adapters.logging_utils import get_logger
from holdwise.analysis.operations import aggregate_expenses, aggregate_income
from holdwise.analysis.purchase import (
    resolve_cash_requirements,
    resolve_financing,
    resolve_purchase_costs,
)
from holdwise.domain.analysis import (
    CashflowSummary,
    CashRequirements,
    ExpenseBreakdown,
    FinancingBreakdown,
    IncomeBreakdown,
    NoiSummary,
    PropertyInfo,
    PurchaseBreakdown,
    QuickAnalysis,
    YearOneAnalysis,
)
from holdwise.domain.assumptions import DefaultAssumptions, ResolvedParameters
from holdwise.domain.finance import amortize_one_year, pct, safe_divide
from holdwise.domain.parameters import PropertyParameters
from holdwise.services.validation import prepare_parameters

logger = get_logger(__name__)


def principal_paid_first_year(financing: FinancingBreakdown) -> float:
    """
    Principal retired by the first 12 payments, summed over every lien.
    Run through the amortization stepper; the split is not linear so it
    cannot be read off the annuity formula.
    """
    return sum(
        amortize_one_year(lien.total_principal, lien.monthly_rate, lien.monthly_payment).yearly_principal
        for lien in financing.liens
    )


def compute_quick_analysis(
    params: ResolvedParameters,
    purchase: PurchaseBreakdown,
    financing: FinancingBreakdown,
    income: IncomeBreakdown,
    expenses: ExpenseBreakdown,
    noi: float,
    annual_cash_flow: float,
    cash_invested: float,
) -> QuickAnalysis:
    price = params.purchase_price
    fmv = params.fair_market_value
    ads = financing.annual_debt_service

    # --- returns ---
    cash_on_cash = safe_divide(annual_cash_flow, cash_invested) * 100
    principal_year1 = principal_paid_first_year(financing)
    equity_roi = safe_divide(principal_year1, cash_invested) * 100
    appreciation_value = fmv * pct(params.appreciation_rate)
    appreciation_roi = safe_divide(appreciation_value, cash_invested) * 100

    return QuickAnalysis(
        cap_rate_on_pp=safe_divide(noi, price) * 100,
        cap_rate_on_fmv=safe_divide(noi, fmv) * 100,
        cash_on_cash_roi=cash_on_cash,
        principal_paid_year1=principal_year1,
        equity_roi=equity_roi,
        appreciation_value=appreciation_value,
        appreciation_roi=appreciation_roi,
        total_roi=cash_on_cash + equity_roi + appreciation_roi,
        # --- lender / valuation ratios ---
        gross_rent_multiplier=safe_divide(price, income.gross_rents),
        debt_coverage_ratio=safe_divide(noi, ads),
        break_even_ratio=safe_divide(expenses.total_expenses + ads, income.effective_gross_income) * 100,
        debt_yield=safe_divide(noi, financing.total_principal) * 100,
        first_lien_ltv=safe_divide(financing.first_lien.total_principal, fmv) * 100,
        first_lien_ltpp=safe_divide(financing.first_lien.total_principal, price) * 100,
        expense_to_income_ratio=safe_divide(expenses.total_expenses, income.effective_gross_income) * 100,
        gross_yield=safe_divide(income.gross_rents, price) * 100,
        rent_to_value=safe_divide(income.gross_rents / 12.0, price) * 100,
    )


def build_year_one(params: ResolvedParameters) -> YearOneAnalysis:
    purchase = resolve_purchase_costs(params)
    financing = resolve_financing(params)
    cash_requirements: CashRequirements = resolve_cash_requirements(params, purchase, financing)

    income = aggregate_income(params.gross_annual_rent, params.other_annual_income, params.vacancy_rate)
    expenses = aggregate_expenses(params, params.gross_annual_rent, income.effective_gross_income)

    # NOI is income after vacancy + operating expenses, BEFORE debt.
    noi = income.effective_gross_income - expenses.total_expenses
    annual_cash_flow = noi - financing.annual_debt_service

    quick = compute_quick_analysis(
        params,
        purchase,
        financing,
        income,
        expenses,
        noi=noi,
        annual_cash_flow=annual_cash_flow,
        cash_invested=cash_requirements.total_cash_required,
    )

    return YearOneAnalysis(
        property_info=PropertyInfo(
            fair_market_value=params.fair_market_value,
            number_of_units=params.number_of_units,
            vacancy_rate=params.vacancy_rate,
            management_rate=params.management_rate,
            maintenance_rate=params.maintenance_rate,
            capex_rate=params.capex_rate,
            appreciation_rate=params.appreciation_rate,
            rent_growth_rate=params.rent_growth_rate,
            expense_growth_rate=params.expense_growth_rate,
            selling_cost_pct=params.selling_cost_pct,
        ),
        purchase=purchase,
        financing=financing,
        income=income,
        expenses=expenses,
        noi=NoiSummary(net_operating_income=noi, monthly_net_operating_income=noi / 12.0),
        cash_requirements=cash_requirements,
        cashflow=CashflowSummary(
            annual_debt_service=financing.annual_debt_service,
            monthly_debt_service=financing.monthly_debt_service,
            annual_profit_or_loss=annual_cash_flow,
            monthly_profit_or_loss=annual_cash_flow / 12.0,
        ),
        quick_analysis=quick,
    )


def get_year_one_analysis(
    params: dict[str, Any] | PropertyParameters,
    defaults: DefaultAssumptions | None = None,
) -> YearOneAnalysis:
    """
    Single-year snapshot: purchase, financing, income/expense roll-up, NOI,
    cash flow and the ratio set.

    Raises InvalidInputError before computing anything if the parameters
    cannot produce an analysis.
    """
    resolved = prepare_parameters(params, defaults)
    analysis = build_year_one(resolved)
    logger.debug(
        "year_one_analysis",
        extra={
            "context": {
                "noi": analysis.noi.net_operating_income,
                "cash_required": analysis.cash_requirements.total_cash_required,
                "dcr": analysis.quick_analysis.debt_coverage_ratio,
            }
        },
    )
    return analysis
