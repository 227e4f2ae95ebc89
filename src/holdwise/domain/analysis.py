from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

ClosingCostMode = Literal["itemized", "percent"]


@dataclass(frozen=True)
class CostLine:
    name: str
    amount: float


# ----------------------------
# Year-one sub-groups
# ----------------------------

@dataclass(frozen=True)
class PropertyInfo:
    fair_market_value: float
    number_of_units: int
    vacancy_rate: float          # all rates in percent
    management_rate: float
    maintenance_rate: float
    capex_rate: float
    appreciation_rate: float
    rent_growth_rate: float
    expense_growth_rate: float
    selling_cost_pct: float


@dataclass(frozen=True)
class PurchaseBreakdown:
    offer_price: float
    repairs: float
    repair_contingency: float
    closing_costs: float
    closing_cost_mode: ClosingCostMode
    closing_cost_items: tuple[CostLine, ...]
    real_purchase_price: float   # price + repairs + contingency + closing costs


@dataclass(frozen=True)
class LoanTerms:
    principal_borrowed: float
    mortgage_insurance: float
    total_principal: float       # borrowed + financed mortgage insurance
    interest_rate: float         # annual, percent
    amortization_years: float
    monthly_payment: float
    annual_payment: float
    total_payments: float        # over the full term
    total_interest: float
    first_month_interest: float
    first_month_principal: float

    @property
    def monthly_rate(self) -> float:
        return self.interest_rate / 100.0 / 12.0


@dataclass(frozen=True)
class FinancingBreakdown:
    first_lien: LoanTerms
    second_lien: LoanTerms | None
    monthly_debt_service: float
    annual_debt_service: float

    @property
    def liens(self) -> tuple[LoanTerms, ...]:
        if self.second_lien is None:
            return (self.first_lien,)
        return (self.first_lien, self.second_lien)

    @property
    def total_principal(self) -> float:
        return sum(lien.total_principal for lien in self.liens)


@dataclass(frozen=True)
class IncomeBreakdown:
    gross_rents: float
    other_income: float
    gross_income: float          # rents + other income
    vacancy_loss: float
    effective_gross_income: float


@dataclass(frozen=True)
class ExpenseBreakdown:
    property_tax: float
    insurance: float
    management: float
    maintenance: float
    capex: float
    hoa: float
    utilities: float
    other: float
    total_expenses: float


@dataclass(frozen=True)
class NoiSummary:
    net_operating_income: float
    monthly_net_operating_income: float


@dataclass(frozen=True)
class CashRequirements:
    cash_required_to_close: float
    deposits: float
    prorated_credits: float
    total_cash_required: float


@dataclass(frozen=True)
class CashflowSummary:
    annual_debt_service: float
    monthly_debt_service: float
    annual_profit_or_loss: float
    monthly_profit_or_loss: float


@dataclass(frozen=True)
class QuickAnalysis:
    # percents unless noted
    cap_rate_on_pp: float
    cap_rate_on_fmv: float
    cash_on_cash_roi: float
    principal_paid_year1: float   # dollars
    equity_roi: float
    appreciation_value: float     # dollars
    appreciation_roi: float
    total_roi: float
    gross_rent_multiplier: float  # ratio
    debt_coverage_ratio: float    # ratio
    break_even_ratio: float
    debt_yield: float
    first_lien_ltv: float
    first_lien_ltpp: float
    expense_to_income_ratio: float
    gross_yield: float
    rent_to_value: float


@dataclass(frozen=True)
class YearOneAnalysis:
    property_info: PropertyInfo
    purchase: PurchaseBreakdown
    financing: FinancingBreakdown
    income: IncomeBreakdown
    expenses: ExpenseBreakdown
    noi: NoiSummary
    cash_requirements: CashRequirements
    cashflow: CashflowSummary
    quick_analysis: QuickAnalysis

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ----------------------------
# Projection
# ----------------------------

@dataclass(frozen=True)
class ProjectionRow:
    year: int

    # income
    gross_rent: float
    other_income: float
    vacancy_loss: float
    operating_income: float

    # expenses
    property_tax: float
    insurance: float
    management: float
    maintenance: float
    capex: float
    hoa: float
    utilities: float
    other_expenses: float
    total_expenses: float

    # cash flow
    noi: float
    loan_payment: float
    cash_flow: float
    depreciation: float
    total_deductions: float
    tax_savings: float
    post_tax_cash_flow: float

    # loan & equity
    property_value: float
    loan_balance: float
    yearly_principal: float
    yearly_interest: float
    total_equity: float

    # sale analysis
    selling_costs: float
    sale_proceeds: float
    cumulative_cash_flow: float
    total_cash_invested: float
    total_profit: float

    # returns (percent)
    cap_rate_purchase: float
    cap_rate_market: float
    cash_on_cash: float
    return_on_equity: float
    roi: float
    irr: float

    # ratios
    expense_ratio: float
    ltv_ratio: float
    rent_to_value: float
    gross_rent_multiplier: float
    debt_coverage_ratio: float
    break_even_ratio: float
    debt_yield: float
    equity_multiple: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
