from holdwise.domain.analysis import ExpenseBreakdown, IncomeBreakdown
from holdwise.domain.assumptions import ResolvedParameters
from holdwise.domain.finance import pct


def aggregate_income(gross_rent: float, other_income: float, vacancy_rate_percent: float) -> IncomeBreakdown:
    """
    Vacancy is charged on total income (rent + parking/laundry/storage/other),
    not on rent alone.
    """
    gross_income = gross_rent + other_income
    vacancy_loss = gross_income * pct(vacancy_rate_percent)
    return IncomeBreakdown(
        gross_rents=gross_rent,
        other_income=other_income,
        gross_income=gross_income,
        vacancy_loss=vacancy_loss,
        effective_gross_income=gross_income - vacancy_loss,
    )


def aggregate_expenses(
    params: ResolvedParameters,
    gross_rent: float,
    operating_income: float,
    growth_factor: float = 1.0,
) -> ExpenseBreakdown:
    """
    Operating expenses (debt service is financing, not operations).

    - fixed dollar lines (tax, insurance, HOA, utilities, other) scale with
      growth_factor, i.e. (1 + expense growth)^(year - 1) in projections
    - management: percent of operating income (post-vacancy)
    - maintenance and capex: percent of gross rent
    """
    property_tax = params.property_tax * growth_factor
    insurance = params.insurance * growth_factor
    hoa = params.hoa * growth_factor
    utilities = params.utilities * growth_factor
    other = params.other_expenses * growth_factor

    management = operating_income * pct(params.management_rate)
    maintenance = gross_rent * pct(params.maintenance_rate)
    capex = gross_rent * pct(params.capex_rate)

    total = property_tax + insurance + hoa + utilities + other + management + maintenance + capex

    return ExpenseBreakdown(
        property_tax=property_tax,
        insurance=insurance,
        management=management,
        maintenance=maintenance,
        capex=capex,
        hoa=hoa,
        utilities=utilities,
        other=other,
        total_expenses=total,
    )
