# src/holdwise/domain/assumptions.py
from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict

from holdwise.domain.parameters import ClosingCostItem, OtherIncome


class DefaultAssumptions(BaseModel):
    """
    Named default percentages used when a parameter is absent.

    Frozen: one table is shared by every computation.
    """
    model_config = ConfigDict(frozen=True)

    vacancy_rate: float = 5.0
    management_rate: float = 8.0
    maintenance_rate: float = 5.0
    capex_rate: float = 5.0
    appreciation_rate: float = 3.0
    rent_growth_rate: float = 2.0
    expense_growth_rate: float = 2.0
    selling_cost_pct: float = 6.0
    loan_to_value_pct: float = 80.0
    interest_rate: float = 7.0
    amortization_years: float = 30.0
    closing_cost_pct: float = 3.0

    @classmethod
    def from_config(cls, cfg) -> DefaultAssumptions:
        return cls(
            vacancy_rate=cfg.VACANCY_RATE,
            management_rate=cfg.MANAGEMENT_RATE,
            maintenance_rate=cfg.MAINTENANCE_RATE,
            capex_rate=cfg.CAPEX_RATE,
            appreciation_rate=cfg.APPRECIATION_RATE,
            rent_growth_rate=cfg.RENT_GROWTH_RATE,
            expense_growth_rate=cfg.EXPENSE_GROWTH_RATE,
            selling_cost_pct=cfg.SELLING_COST_PCT,
            loan_to_value_pct=cfg.LOAN_TO_VALUE_PCT,
            interest_rate=cfg.INTEREST_RATE,
            amortization_years=cfg.AMORTIZATION_YEARS,
            closing_cost_pct=cfg.DEFAULT_CLOSING_COST_PCT,
        )


@dataclass(frozen=True)
class ResolvedLien:
    principal: float | None         # None => derive from LTV (first lien only)
    interest_rate: float            # percent
    amortization_years: float
    mortgage_insurance_pct: float = 0.0


@dataclass(frozen=True)
class ResolvedParameters:
    """
    PropertyParameters after validation and default resolution.
    No optional numbers left: every field is what the formulas use.
    """
    purchase_price: float
    fair_market_value: float
    repair_costs: float
    repair_contingency: float
    closing_cost_items: tuple[ClosingCostItem, ...]
    closing_cost_pct: float

    gross_annual_rent: float
    other_income: OtherIncome
    vacancy_rate: float

    property_tax: float
    insurance: float
    hoa: float
    utilities: float
    other_expenses: float
    management_rate: float
    maintenance_rate: float
    capex_rate: float

    loan_to_value_pct: float
    first_lien: ResolvedLien
    second_lien: ResolvedLien | None

    appreciation_rate: float
    rent_growth_rate: float
    expense_growth_rate: float
    selling_cost_pct: float

    number_of_units: int
    deposits: float
    prorated_credits: float

    @property
    def other_annual_income(self) -> float:
        return self.other_income.total
