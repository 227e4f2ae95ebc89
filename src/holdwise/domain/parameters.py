from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Every *_percent field is a plain percent: 7.0 means 7%.
# None means "not supplied" and resolves to the default table;
# an explicit 0 is a valid override.


class ClosingCostItem(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    amount: float = 0.0


class OtherIncome(BaseModel):
    """Annual non-rent income. Subject to vacancy like rent."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    parking: float = 0.0
    laundry: float = 0.0
    storage: float = 0.0
    other: float = 0.0

    @property
    def total(self) -> float:
        return self.parking + self.laundry + self.storage + self.other


class OperatingExpenses(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    # fixed annual dollars, escalated by expense growth in projections
    property_tax: float = 0.0
    insurance: float = 0.0
    hoa: float = 0.0
    utilities: float = 0.0
    other: float = 0.0

    # management applies to operating income (post-vacancy),
    # maintenance and capex to gross rent
    management_percent: float | None = None
    maintenance_percent: float | None = None
    capex_percent: float | None = None


class SecondLien(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    principal: float = 0.0
    interest_rate_percent: float = 0.0
    amortization_years: float = 0.0


class FinancingTerms(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    loan_to_value_percent: float | None = None
    principal: float | None = Field(
        default=None, description="Explicit first-lien principal; overrides loan_to_value_percent"
    )
    interest_rate_percent: float | None = None
    amortization_years: float | None = None
    mortgage_insurance_percent: float = 0.0
    second_lien: SecondLien | None = None


class GrowthAssumptions(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    appreciation_rate_percent: float | None = None
    rent_growth_rate_percent: float | None = None
    expense_growth_rate_percent: float | None = None
    selling_cost_percent: float | None = None


class PropertyParameters(BaseModel):
    """
    Everything the projection engine needs for one property.

    Collaborators (listing source, rent estimator, user settings) fill this
    in; the engine never reaches for anything outside it.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    purchase_price: float | None = Field(default=None, description="Offer / purchase price")
    fair_market_value: float | None = Field(default=None, description="After-repair value; defaults to purchase_price")

    repair_costs: float = 0.0
    repair_contingency: float = 0.0
    closing_cost_items: list[ClosingCostItem] = Field(default_factory=list)
    closing_cost_percent: float | None = None

    gross_annual_rent: float | None = None
    unit_monthly_rents: list[float] | None = Field(
        default=None, description="Per-unit monthly rents; used when gross_annual_rent is absent"
    )
    vacancy_rate_percent: float | None = None
    other_income: OtherIncome = Field(default_factory=OtherIncome)

    operating_expenses: OperatingExpenses = Field(default_factory=OperatingExpenses)
    financing: FinancingTerms = Field(default_factory=FinancingTerms)
    growth: GrowthAssumptions = Field(default_factory=GrowthAssumptions)

    number_of_units: int = 1

    # cash requirements
    deposits: float = 0.0
    prorated_credits: float = 0.0
