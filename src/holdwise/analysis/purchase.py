import math

from holdwise.domain.analysis import (
    CashRequirements,
    CostLine,
    FinancingBreakdown,
    LoanTerms,
    PurchaseBreakdown,
)
from holdwise.domain.assumptions import ResolvedLien, ResolvedParameters
from holdwise.domain.errors import InvalidInputError
from holdwise.domain.finance import monthly_payment, pct


def resolve_purchase_costs(params: ResolvedParameters) -> PurchaseBreakdown:
    """
    Real purchase price = price + repairs + repair contingency + closing costs.

    Closing costs come from the itemized list when any item carries a
    nonzero amount, otherwise from purchase_price * closing_cost_pct.
    """
    items = tuple(CostLine(name=i.name, amount=i.amount) for i in params.closing_cost_items)

    if any(item.amount for item in items):
        closing_costs = sum(item.amount for item in items)
        mode = "itemized"
    else:
        closing_costs = params.purchase_price * pct(params.closing_cost_pct)
        mode = "percent"

    real_purchase_price = (
        params.purchase_price
        + params.repair_costs
        + params.repair_contingency
        + closing_costs
    )

    return PurchaseBreakdown(
        offer_price=params.purchase_price,
        repairs=params.repair_costs,
        repair_contingency=params.repair_contingency,
        closing_costs=closing_costs,
        closing_cost_mode=mode,
        closing_cost_items=items,
        real_purchase_price=real_purchase_price,
    )


def _loan_terms(lien: ResolvedLien, principal_borrowed: float, field: str) -> LoanTerms:
    mortgage_insurance = principal_borrowed * pct(lien.mortgage_insurance_pct)
    total_principal = principal_borrowed + mortgage_insurance

    payment = monthly_payment(total_principal, lien.interest_rate, lien.amortization_years)
    if not math.isfinite(payment):
        raise InvalidInputError(f"{field}.interest_rate_percent", "payment is not computable")

    n_months = lien.amortization_years * 12
    total_payments = payment * n_months
    first_month_interest = total_principal * pct(lien.interest_rate) / 12.0

    return LoanTerms(
        principal_borrowed=principal_borrowed,
        mortgage_insurance=mortgage_insurance,
        total_principal=total_principal,
        interest_rate=lien.interest_rate,
        amortization_years=lien.amortization_years,
        monthly_payment=payment,
        annual_payment=payment * 12,
        total_payments=total_payments,
        total_interest=max(0.0, total_payments - total_principal),
        first_month_interest=first_month_interest if payment > 0 else 0.0,
        first_month_principal=payment - first_month_interest if payment > 0 else 0.0,
    )


def resolve_financing(params: ResolvedParameters) -> FinancingBreakdown:
    """
    First lien principal = explicit principal, else purchase_price * LTV.
    A mortgage-insurance fee is financed on top of the borrowed amount.
    A second lien is computed the same way and adds to debt service.
    """
    first = params.first_lien
    if first.principal is not None:
        borrowed = first.principal
    else:
        borrowed = params.purchase_price * pct(params.loan_to_value_pct)

    first_terms = _loan_terms(first, borrowed, "financing")

    second_terms = None
    if params.second_lien is not None:
        second_terms = _loan_terms(params.second_lien, params.second_lien.principal or 0.0, "financing.second_lien")

    monthly_debt_service = first_terms.monthly_payment
    if second_terms is not None:
        monthly_debt_service += second_terms.monthly_payment

    return FinancingBreakdown(
        first_lien=first_terms,
        second_lien=second_terms,
        monthly_debt_service=monthly_debt_service,
        annual_debt_service=monthly_debt_service * 12,
    )


def resolve_cash_requirements(
    params: ResolvedParameters,
    purchase: PurchaseBreakdown,
    financing: FinancingBreakdown,
) -> CashRequirements:
    # financed mortgage insurance is not cash the buyer brings
    borrowed = financing.first_lien.principal_borrowed
    if financing.second_lien is not None:
        borrowed += financing.second_lien.principal_borrowed

    cash_to_close = purchase.real_purchase_price - borrowed
    return CashRequirements(
        cash_required_to_close=cash_to_close,
        deposits=params.deposits,
        prorated_credits=params.prorated_credits,
        total_cash_required=cash_to_close + params.deposits - params.prorated_credits,
    )
