from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Literal

from holdwise.adapters.config import config
from holdwise.domain.analysis import YearOneAnalysis
from holdwise.domain.finance import safe_divide

Rating = Literal["Excellent", "Good", "Fair", "Poor"]


@dataclass(frozen=True)
class RuleCheck:
    passes: bool
    actual: float
    target: float
    message: str


@dataclass(frozen=True)
class OverallScore:
    score: int
    max_score: int
    percentage: float
    rating: Rating


@dataclass(frozen=True)
class InvestmentRules:
    one_percent: RuleCheck
    two_percent: RuleCheck
    fifty_percent: RuleCheck
    debt_coverage: RuleCheck
    overall: OverallScore

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PurchaseCriteria:
    cash_needed: RuleCheck
    cash_flow: RuleCheck
    fifty_percent: RuleCheck

    @property
    def all_pass(self) -> bool:
        return self.cash_needed.passes and self.cash_flow.passes and self.fifty_percent.passes

    def to_dict(self) -> dict[str, Any]:
        return asdict(self) | {"all_pass": self.all_pass}


def _rent_rule(analysis: YearOneAnalysis, percent: float) -> RuleCheck:
    monthly_rent = analysis.income.gross_rents / 12.0
    target = analysis.purchase.offer_price * percent / 100.0
    passes = monthly_rent >= target
    verb = "Passes" if passes else "Fails"
    op = ">=" if passes else "<"
    return RuleCheck(
        passes=passes,
        actual=monthly_rent,
        target=target,
        message=f"{verb} {percent:g}% rule (${monthly_rent:,.0f} {op} ${target:,.0f})",
    )


def check_one_percent_rule(analysis: YearOneAnalysis) -> RuleCheck:
    """Monthly rent should be at least 1% of the purchase price."""
    return _rent_rule(analysis, 1.0)


def check_two_percent_rule(analysis: YearOneAnalysis) -> RuleCheck:
    return _rent_rule(analysis, 2.0)


def check_fifty_percent_rule(analysis: YearOneAnalysis, max_ratio: float | None = None) -> RuleCheck:
    """Operating expenses should stay within half of gross income."""
    limit = config.MAX_EXPENSE_TO_INCOME_PCT if max_ratio is None else max_ratio
    ratio = safe_divide(analysis.expenses.total_expenses, analysis.income.gross_income) * 100
    passes = ratio <= limit
    return RuleCheck(
        passes=passes,
        actual=ratio,
        target=limit,
        message=(
            f"Expenses are {ratio:.1f}% of income "
            + (f"(<= {limit:g}%)" if passes else f"(> {limit:g}%)")
        ),
    )


def check_debt_coverage(analysis: YearOneAnalysis, min_dcr: float | None = None) -> RuleCheck:
    """Lenders typically want DCR >= 1.25. An unfinanced property passes."""
    target = config.MIN_DSCR_GOOD if min_dcr is None else min_dcr
    dcr = analysis.quick_analysis.debt_coverage_ratio
    unfinanced = analysis.financing.annual_debt_service == 0
    passes = unfinanced or dcr >= target
    if unfinanced:
        message = "No debt service"
    elif passes:
        message = f"Strong debt coverage ({dcr:.2f}x, >= {target:.2f}x recommended)"
    else:
        message = f"Weak debt coverage ({dcr:.2f}x, < {target:.2f}x recommended)"
    return RuleCheck(passes=passes, actual=dcr, target=target, message=message)


def overall_score(analysis: YearOneAnalysis, one_percent: RuleCheck, debt_coverage: RuleCheck) -> OverallScore:
    qa = analysis.quick_analysis
    score = 0
    max_score = 0

    # Cap rate (0-3 points)
    max_score += 3
    if qa.cap_rate_on_pp >= 10:
        score += 3
    elif qa.cap_rate_on_pp >= 8:
        score += 2
    elif qa.cap_rate_on_pp >= 6:
        score += 1

    # Cash on cash (0-3 points)
    max_score += 3
    if qa.cash_on_cash_roi >= 12:
        score += 3
    elif qa.cash_on_cash_roi >= 8:
        score += 2
    elif qa.cash_on_cash_roi >= 5:
        score += 1

    # 1% rule (0-2 points)
    max_score += 2
    if one_percent.passes:
        score += 2

    # Debt coverage (0-2 points)
    max_score += 2
    if debt_coverage.passes:
        score += 2

    percentage = score / max_score * 100
    if percentage >= 80:
        rating: Rating = "Excellent"
    elif percentage >= 60:
        rating = "Good"
    elif percentage >= 40:
        rating = "Fair"
    else:
        rating = "Poor"

    return OverallScore(score=score, max_score=max_score, percentage=percentage, rating=rating)


def evaluate_rules(analysis: YearOneAnalysis) -> InvestmentRules:
    one = check_one_percent_rule(analysis)
    dcr = check_debt_coverage(analysis)
    return InvestmentRules(
        one_percent=one,
        two_percent=check_two_percent_rule(analysis),
        fifty_percent=check_fifty_percent_rule(analysis),
        debt_coverage=dcr,
        overall=overall_score(analysis, one, dcr),
    )


def evaluate_purchase_criteria(
    analysis: YearOneAnalysis,
    *,
    max_cash_needed: float | None = None,
    min_monthly_cash_flow: float | None = None,
) -> PurchaseCriteria:
    cash_cap = config.MAX_CASH_NEEDED if max_cash_needed is None else max_cash_needed
    cf_floor = config.MIN_MONTHLY_CASHFLOW if min_monthly_cash_flow is None else min_monthly_cash_flow

    cash_needed = analysis.cash_requirements.total_cash_required
    monthly_cf = analysis.cashflow.monthly_profit_or_loss
    expense_ratio = analysis.quick_analysis.expense_to_income_ratio
    limit = config.MAX_EXPENSE_TO_INCOME_PCT

    return PurchaseCriteria(
        cash_needed=RuleCheck(
            passes=cash_needed < cash_cap,
            actual=cash_needed,
            target=cash_cap,
            message=f"Total cash needed less than ${cash_cap:,.0f}",
        ),
        cash_flow=RuleCheck(
            passes=monthly_cf > cf_floor,
            actual=monthly_cf,
            target=cf_floor,
            message=f"Cash flow greater than ${cf_floor:,.0f}/mo",
        ),
        fifty_percent=RuleCheck(
            passes=expense_ratio <= limit,
            actual=expense_ratio,
            target=limit,
            message=f"Operating expenses at most {limit:g}% of income",
        ),
    )
