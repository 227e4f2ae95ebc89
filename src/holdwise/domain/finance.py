import math
from dataclasses import dataclass

# Balances below this after a payment are treated as paid off.
PAYOFF_TOLERANCE = 1e-6


def safe_divide(numerator: float, denominator: float) -> float:
    """
    numerator / denominator, or exactly 0.0 when the denominator is zero or
    not finite. Every ratio in the engine goes through here.
    """
    if denominator == 0 or not math.isfinite(denominator):
        return 0.0
    result = numerator / denominator
    if not math.isfinite(result):
        return 0.0
    return result


def pct(value: float) -> float:
    """Plain percent (7.0) -> fraction (0.07)."""
    return value / 100.0


def monthly_payment(principal: float, annual_rate_percent: float, years: float) -> float:
    """
    Standard fixed-rate amortization payment:
    M = P * r(1+r)^n / ((1+r)^n - 1)

    Evaluated as P * r / (1 - (1+r)^-n) with log1p/expm1, which is the same
    number but neither overflows for very long terms nor loses the rate
    when it is tiny.
    P = principal, r = annual rate / 12, n = years * 12
    """
    if principal <= 0:
        return 0.0
    n = years * 12
    if n <= 0:
        return 0.0

    r = pct(annual_rate_percent) / 12.0
    if r == 0:
        return principal / n

    denom = -math.expm1(-n * math.log1p(r))
    if denom == 0:
        return principal / n
    return principal * r / denom


@dataclass(frozen=True)
class AmortizationYear:
    start_balance: float
    end_balance: float
    yearly_principal: float
    yearly_interest: float


def amortize_one_year(balance: float, monthly_rate: float, payment: float) -> AmortizationYear:
    """
    Advance a loan by 12 monthly payments.

    The balance is clamped at zero once the loan is paid off; interest and
    principal are still accumulated month by month so that
    principal + interest == payment * 12.
    """
    start = balance
    yearly_principal = 0.0
    yearly_interest = 0.0

    for _ in range(12):
        interest = balance * monthly_rate
        principal = payment - interest
        yearly_interest += interest
        yearly_principal += principal
        balance = max(0.0, balance - principal)
        if balance < PAYOFF_TOLERANCE:
            balance = 0.0

    return AmortizationYear(
        start_balance=start,
        end_balance=balance,
        yearly_principal=yearly_principal,
        yearly_interest=yearly_interest,
    )
