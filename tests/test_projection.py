import copy

import pytest

from holdwise.analysis.projection import (
    DEPRECIABLE_SHARE,
    DEPRECIATION_PERIOD_YEARS,
    PROJECTION_YEARS,
    TAX_RATE,
    analyze,
    get_thirty_year_projection,
    projection_to_frame,
)
from holdwise.domain.errors import InvalidInputError


def test_thirty_rows_in_year_order(baseline_params):
    rows = get_thirty_year_projection(baseline_params)

    assert len(rows) == PROJECTION_YEARS == 30
    assert [r.year for r in rows] == list(range(1, 31))


def test_value_compounds_from_year_one(baseline_params):
    rows = get_thirty_year_projection(baseline_params)

    for r in rows:
        assert r.property_value == pytest.approx(300_000 * 1.03 ** r.year)


def test_rent_and_expenses_compound_from_year_two(baseline_params):
    params = copy.deepcopy(baseline_params)
    params["gross_annual_rent"] = 24_000

    rows = get_thirty_year_projection(params)

    assert rows[0].gross_rent == pytest.approx(24_000)
    assert rows[1].gross_rent == pytest.approx(24_480)
    assert rows[0].property_tax == pytest.approx(3_600)
    assert rows[1].property_tax == pytest.approx(3_672)
    assert rows[9].insurance == pytest.approx(1_200 * 1.02 ** 9)


def test_expense_bases_per_row(baseline_params):
    for r in get_thirty_year_projection(baseline_params):
        assert r.management == pytest.approx(r.operating_income * 0.08)
        assert r.maintenance == pytest.approx(r.gross_rent * 0.05)
        assert r.vacancy_loss == pytest.approx((r.gross_rent + r.other_income) * 0.05)
        assert r.noi == pytest.approx(r.operating_income - r.total_expenses)


def test_depreciation_uses_the_current_value(baseline_params):
    rows = get_thirty_year_projection(baseline_params)

    for r in rows:
        if r.year <= DEPRECIATION_PERIOD_YEARS:
            expected = r.property_value * DEPRECIABLE_SHARE / DEPRECIATION_PERIOD_YEARS
        else:
            expected = 0.0
        assert r.depreciation == pytest.approx(expected)
        assert r.tax_savings == pytest.approx((r.total_expenses + r.yearly_interest + r.depreciation) * TAX_RATE)
        assert r.post_tax_cash_flow == pytest.approx(r.cash_flow + r.tax_savings)

    assert rows[26].depreciation > 0
    assert rows[27].depreciation == 0.0


def test_loan_pays_down_to_exactly_zero(baseline_params):
    rows = get_thirty_year_projection(baseline_params)
    balances = [r.loan_balance for r in rows]

    assert all(b2 <= b1 for b1, b2 in zip(balances, balances[1:]))
    assert balances[0] < 240_000
    assert balances[-1] == 0.0


def test_principal_and_interest_add_up_to_payments(baseline_params):
    for r in get_thirty_year_projection(baseline_params):
        assert r.yearly_principal + r.yearly_interest == pytest.approx(r.loan_payment)


def test_exit_and_profit_columns(baseline_params):
    rows = get_thirty_year_projection(baseline_params)

    running = 0.0
    for r in rows:
        running += r.cash_flow
        assert r.cumulative_cash_flow == pytest.approx(running)
        assert r.total_equity == pytest.approx(r.property_value - r.loan_balance)
        assert r.selling_costs == pytest.approx(r.property_value * 0.06)
        assert r.sale_proceeds == pytest.approx(r.property_value - r.selling_costs - r.loan_balance)
        assert r.total_cash_invested == pytest.approx(69_000)
        assert r.total_profit == pytest.approx(r.sale_proceeds + r.cumulative_cash_flow - 69_000)


def test_return_metrics(baseline_params):
    rows = get_thirty_year_projection(baseline_params)
    r = rows[4]

    # cap rate on purchase is measured against the real purchase price
    assert r.cap_rate_purchase == pytest.approx(r.noi / 309_000 * 100)
    assert r.cap_rate_market == pytest.approx(r.noi / r.property_value * 100)
    assert r.cash_on_cash == pytest.approx(r.cash_flow / 69_000 * 100)
    assert r.return_on_equity == pytest.approx(r.cash_flow / r.total_equity * 100)
    assert r.roi == pytest.approx((r.cash_flow + r.yearly_principal) / 69_000 * 100)

    multiple = (r.sale_proceeds + r.cumulative_cash_flow) / 69_000
    assert r.equity_multiple == pytest.approx(multiple)
    assert r.irr == pytest.approx((multiple ** (1 / 5) - 1) * 100)


def test_row_ratios(baseline_params):
    r = get_thirty_year_projection(baseline_params)[2]

    assert r.expense_ratio == pytest.approx(r.total_expenses / r.operating_income * 100)
    assert r.ltv_ratio == pytest.approx(r.loan_balance / r.property_value * 100)
    assert r.rent_to_value == pytest.approx(r.gross_rent / 12 / r.property_value * 100)
    assert r.gross_rent_multiplier == pytest.approx(r.property_value / r.gross_rent)
    assert r.debt_coverage_ratio == pytest.approx(r.noi / r.loan_payment)
    assert r.break_even_ratio == pytest.approx((r.total_expenses + r.loan_payment) / r.operating_income * 100)


def test_projection_is_deterministic(baseline_params):
    first = [r.to_dict() for r in get_thirty_year_projection(baseline_params)]
    second = [r.to_dict() for r in get_thirty_year_projection(copy.deepcopy(baseline_params))]
    assert first == second


def test_zero_financing_projection(baseline_params):
    params = copy.deepcopy(baseline_params)
    params["financing"]["loan_to_value_percent"] = 0

    for r in get_thirty_year_projection(params):
        assert r.loan_balance == 0.0
        assert r.loan_payment == 0.0
        assert r.yearly_interest == 0.0
        assert r.debt_coverage_ratio == 0.0
        assert r.debt_yield == 0.0
        assert r.cash_flow == pytest.approx(r.noi)


def test_irr_is_zero_when_nothing_is_invested(baseline_params):
    params = copy.deepcopy(baseline_params)
    params["financing"]["loan_to_value_percent"] = 100
    params["closing_cost_percent"] = 0

    rows = get_thirty_year_projection(params)

    assert rows[0].total_cash_invested == 0.0
    assert all(r.irr == 0.0 for r in rows)
    assert all(r.cash_on_cash == 0.0 for r in rows)
    assert all(r.equity_multiple == 0.0 for r in rows)


def test_second_lien_balance_is_tracked_separately(baseline_params):
    params = copy.deepcopy(baseline_params)
    params["financing"]["second_lien"] = {
        "principal": 30_000,
        "interest_rate_percent": 9,
        "amortization_years": 10,
    }

    year_one, rows = analyze(params)
    second = year_one.financing.second_lien

    assert rows[0].loan_payment == pytest.approx(year_one.financing.annual_debt_service)
    assert second.monthly_payment > 0

    # the 10-year second lien is gone after year 10; the payment column stays on schedule
    first_only = get_thirty_year_projection(baseline_params)
    assert rows[8].loan_balance > first_only[8].loan_balance
    assert rows[9].loan_balance == pytest.approx(first_only[9].loan_balance)
    assert rows[10].loan_balance == pytest.approx(first_only[10].loan_balance)
    assert rows[10].loan_payment == rows[0].loan_payment


def test_invalid_input_raises_before_projection(baseline_params):
    params = copy.deepcopy(baseline_params)
    params["purchase_price"] = -1

    with pytest.raises(InvalidInputError) as exc:
        get_thirty_year_projection(params)
    assert exc.value.field == "purchase_price"


def test_projection_frame(baseline_params):
    df = projection_to_frame(get_thirty_year_projection(baseline_params))

    assert df.index.name == "year"
    assert list(df.index) == list(range(1, 31))
    assert "irr" in df.columns
    assert df.loc[30, "loan_balance"] == 0.0


def test_empty_projection_frame():
    assert projection_to_frame([]).empty
