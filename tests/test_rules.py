import copy

import pytest

from holdwise.analysis.rules import (
    check_debt_coverage,
    check_fifty_percent_rule,
    check_one_percent_rule,
    evaluate_purchase_criteria,
    evaluate_rules,
)
from holdwise.analysis.year_one import get_year_one_analysis


def test_weak_property_scores_poor(baseline_params):
    """
    2,500/mo on a 300k price: fails 1% and 2%, DCR below 1.25,
    cap rate ~6.1% (1 pt), negative cash-on-cash (0 pts).
    """
    rules = evaluate_rules(get_year_one_analysis(baseline_params))

    assert not rules.one_percent.passes
    assert rules.one_percent.actual == pytest.approx(2_500)
    assert rules.one_percent.target == pytest.approx(3_000)
    assert not rules.two_percent.passes
    assert rules.fifty_percent.passes
    assert rules.fifty_percent.actual == pytest.approx(10_080 / 30_000 * 100)
    assert not rules.debt_coverage.passes

    assert rules.overall.score == 1
    assert rules.overall.max_score == 10
    assert rules.overall.percentage == pytest.approx(10.0)
    assert rules.overall.rating == "Poor"


def test_cash_flowing_property_scores_excellent(cashflow_params):
    rules = evaluate_rules(get_year_one_analysis(cashflow_params))

    assert rules.one_percent.passes
    # 2,000/mo on 100k sits exactly on the 2% line
    assert rules.two_percent.passes
    assert rules.fifty_percent.passes
    assert rules.debt_coverage.passes
    assert rules.debt_coverage.actual > 2.5

    assert rules.overall.score == 10
    assert rules.overall.rating == "Excellent"


def test_rule_messages_are_plain_text(baseline_params):
    one = check_one_percent_rule(get_year_one_analysis(baseline_params))
    assert one.message == "Fails 1% rule ($2,500 < $3,000)"


def test_unfinanced_property_passes_debt_coverage(baseline_params):
    params = copy.deepcopy(baseline_params)
    params["financing"]["loan_to_value_percent"] = 0

    check = check_debt_coverage(get_year_one_analysis(params))

    assert check.passes
    assert check.actual == 0.0


def test_thresholds_can_be_overridden(baseline_params):
    a = get_year_one_analysis(baseline_params)

    assert not check_fifty_percent_rule(a, max_ratio=30).passes
    assert check_debt_coverage(a, min_dcr=0.9).passes


def test_purchase_criteria(cashflow_params, baseline_params):
    good = evaluate_purchase_criteria(get_year_one_analysis(cashflow_params))
    assert good.cash_needed.passes
    assert good.cash_needed.actual == pytest.approx(23_000)
    assert good.cash_flow.passes
    assert good.fifty_percent.passes
    assert good.all_pass

    weak = evaluate_purchase_criteria(get_year_one_analysis(baseline_params))
    assert not weak.cash_needed.passes
    assert not weak.cash_flow.passes
    assert not weak.all_pass

    loose = evaluate_purchase_criteria(
        get_year_one_analysis(baseline_params),
        max_cash_needed=100_000,
        min_monthly_cash_flow=-100,
    )
    assert loose.all_pass
    assert loose.to_dict()["all_pass"] is True
