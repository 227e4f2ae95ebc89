# tests/test_api_analysis.py
import copy

import pytest


def test_analysis_success(client, baseline_params):
    r = client.post("/analysis", json=baseline_params)
    assert r.status_code == 200, r.text

    data = r.json()
    y1 = data["year_one"]
    assert y1["financing"]["first_lien"]["monthly_payment"] == pytest.approx(1596.73, abs=0.01)
    assert y1["income"]["effective_gross_income"] == pytest.approx(28_500)
    assert y1["purchase"]["closing_cost_mode"] == "percent"
    assert data["rules"]["overall"]["rating"] == "Poor"
    assert data["purchase_criteria"]["all_pass"] is False


def test_analysis_accepts_money_and_percent_strings(client, baseline_params):
    payload = copy.deepcopy(baseline_params)
    payload["purchase_price"] = "$300,000"
    payload["financing"]["interest_rate_percent"] = "7%"
    payload["closing_cost_items"] = [{"name": "Title", "amount": "1,500"}]

    r = client.post("/analysis", json=payload)
    assert r.status_code == 200, r.text

    purchase = r.json()["year_one"]["purchase"]
    assert purchase["offer_price"] == 300_000
    assert purchase["closing_cost_mode"] == "itemized"
    assert purchase["closing_cost_items"] == [{"name": "Title", "amount": 1_500}]


def test_missing_required_field_returns_cannot_calculate(client, baseline_params):
    bad = copy.deepcopy(baseline_params)
    bad.pop("purchase_price")

    r = client.post("/analysis", json=bad)
    assert r.status_code == 400
    detail = r.json()["detail"]
    assert detail["status"] == "cannot_calculate"
    assert detail["field"] == "purchase_price"


def test_negative_money_returns_cannot_calculate(client, baseline_params):
    bad = copy.deepcopy(baseline_params)
    bad["operating_expenses"]["insurance"] = -1

    r = client.post("/projection", json=bad)
    assert r.status_code == 400
    assert r.json()["detail"]["field"] == "operating_expenses.insurance"


def test_projection_endpoint(client, baseline_params):
    r = client.post("/projection", json=baseline_params)
    assert r.status_code == 200, r.text

    data = r.json()
    assert data["years"] == 30
    rows = data["rows"]
    assert [row["year"] for row in rows] == list(range(1, 31))
    assert rows[0]["gross_rent"] == pytest.approx(30_000)
    assert rows[1]["gross_rent"] == pytest.approx(30_600)
    assert rows[-1]["loan_balance"] == 0.0


def test_quick_score_endpoint(client):
    r = client.post(
        "/quick-score",
        json={"purchase_price": 100_000, "monthly_rent": 2_000, "interest_rate_percent": 7, "vacancy_rate_percent": 5},
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["label"] == "good"
    assert data["passes_one_percent"] is True


def test_quick_score_without_rent(client):
    r = client.post("/quick-score", json={"purchase_price": 100_000})
    assert r.status_code == 200, r.text
    assert r.json()["label"] == "unknown"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}
