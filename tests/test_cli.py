import json

import pandas as pd
import pytest
from typer.testing import CliRunner

from holdwise.entrypoints.cli import app

runner = CliRunner()


@pytest.fixture
def params_file(tmp_path, baseline_params):
    path = tmp_path / "property.json"
    path.write_text(json.dumps(baseline_params), encoding="utf-8")
    return path


def test_analyze_prints_json(params_file):
    result = runner.invoke(app, ["analyze", str(params_file)])
    assert result.exit_code == 0, result.output

    data = json.loads(result.stdout)
    assert data["year_one"]["noi"]["net_operating_income"] == pytest.approx(18_420)
    assert data["rules"]["overall"]["rating"] == "Poor"


def test_project_prints_summary(params_file):
    result = runner.invoke(app, ["project", str(params_file)])
    assert result.exit_code == 0, result.output
    assert "irr" in result.stdout
    assert "total_equity" in result.stdout


@pytest.mark.parametrize("suffix", [".csv", ".json"])
def test_project_writes_table(params_file, tmp_path, suffix):
    out = tmp_path / "out" / f"projection{suffix}"

    result = runner.invoke(app, ["project", str(params_file), "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()

    df = pd.read_csv(out) if suffix == ".csv" else pd.read_json(out, orient="records")
    assert len(df) == 30
    assert list(df["year"]) == list(range(1, 31))


def test_invalid_params_exit_with_cannot_calculate(tmp_path, baseline_params):
    baseline_params.pop("gross_annual_rent")
    path = tmp_path / "bad.json"
    path.write_text(json.dumps(baseline_params), encoding="utf-8")

    result = runner.invoke(app, ["project", str(path)])
    assert result.exit_code == 2
    assert "cannot calculate: gross_annual_rent" in result.output


def test_score_listings(tmp_path):
    listings = tmp_path / "listings.csv"
    pd.DataFrame(
        {"purchase_price": [100_000, 300_000], "monthly_rent": [2_000, 1_500]}
    ).to_csv(listings, index=False)
    out = tmp_path / "scored.csv"

    result = runner.invoke(app, ["score-listings", str(listings), "--out", str(out)])
    assert result.exit_code == 0, result.output

    scored = pd.read_csv(out)
    assert "label" in scored.columns
    assert len(scored) == 2


@pytest.mark.parametrize(
    "content, reason",
    [
        ("{not json", "not valid JSON"),
        ("[1, 2, 3]", "expected a JSON object"),
    ],
)
def test_unreadable_params_exit_with_cannot_calculate(tmp_path, content, reason):
    path = tmp_path / "broken.json"
    path.write_text(content, encoding="utf-8")

    result = runner.invoke(app, ["analyze", str(path)])
    assert result.exit_code == 2
    assert "cannot calculate: payload" in result.output
    assert reason in result.output


def test_score_listings_rejects_negative_price(tmp_path):
    listings = tmp_path / "listings.csv"
    pd.DataFrame({"purchase_price": [-5], "monthly_rent": [1_000]}).to_csv(listings, index=False)

    result = runner.invoke(app, ["score-listings", str(listings)])
    assert result.exit_code == 2
    assert "cannot calculate: purchase_price.0" in result.output
