from __future__ import annotations

import json
from typing import Optional

import typer

from holdwise.adapters.logging_utils import get_logger
from holdwise.adapters.storage import read_df, read_params, write_df
from holdwise.analysis.projection import analyze, projection_to_frame
from holdwise.analysis.quick_score import quick_score_df
from holdwise.analysis.rules import evaluate_purchase_criteria, evaluate_rules
from holdwise.domain.errors import InvalidInputError

logger = get_logger(__name__)

app = typer.Typer(help="Holdwise buy-and-hold rental analysis (year one, 30-year projection).")

SUMMARY_COLUMNS = [
    "property_value",
    "loan_balance",
    "noi",
    "cash_flow",
    "total_equity",
    "total_profit",
    "cash_on_cash",
    "irr",
]


def _cannot_calculate(err: InvalidInputError) -> typer.Exit:
    logger.info("analysis_rejected", extra={"context": {"field": err.field, "reason": err.message}})
    typer.echo(f"cannot calculate: {err.field}: {err.message}", err=True)
    return typer.Exit(code=2)


@app.command("analyze")
def analyze_cmd(
    params_path: str = typer.Argument(..., help="JSON file of property parameters"),
) -> None:
    """
    Print the year-one analysis and rule checks as JSON.
    """
    try:
        year_one, _ = analyze(read_params(params_path))
    except InvalidInputError as e:
        raise _cannot_calculate(e) from e

    out = {
        "year_one": year_one.to_dict(),
        "rules": evaluate_rules(year_one).to_dict(),
        "purchase_criteria": evaluate_purchase_criteria(year_one).to_dict(),
    }
    typer.echo(json.dumps(out, indent=2))


@app.command("project")
def project_cmd(
    params_path: str = typer.Argument(..., help="JSON file of property parameters"),
    out: Optional[str] = typer.Option(
        None,
        "--out",
        help="Write the full table to this path (.csv, .json or .parquet)",
    ),
) -> None:
    """
    Run the 30-year projection. Prints a summary table unless --out is given.
    """
    try:
        _, rows = analyze(read_params(params_path))
    except InvalidInputError as e:
        raise _cannot_calculate(e) from e

    df = projection_to_frame(rows)
    if out:
        write_df(df, out)
        typer.echo(f"Wrote {len(df)} rows to {out}")
        return

    typer.echo(df[SUMMARY_COLUMNS].round(2).to_string())


@app.command("score-listings")
def score_listings_cmd(
    listings_path: str = typer.Argument(..., help="Table with purchase_price and monthly_rent columns"),
    out: Optional[str] = typer.Option(None, "--out", help="Write scored listings to this path"),
) -> None:
    """
    Quick-score a table of listings.
    """
    try:
        scored = quick_score_df(read_df(listings_path))
    except InvalidInputError as e:
        raise _cannot_calculate(e) from e

    if out:
        write_df(scored, out)
        typer.echo(f"Wrote {len(scored)} rows to {out}")
        return

    typer.echo(scored["label"].value_counts().to_string())


if __name__ == "__main__":
    app()
