# src/holdwise/api/http.py
from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, HTTPException

from holdwise.adapters.logging_utils import get_logger
from holdwise.analysis.projection import get_thirty_year_projection
from holdwise.analysis.quick_score import quick_score
from holdwise.analysis.rules import evaluate_purchase_criteria, evaluate_rules
from holdwise.analysis.year_one import get_year_one_analysis
from holdwise.domain.errors import InvalidInputError
from .schemas import (
    AnalysisResponse,
    CannotCalculate,
    ProjectionResponse,
    QuickScoreRequest,
    QuickScoreResponse,
)

logger = get_logger(__name__)

app = FastAPI(title="holdwise")


def _cannot_calculate(route: str, err: InvalidInputError) -> HTTPException:
    logger.info(
        "analysis_rejected",
        extra={"context": {"route": route, "field": err.field, "reason": err.message}},
    )
    detail = CannotCalculate(field=err.field, message=err.message)
    return HTTPException(status_code=400, detail=detail.model_dump())


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/analysis", response_model=AnalysisResponse)
def analysis_endpoint(payload: dict[str, Any] = Body(...)) -> AnalysisResponse:
    """
    Year-one snapshot plus rule checks for one property.

    The body is parsed by the engine itself so malformed values come back
    as "cannot calculate" with the offending field, not as a 422.
    """
    try:
        year_one = get_year_one_analysis(payload)
    except InvalidInputError as e:
        raise _cannot_calculate("/analysis", e) from e

    return AnalysisResponse(
        year_one=year_one.to_dict(),
        rules=evaluate_rules(year_one).to_dict(),
        purchase_criteria=evaluate_purchase_criteria(year_one).to_dict(),
    )


@app.post("/projection", response_model=ProjectionResponse)
def projection_endpoint(payload: dict[str, Any] = Body(...)) -> ProjectionResponse:
    try:
        rows = get_thirty_year_projection(payload)
    except InvalidInputError as e:
        raise _cannot_calculate("/projection", e) from e

    return ProjectionResponse(years=len(rows), rows=[r.to_dict() for r in rows])


@app.post("/quick-score", response_model=QuickScoreResponse)
def quick_score_endpoint(payload: QuickScoreRequest) -> QuickScoreResponse:
    try:
        result = quick_score(**payload.model_dump())
    except InvalidInputError as e:
        raise _cannot_calculate("/quick-score", e) from e

    return QuickScoreResponse(**result.to_dict())
