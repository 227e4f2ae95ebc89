# src/holdwise/services/validation.py
from __future__ import annotations

import math
from typing import Any, Iterator

from pydantic import ValidationError

from holdwise.adapters.config import config
from holdwise.domain.assumptions import DefaultAssumptions, ResolvedLien, ResolvedParameters
from holdwise.domain.errors import InvalidInputError
from holdwise.domain.parameters import PropertyParameters

# Shared, read-only default table built once from configuration.
DEFAULT_ASSUMPTIONS = DefaultAssumptions.from_config(config)

# Dollar amounts that must not be negative (dotted paths into the model)
_MONEY_FIELDS = [
    "purchase_price",
    "fair_market_value",
    "repair_costs",
    "repair_contingency",
    "gross_annual_rent",
    "deposits",
    "prorated_credits",
    "other_income.parking",
    "other_income.laundry",
    "other_income.storage",
    "other_income.other",
    "operating_expenses.property_tax",
    "operating_expenses.insurance",
    "operating_expenses.hoa",
    "operating_expenses.utilities",
    "operating_expenses.other",
    "financing.principal",
    "financing.second_lien.principal",
]

_RATE_FIELDS = [
    "closing_cost_percent",
    "vacancy_rate_percent",
    "operating_expenses.management_percent",
    "operating_expenses.maintenance_percent",
    "operating_expenses.capex_percent",
    "financing.loan_to_value_percent",
    "financing.interest_rate_percent",
    "financing.amortization_years",
    "financing.mortgage_insurance_percent",
    "financing.second_lien.interest_rate_percent",
    "financing.second_lien.amortization_years",
    "growth.appreciation_rate_percent",
    "growth.rent_growth_rate_percent",
    "growth.expense_growth_rate_percent",
    "growth.selling_cost_percent",
]

# Percent fields that only make sense up to 100
_BOUNDED_PERCENT_FIELDS = [
    "vacancy_rate_percent",
    "financing.loan_to_value_percent",
    "growth.selling_cost_percent",
]


def _to_num(val: Any) -> Any:
    """
    Coerce values like:
      - "250000"
      - "$250,000"
      - "6.5%"
    into float. Anything that does not look numeric is returned unchanged
    so pydantic can report it.
    """
    if not isinstance(val, str):
        return val
    s = val.strip().replace(",", "").replace("$", "")
    if s.endswith("%"):
        s = s[:-1].strip()
    if not s:
        return None
    try:
        return float(s)
    except ValueError:
        return val


def _normalize_payload(raw: Any) -> Any:
    if isinstance(raw, dict):
        out = {}
        for k, v in raw.items():
            # free-text labels stay strings
            v = v if k == "name" else _normalize_payload(v)
            # null / blank means "not supplied"
            if v is not None:
                out[k] = v
        return out
    if isinstance(raw, list):
        return [_normalize_payload(v) for v in raw]
    return _to_num(raw)


def parse_parameters(raw: dict[str, Any] | PropertyParameters) -> PropertyParameters:
    """
    Turn a loosely-typed payload (API body, JSON file, settings merge) into
    PropertyParameters. Percent strings keep percent units: "7%" -> 7.0.
    """
    if isinstance(raw, PropertyParameters):
        return raw
    if not isinstance(raw, dict):
        raise InvalidInputError("payload", f"expected an object, got {type(raw).__name__}")

    try:
        return PropertyParameters.model_validate(_normalize_payload(raw))
    except ValidationError as err:
        first = err.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "payload"
        raise InvalidInputError(field, first.get("msg", "invalid value")) from err


def _lookup(params: PropertyParameters, path: str) -> Any:
    obj: Any = params
    for part in path.split("."):
        if obj is None:
            return None
        obj = getattr(obj, part)
    return obj


def _iter_numbers(obj: Any, prefix: str = "") -> Iterator[tuple[str, float]]:
    if isinstance(obj, dict):
        for k, v in obj.items():
            yield from _iter_numbers(v, f"{prefix}.{k}" if prefix else str(k))
    elif isinstance(obj, list):
        for i, v in enumerate(obj):
            yield from _iter_numbers(v, f"{prefix}.{i}")
    elif isinstance(obj, (int, float)) and not isinstance(obj, bool):
        yield prefix, float(obj)


def validate_parameters(params: PropertyParameters) -> None:
    """
    Structural checks that must pass before any arithmetic runs.
    Raises InvalidInputError naming the first offending field.
    """
    # 1. Required inputs
    if params.purchase_price is None:
        raise InvalidInputError("purchase_price", "Missing required field")
    if params.gross_annual_rent is None and not params.unit_monthly_rents:
        raise InvalidInputError("gross_annual_rent", "Missing required field (or unit_monthly_rents)")

    # 2. NaN / inf anywhere
    for path, value in _iter_numbers(params.model_dump()):
        if not math.isfinite(value):
            raise InvalidInputError(path, "must be a finite number")

    # 3. Sign and range checks
    for path in _MONEY_FIELDS:
        v = _lookup(params, path)
        if v is not None and v < 0:
            raise InvalidInputError(path, "must not be negative")

    for i, item in enumerate(params.closing_cost_items):
        if item.amount < 0:
            raise InvalidInputError(f"closing_cost_items.{i}.amount", "must not be negative")

    for i, rent in enumerate(params.unit_monthly_rents or []):
        if rent < 0:
            raise InvalidInputError(f"unit_monthly_rents.{i}", "must not be negative")

    for path in _RATE_FIELDS:
        v = _lookup(params, path)
        if v is not None and v < 0:
            raise InvalidInputError(path, "must not be negative")

    for path in _BOUNDED_PERCENT_FIELDS:
        v = _lookup(params, path)
        if v is not None and v > 100:
            raise InvalidInputError(path, "must be between 0 and 100")

    if params.number_of_units < 1:
        raise InvalidInputError("number_of_units", "must be at least 1")


def _default(value: float | None, fallback: float) -> float:
    # explicit 0 is an override; only a missing value falls back
    return fallback if value is None else value


def resolve_parameters(
    params: PropertyParameters,
    defaults: DefaultAssumptions | None = None,
) -> ResolvedParameters:
    """
    Fill every absent field from the default table.
    Assumes validate_parameters() already passed.
    """
    d = defaults or DEFAULT_ASSUMPTIONS
    fin = params.financing
    opx = params.operating_expenses
    growth = params.growth

    if params.gross_annual_rent is not None:
        gross_annual_rent = params.gross_annual_rent
    else:
        gross_annual_rent = sum(params.unit_monthly_rents or []) * 12.0

    purchase_price = float(params.purchase_price or 0.0)
    ltv = _default(fin.loan_to_value_percent, d.loan_to_value_pct)

    first_lien = ResolvedLien(
        principal=fin.principal,
        interest_rate=_default(fin.interest_rate_percent, d.interest_rate),
        amortization_years=_default(fin.amortization_years, d.amortization_years),
        mortgage_insurance_pct=fin.mortgage_insurance_percent,
    )

    second_lien = None
    if fin.second_lien is not None and fin.second_lien.principal > 0:
        second_lien = ResolvedLien(
            principal=fin.second_lien.principal,
            interest_rate=fin.second_lien.interest_rate_percent,
            amortization_years=fin.second_lien.amortization_years,
        )

    resolved = ResolvedParameters(
        purchase_price=purchase_price,
        fair_market_value=_default(params.fair_market_value, purchase_price),
        repair_costs=params.repair_costs,
        repair_contingency=params.repair_contingency,
        closing_cost_items=tuple(params.closing_cost_items),
        closing_cost_pct=_default(params.closing_cost_percent, d.closing_cost_pct),
        gross_annual_rent=gross_annual_rent,
        other_income=params.other_income,
        vacancy_rate=_default(params.vacancy_rate_percent, d.vacancy_rate),
        property_tax=opx.property_tax,
        insurance=opx.insurance,
        hoa=opx.hoa,
        utilities=opx.utilities,
        other_expenses=opx.other,
        management_rate=_default(opx.management_percent, d.management_rate),
        maintenance_rate=_default(opx.maintenance_percent, d.maintenance_rate),
        capex_rate=_default(opx.capex_percent, d.capex_rate),
        loan_to_value_pct=ltv,
        first_lien=first_lien,
        second_lien=second_lien,
        appreciation_rate=_default(growth.appreciation_rate_percent, d.appreciation_rate),
        rent_growth_rate=_default(growth.rent_growth_rate_percent, d.rent_growth_rate),
        expense_growth_rate=_default(growth.expense_growth_rate_percent, d.expense_growth_rate),
        selling_cost_pct=_default(growth.selling_cost_percent, d.selling_cost_pct),
        number_of_units=params.number_of_units,
        deposits=params.deposits,
        prorated_credits=params.prorated_credits,
    )

    _check_loan_terms(resolved)
    return resolved


def _check_loan_terms(p: ResolvedParameters) -> None:
    first = p.first_lien
    financed = first.principal if first.principal is not None else p.purchase_price * p.loan_to_value_pct / 100.0
    if financed > 0 and first.amortization_years <= 0:
        raise InvalidInputError("financing.amortization_years", "must be > 0 when a loan is financed")

    second = p.second_lien
    if second is not None and second.principal and second.amortization_years <= 0:
        raise InvalidInputError(
            "financing.second_lien.amortization_years", "must be > 0 when a second lien is financed"
        )


def prepare_parameters(
    raw: dict[str, Any] | PropertyParameters,
    defaults: DefaultAssumptions | None = None,
) -> ResolvedParameters:
    """
    parse -> validate -> resolve defaults. The single entry point the
    engine uses for its input.
    """
    params = parse_parameters(raw)
    validate_parameters(params)
    return resolve_parameters(params, defaults)
