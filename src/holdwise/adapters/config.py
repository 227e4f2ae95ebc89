# src/holdwise/adapters/config.py
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    # App & logging
    ENV: str = Field(default="dev")
    LOG_LEVEL: str = Field(default="INFO")

    # Default underwriting assumptions.
    # Percent as plain numbers: 7.0 means 7%.
    VACANCY_RATE: float = Field(default=5.0)
    MANAGEMENT_RATE: float = Field(default=8.0)
    MAINTENANCE_RATE: float = Field(default=5.0)
    CAPEX_RATE: float = Field(default=5.0)
    APPRECIATION_RATE: float = Field(default=3.0)
    RENT_GROWTH_RATE: float = Field(default=2.0)
    EXPENSE_GROWTH_RATE: float = Field(default=2.0)
    SELLING_COST_PCT: float = Field(default=6.0)
    LOAN_TO_VALUE_PCT: float = Field(default=80.0)
    INTEREST_RATE: float = Field(default=7.0)
    AMORTIZATION_YEARS: int = Field(default=30)
    DEFAULT_CLOSING_COST_PCT: float = Field(default=3.0)

    # -----------------------------
    # Rule thresholds
    # -----------------------------
    MIN_DSCR_GOOD: float = Field(default=1.25)
    MAX_EXPENSE_TO_INCOME_PCT: float = Field(default=50.0)
    MAX_CASH_NEEDED: float = Field(default=50_000.0)
    MIN_MONTHLY_CASHFLOW: float = Field(default=150.0)

    model_config = SettingsConfigDict(
        env_prefix="HOLDWISE_",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator(
        "VACANCY_RATE",
        "MANAGEMENT_RATE",
        "MAINTENANCE_RATE",
        "CAPEX_RATE",
        "APPRECIATION_RATE",
        "RENT_GROWTH_RATE",
        "EXPENSE_GROWTH_RATE",
        "SELLING_COST_PCT",
        "LOAN_TO_VALUE_PCT",
        "INTEREST_RATE",
        "DEFAULT_CLOSING_COST_PCT",
        "MAX_EXPENSE_TO_INCOME_PCT",
        mode="before",
    )
    @classmethod
    def _to_non_negative_percent(cls, v: Any) -> Any:
        if v is None:
            return v
        if isinstance(v, str):
            v = v.strip().replace("%", "")
        try:
            f = float(v)
        except Exception as err:
            raise ValueError("rate must be numeric or percent-like") from err
        if f < 0:
            raise ValueError("rate must be non-negative")
        return f

    @field_validator("AMORTIZATION_YEARS", mode="before")
    @classmethod
    def _term_positive(cls, v: Any) -> Any:
        n = int(v)
        if n <= 0:
            raise ValueError("AMORTIZATION_YEARS must be > 0")
        return n

    @field_validator("MIN_DSCR_GOOD", mode="before")
    @classmethod
    def _dscr_positive(cls, v: Any) -> Any:
        f = float(v)
        if f <= 0:
            raise ValueError("MIN_DSCR_GOOD must be > 0")
        return f


config = AppConfig()
