import json
import logging

import pytest
from pydantic import ValidationError

from holdwise.adapters.config import AppConfig
from holdwise.adapters.logging_utils import JsonLogFormatter
from holdwise.domain.assumptions import DefaultAssumptions


def test_env_overrides_feed_the_default_table(monkeypatch):
    monkeypatch.setenv("HOLDWISE_VACANCY_RATE", "8%")
    monkeypatch.setenv("HOLDWISE_AMORTIZATION_YEARS", "15")

    cfg = AppConfig()
    defaults = DefaultAssumptions.from_config(cfg)

    assert cfg.VACANCY_RATE == 8.0
    assert defaults.vacancy_rate == 8.0
    assert defaults.amortization_years == 15


@pytest.mark.parametrize(
    "name, value",
    [
        ("HOLDWISE_INTEREST_RATE", "-1"),
        ("HOLDWISE_AMORTIZATION_YEARS", "0"),
        ("HOLDWISE_MIN_DSCR_GOOD", "0"),
        ("HOLDWISE_MANAGEMENT_RATE", "lots"),
    ],
)
def test_bad_env_values_are_rejected(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValidationError):
        AppConfig()


def test_default_table_is_frozen():
    with pytest.raises(ValidationError):
        DefaultAssumptions().vacancy_rate = 1.0


def test_json_formatter_merges_context():
    record = logging.LogRecord(
        name="holdwise.test",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="analysis_rejected",
        args=(),
        exc_info=None,
    )
    record.context = {"field": "purchase_price"}

    payload = json.loads(JsonLogFormatter().format(record))

    assert payload["event"] == "analysis_rejected"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "holdwise.test"
    assert payload["field"] == "purchase_price"
