from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from ratecalc.models.config import CalculatorConfig, DEFAULT_CONFIG
from ratecalc.models.rates import RateSnapshot
from ratecalc.services.configuration import ConfigurationHolder

T0 = datetime(2026, 1, 5, tzinfo=timezone.utc)


def test_defaults_match_storage_format():
    assert DEFAULT_CONFIG.to_storage() == {
        "usdPln": 3.65,
        "eurUsd": 1.16,
        "workingDaysInYear": 251,
        "vacationDays": 27,
        "hoursPerDay": 8,
    }


def test_model_rejects_vacation_above_working_days():
    with pytest.raises(ValidationError):
        CalculatorConfig(working_days_per_year=10, vacation_days_per_year=11)


@pytest.mark.parametrize(
    "field,value",
    [
        ("usd_to_pln", 0),
        ("usd_to_pln", -3.5),
        ("eur_to_usd", "abc"),
        ("hours_per_day", 0),
        ("usd_to_pln", float("nan")),
        ("working_days_per_year", -1),
        ("vacation_days_per_year", 400),
        ("usd_to_pln", None),
    ],
)
def test_invalid_value_keeps_previous(config, field, value):
    holder = ConfigurationHolder(config)
    rejected = holder.update({field: value}, now=T0)
    assert rejected == [field]
    assert holder.config == config


def test_valid_fields_apply_even_when_others_rejected(config):
    holder = ConfigurationHolder(config)
    rejected = holder.update({"usdPln": "3.90", "hoursPerDay": -2, "vacationDays": 20}, now=T0)
    assert rejected == ["hours_per_day"]
    assert holder.config.usd_to_pln == 3.9
    assert holder.config.vacation_days_per_year == 20
    assert holder.config.hours_per_day == 8


def test_unknown_field_reported(config):
    holder = ConfigurationHolder(config)
    assert holder.update({"taxRate": 0.19}, now=T0) == ["taxRate"]


def test_billable_hours_follow_changes(config):
    holder = ConfigurationHolder(config)
    assert holder.billable_hours_per_year() == 1792
    holder.update({"vacation_days_per_year": 0}, now=T0)
    assert holder.billable_hours_per_year() == 251 * 8


def test_manual_rate_edit_records_timestamp(config):
    holder = ConfigurationHolder(config)
    holder.update({"vacation_days_per_year": 10}, now=T0)
    assert holder.rates_changed_at is None
    holder.update({"eur_to_usd": 1.2}, now=T0)
    assert holder.rates_changed_at == T0


def test_stale_rate_response_discarded(config):
    holder = ConfigurationHolder(config)
    requested_at = T0
    holder.update({"usd_to_pln": 4.2}, now=T0 + timedelta(seconds=5))
    snapshot = RateSnapshot(usd_to_pln=3.7, eur_to_usd=1.1, fetched_at=T0 + timedelta(seconds=10))
    assert holder.apply_rates(snapshot, requested_at) is False
    assert holder.config.usd_to_pln == 4.2


def test_out_of_order_responses(config):
    holder = ConfigurationHolder(config)
    newer = RateSnapshot(usd_to_pln=3.8, eur_to_usd=1.1, fetched_at=T0 + timedelta(seconds=3))
    older = RateSnapshot(usd_to_pln=3.6, eur_to_usd=1.2, fetched_at=T0 + timedelta(seconds=4))
    assert holder.apply_rates(newer, T0 + timedelta(seconds=2)) is True
    assert holder.apply_rates(older, T0 + timedelta(seconds=1)) is False
    assert holder.config.usd_to_pln == 3.8
