"""Conversion engine.

Pure functions mapping a row's canonical yearly-PLN amount to any of the nine
(period, currency) display cells and back. Nothing here holds state: every
value is derived from ``(yearly_pln, config)`` on each call.

Cross rates are composed through PLN (star topology), so supporting a new
currency only needs its PLN value in ``to_pln``.
"""

from __future__ import annotations

import math
import re
from typing import Dict, Optional

from ratecalc.core.errors import DivisionUndefined
from ratecalc.models.config import CalculatorConfig
from ratecalc.models.constants import (
    CELLS,
    CURRENCIES,
    FINE_GRAINED_CURRENCIES,
    HOURLY_ROUNDING_STEP,
    MONTHS_PER_YEAR,
    PERIODS,
    PIVOT_CURRENCY,
)
from ratecalc.services.money import format_amount, round_to_step

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"^(\d+\.?\d*|\.\d+)")


def _check_currency(currency: str) -> str:
    if currency not in CURRENCIES:
        raise ValueError(f"unsupported currency '{currency}'")
    return currency


def _check_period(period: str) -> str:
    if period not in PERIODS:
        raise ValueError(f"unsupported period '{period}'")
    return period


# Rates -------------------------------------------------------------


def to_pln(config: CalculatorConfig, currency: str) -> float:
    """PLN per one unit of ``currency``."""
    _check_currency(currency)
    if currency == "USD":
        return config.usd_to_pln
    if currency == "EUR":
        return config.eur_to_usd * config.usd_to_pln
    return 1.0


def exchange_rate(config: CalculatorConfig, from_currency: str, to_currency: str) -> float:
    """Units of ``to_currency`` per one unit of ``from_currency``."""
    _check_currency(from_currency)
    _check_currency(to_currency)
    if from_currency == to_currency:
        return 1.0
    return to_pln(config, from_currency) / to_pln(config, to_currency)


def billable_hours_per_year(config: CalculatorConfig) -> float:
    billable_days = config.working_days_per_year - config.vacation_days_per_year
    return max(0.0, billable_days * config.hours_per_day)


# Forward -----------------------------------------------------------


def is_fine_grained(period: str, currency: str) -> bool:
    return period == "hourly" and currency in FINE_GRAINED_CURRENCIES


def derive_value(
    yearly_pln: float, period: str, currency: str, config: CalculatorConfig
) -> float:
    """Unrounded value of one cell.

    Raises DivisionUndefined for hourly cells when there are no billable hours.
    """
    _check_period(period)
    yearly_in_target = yearly_pln * exchange_rate(config, PIVOT_CURRENCY, currency)
    if period == "yearly":
        return yearly_in_target
    if period == "monthly":
        return yearly_in_target / MONTHS_PER_YEAR
    hours = billable_hours_per_year(config)
    if hours == 0:
        raise DivisionUndefined("no billable hours configured")
    return yearly_in_target / hours


def round_for_display(value: float, period: str, currency: str) -> float:
    if is_fine_grained(period, currency):
        return round_to_step(value, str(HOURLY_ROUNDING_STEP))
    return round_to_step(value, "1")


def display_value(
    yearly_pln: float, period: str, currency: str, config: CalculatorConfig
) -> str:
    """Display string for one cell; blank when the value is undefined or zero."""
    try:
        value = derive_value(yearly_pln, period, currency, config)
    except DivisionUndefined:
        return ""
    rounded = round_for_display(value, period, currency)
    return format_amount(rounded, 1 if is_fine_grained(period, currency) else 0)


def display_cells(yearly_pln: float, config: CalculatorConfig) -> Dict[str, Dict[str, str]]:
    cells: Dict[str, Dict[str, str]] = {p: {} for p in PERIODS}
    for period, currency in CELLS:
        cells[period][currency] = display_value(yearly_pln, period, currency, config)
    return cells


# Inverse -----------------------------------------------------------


def _finite_or_none(value: float) -> Optional[float]:
    return value if math.isfinite(value) else None


def sanitize_numeric(raw: str) -> str:
    """Drop everything but digits and dots (``"16,800 zł"`` -> ``"16800"``)."""
    return _NON_NUMERIC.sub("", raw or "")


def parse_numeric(raw: str) -> Optional[float]:
    """Parse the leading number of the sanitized input, None when there is none."""
    match = _LEADING_NUMBER.match(sanitize_numeric(raw))
    if not match:
        return None
    value = float(match.group(1))
    if not math.isfinite(value):
        return None
    return value


def canonical_from_display(
    raw: str, period: str, currency: str, config: CalculatorConfig
) -> Optional[float]:
    """New yearly-PLN amount for an edited cell, or None when the edit is ignored."""
    _check_period(period)
    value = parse_numeric(raw)
    if value is None:
        return None
    value_in_pln = value * exchange_rate(config, currency, PIVOT_CURRENCY)
    if period == "yearly":
        return _finite_or_none(value_in_pln)
    if period == "monthly":
        return _finite_or_none(value_in_pln * MONTHS_PER_YEAR)
    hours = billable_hours_per_year(config)
    if hours == 0:
        return None
    return _finite_or_none(value_in_pln * hours)


def display_step(period: str, currency: str) -> float:
    """Increment used by the up/down nudge of a cell."""
    return HOURLY_ROUNDING_STEP if is_fine_grained(period, currency) else 1.0


def stepped_display(current: str, period: str, currency: str, direction: int) -> str:
    """Value of a cell after one nudge, floored at zero."""
    fine = is_fine_grained(period, currency)
    current_value = parse_numeric(current) or 0.0
    new_value = max(0.0, current_value + direction * display_step(period, currency))
    new_value = round_for_display(new_value, period, currency)
    # A blank cell means zero; keep an explicit "0" so the edit is not ignored
    return format_amount(new_value, 1 if fine else 0) or "0"
