"""Pydantic domain models for the rate calculator."""

from .constants import (
    CURRENCIES,
    PERIODS,
    CELLS,
    PIVOT_CURRENCY,
    Currency,
    Period,
)  # re-export
from .config import CalculatorConfig, DEFAULT_CONFIG
from .row import Row, DEFAULT_ROWS, default_rows
from .rates import RateSnapshot, ExchangeRateApiPayload

__all__ = [
    "CURRENCIES",
    "PERIODS",
    "CELLS",
    "PIVOT_CURRENCY",
    "Currency",
    "Period",
    "CalculatorConfig",
    "DEFAULT_CONFIG",
    "Row",
    "DEFAULT_ROWS",
    "default_rows",
    "RateSnapshot",
    "ExchangeRateApiPayload",
]
