"""Money / rounding helpers.

Centralized so the conversion engine, the rate providers and the page use
identical rounding semantics (half away from zero, never banker's rounding).
"""

from __future__ import annotations
from decimal import Decimal, ROUND_HALF_UP, localcontext

# Wide enough for any finite float (up to ~1.8e308) plus the decimal places
_DECIMAL_PRECISION = 400


def _quantize(value: float, step: str) -> float:
    with localcontext() as ctx:
        ctx.prec = _DECIMAL_PRECISION
        return float(Decimal(str(value)).quantize(Decimal(step), rounding=ROUND_HALF_UP))


def round2(value: float) -> float:
    return _quantize(value, "0.01")


def round_to_step(value: float, step: str = "1") -> float:
    """Round to a decimal step such as ``"1"`` or ``"0.1"``."""
    return _quantize(value, step)


def format_amount(value: float, decimals: int = 0) -> str:
    """en-US grouping (``16,800`` / ``15.4``); zero renders as an empty cell."""
    if value == 0:
        return ""
    return f"{value:,.{decimals}f}"
