from __future__ import annotations

from fastapi import APIRouter, Depends

from ratecalc.services.calculator import SalaryCalculator
from .deps import get_calculator

"""Rates router.

Endpoints:
    - GET /api/rates          -> current cross rates and cache status
    - POST /api/rates/refresh -> manual refresh, allowed regardless of cache age

A failed refresh leaves the configuration untouched and reports the warning
in ``status.error``; it is not an HTTP error. The offline ``static`` provider
never changes the rates, so a refresh there answers ``applied: false``.
"""

router = APIRouter(prefix="/api/rates", tags=["rates"])


def _rates_out(calc: SalaryCalculator) -> dict:
    return {
        "usd_to_pln": calc.config.usd_to_pln,
        "eur_to_usd": calc.config.eur_to_usd,
        "status": calc.rates.status(),
    }


@router.get("", summary="Current exchange rates")
async def get_rates(calc: SalaryCalculator = Depends(get_calculator)):
    return _rates_out(calc)


@router.post("/refresh", summary="Fetch exchange rates now")
async def refresh_rates(calc: SalaryCalculator = Depends(get_calculator)):
    applied = await calc.refresh_rates(manual=True)
    return {"applied": applied, **_rates_out(calc)}
