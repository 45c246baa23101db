from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, BackgroundTasks, Body, Depends

from ratecalc.core.config import Settings
from ratecalc.services.calculator import SalaryCalculator
from .deps import get_app_settings, get_calculator

"""Whole-calculator endpoints.

Endpoints:
    - GET /api/state    -> configuration, billable hours, rows with all nine cells
    - PATCH /api/config -> partial configuration update, invalid fields rejected
    - POST /api/reset   -> restore default configuration and rows

Reading the state schedules a background rate refresh once the cached rates
are older than the validity window.
"""

router = APIRouter(prefix="/api", tags=["calculator"])


@router.get("/state", summary="Current configuration and derived grid")
async def get_state(
    background_tasks: BackgroundTasks,
    calc: SalaryCalculator = Depends(get_calculator),
    settings: Settings = Depends(get_app_settings),
) -> Dict[str, Any]:
    if settings.auto_refresh_rates and calc.needs_rate_refresh():
        background_tasks.add_task(calc.refresh_rates)
    return calc.snapshot()


@router.patch("/config", summary="Update configuration fields")
async def update_config(
    payload: Dict[str, Any] = Body(..., examples=[{"vacationDays": 20}]),
    calc: SalaryCalculator = Depends(get_calculator),
):
    rejected = calc.update_config(payload)
    return {
        "config": calc.config.to_storage(),
        "billable_hours_per_year": calc.billable_hours(),
        "rejected": rejected,
    }


@router.post("/reset", summary="Restore default configuration and rows")
async def reset(calc: SalaryCalculator = Depends(get_calculator)):
    calc.reset()
    return calc.snapshot()
