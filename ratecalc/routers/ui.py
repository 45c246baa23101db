from pathlib import Path
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ratecalc.core.config import Settings
from ratecalc.models.constants import CURRENCIES, Currency, PERIODS, Period
from ratecalc.services.calculator import SalaryCalculator
from .deps import get_app_settings, get_calculator

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


def _back_home() -> RedirectResponse:
    return RedirectResponse(url="/", status_code=303)


@router.get("/", response_class=HTMLResponse)
async def ui_home(
    request: Request,
    background_tasks: BackgroundTasks,
    calc: SalaryCalculator = Depends(get_calculator),
    settings: Settings = Depends(get_app_settings),
    settings_open: bool = False,
):
    if settings.auto_refresh_rates and calc.needs_rate_refresh():
        background_tasks.add_task(calc.refresh_rates)
    state = calc.snapshot()
    context = {
        "app_name": settings.app_name,
        "version": settings.version,
        "state": state,
        "config": calc.config,
        "eur_to_pln": calc.config_holder.exchange_rate("EUR", "PLN"),
        "periods": PERIODS,
        "currencies": CURRENCIES,
        "settings_open": settings_open,
    }
    return templates.TemplateResponse(
        request, "index.html", context, background=background_tasks
    )


@router.post("/ui/rows")
async def ui_add_row(calc: SalaryCalculator = Depends(get_calculator)):
    calc.add_row()
    return _back_home()


@router.post("/ui/rows/{row_id}/delete")
async def ui_remove_row(row_id: int, calc: SalaryCalculator = Depends(get_calculator)):
    calc.remove_row(row_id)
    return _back_home()


@router.post("/ui/rows/{row_id}/label")
async def ui_set_label(
    row_id: int,
    label: str = Form(""),
    calc: SalaryCalculator = Depends(get_calculator),
):
    calc.set_label(row_id, label)
    return _back_home()


@router.post("/ui/rows/{row_id}/cells/{period}/{currency}")
async def ui_commit_cell(
    row_id: int,
    period: Period,
    currency: Currency,
    value: str = Form(""),
    calc: SalaryCalculator = Depends(get_calculator),
):
    # Unparsable input is dropped; the redirect re-renders the last valid value
    calc.commit_edit(row_id, period, currency, value)
    return _back_home()


@router.post("/ui/config")
async def ui_update_config(
    usd_to_pln: Optional[str] = Form(None),
    eur_to_usd: Optional[str] = Form(None),
    working_days_per_year: Optional[str] = Form(None),
    vacation_days_per_year: Optional[str] = Form(None),
    hours_per_day: Optional[str] = Form(None),
    calc: SalaryCalculator = Depends(get_calculator),
):
    submitted = {
        "usd_to_pln": usd_to_pln,
        "eur_to_usd": eur_to_usd,
        "working_days_per_year": working_days_per_year,
        "vacation_days_per_year": vacation_days_per_year,
        "hours_per_day": hours_per_day,
    }
    changes = {k: v.strip() for k, v in submitted.items() if v is not None and v.strip()}
    calc.update_config(changes)
    return RedirectResponse(url="/?settings_open=true", status_code=303)


@router.post("/ui/rates/refresh")
async def ui_refresh_rates(calc: SalaryCalculator = Depends(get_calculator)):
    await calc.refresh_rates(manual=True)
    return RedirectResponse(url="/?settings_open=true", status_code=303)


@router.post("/ui/reset")
async def ui_reset(calc: SalaryCalculator = Depends(get_calculator)):
    calc.reset()
    return _back_home()
