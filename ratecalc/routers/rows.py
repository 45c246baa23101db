from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ratecalc.models.constants import Currency, Period
from ratecalc.services.calculator import SalaryCalculator
from .deps import get_calculator

router = APIRouter(prefix="/api/rows", tags=["rows"])


class RowCreateIn(BaseModel):
    initial_amount: float = Field(0.0, ge=0, allow_inf_nan=False, description="Yearly PLN")
    label: str = ""


class RowLabelIn(BaseModel):
    label: str


class CellEditIn(BaseModel):
    value: str = Field(..., description="Raw text as typed into the cell")


class CellStepIn(BaseModel):
    direction: Literal["up", "down"]


def _row_out(calc: SalaryCalculator, row_id: int) -> dict:
    row = calc.rows.require(row_id)
    return {
        "id": row.id,
        "label": row.label,
        "yearly_pln": row.yearly_pln,
        "cells": calc.cells(row_id),
    }


@router.post("", status_code=201, summary="Append a row")
async def add_row(payload: RowCreateIn, calc: SalaryCalculator = Depends(get_calculator)):
    row = calc.add_row(payload.initial_amount, payload.label)
    return _row_out(calc, row.id)


@router.patch("/{row_id}", summary="Edit a row label")
async def set_label(
    row_id: int, payload: RowLabelIn, calc: SalaryCalculator = Depends(get_calculator)
):
    calc.set_label(row_id, payload.label)
    return _row_out(calc, row_id)


@router.delete("/{row_id}", summary="Remove a row (no-op when absent)")
async def remove_row(row_id: int, calc: SalaryCalculator = Depends(get_calculator)):
    removed = calc.remove_row(row_id)
    return {"status": "ok", "removed": removed, "id": row_id}


@router.get("/{row_id}/cells", summary="All nine display cells of a row")
async def get_cells(row_id: int, calc: SalaryCalculator = Depends(get_calculator)):
    return _row_out(calc, row_id)


@router.put("/{row_id}/cells/{period}/{currency}", summary="Commit an edited cell")
async def commit_cell(
    row_id: int,
    period: Period,
    currency: Currency,
    payload: CellEditIn,
    calc: SalaryCalculator = Depends(get_calculator),
):
    changed = calc.commit_edit(row_id, period, currency, payload.value)
    return {"changed": changed, **_row_out(calc, row_id)}


@router.post("/{row_id}/cells/{period}/{currency}/step", summary="Nudge a cell up or down")
async def step_cell(
    row_id: int,
    period: Period,
    currency: Currency,
    payload: CellStepIn,
    calc: SalaryCalculator = Depends(get_calculator),
):
    direction = 1 if payload.direction == "up" else -1
    changed = calc.step_cell(row_id, period, currency, direction)
    return {"changed": changed, **_row_out(calc, row_id)}
