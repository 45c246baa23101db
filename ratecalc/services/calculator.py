"""Calculator facade used by the routers.

Owns the configuration holder, the row store and the rate cache bookkeeping,
and persists state after every mutation. All methods except
``refresh_rates`` are synchronous and run to completion; ``refresh_rates``
awaits the blocking provider call in a worker thread and applies the result
back on the event loop.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from starlette.concurrency import run_in_threadpool

from ratecalc.core.errors import RateFetchError
from ratecalc.db.dal import KeyValueStore
from ratecalc.models.config import CalculatorConfig, DEFAULT_CONFIG
from ratecalc.models.constants import CELLS
from ratecalc.models.row import Row, default_rows
from ratecalc.models.rates import RateSnapshot
from ratecalc.services import conversion
from ratecalc.services.configuration import ConfigurationHolder
from ratecalc.services.rates.cache_service import FetchTicket, RateCacheService
from ratecalc.services.row_store import RowStore
from ratecalc.services.state_store import (
    PersistedState,
    load_state,
    save_rates_timestamp,
    save_state,
)

logger = logging.getLogger("ratecalc.calculator")


class SalaryCalculator:
    def __init__(
        self,
        rates: RateCacheService,
        config: CalculatorConfig = DEFAULT_CONFIG,
        rows: Optional[List[Row]] = None,
        store: Optional[KeyValueStore] = None,
    ):
        self.config_holder = ConfigurationHolder(config)
        self.rows = RowStore(default_rows() if rows is None else rows)
        self.rates = rates
        self._store = store

    @classmethod
    def from_store(cls, store: KeyValueStore, rates: RateCacheService) -> "SalaryCalculator":
        state: PersistedState = load_state(store)
        rates.last_updated = state.rates_last_updated
        calc = cls(rates, config=state.config, rows=state.rows, store=store)
        calc.config_holder.rates_changed_at = state.rates_changed_at
        return calc

    # Persistence ---------------------------------------------------
    def save(self, rates_updated: Optional[datetime] = None) -> None:
        if self._store is None:
            return
        try:
            save_state(
                self._store,
                self.config,
                self.rows.rows(),
                rates_changed_at=self.config_holder.rates_changed_at,
            )
            if rates_updated is not None:
                save_rates_timestamp(self._store, rates_updated)
        except sqlite3.Error:
            # State stays in memory; the next mutation writes it again
            logger.exception("failed to persist calculator state")

    # Configuration -------------------------------------------------
    @property
    def config(self) -> CalculatorConfig:
        return self.config_holder.config

    def billable_hours(self) -> float:
        return self.config_holder.billable_hours_per_year()

    def update_config(self, changes: Mapping[str, Any]) -> List[str]:
        rejected = self.config_holder.update(changes, now=self.rates.now())
        self.save()
        return rejected

    # Rows ----------------------------------------------------------
    def add_row(self, initial_amount: float = 0.0, label: str = "") -> Row:
        row = self.rows.add_row(initial_amount, label)
        self.save()
        return row

    def remove_row(self, row_id: int) -> bool:
        removed = self.rows.remove_row(row_id)
        if removed:
            self.save()
        return removed

    def set_label(self, row_id: int, text: str) -> Row:
        row = self.rows.set_label(row_id, text)
        self.save()
        return row

    # Cells ---------------------------------------------------------
    def derive(self, row_id: int, period: str, currency: str) -> str:
        row = self.rows.require(row_id)
        return conversion.display_value(row.yearly_pln, period, currency, self.config)

    def cells(self, row_id: int) -> Dict[str, Dict[str, str]]:
        row = self.rows.require(row_id)
        return conversion.display_cells(row.yearly_pln, self.config)

    def commit_edit(self, row_id: int, period: str, currency: str, raw: str) -> bool:
        """Write an edited cell back as the row's new canonical amount.

        Returns False and changes nothing when the edit does not produce a
        new amount (unparsable text, the value already shown, an hourly cell
        without billable hours).
        """
        current = self.derive(row_id, period, currency)
        if conversion.sanitize_numeric(raw) == conversion.sanitize_numeric(current):
            return False
        new_amount = conversion.canonical_from_display(raw, period, currency, self.config)
        if new_amount is None:
            logger.debug("ignoring edit %r for row %s %s/%s", raw, row_id, period, currency)
            return False
        if new_amount == self.rows.require(row_id).yearly_pln:
            return False
        self.rows.set_canonical_amount(row_id, new_amount)
        self.save()
        return True

    def step_cell(self, row_id: int, period: str, currency: str, direction: int) -> bool:
        current = self.derive(row_id, period, currency)
        stepped = conversion.stepped_display(current, period, currency, direction)
        return self.commit_edit(row_id, period, currency, stepped)

    # Rates ---------------------------------------------------------
    def apply_rates(self, snapshot: RateSnapshot, ticket: FetchTicket) -> bool:
        applied = self.config_holder.apply_rates(snapshot, ticket.requested_at)
        if not applied:
            self.rates.record_discarded()
            return False
        self.rates.record_success(snapshot)
        self.save(rates_updated=snapshot.fetched_at)
        return True

    async def refresh_rates(self, manual: bool = False) -> bool:
        if not self.rates.remote:
            logger.info("rate provider %s is offline; keeping configured rates", self.rates.provider_name)
            return False
        ticket = self.rates.begin(manual=manual)
        try:
            snapshot = await run_in_threadpool(self.rates.fetch)
        except RateFetchError as e:
            logger.warning("exchange rate refresh failed: %s", e)
            self.rates.record_failure()
            return False
        return self.apply_rates(snapshot, ticket)

    def needs_rate_refresh(self) -> bool:
        return self.rates.remote and self.rates.pending == 0 and self.rates.is_stale()

    # Lifecycle -----------------------------------------------------
    def reset(self) -> None:
        self.config_holder.replace(DEFAULT_CONFIG)
        self.config_holder.rates_changed_at = self.rates.now()
        self.rows.replace_all(default_rows())
        self.save()

    def snapshot(self) -> Dict[str, Any]:
        config = self.config
        rows = []
        for row in self.rows.rows():
            rows.append(
                {
                    "id": row.id,
                    "label": row.label,
                    "yearly_pln": row.yearly_pln,
                    "cells": conversion.display_cells(row.yearly_pln, config),
                }
            )
        return {
            "config": config.to_storage(),
            "billable_hours_per_year": self.billable_hours(),
            "columns": [{"period": p, "currency": c} for p, c in CELLS],
            "rows": rows,
            "rates": self.rates.status(),
        }
