"""Holder for the current calculator configuration.

The configuration itself is an immutable ``CalculatorConfig``; updates build
and validate a new instance and swap it in. Each changed field is validated
on its own, so one bad value never blocks the others and never replaces the
previous valid value.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError

from ratecalc.models.config import CalculatorConfig, DEFAULT_CONFIG
from ratecalc.models.rates import RateSnapshot
from ratecalc.services.conversion import billable_hours_per_year, exchange_rate

logger = logging.getLogger("ratecalc.config")

RATE_FIELDS = ("usd_to_pln", "eur_to_usd")

# Accept both the attribute names and the storage aliases on input
_FIELD_NAMES: Dict[str, str] = {}
for _name, _info in CalculatorConfig.model_fields.items():
    _FIELD_NAMES[_name] = _name
    if _info.alias:
        _FIELD_NAMES[_info.alias] = _name


class ConfigurationHolder:
    def __init__(self, config: CalculatorConfig = DEFAULT_CONFIG):
        self._config = config
        # Last manual rate edit or last applied fetch; older fetches are discarded
        self.rates_changed_at: Optional[datetime] = None

    @property
    def config(self) -> CalculatorConfig:
        return self._config

    def exchange_rate(self, from_currency: str, to_currency: str) -> float:
        return exchange_rate(self._config, from_currency, to_currency)

    def billable_hours_per_year(self) -> float:
        return billable_hours_per_year(self._config)

    def _try_set(self, field: str, value: Any) -> bool:
        data = self._config.model_dump()
        data[field] = value
        try:
            self._config = CalculatorConfig.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "rejected configuration value %s=%r: %s", field, value, e.errors()[0]["msg"]
            )
            return False
        return True

    def update(self, changes: Mapping[str, Any], now: Optional[datetime] = None) -> List[str]:
        """Apply changes field by field; return the names of rejected fields."""
        rejected: List[str] = []
        rates_touched = False
        for key, value in changes.items():
            field = _FIELD_NAMES.get(key)
            if field is None:
                logger.warning("ignoring unknown configuration field %r", key)
                rejected.append(key)
                continue
            if value is None or isinstance(value, bool):
                rejected.append(field)
                continue
            if self._try_set(field, value):
                rates_touched = rates_touched or field in RATE_FIELDS
            else:
                rejected.append(field)
        if rates_touched and now is not None:
            self.rates_changed_at = now
        return rejected

    def apply_rates(self, snapshot: RateSnapshot, requested_at: datetime) -> bool:
        """Swap in fetched rates unless a newer rate change already happened."""
        if self.rates_changed_at is not None and requested_at < self.rates_changed_at:
            logger.info(
                "discarding rate response requested at %s; rates changed at %s",
                requested_at.isoformat(),
                self.rates_changed_at.isoformat(),
            )
            return False
        self._config = self._config.model_copy(
            update={"usd_to_pln": snapshot.usd_to_pln, "eur_to_usd": snapshot.eur_to_usd}
        )
        self.rates_changed_at = requested_at
        return True

    def replace(self, config: CalculatorConfig) -> None:
        self._config = config
