"""Load / save calculator state through the key/value store.

Loading is resilient: a missing key, corrupt JSON or a record that fails
validation falls back to the built-in defaults for that piece of state and
is logged, never raised.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import ValidationError

from ratecalc.db.dal import KeyValueStore
from ratecalc.models.config import CalculatorConfig, DEFAULT_CONFIG
from ratecalc.models.constants import STORAGE_KEYS
from ratecalc.models.row import Row, default_rows

logger = logging.getLogger("ratecalc.state")


@dataclass
class PersistedState:
    config: CalculatorConfig = DEFAULT_CONFIG
    rows: List[Row] = field(default_factory=default_rows)
    rates_last_updated: Optional[datetime] = None
    rates_changed_at: Optional[datetime] = None


def _load_config(store: KeyValueStore) -> CalculatorConfig:
    try:
        data = store.get_json(STORAGE_KEYS["config"])
    except ValueError:
        logger.error("stored configuration is not valid JSON; using defaults")
        return DEFAULT_CONFIG
    if data is None:
        return DEFAULT_CONFIG
    try:
        return CalculatorConfig.model_validate(data)
    except ValidationError as e:
        logger.error("stored configuration rejected (%s); using defaults", e.error_count())
        return DEFAULT_CONFIG


def _load_rows(store: KeyValueStore) -> List[Row]:
    try:
        data = store.get_json(STORAGE_KEYS["rows"])
    except ValueError:
        logger.error("stored rows are not valid JSON; using defaults")
        return default_rows()
    if data is None:
        return default_rows()
    if not isinstance(data, list):
        logger.error("stored rows are not a list; using defaults")
        return default_rows()
    try:
        rows = [Row.model_validate(item) for item in data]
    except ValidationError as e:
        logger.error("stored rows rejected (%s); using defaults", e.error_count())
        return default_rows()
    if len({r.id for r in rows}) != len(rows):
        logger.error("stored rows contain duplicate ids; using defaults")
        return default_rows()
    return rows


def _load_timestamp(store: KeyValueStore, key: str) -> Optional[datetime]:
    raw = store.get(STORAGE_KEYS[key])
    if not raw:
        return None
    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        logger.warning("ignoring unparsable %s timestamp %r", key, raw)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def load_state(store: KeyValueStore) -> PersistedState:
    try:
        return PersistedState(
            config=_load_config(store),
            rows=_load_rows(store),
            rates_last_updated=_load_timestamp(store, "rates_updated"),
            rates_changed_at=_load_timestamp(store, "rates_changed"),
        )
    except sqlite3.Error:
        logger.exception("failed to read persisted state; using defaults")
        return PersistedState()


def save_state(
    store: KeyValueStore,
    config: CalculatorConfig,
    rows: List[Row],
    rates_changed_at: Optional[datetime] = None,
) -> None:
    store.set_many_json(
        {
            STORAGE_KEYS["config"]: config.to_storage(),
            STORAGE_KEYS["rows"]: [r.to_storage() for r in rows],
        }
    )
    if rates_changed_at is not None:
        store.set(STORAGE_KEYS["rates_changed"], rates_changed_at.isoformat())


def save_rates_timestamp(store: KeyValueStore, when: datetime) -> None:
    store.set(STORAGE_KEYS["rates_updated"], when.isoformat())
