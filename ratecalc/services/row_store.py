"""Ordered in-memory collection of comparison rows.

Display order is insertion order; ids are only used for lookup. The amount
of a row changes through ``set_canonical_amount`` and nowhere else.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional

from ratecalc.core.errors import RowNotFoundError
from ratecalc.models.row import Row

logger = logging.getLogger("ratecalc.rows")


class RowStore:
    def __init__(self, rows: Iterable[Row] = ()):
        self._rows: List[Row] = []
        self._next_id = 1
        for row in rows:
            self._append(row)

    def _append(self, row: Row) -> None:
        if any(r.id == row.id for r in self._rows):
            raise ValueError(f"duplicate row id {row.id}")
        self._rows.append(row)
        self._next_id = max(self._next_id, row.id + 1)

    def _index(self, row_id: int) -> int:
        for i, row in enumerate(self._rows):
            if row.id == row_id:
                return i
        raise RowNotFoundError(row_id)

    # Queries -------------------------------------------------------
    def rows(self) -> List[Row]:
        return list(self._rows)

    def get(self, row_id: int) -> Optional[Row]:
        try:
            return self._rows[self._index(row_id)]
        except RowNotFoundError:
            return None

    def require(self, row_id: int) -> Row:
        return self._rows[self._index(row_id)]

    def __len__(self) -> int:
        return len(self._rows)

    # Mutations -----------------------------------------------------
    def add_row(self, initial_amount: float = 0.0, label: str = "") -> Row:
        row = Row(id=self._next_id, label=label, yearly_pln=initial_amount)
        self._append(row)
        logger.debug("row %s added", row.id)
        return row

    def remove_row(self, row_id: int) -> bool:
        before = len(self._rows)
        self._rows = [r for r in self._rows if r.id != row_id]
        removed = len(self._rows) != before
        if removed:
            logger.debug("row %s removed", row_id)
        return removed

    def set_label(self, row_id: int, text: str) -> Row:
        i = self._index(row_id)
        self._rows[i] = self._rows[i].model_copy(update={"label": text or ""})
        return self._rows[i]

    def set_canonical_amount(self, row_id: int, value: float) -> Row:
        if not math.isfinite(value) or value < 0:
            raise ValueError("canonical amount must be a finite non-negative number")
        i = self._index(row_id)
        self._rows[i] = self._rows[i].model_copy(update={"yearly_pln": float(value)})
        return self._rows[i]

    def replace_all(self, rows: Iterable[Row]) -> None:
        self._rows = []
        self._next_id = 1
        for row in rows:
            self._append(row)
