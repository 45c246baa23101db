from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class Row(BaseModel):
    """One comparison row; ``yearly_pln`` is its only stored amount."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    label: str = Field("", alias="companyName")
    yearly_pln: float = Field(0.0, ge=0, allow_inf_nan=False, alias="yearlyPln")

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


DEFAULT_ROWS: List[Row] = [
    Row(id=1, label="Company A", yearly_pln=201600),
    Row(id=2, label="Company B", yearly_pln=180000),
    Row(id=3, label="", yearly_pln=294000),
]


def default_rows() -> List[Row]:
    return [r.model_copy() for r in DEFAULT_ROWS]
