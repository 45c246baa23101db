from __future__ import annotations

from datetime import datetime
from typing import Dict

from pydantic import BaseModel, Field, field_validator


class RateSnapshot(BaseModel):
    """The two cross rates the calculator composes everything else from."""

    usd_to_pln: float = Field(..., gt=0, allow_inf_nan=False)
    eur_to_usd: float = Field(..., gt=0, allow_inf_nan=False)
    fetched_at: datetime
    source: str = "static"


class ExchangeRateApiPayload(BaseModel):
    """Subset of the ``/v4/latest/USD`` response we rely on.

    The remote source is untrusted: both PLN and EUR quotes must be present
    and positive before a payload is accepted.
    """

    base: str = "USD"
    rates: Dict[str, float]

    @field_validator("base")
    def _usd_base(cls, v: str) -> str:
        if v.upper() != "USD":
            raise ValueError("expected USD based rates")
        return v.upper()

    @field_validator("rates")
    def _required_quotes(cls, v: Dict[str, float]) -> Dict[str, float]:
        for code in ("PLN", "EUR"):
            value = v.get(code)
            if value is None:
                raise ValueError(f"missing {code} rate")
            if value <= 0:
                raise ValueError(f"{code} rate must be positive")
        return v
