from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator


class CalculatorConfig(BaseModel):
    """Exchange rates and working-time parameters.

    Serialized with the legacy browser storage keys
    (``usdPln``, ``eurUsd``, ``workingDaysInYear``, ``vacationDays``,
    ``hoursPerDay``); snake_case names are accepted on input too.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    usd_to_pln: float = Field(3.65, gt=0, allow_inf_nan=False, alias="usdPln")
    eur_to_usd: float = Field(1.16, gt=0, allow_inf_nan=False, alias="eurUsd")
    working_days_per_year: int = Field(251, ge=0, alias="workingDaysInYear")
    vacation_days_per_year: int = Field(27, ge=0, alias="vacationDays")
    hours_per_day: float = Field(8, gt=0, allow_inf_nan=False, alias="hoursPerDay")

    @model_validator(mode="after")
    def _vacation_within_working_days(self) -> "CalculatorConfig":
        if self.vacation_days_per_year > self.working_days_per_year:
            raise ValueError("vacation days cannot exceed working days")
        return self

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True)


DEFAULT_CONFIG = CalculatorConfig()
