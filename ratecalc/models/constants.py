"""Domain constants for the conversion grid.

Kept as plain tuples and Literal aliases; PLN is the pivot every cross rate
is composed through.
"""

from typing import Literal, Tuple

Currency = Literal["PLN", "USD", "EUR"]
Period = Literal["hourly", "monthly", "yearly"]

PIVOT_CURRENCY: Currency = "PLN"
CURRENCIES: Tuple[str, ...] = ("PLN", "USD", "EUR")
PERIODS: Tuple[str, ...] = ("hourly", "monthly", "yearly")

# Grid order used by the page and the API: hourly, monthly, yearly x PLN, USD, EUR
CELLS: Tuple[Tuple[str, str], ...] = tuple((p, c) for p in PERIODS for c in CURRENCIES)

MONTHS_PER_YEAR = 12
HOURLY_ROUNDING_STEP = 0.1
# Hourly USD/EUR cells are shown with one decimal; every other cell is whole units
FINE_GRAINED_CURRENCIES: Tuple[str, ...] = ("USD", "EUR")

STORAGE_KEYS = {
    "config": "salary_config",
    "rows": "salary_rows",
    "rates_updated": "rates_last_updated",
    "rates_changed": "rates_changed_at",
}
