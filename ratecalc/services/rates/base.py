from __future__ import annotations

"""Rate provider abstraction.

A provider returns one snapshot of the two cross rates the calculator needs
(PLN per USD, USD per EUR). Providers raise RateFetchError on any failure;
deciding what to keep is the caller's job.
"""
from abc import ABC, abstractmethod

from ratecalc.models.rates import RateSnapshot


class RateProvider(ABC):
    name: str = "abstract"
    # Offline sources never replace the user's configured rates
    remote: bool = True

    @abstractmethod
    def fetch(self) -> RateSnapshot:
        """Return the current snapshot or raise RateFetchError."""
        raise NotImplementedError
