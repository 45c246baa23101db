from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ratecalc.core.config import Settings
from ratecalc.models.rates import RateSnapshot
from .base import RateProvider
from .providers import Clock, make_rate_provider, utcnow

"""Rate cache bookkeeping.

Purpose:
    Track when the cached rates were last refreshed, whether they are still
    inside the validity window (settings.rates_cache_ttl_seconds, 24h by
    default) and the warning left by the last failed fetch.

Design:
    - Wraps one RateProvider selected via settings.exchange_rate_provider.
    - The cached rates themselves live in the calculator configuration; this
      service only decides *when* to fetch and records the outcome.
    - fetch() is blocking and is meant to run in a worker thread; the result
      is applied to the configuration by the caller on the event loop.
"""

FETCH_FAILED_MESSAGE = "Failed to load exchange rates. Using cached or default values."


@dataclass(frozen=True)
class FetchTicket:
    """Issued when a fetch starts; used to order responses."""

    requested_at: datetime
    manual: bool


class RateCacheService:
    def __init__(
        self,
        provider: RateProvider,
        ttl_seconds: int = 24 * 60 * 60,
        last_updated: Optional[datetime] = None,
        clock: Clock = utcnow,
    ):
        self._provider = provider
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock
        self.last_updated = last_updated
        self.last_error: Optional[str] = None
        self.pending = 0

    @property
    def provider_name(self) -> str:
        return self._provider.name

    @property
    def remote(self) -> bool:
        return self._provider.remote

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def now(self) -> datetime:
        return self._clock()

    def is_stale(self, now: Optional[datetime] = None) -> bool:
        if self.last_updated is None:
            return True
        now = now or self._clock()
        return now - self.last_updated >= self._ttl

    def begin(self, manual: bool = False) -> FetchTicket:
        self.pending += 1
        return FetchTicket(requested_at=self._clock(), manual=manual)

    def fetch(self) -> RateSnapshot:
        """Blocking provider call; raises RateFetchError."""
        return self._provider.fetch()

    def record_success(self, snapshot: RateSnapshot) -> None:
        self.pending = max(0, self.pending - 1)
        self.last_updated = snapshot.fetched_at
        self.last_error = None

    def record_discarded(self) -> None:
        self.pending = max(0, self.pending - 1)

    def record_failure(self) -> None:
        self.pending = max(0, self.pending - 1)
        self.last_error = FETCH_FAILED_MESSAGE

    def status(self) -> dict:
        return {
            "provider": self.provider_name,
            "last_updated": self.last_updated.isoformat() if self.last_updated else None,
            "stale": self.is_stale(),
            "loading": self.pending > 0,
            "error": self.last_error,
        }


def build_rate_cache_service(
    settings: Settings,
    last_updated: Optional[datetime] = None,
    clock: Clock = utcnow,
) -> RateCacheService:
    provider = make_rate_provider(
        settings.exchange_rate_provider,
        url=str(settings.exchange_api_url),
        timeout=settings.http_timeout_seconds,
        retries=settings.http_retries,
        clock=clock,
    )
    return RateCacheService(
        provider,
        ttl_seconds=settings.rates_cache_ttl_seconds,
        last_updated=last_updated,
        clock=clock,
    )
