from __future__ import annotations

"""Concrete rate providers and factory.

'static' returns the built-in default rates (offline use, tests) and is never
polled for refreshes;
'external-http' reads exchangerate-api.com's USD based table.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Dict, Optional, Type

from pydantic import ValidationError

from ratecalc.core.errors import RateFetchError
from ratecalc.models.config import DEFAULT_CONFIG
from ratecalc.models.rates import ExchangeRateApiPayload, RateSnapshot
from ratecalc.services.http_client import HttpError, get_json
from ratecalc.services.money import round2
from .base import RateProvider

logger = logging.getLogger("ratecalc.rates")

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StaticRateProvider(RateProvider):
    name = "static"
    remote = False

    def __init__(self, clock: Clock = utcnow, **_: object):
        self._clock = clock

    def fetch(self) -> RateSnapshot:
        return RateSnapshot(
            usd_to_pln=DEFAULT_CONFIG.usd_to_pln,
            eur_to_usd=DEFAULT_CONFIG.eur_to_usd,
            fetched_at=self._clock(),
            source=self.name,
        )


class ExternalHTTPRateProvider(RateProvider):
    """USD based latest rates; PLN per USD is read directly, EUR is inverted."""

    name = "external-http"

    def __init__(
        self,
        url: str = "https://api.exchangerate-api.com/v4/latest/USD",
        timeout: float = 5.0,
        retries: int = 2,
        clock: Clock = utcnow,
        fetch_json: Optional[Callable[..., Dict]] = None,
    ):
        self._url = str(url)
        self._timeout = timeout
        self._retries = retries
        self._clock = clock
        self._fetch_json = fetch_json or get_json

    def fetch(self) -> RateSnapshot:
        try:
            data = self._fetch_json(self._url, timeout=self._timeout, retries=self._retries)
        except HttpError as e:
            raise RateFetchError(str(e)) from e
        try:
            payload = ExchangeRateApiPayload.model_validate(data)
        except ValidationError as e:
            raise RateFetchError(f"invalid rate payload: {e.errors()[0]['msg']}") from e
        usd_to_pln = payload.rates["PLN"]
        # The API quotes EUR per USD; the calculator stores USD per EUR
        eur_to_usd = round2(1 / payload.rates["EUR"])
        try:
            snapshot = RateSnapshot(
                usd_to_pln=usd_to_pln,
                eur_to_usd=eur_to_usd,
                fetched_at=self._clock(),
                source=self.name,
            )
        except ValidationError as e:
            raise RateFetchError(f"unusable rates: {e.errors()[0]['msg']}") from e
        logger.info("fetched rates usd_pln=%s eur_usd=%s", usd_to_pln, eur_to_usd)
        return snapshot


_PROVIDER_REGISTRY: Dict[str, Type[RateProvider]] = {
    "static": StaticRateProvider,
    "external-http": ExternalHTTPRateProvider,
}


def make_rate_provider(kind: str, **kwargs) -> RateProvider:
    cls = _PROVIDER_REGISTRY.get(kind)
    if not cls:
        raise ValueError(f"Unknown rate provider kind '{kind}'")
    return cls(**kwargs)
