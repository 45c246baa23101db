"""Pytest configuration and fixtures."""
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from ratecalc.core.config import Settings
from ratecalc.db.dal import KeyValueStore
from ratecalc.main import create_app
from ratecalc.models.config import CalculatorConfig
from ratecalc.services.calculator import SalaryCalculator
from ratecalc.services.rates.cache_service import RateCacheService
from ratecalc.services.rates.providers import StaticRateProvider


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    """Configuration used throughout the worked examples: 1792 billable hours."""
    return CalculatorConfig(
        usd_to_pln=3.65,
        eur_to_usd=1.16,
        working_days_per_year=251,
        vacation_days_per_year=27,
        hours_per_day=8,
    )


@pytest.fixture
def store(tmp_path):
    return KeyValueStore(tmp_path / "state.sqlite3")


@pytest.fixture
def rate_cache(clock):
    return RateCacheService(StaticRateProvider(clock=clock), clock=clock)


@pytest.fixture
def calculator(rate_cache, config):
    return SalaryCalculator(rate_cache, config=config)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        db_filename="api.sqlite3",
        exchange_rate_provider="static",
        auto_refresh_rates=False,
    )


@pytest.fixture
def app(settings, clock):
    return create_app(settings_override=settings, clock=clock)


@pytest.fixture
def client(app):
    return TestClient(app)
