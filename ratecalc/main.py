import asyncio
import logging
import sqlite3
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import KeyValueStore
from .routers import health, state, rows, rates, ui
from .services.calculator import SalaryCalculator
from .services.rates.cache_service import build_rate_cache_service
from .services.rates.providers import Clock, utcnow

logger = logging.getLogger("ratecalc")


def _open_store(settings: Settings) -> KeyValueStore | None:
    try:
        return KeyValueStore(settings.db_path)  # type: ignore[arg-type]
    except sqlite3.Error:
        # Unreadable database: run on defaults without persistence
        logger.exception("failed to open state store at %s", settings.db_path)
        return None


def create_app(settings_override: Settings | None = None, clock: Clock = utcnow) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    clock: time source for rate cache decisions; tests pass a fixed clock.
    """
    settings = settings_override or get_settings()
    if settings_override is not None:
        settings.init_post_load()
    init_logging(debug=settings.debug)

    rate_cache = build_rate_cache_service(settings, clock=clock)
    store = _open_store(settings)
    if store is not None:
        calculator = SalaryCalculator.from_store(store, rate_cache)
    else:
        calculator = SalaryCalculator(rate_cache)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        refresh_task = None
        if settings.auto_refresh_rates and calculator.needs_rate_refresh():
            logger.info("cached exchange rates are stale; refreshing in background")
            refresh_task = asyncio.create_task(calculator.refresh_rates())
        yield
        if refresh_task is not None and not refresh_task.done():
            refresh_task.cancel()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.calculator = calculator

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(errors.RowNotFoundError, errors.row_not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(state.router)
    app.include_router(rows.router)
    app.include_router(rates.router)
    app.include_router(ui.router)

    return app
