"""Domain exceptions and HTTP error handlers.

Handlers return a uniform ``{"error": ..., "detail": ...}`` body so the page
script and API clients can rely on one shape.
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette import status
import logging

logger = logging.getLogger("ratecalc.errors")


class CalculatorError(Exception):
    """Base class for calculator domain errors."""


class RowNotFoundError(CalculatorError, KeyError):
    def __init__(self, row_id: int):
        super().__init__(row_id)
        self.row_id = row_id

    def __str__(self) -> str:
        return f"row {self.row_id} not found"


class DivisionUndefined(CalculatorError, ZeroDivisionError):
    """Hourly values are undefined when there are no billable hours."""


class RateFetchError(CalculatorError):
    """Remote rate source failed or returned an unusable payload."""


def http_error_handler(request: Request, exc):  # type: ignore
    code = getattr(exc, "status_code", status.HTTP_404_NOT_FOUND)
    if code == status.HTTP_404_NOT_FOUND and getattr(exc, "detail", None) == "Not Found":
        detail = f"No route for {request.method} {request.url.path}"
    else:
        detail = getattr(exc, "detail", None)
    return JSONResponse(
        status_code=code,
        content={
            "error": "not_found" if code == status.HTTP_404_NOT_FOUND else "http_error",
            "detail": detail,
        },
    )


def row_not_found_handler(request: Request, exc: RowNotFoundError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "row_not_found", "detail": str(exc)},
    )


def validation_error_handler(request: Request, exc: RequestValidationError):  # type: ignore
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "detail": jsonable_encoder(exc.errors()),
        },
    )


def server_error_handler(request: Request, exc: Exception):  # type: ignore
    logger.exception("unhandled exception")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "detail": "An unexpected error occurred.",
        },
    )
