# barbershop/errors.py

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class BookingError(Exception):
    """Base class for failures raised by the booking core."""

    code = "booking_error"
    status_code = 400
    retryable = False

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class BookingValidationError(BookingError):
    """Bad identifiers, inactive barber/service, closed day, illegal transition."""

    code = "validation_error"
    status_code = 422


class NotFoundError(BookingValidationError):
    code = "not_found"
    status_code = 404


class SlotConflictError(BookingError):
    """The requested start time is no longer free; refresh and pick another slot."""

    code = "slot_conflict"
    status_code = 409


class StoreUnavailableError(BookingError):
    """Transient failure talking to the data store. Safe for the caller to retry."""

    code = "store_unavailable"
    status_code = 503
    retryable = True


class AuthorizationError(BookingError):
    code = "forbidden"
    status_code = 403


def _problem(exc: BookingError) -> Dict[str, Any]:
    return {"detail": exc.detail, "code": exc.code, "retryable": exc.retryable}


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(BookingError)
    async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
        if exc.retryable:
            logger.warning("%s %s failed: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content=_problem(exc))
