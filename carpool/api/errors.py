"""Translate booking errors into HTTP responses."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from carpool.domain.errors import (
    AccountTooNew,
    AlreadyStarted,
    BookingError,
    Conflict,
    InvalidCapacity,
    InvalidCarOwner,
    InvalidSchedule,
    NoPassengers,
    NotFound,
    OutOfWindow,
    Unauthorized,
)

logger = logging.getLogger(__name__)

# Checked in order, so subclasses (TripFull < Conflict) inherit their parent's code.
STATUS_CODES: list[tuple[type[BookingError], int]] = [
    (NotFound, 404),
    (Conflict, 409),
    (AlreadyStarted, 409),
    (Unauthorized, 401),
    (InvalidCarOwner, 400),
    (InvalidSchedule, 400),
    (InvalidCapacity, 400),
    (NoPassengers, 400),
    (OutOfWindow, 400),
    (AccountTooNew, 400),
]


def status_code_for(exc: BookingError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 400


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    status_code = status_code_for(exc)
    logger.debug(
        "%s %s rejected: %s (%s)", request.method, request.url.path, exc.kind, exc.message
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "error": exc.kind},
    )


def init_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, booking_error_handler)
