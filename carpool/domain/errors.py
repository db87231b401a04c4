"""
Booking error taxonomy.

Every rejection raised by the engine, the registries and the account layer
derives from ``BookingError`` and carries a stable ``kind`` string, so that
outer layers (REST handlers, tests) can branch on the kind without parsing
messages.  None of these are fatal; the caller decides how to render them.
"""


class BookingError(Exception):
    """Base class for all recoverable booking failures."""

    kind = "BookingError"

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class NotFound(BookingError):
    """Referenced trip or user does not exist."""

    kind = "NotFound"


class Conflict(BookingError):
    """Duplicate trip/user id or duplicate enrollment."""

    kind = "Conflict"


class TripFull(Conflict):
    """No seats left and overbooking is disabled."""

    kind = "TripFull"


class InvalidCarOwner(BookingError):
    """User is not flagged as a car owner or lacks license / plate."""

    kind = "InvalidCarOwner"


class InvalidSchedule(BookingError):
    """Departure is closer than the required lead time."""

    kind = "InvalidSchedule"


class InvalidCapacity(BookingError):
    kind = "InvalidCapacity"


class Unauthorized(BookingError):
    """Caller is not the trip's car owner."""

    kind = "Unauthorized"


class AlreadyStarted(BookingError):
    kind = "AlreadyStarted"


class NoPassengers(BookingError):
    kind = "NoPassengers"


class OutOfWindow(BookingError):
    """Start or cancel attempted after the grace period."""

    kind = "OutOfWindow"


class AccountTooNew(BookingError):
    """Account deletion attempted before the minimum account age."""

    kind = "AccountTooNew"
