"""FastAPI dependency injection helpers.

The process holds one directory, one trip registry and one engine; tests
swap them out through ``app.dependency_overrides``.
"""

from carpool.config import settings
from carpool.domain.accounts import AccountService
from carpool.domain.booking import BookingEngine
from carpool.domain.clock import SystemClock
from carpool.infrastructure.repositories import TripRegistry, UserDirectory

_clock = SystemClock()
_directory = UserDirectory()
_registry = TripRegistry()

_booking_engine = BookingEngine.from_settings(settings, _directory, _registry, _clock)
_account_service = AccountService.from_settings(settings, _directory, _clock)


def get_booking_engine() -> BookingEngine:
    return _booking_engine


def get_account_service() -> AccountService:
    return _account_service
