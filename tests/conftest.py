"""
Shared test fixtures.

Every test gets a fresh directory, trip registry and engine, all wired to a
``FixedClock`` so window boundaries can be hit to the second.  The API
client fixture overrides the app's dependencies with the same objects.
"""

from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from carpool.domain.accounts import AccountService
from carpool.domain.booking import BookingEngine
from carpool.domain.clock import FixedClock
from carpool.domain.entities import TripDetails, User, UserProfile
from carpool.infrastructure.repositories import TripRegistry, UserDirectory

NOW = datetime(2026, 10, 19, 9, 0, tzinfo=timezone.utc)

OWNER_PROFILE = UserProfile(
    first_name="Una",
    last_name="Owner",
    mobile_number="91234567",
    email="una@example.com",
    is_car_owner=True,
    driver_license="L1",
    car_plate_number="P1",
)


# ── Engine fixtures ───────────────────────────────────────────────────


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)


@pytest.fixture
def directory() -> UserDirectory:
    return UserDirectory()


@pytest.fixture
def registry() -> TripRegistry:
    return TripRegistry()


@pytest.fixture
def accounts(directory, clock) -> AccountService:
    return AccountService(directory, clock)


@pytest.fixture
def engine(directory, registry, clock) -> BookingEngine:
    return BookingEngine(directory, registry, clock)


@pytest.fixture
def owner(accounts) -> User:
    return accounts.create_user("U1", OWNER_PROFILE)


@pytest.fixture
def make_details() -> Callable[..., TripDetails]:
    def _make(
        start_in: timedelta = timedelta(hours=1),
        total_seats: int = 2,
        car_owner_id: str = "U1",
        alt_pickup_location=None,
    ) -> TripDetails:
        return TripDetails(
            car_owner_id=car_owner_id,
            pickup_location="Jurong East MRT",
            alt_pickup_location=alt_pickup_location,
            start_time=NOW + start_in,
            destination="Changi Airport",
            total_seats=total_seats,
        )

    return _make


# ── API fixture ───────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(engine, accounts) -> AsyncGenerator[AsyncClient, None]:
    """AsyncClient against an app wired to the test engine."""
    from carpool.api.app import create_app
    from carpool.api.dependencies import get_account_service, get_booking_engine
    from carpool.api.middleware import limiter

    limiter.reset()
    app = create_app()
    app.dependency_overrides[get_booking_engine] = lambda: engine
    app.dependency_overrides[get_account_service] = lambda: accounts

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
