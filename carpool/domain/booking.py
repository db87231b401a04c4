"""
Trip Booking Engine
===================

Validates and applies every trip lifecycle command:

* **Create / update** -- the owner must exist and be an eligible car owner,
  the departure must be at least ``lead_time`` away, seats must be >= 0.
* **Enroll**          -- one seat per user; a duplicate enrollment is a
  ``Conflict``.  Seats are a soft cap unless ``allow_overbooking`` is off.
* **Start**           -- owner only, once, with >= 1 passenger and no later
  than ``start_grace`` after the scheduled departure.
* **Cancel**          -- unstarted trips only, no later than
  ``cancel_grace`` after departure; the trip record is removed.

Atomicity
---------
The engine holds no trip state between calls.  Each command re-reads the
trip through ``TripRegistry.update`` / ``delete``, whose callbacks run under
that trip's lock, so validation and write-back form one unit and a failed
check leaves the stored record untouched.

All window checks are closed: ``now == scheduled + grace`` is still allowed.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING

from .clock import Clock, as_utc
from .entities import Trip, TripDetails
from .enums import TripStatus
from .errors import (
    AlreadyStarted,
    Conflict,
    InvalidCapacity,
    InvalidCarOwner,
    InvalidSchedule,
    NoPassengers,
    NotFound,
    OutOfWindow,
    TripFull,
    Unauthorized,
)

if TYPE_CHECKING:
    from carpool.config import Settings
    from carpool.infrastructure.repositories import TripRegistry, UserDirectory

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(minutes=30)


class BookingEngine:
    def __init__(
        self,
        directory: UserDirectory,
        registry: TripRegistry,
        clock: Clock,
        *,
        lead_time: timedelta = DEFAULT_WINDOW,
        start_grace: timedelta = DEFAULT_WINDOW,
        cancel_grace: timedelta = DEFAULT_WINDOW,
        allow_overbooking: bool = True,
    ):
        self.directory = directory
        self.registry = registry
        self.clock = clock
        self.lead_time = lead_time
        self.start_grace = start_grace
        self.cancel_grace = cancel_grace
        self.allow_overbooking = allow_overbooking

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        directory: UserDirectory,
        registry: TripRegistry,
        clock: Clock,
    ) -> "BookingEngine":
        return cls(
            directory,
            registry,
            clock,
            lead_time=timedelta(minutes=settings.lead_time_minutes),
            start_grace=timedelta(minutes=settings.start_grace_minutes),
            cancel_grace=timedelta(minutes=settings.cancel_grace_minutes),
            allow_overbooking=settings.allow_overbooking,
        )

    # ── Validation ────────────────────────────────────────────────────

    def _validate_details(self, details: TripDetails, now: datetime) -> TripDetails:
        """Run the owner / schedule / capacity checks in order."""
        if not self.directory.exists(details.car_owner_id):
            raise NotFound(f"Car owner {details.car_owner_id} does not exist")
        if not self.directory.is_eligible_car_owner(details.car_owner_id):
            raise InvalidCarOwner(
                f"User {details.car_owner_id} is not a car owner with "
                "driver license and car plate on file"
            )
        start_time = as_utc(details.start_time)
        if start_time < now + self.lead_time:
            raise InvalidSchedule(
                "Trips must be scheduled at least "
                f"{int(self.lead_time.total_seconds() // 60)} minutes in the future"
            )
        if details.total_seats < 0:
            raise InvalidCapacity("Total seats cannot be negative")
        return replace(details, start_time=start_time)

    def _check_not_late(self, trip: Trip, grace: timedelta, action: str) -> None:
        if self.clock.now() > as_utc(trip.start_time) + grace:
            raise OutOfWindow(
                f"Trip {trip.id} cannot be {action} more than "
                f"{int(grace.total_seconds() // 60)} minutes after scheduled time"
            )

    # ── Commands ──────────────────────────────────────────────────────

    def create_trip(self, trip_id: str, details: TripDetails) -> Trip:
        if self.registry.exists(trip_id):
            raise Conflict(f"Trip {trip_id} already exists")
        checked = self._validate_details(details, self.clock.now())
        trip = self.registry.create(Trip.from_details(trip_id, checked))
        logger.info(
            "Trip %s created by %s (%d seats, departs %s)",
            trip_id, trip.car_owner_id, trip.total_seats, trip.start_time.isoformat(),
        )
        return trip

    def update_trip(self, trip_id: str, details: TripDetails) -> Trip:
        def mutate(trip: Trip) -> None:
            if trip.started:
                raise AlreadyStarted(f"Trip {trip_id} has already started")
            trip.apply_details(self._validate_details(details, self.clock.now()))

        trip = self.registry.update(trip_id, mutate)
        logger.info("Trip %s updated (%d seats)", trip_id, trip.total_seats)
        return trip

    def create_or_update_trip(
        self, is_create: bool, trip_id: str, details: TripDetails
    ) -> Trip:
        if is_create:
            return self.create_trip(trip_id, details)
        return self.update_trip(trip_id, details)

    def enroll_passenger(self, trip_id: str, user_id: str) -> Trip:
        def mutate(trip: Trip) -> None:
            if trip.started:
                raise AlreadyStarted(
                    f"Trip {trip_id} has already started; enrollment is closed"
                )
            if user_id in trip.enrolled_passengers:
                raise Conflict(f"User {user_id} already enrolled in trip {trip_id}")
            if not self.allow_overbooking and trip.available_seats == 0:
                raise TripFull(f"Trip {trip_id} has no available seats")
            trip.add_passenger(user_id)

        trip = self.registry.update(trip_id, mutate)
        logger.info(
            "User %s enrolled in trip %s (%d seats left)",
            user_id, trip_id, trip.available_seats,
        )
        return trip

    def start_trip(self, trip_id: str, caller_id: str) -> Trip:
        def mutate(trip: Trip) -> None:
            if caller_id != trip.car_owner_id:
                raise Unauthorized("Only the car owner can start the trip")
            if trip.started:
                raise AlreadyStarted(f"Trip {trip_id} is already started")
            if not trip.enrolled_passengers:
                raise NoPassengers(
                    "Trip cannot start without any enrolled passengers"
                )
            self._check_not_late(trip, self.start_grace, "started")
            trip.mark_started()

        trip = self.registry.update(trip_id, mutate)
        logger.info(
            "Trip %s started with %d passengers",
            trip_id, len(trip.enrolled_passengers),
        )
        return trip

    def cancel_trip(self, trip_id: str) -> None:
        def guard(trip: Trip) -> None:
            # started trips cannot move to CANCELLED
            trip.ensure_can_transition(TripStatus.CANCELLED)
            self._check_not_late(trip, self.cancel_grace, "cancelled")

        self.registry.delete(trip_id, guard)
        logger.info("Trip %s cancelled", trip_id)

    # ── Queries ───────────────────────────────────────────────────────

    def get_trip(self, trip_id: str) -> Trip:
        return self.registry.get(trip_id)

    def list_trips(self) -> list[Trip]:
        return self.registry.list()

    def get_status(self, trip_id: str) -> tuple[bool, list[str]]:
        trip = self.registry.get(trip_id)
        return trip.started, list(trip.enrolled_passengers)
