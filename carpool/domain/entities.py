"""
Domain entities with business logic.

Patterns used
-------------
- **State Pattern** on ``Trip``: enforces valid lifecycle transitions
  (SCHEDULED -> STARTED | CANCELLED).
- ``Trip.available_seats`` is always derived from ``total_seats`` and the
  passenger list, never stored.
- ``User`` is an immutable value: updates replace the whole record, so a
  reader always sees a consistent owner-status snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from .enums import TRIP_TRANSITIONS, TripStatus
from .errors import AlreadyStarted


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class UserProfile:
    """Caller-supplied user fields; ``id`` and ``created_at`` are managed."""

    first_name: str = ""
    last_name: str = ""
    mobile_number: str = ""
    email: str = ""
    is_car_owner: bool = False
    driver_license: str = ""
    car_plate_number: str = ""

    @property
    def has_car_details(self) -> bool:
        return bool(self.driver_license) and bool(self.car_plate_number)


@dataclass(frozen=True)
class TripDetails:
    """Fields supplied when a trip is published or edited."""

    car_owner_id: str
    pickup_location: str
    start_time: datetime
    destination: str
    total_seats: int
    alt_pickup_location: Optional[str] = None


# ── Entities ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class User:
    id: str
    created_at: datetime
    first_name: str = ""
    last_name: str = ""
    mobile_number: str = ""
    email: str = ""
    is_car_owner: bool = False
    driver_license: str = ""
    car_plate_number: str = ""

    @classmethod
    def from_profile(
        cls, user_id: str, profile: UserProfile, created_at: datetime
    ) -> "User":
        return cls(
            id=user_id,
            created_at=created_at,
            first_name=profile.first_name,
            last_name=profile.last_name,
            mobile_number=profile.mobile_number,
            email=profile.email,
            is_car_owner=profile.is_car_owner,
            driver_license=profile.driver_license,
            car_plate_number=profile.car_plate_number,
        )

    @property
    def is_eligible_car_owner(self) -> bool:
        return (
            self.is_car_owner
            and bool(self.driver_license)
            and bool(self.car_plate_number)
        )


@dataclass
class Trip:
    id: str
    car_owner_id: str
    pickup_location: str
    start_time: datetime
    destination: str
    total_seats: int = 0
    alt_pickup_location: Optional[str] = None
    enrolled_passengers: list[str] = field(default_factory=list)
    started: bool = False

    @classmethod
    def from_details(cls, trip_id: str, details: TripDetails) -> "Trip":
        return cls(
            id=trip_id,
            car_owner_id=details.car_owner_id,
            pickup_location=details.pickup_location,
            alt_pickup_location=details.alt_pickup_location,
            start_time=details.start_time,
            destination=details.destination,
            total_seats=details.total_seats,
        )

    @property
    def available_seats(self) -> int:
        return max(0, self.total_seats - len(self.enrolled_passengers))

    @property
    def status(self) -> TripStatus:
        return TripStatus.STARTED if self.started else TripStatus.SCHEDULED

    def copy(self) -> "Trip":
        return replace(self, enrolled_passengers=list(self.enrolled_passengers))

    def apply_details(self, details: TripDetails) -> None:
        """Overwrite the editable fields, keeping passengers and state."""
        self.car_owner_id = details.car_owner_id
        self.pickup_location = details.pickup_location
        self.alt_pickup_location = details.alt_pickup_location
        self.start_time = details.start_time
        self.destination = details.destination
        self.total_seats = details.total_seats

    def add_passenger(self, user_id: str) -> None:
        """Append *user_id*; callers check for duplicates under the trip lock."""
        self.enrolled_passengers.append(user_id)

    def ensure_can_transition(self, new_status: TripStatus) -> None:
        """Raise ``AlreadyStarted`` if *new_status* is not reachable."""
        if new_status not in TRIP_TRANSITIONS.get(self.status, set()):
            raise AlreadyStarted(
                f"Trip {self.id} cannot move from {self.status.value} "
                f"to {new_status.value}"
            )

    def mark_started(self) -> None:
        self.ensure_can_transition(TripStatus.STARTED)
        self.started = True
