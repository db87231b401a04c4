"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from carpool.domain.entities import TripDetails, UserProfile


# ── Requests ──────────────────────────────────────────────────────────


class UserRequest(BaseModel):
    first_name: str = ""
    last_name: str = ""
    mobile_number: str = ""
    email: str = ""
    is_car_owner: bool = False
    driver_license: Optional[str] = None
    car_plate_number: Optional[str] = None

    def to_profile(self) -> UserProfile:
        return UserProfile(
            first_name=self.first_name,
            last_name=self.last_name,
            mobile_number=self.mobile_number,
            email=self.email,
            is_car_owner=self.is_car_owner,
            driver_license=self.driver_license or "",
            car_plate_number=self.car_plate_number or "",
        )


class TripRequest(BaseModel):
    car_owner_id: str
    pickup_location: str
    alt_pickup_location: Optional[str] = None
    start_time: datetime
    destination: str
    # Negative values are rejected by the engine, not here, so the caller
    # gets an InvalidCapacity error rather than a schema error.
    total_seats: int

    def to_details(self) -> TripDetails:
        return TripDetails(
            car_owner_id=self.car_owner_id,
            pickup_location=self.pickup_location,
            alt_pickup_location=self.alt_pickup_location,
            start_time=self.start_time,
            destination=self.destination,
            total_seats=self.total_seats,
        )


class EnrollRequest(BaseModel):
    user_id: str = Field(..., min_length=1)


# ── Responses ─────────────────────────────────────────────────────────


class UserResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    mobile_number: str
    email: str
    is_car_owner: bool
    driver_license: Optional[str] = None
    car_plate_number: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class TripResponse(BaseModel):
    id: str
    car_owner_id: str
    pickup_location: str
    alt_pickup_location: Optional[str] = None
    start_time: datetime
    destination: str
    total_seats: int
    available_seats: int
    enrolled_passengers: list[str] = []
    started: bool

    model_config = {"from_attributes": True}


class TripStatusResponse(BaseModel):
    id: str
    started: bool
    enrolled_passengers: list[str]


class MessageResponse(BaseModel):
    detail: str


class HealthResponse(BaseModel):
    status: str = "ok"
    users: int = 0
    trips: int = 0


class ErrorResponse(BaseModel):
    detail: str
    error: str
