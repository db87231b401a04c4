"""
Trip endpoints
==============

GET    /api/v1/trips                  -- list trips
GET    /api/v1/trips/{trip_id}        -- trip details incl. available seats
POST   /api/v1/trips/{trip_id}        -- publish a trip (202 Accepted)
PUT    /api/v1/trips/{trip_id}        -- edit a trip, keeping its passengers
DELETE /api/v1/trips/{trip_id}        -- cancel an unstarted trip
PUT    /api/v1/trips/{trip_id}/enroll -- enroll a passenger
PUT    /api/v1/trips/{trip_id}/start  -- start the trip (``car-owner-id`` header)
GET    /api/v1/trips/{trip_id}/status -- started flag and passenger list

Handlers are plain functions: FastAPI runs them on its thread pool and the
engine's per-trip locks serialise concurrent commands on the same trip.
Booking errors are rendered by ``carpool.api.errors``.
"""

from fastapi import APIRouter, Depends, Header, Request

from carpool.api.dependencies import get_booking_engine
from carpool.api.middleware import limiter
from carpool.api.schemas import (
    EnrollRequest,
    ErrorResponse,
    MessageResponse,
    TripRequest,
    TripResponse,
    TripStatusResponse,
)
from carpool.config import settings
from carpool.domain.booking import BookingEngine

router = APIRouter(
    prefix="/trips",
    tags=["trips"],
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
    },
)


@router.get("", response_model=list[TripResponse], summary="List all trips")
@limiter.limit(settings.rate_limit)
def list_trips(
    request: Request,
    engine: BookingEngine = Depends(get_booking_engine),
):
    return [TripResponse.model_validate(trip) for trip in engine.list_trips()]


@router.get("/{trip_id}", response_model=TripResponse, summary="Get a trip")
@limiter.limit(settings.rate_limit)
def get_trip(
    request: Request,
    trip_id: str,
    engine: BookingEngine = Depends(get_booking_engine),
):
    return TripResponse.model_validate(engine.get_trip(trip_id))


@router.post(
    "/{trip_id}",
    status_code=202,
    response_model=TripResponse,
    summary="Publish a trip",
    responses={202: {"description": "Trip accepted."}},
)
@limiter.limit(settings.rate_limit)
def create_trip(
    request: Request,
    trip_id: str,
    body: TripRequest,
    engine: BookingEngine = Depends(get_booking_engine),
):
    trip = engine.create_or_update_trip(True, trip_id, body.to_details())
    return TripResponse.model_validate(trip)


@router.put(
    "/{trip_id}",
    status_code=202,
    response_model=TripResponse,
    summary="Edit a trip",
    description="Re-validates the trip; enrolled passengers are kept.",
)
@limiter.limit(settings.rate_limit)
def update_trip(
    request: Request,
    trip_id: str,
    body: TripRequest,
    engine: BookingEngine = Depends(get_booking_engine),
):
    trip = engine.create_or_update_trip(False, trip_id, body.to_details())
    return TripResponse.model_validate(trip)


@router.delete(
    "/{trip_id}",
    response_model=MessageResponse,
    summary="Cancel a trip",
    description=(
        "Only unstarted trips can be cancelled, and no later than 30 minutes "
        "after the scheduled start. The trip is removed."
    ),
)
@limiter.limit(settings.rate_limit)
def cancel_trip(
    request: Request,
    trip_id: str,
    engine: BookingEngine = Depends(get_booking_engine),
):
    engine.cancel_trip(trip_id)
    return MessageResponse(detail=f"Trip {trip_id} cancelled")


@router.put(
    "/{trip_id}/enroll",
    status_code=202,
    response_model=TripResponse,
    summary="Enroll a passenger",
)
@limiter.limit(settings.rate_limit)
def enroll_passenger(
    request: Request,
    trip_id: str,
    body: EnrollRequest,
    engine: BookingEngine = Depends(get_booking_engine),
):
    return TripResponse.model_validate(engine.enroll_passenger(trip_id, body.user_id))


@router.put(
    "/{trip_id}/start",
    status_code=202,
    response_model=TripResponse,
    summary="Start a trip",
)
@limiter.limit(settings.rate_limit)
def start_trip(
    request: Request,
    trip_id: str,
    car_owner_id: str = Header(""),
    engine: BookingEngine = Depends(get_booking_engine),
):
    return TripResponse.model_validate(engine.start_trip(trip_id, car_owner_id))


@router.get(
    "/{trip_id}/status",
    response_model=TripStatusResponse,
    summary="Get trip status",
)
@limiter.limit(settings.rate_limit)
def get_trip_status(
    request: Request,
    trip_id: str,
    engine: BookingEngine = Depends(get_booking_engine),
):
    started, passengers = engine.get_status(trip_id)
    return TripStatusResponse(id=trip_id, started=started, enrolled_passengers=passengers)
