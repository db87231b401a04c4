"""Unit tests for the booking engine's validation and lifecycle rules."""

from dataclasses import replace
from datetime import timedelta

import pytest

from carpool.domain.booking import BookingEngine
from carpool.domain.entities import UserProfile
from carpool.domain.errors import (
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
from tests.conftest import NOW

THIRTY_MINUTES = timedelta(minutes=30)
ONE_SECOND = timedelta(seconds=1)


class TestCreateTrip:
    def test_new_trip_is_scheduled_and_empty(self, engine, owner, make_details):
        trip = engine.create_trip("T1", make_details(total_seats=4))
        assert trip.started is False
        assert trip.enrolled_passengers == []
        assert trip.available_seats == trip.total_seats == 4

    def test_trip_is_persisted(self, engine, owner, make_details):
        engine.create_trip("T1", make_details(alt_pickup_location="Clementi"))
        stored = engine.get_trip("T1")
        assert stored.alt_pickup_location == "Clementi"
        assert stored.car_owner_id == "U1"

    def test_duplicate_id_conflicts(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        with pytest.raises(Conflict):
            engine.create_trip("T1", make_details(total_seats=5))
        assert engine.get_trip("T1").total_seats == 2

    def test_duplicate_id_checked_before_owner(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        with pytest.raises(Conflict):
            engine.create_trip("T1", make_details(car_owner_id="ghost"))

    def test_unknown_owner_not_found(self, engine, make_details):
        with pytest.raises(NotFound):
            engine.create_trip("T1", make_details(car_owner_id="ghost"))

    def test_non_owner_rejected(self, engine, accounts, make_details):
        accounts.create_user("U9", UserProfile(first_name="Rider"))
        with pytest.raises(InvalidCarOwner):
            engine.create_trip("T1", make_details(car_owner_id="U9"))
        assert engine.list_trips() == []

    def test_lead_time_just_short_fails(self, engine, owner, make_details):
        with pytest.raises(InvalidSchedule):
            engine.create_trip("T1", make_details(start_in=THIRTY_MINUTES - ONE_SECOND))

    def test_lead_time_exactly_thirty_minutes_succeeds(
        self, engine, owner, make_details
    ):
        trip = engine.create_trip("T1", make_details(start_in=THIRTY_MINUTES))
        assert trip.start_time == NOW + THIRTY_MINUTES

    def test_past_departure_fails(self, engine, owner, make_details):
        with pytest.raises(InvalidSchedule):
            engine.create_trip("T1", make_details(start_in=-timedelta(hours=1)))

    def test_negative_seats_fail(self, engine, owner, make_details):
        with pytest.raises(InvalidCapacity):
            engine.create_trip("T1", make_details(total_seats=-1))

    def test_zero_seats_allowed(self, engine, owner, make_details):
        assert engine.create_trip("T1", make_details(total_seats=0)).available_seats == 0

    def test_naive_start_time_treated_as_utc(self, engine, owner, make_details):
        details = make_details()
        naive = replace(details, start_time=details.start_time.replace(tzinfo=None))
        assert engine.create_trip("T1", naive).start_time == details.start_time


class TestUpdateTrip:
    def test_missing_trip_not_found(self, engine, owner, make_details):
        with pytest.raises(NotFound):
            engine.update_trip("T1", make_details())

    def test_update_keeps_passengers(self, engine, owner, make_details):
        engine.create_trip("T1", make_details(total_seats=2))
        engine.enroll_passenger("T1", "U2")
        trip = engine.update_trip("T1", make_details(total_seats=5))
        assert trip.enrolled_passengers == ["U2"]
        assert trip.available_seats == 4

    def test_shrinking_capacity_floors_available_seats(
        self, engine, owner, make_details
    ):
        engine.create_trip("T1", make_details(total_seats=3))
        engine.enroll_passenger("T1", "U2")
        engine.enroll_passenger("T1", "U3")
        assert engine.update_trip("T1", make_details(total_seats=1)).available_seats == 0

    def test_invalid_update_leaves_trip_untouched(self, engine, owner, make_details):
        engine.create_trip("T1", make_details(total_seats=2))
        with pytest.raises(InvalidSchedule):
            engine.update_trip("T1", make_details(start_in=timedelta(minutes=5)))
        with pytest.raises(InvalidCapacity):
            engine.update_trip("T1", make_details(total_seats=-3))
        assert engine.get_trip("T1").total_seats == 2

    def test_started_trip_cannot_be_edited(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.enroll_passenger("T1", "U2")
        engine.start_trip("T1", "U1")
        with pytest.raises(AlreadyStarted):
            engine.update_trip("T1", make_details(total_seats=9))

    def test_create_or_update_dispatch(self, engine, owner, make_details):
        engine.create_or_update_trip(True, "T1", make_details(total_seats=2))
        trip = engine.create_or_update_trip(False, "T1", make_details(total_seats=3))
        assert trip.total_seats == 3
        with pytest.raises(Conflict):
            engine.create_or_update_trip(True, "T1", make_details())


class TestEnrollPassenger:
    def test_missing_trip_not_found(self, engine):
        with pytest.raises(NotFound):
            engine.enroll_passenger("nope", "U2")

    def test_enroll_decrements_available_seats(self, engine, owner, make_details):
        engine.create_trip("T1", make_details(total_seats=2))
        assert engine.enroll_passenger("T1", "U2").available_seats == 1

    def test_double_enrollment_conflicts(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.enroll_passenger("T1", "U2")
        with pytest.raises(Conflict):
            engine.enroll_passenger("T1", "U2")
        assert engine.get_trip("T1").enrolled_passengers == ["U2"]

    def test_overbooking_accepted_by_default(self, engine, owner, make_details):
        engine.create_trip("T1", make_details(total_seats=1))
        engine.enroll_passenger("T1", "U2")
        trip = engine.enroll_passenger("T1", "U3")
        assert trip.enrolled_passengers == ["U2", "U3"]
        assert trip.available_seats == 0

    def test_overbooking_disabled_rejects_when_full(
        self, directory, registry, clock, owner, make_details
    ):
        strict = BookingEngine(directory, registry, clock, allow_overbooking=False)
        strict.create_trip("T1", make_details(total_seats=1))
        strict.enroll_passenger("T1", "U2")
        with pytest.raises(TripFull):
            strict.enroll_passenger("T1", "U3")
        assert strict.get_trip("T1").enrolled_passengers == ["U2"]

    def test_trip_full_is_a_conflict(self):
        assert issubclass(TripFull, Conflict)

    def test_enrollment_closed_after_start(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.enroll_passenger("T1", "U2")
        engine.start_trip("T1", "U1")
        with pytest.raises(AlreadyStarted):
            engine.enroll_passenger("T1", "U3")


class TestStartTrip:
    @pytest.fixture
    def booked(self, engine, owner, make_details):
        engine.create_trip("T1", make_details(start_in=timedelta(hours=1)))
        engine.enroll_passenger("T1", "U2")
        return engine

    def test_missing_trip_not_found(self, engine):
        with pytest.raises(NotFound):
            engine.start_trip("nope", "U1")

    def test_only_owner_can_start(self, booked):
        with pytest.raises(Unauthorized):
            booked.start_trip("T1", "U2")
        assert booked.get_trip("T1").started is False

    def test_start_without_passengers_fails(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        with pytest.raises(NoPassengers):
            engine.start_trip("T1", "U1")

    def test_second_start_fails_and_stays_started(self, booked):
        booked.start_trip("T1", "U1")
        with pytest.raises(AlreadyStarted):
            booked.start_trip("T1", "U1")
        assert booked.get_status("T1") == (True, ["U2"])

    def test_start_before_departure_allowed(self, booked):
        assert booked.start_trip("T1", "U1").started is True

    def test_start_at_grace_boundary_succeeds(self, booked, clock):
        clock.set(NOW + timedelta(hours=1) + THIRTY_MINUTES)
        assert booked.start_trip("T1", "U1").started is True

    def test_start_one_second_late_fails(self, booked, clock):
        clock.set(NOW + timedelta(hours=1) + THIRTY_MINUTES + ONE_SECOND)
        with pytest.raises(OutOfWindow):
            booked.start_trip("T1", "U1")
        assert booked.get_trip("T1").started is False

    def test_unauthorized_checked_before_window(self, booked, clock):
        clock.advance(timedelta(days=1))
        with pytest.raises(Unauthorized):
            booked.start_trip("T1", "someone-else")


class TestCancelTrip:
    def test_missing_trip_not_found(self, engine):
        with pytest.raises(NotFound):
            engine.cancel_trip("nope")

    def test_cancel_removes_trip(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.enroll_passenger("T1", "U2")
        engine.cancel_trip("T1")
        with pytest.raises(NotFound):
            engine.get_trip("T1")
        assert engine.list_trips() == []

    def test_cancel_started_trip_fails(self, engine, owner, make_details, clock):
        engine.create_trip("T1", make_details())
        engine.enroll_passenger("T1", "U2")
        engine.start_trip("T1", "U1")
        with pytest.raises(AlreadyStarted):
            engine.cancel_trip("T1")
        clock.advance(timedelta(days=2))
        with pytest.raises(AlreadyStarted):
            engine.cancel_trip("T1")
        assert engine.get_trip("T1").started is True

    def test_cancel_at_grace_boundary_succeeds(self, engine, owner, make_details, clock):
        engine.create_trip("T1", make_details(start_in=timedelta(hours=1)))
        clock.set(NOW + timedelta(hours=1) + THIRTY_MINUTES)
        engine.cancel_trip("T1")
        assert not engine.registry.exists("T1")

    def test_cancel_too_late_fails(self, engine, owner, make_details, clock):
        engine.create_trip("T1", make_details(start_in=timedelta(hours=1)))
        clock.set(NOW + timedelta(hours=1) + THIRTY_MINUTES + ONE_SECOND)
        with pytest.raises(OutOfWindow):
            engine.cancel_trip("T1")
        assert engine.registry.exists("T1")

    def test_cancelled_id_can_be_reused(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.cancel_trip("T1")
        assert engine.create_trip("T1", make_details(total_seats=6)).total_seats == 6


class TestQueries:
    def test_status_of_missing_trip(self, engine):
        with pytest.raises(NotFound):
            engine.get_status("nope")

    def test_status_reports_started_and_passengers(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.enroll_passenger("T1", "U2")
        assert engine.get_status("T1") == (False, ["U2"])

    def test_list_trips_in_creation_order(self, engine, owner, make_details):
        engine.create_trip("T2", make_details())
        engine.create_trip("T1", make_details())
        assert [t.id for t in engine.list_trips()] == ["T2", "T1"]

    def test_returned_trip_is_a_copy(self, engine, owner, make_details):
        engine.create_trip("T1", make_details())
        engine.get_trip("T1").enrolled_passengers.append("intruder")
        assert engine.get_status("T1") == (False, [])


class TestEndToEnd:
    def test_publish_fill_start_then_cancel_fails(self, engine, owner, make_details):
        trip = engine.create_trip("T1", make_details(total_seats=2))
        assert trip.available_seats == 2

        assert engine.enroll_passenger("T1", "U2").available_seats == 1
        assert engine.enroll_passenger("T1", "U3").available_seats == 0

        started = engine.start_trip("T1", "U1")
        assert started.started is True

        with pytest.raises(AlreadyStarted):
            engine.cancel_trip("T1")
        assert engine.get_status("T1") == (True, ["U2", "U3"])


class TestFromSettings:
    def test_windows_come_from_settings(self, directory, registry, clock):
        from carpool.config import Settings

        custom = Settings(
            lead_time_minutes=60,
            start_grace_minutes=10,
            cancel_grace_minutes=5,
            allow_overbooking=False,
        )
        engine = BookingEngine.from_settings(custom, directory, registry, clock)
        assert engine.lead_time == timedelta(minutes=60)
        assert engine.start_grace == timedelta(minutes=10)
        assert engine.cancel_grace == timedelta(minutes=5)
        assert engine.allow_overbooking is False
