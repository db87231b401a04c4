"""Domain enumerations and state-transition rules."""

import enum


class TripStatus(str, enum.Enum):
    SCHEDULED = "SCHEDULED"
    STARTED = "STARTED"
    CANCELLED = "CANCELLED"


# State machine: maps current status -> set of valid next statuses.
# Cancelled trips are removed from the registry, so CANCELLED is terminal.
TRIP_TRANSITIONS: dict[TripStatus, set[TripStatus]] = {
    TripStatus.SCHEDULED: {TripStatus.STARTED, TripStatus.CANCELLED},
    TripStatus.STARTED: set(),
    TripStatus.CANCELLED: set(),
}
