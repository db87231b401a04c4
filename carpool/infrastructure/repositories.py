"""
Repository Pattern -- owns the in-memory records so domain logic never
touches a raw container.

* ``UserDirectory`` stores immutable ``User`` values behind one lock.
* ``TripRegistry`` stores ``Trip`` records and hands out copies only.
  Mutations go through ``update`` / ``delete``, which run the caller's
  check under the trip's own lock (see ``KeyedLock``).
"""

from __future__ import annotations

import threading
from typing import Callable, Optional

from .locks import KeyedLock
from carpool.domain.entities import Trip, User
from carpool.domain.errors import Conflict, NotFound


class UserDirectory:
    def __init__(self):
        self._lock = threading.RLock()
        self._users: dict[str, User] = {}

    def exists(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._users

    def get(self, user_id: str) -> User:
        with self._lock:
            user = self._users.get(user_id)
        if user is None:
            raise NotFound(f"User {user_id} does not exist")
        return user

    def is_eligible_car_owner(self, user_id: str) -> bool:
        with self._lock:
            user = self._users.get(user_id)
        return user is not None and user.is_eligible_car_owner

    def list(self) -> list[User]:
        with self._lock:
            return list(self._users.values())

    def add(self, user: User) -> User:
        with self._lock:
            if user.id in self._users:
                raise Conflict(f"User {user.id} already exists")
            self._users[user.id] = user
        return user

    def replace(self, user: User) -> User:
        with self._lock:
            if user.id not in self._users:
                raise NotFound(f"User {user.id} does not exist")
            self._users[user.id] = user
        return user

    def remove(
        self, user_id: str, guard: Optional[Callable[[User], None]] = None
    ) -> None:
        """Delete *user_id*; *guard* may veto by raising."""
        with self._lock:
            user = self._users.get(user_id)
            if user is None:
                raise NotFound(f"User {user_id} does not exist")
            if guard is not None:
                guard(user)
            del self._users[user_id]


class TripRegistry:
    def __init__(self):
        self._lock = threading.Lock()  # guards the index only
        self._trip_locks = KeyedLock()
        self._trips: dict[str, Trip] = {}

    def _read(self, trip_id: str) -> Trip:
        with self._lock:
            trip = self._trips.get(trip_id)
            if trip is None:
                raise NotFound(f"Trip {trip_id} does not exist")
            return trip.copy()

    def exists(self, trip_id: str) -> bool:
        with self._lock:
            return trip_id in self._trips

    def get(self, trip_id: str) -> Trip:
        return self._read(trip_id)

    def list(self) -> list[Trip]:
        with self._lock:
            return [t.copy() for t in self._trips.values()]

    def create(self, trip: Trip) -> Trip:
        with self._lock:
            if trip.id in self._trips:
                raise Conflict(f"Trip {trip.id} already exists")
            self._trips[trip.id] = trip.copy()
        return trip.copy()

    def update(self, trip_id: str, mutator: Callable[[Trip], None]) -> Trip:
        """
        Atomic read-modify-write of one trip.

        *mutator* receives a private copy and may raise to abort; the stored
        record is only replaced once it returns.
        """
        with self._trip_locks.hold(trip_id):
            trip = self._read(trip_id)
            mutator(trip)
            with self._lock:
                self._trips[trip_id] = trip.copy()
            return trip

    def delete(
        self, trip_id: str, guard: Optional[Callable[[Trip], None]] = None
    ) -> None:
        """Delete *trip_id*; *guard* runs under the trip lock and may veto."""
        with self._trip_locks.hold(trip_id):
            trip = self._read(trip_id)
            if guard is not None:
                guard(trip)
            with self._lock:
                del self._trips[trip_id]
