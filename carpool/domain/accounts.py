"""User account rules applied on write."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from .clock import Clock, as_utc
from .entities import User, UserProfile
from .errors import AccountTooNew, InvalidCarOwner

if TYPE_CHECKING:
    from carpool.config import Settings
    from carpool.infrastructure.repositories import UserDirectory

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(
        self,
        directory: UserDirectory,
        clock: Clock,
        *,
        min_account_age: timedelta = timedelta(days=365),
    ):
        self.directory = directory
        self.clock = clock
        self.min_account_age = min_account_age

    @classmethod
    def from_settings(
        cls, settings: Settings, directory: UserDirectory, clock: Clock
    ) -> "AccountService":
        return cls(
            directory,
            clock,
            min_account_age=timedelta(days=settings.account_min_age_days),
        )

    @staticmethod
    def _check_car_owner(profile: UserProfile) -> None:
        if profile.is_car_owner and not profile.has_car_details:
            raise InvalidCarOwner(
                "Driver's license and car plate number are required for car owners"
            )

    def create_user(self, user_id: str, profile: UserProfile) -> User:
        self._check_car_owner(profile)
        user = self.directory.add(
            User.from_profile(user_id, profile, created_at=self.clock.now())
        )
        logger.info("User %s created (car owner=%s)", user_id, user.is_car_owner)
        return user

    def update_user(self, user_id: str, profile: UserProfile) -> User:
        self._check_car_owner(profile)
        existing = self.directory.get(user_id)
        user = self.directory.replace(
            User.from_profile(user_id, profile, created_at=existing.created_at)
        )
        logger.info("User %s updated", user_id)
        return user

    def create_or_update_user(
        self, is_create: bool, user_id: str, profile: UserProfile
    ) -> User:
        if is_create:
            return self.create_user(user_id, profile)
        return self.update_user(user_id, profile)

    def delete_user(self, user_id: str) -> None:
        now = self.clock.now()

        def guard(user: User) -> None:
            if as_utc(user.created_at) > now - self.min_account_age:
                raise AccountTooNew(
                    f"Account {user_id} cannot be deleted before it is "
                    f"{self.min_account_age.days} days old"
                )

        self.directory.remove(user_id, guard)
        logger.info("User %s deleted", user_id)

    def get_user(self, user_id: str) -> User:
        return self.directory.get(user_id)

    def list_users(self) -> list[User]:
        return self.directory.list()
