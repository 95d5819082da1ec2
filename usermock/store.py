"""Thread-safe in-memory store of mock users."""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, Dict, List, Optional

from .generator import UserGenerator
from .ids import IdGenerator
from .models import User, UserStatus, utcnow
from .stats import MockDataStats, compute_stats

logger = logging.getLogger("usermock.store")

DEFAULT_PASSWORD = "password123"
DEFAULT_PHONE = "13800138000"
DEFAULT_RANDOM_USERS = 7

_DEFAULT_USERS = (
    ("admin", "admin@example.com", "Administrator", UserStatus.ACTIVE),
    ("testuser", "test@example.com", "Test User", UserStatus.ACTIVE),
    ("demouser", "demo@example.com", "Demo User", UserStatus.INACTIVE),
)


class UserNotFoundError(ValueError):
    """Raised when an update targets a user id that is not stored."""

    def __init__(self, user_id: Optional[int]) -> None:
        super().__init__(f"Mock user not found with id: {user_id}")
        self.user_id = user_id


class UserStore:
    """Identity-keyed table of :class:`User` records.

    Records are copied on the way in and on the way out, so nothing a caller
    holds can alter stored state without going through :meth:`create` or
    :meth:`update`. All access to the table happens under a single lock.
    """

    def __init__(
        self,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
        seed_defaults: bool = True,
        extra_random_users: int = DEFAULT_RANDOM_USERS,
    ) -> None:
        self._clock = clock or utcnow
        self._ids = IdGenerator()
        self._generator = UserGenerator(self._ids, rng=rng, clock=self._clock)
        self._extra_random_users = extra_random_users
        self._users: Dict[int, User] = {}
        self._lock = threading.Lock()
        if seed_defaults:
            self.seed_defaults()

    def __len__(self) -> int:
        with self._lock:
            return len(self._users)

    @property
    def ids(self) -> IdGenerator:
        return self._ids

    @property
    def generator(self) -> UserGenerator:
        return self._generator

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def generate_user(self) -> User:
        """Return a random user with a fresh id without storing it."""

        return self._generator.generate_one()

    def generate_users(self, count: int) -> List[User]:
        return self._generator.generate_many(count)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return replace(user) if user is not None else None

    def get_by_username(self, username: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.username == username:
                    return replace(user)
        return None

    def list_users(self) -> List[User]:
        with self._lock:
            return [replace(user) for user in self._users.values()]

    def list_by_status(self, status: UserStatus) -> List[User]:
        with self._lock:
            return [replace(user) for user in self._users.values() if user.status == status]

    def username_exists(self, username: str) -> bool:
        with self._lock:
            return any(user.username == username for user in self._users.values())

    def email_exists(self, email: str) -> bool:
        with self._lock:
            return any(user.email == email for user in self._users.values())

    def validate_login(self, username: str, password: str) -> bool:
        """Return ``True`` for an ACTIVE user whose password matches exactly."""

        user = self.get_by_username(username)
        if user is None:
            return False
        return user.password == password and user.status == UserStatus.ACTIVE

    def stats(self) -> MockDataStats:
        return compute_stats(self.list_users())

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, user: User) -> User:
        """Insert ``user``, assigning an id and timestamps where missing.

        An existing record with the same id is overwritten. Usernames and
        emails are not checked for duplicates; callers that care use
        :meth:`username_exists` and :meth:`email_exists` first.
        """

        record = replace(user)
        now = self._clock()
        if record.created_at is None:
            record.created_at = now
        record.updated_at = now

        # Allocate under the table lock so a concurrent clear() cannot
        # reset the counter between allocation and insert.
        with self._lock:
            if record.id is None:
                record.id = self._ids.next()
            self._users[record.id] = record
            stored = replace(record)

        logger.info("Created mock user: %s", record.username)
        return stored

    def update(self, user: User) -> User:
        """Replace the stored record with ``user`` as a whole.

        Fields are not merged, except ``created_at``, which always keeps the
        stored value.
        """

        if user.id is None:
            raise UserNotFoundError(None)

        record = replace(user)
        with self._lock:
            existing = self._users.get(record.id)
            if existing is None:
                raise UserNotFoundError(record.id)
            record.created_at = existing.created_at
            record.updated_at = self._clock()
            self._users[record.id] = record
            stored = replace(record)

        logger.info("Updated mock user: %s", record.username)
        return stored

    def delete(self, user_id: int) -> bool:
        with self._lock:
            removed = self._users.pop(user_id, None)
        if removed is None:
            return False
        logger.info("Deleted mock user: %s", removed.username)
        return True

    def clear(self) -> None:
        """Drop every record and restart ids from 1."""

        with self._lock:
            self._users.clear()
            self._ids.reset()
        logger.info("Cleared all mock data")

    def seed_defaults(self) -> None:
        """Replace the contents with the three named users plus random ones."""

        self.clear()
        for username, email, full_name, status in _DEFAULT_USERS:
            self.create(
                User(
                    username=username,
                    email=email,
                    password=DEFAULT_PASSWORD,
                    full_name=full_name,
                    phone=DEFAULT_PHONE,
                    status=status,
                )
            )
        for user in self.generate_users(self._extra_random_users):
            self.create(user)
        logger.info("Initialized default mock data with %s users", len(self))

    def reset(self) -> None:
        self.seed_defaults()


__all__ = ["DEFAULT_PASSWORD", "UserNotFoundError", "UserStore"]
