"""Synthesise pseudo-random user records."""

from __future__ import annotations

import random
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from .ids import IdGenerator
from .models import User, UserStatus, utcnow

FIRST_NAMES = (
    "James", "Mary", "Wei", "Fang", "Lucas",
    "Sofia", "Amir", "Yuki", "Noah", "Elena",
)
LAST_NAMES = (
    "Smith", "Li", "Wang", "Garcia", "Chen",
    "Kowalski", "Sato", "Novak", "Haddad", "Okafor",
)
EMAIL_DOMAINS = ("gmail.com", "163.com", "qq.com", "sina.com", "hotmail.com")

_MAX_BACKDATE_DAYS = 365
_PHONE_RANGE = 1_000_000_000

Clock = Callable[[], datetime]


class UserGenerator:
    """Build fully populated :class:`User` records with fresh ids.

    ``rng`` and ``clock`` are injectable so tests can pin the output.
    """

    def __init__(
        self,
        ids: IdGenerator,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self._ids = ids
        self._rng = rng or random.Random()
        self._clock = clock or utcnow

    def generate_one(self) -> User:
        user_id = self._ids.next()
        username = f"user{user_id}"
        now = self._clock()
        return User(
            id=user_id,
            username=username,
            email=f"{username}@{self._rng.choice(EMAIL_DOMAINS)}",
            password=f"password{user_id}",
            full_name=f"{self._rng.choice(FIRST_NAMES)} {self._rng.choice(LAST_NAMES)}",
            phone="1" + f"{self._rng.randrange(_PHONE_RANGE):010d}",
            status=self._rng.choice(list(UserStatus)),
            created_at=now - timedelta(days=self._rng.randrange(_MAX_BACKDATE_DAYS)),
            updated_at=now,
        )

    def generate_many(self, count: int) -> List[User]:
        if count <= 0:
            return []
        return [self.generate_one() for _ in range(count)]


__all__ = ["EMAIL_DOMAINS", "FIRST_NAMES", "LAST_NAMES", "UserGenerator"]
