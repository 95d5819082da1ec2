"""Aggregate counts over a snapshot of mock users."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Iterable

from .models import User, UserStatus


@dataclass(frozen=True)
class MockDataStats:
    total: int
    active: int
    inactive: int
    suspended: int


def compute_stats(users: Iterable[User]) -> MockDataStats:
    """Count ``users`` in total and per status."""

    counts = Counter(user.status for user in users)
    return MockDataStats(
        total=sum(counts.values()),
        active=counts[UserStatus.ACTIVE],
        inactive=counts[UserStatus.INACTIVE],
        suspended=counts[UserStatus.SUSPENDED],
    )


__all__ = ["MockDataStats", "compute_stats"]
