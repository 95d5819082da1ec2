from __future__ import annotations

import random
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from usermock.store import UserStore


class TickingClock:
    """Clock that moves forward one second on every call."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture()
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture()
def store(clock: TickingClock) -> UserStore:
    return UserStore(rng=random.Random(1234), clock=clock)


@pytest.fixture()
def empty_store(clock: TickingClock) -> UserStore:
    return UserStore(rng=random.Random(1234), clock=clock, seed_defaults=False)
