"""Domain models for the mock user store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class UserStatus(str, Enum):
    """Account status of a mock user."""

    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    SUSPENDED = "SUSPENDED"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class User:
    """A single user record held by :class:`~usermock.store.UserStore`.

    ``id`` and the timestamps stay ``None`` until the store (or the generator)
    fills them in.
    """

    username: str
    email: str
    password: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    status: UserStatus = UserStatus.ACTIVE
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


__all__ = ["User", "UserStatus", "utcnow"]
