"""In-memory mock user store with an optional HTTP front end."""

from __future__ import annotations

from typing import Any

from .models import User, UserStatus
from .stats import MockDataStats
from .store import UserNotFoundError, UserStore


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the HTTP application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "MockDataStats",
    "User",
    "UserNotFoundError",
    "UserStatus",
    "UserStore",
    "create_app",
]
