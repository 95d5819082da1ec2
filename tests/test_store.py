from __future__ import annotations

import threading
from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from usermock.models import User, UserStatus
from usermock.store import DEFAULT_PASSWORD, UserNotFoundError, UserStore


def _user(username: str, status: UserStatus = UserStatus.ACTIVE, **fields) -> User:
    return User(
        username=username,
        email=f"{username}@example.com",
        password=fields.pop("password", "secret"),
        status=status,
        **fields,
    )


def test_new_store_is_seeded_with_ten_users(store: UserStore) -> None:
    users = store.list_users()
    assert len(users) == 10
    assert len(store) == 10

    admin = store.get_by_username("admin")
    assert admin is not None
    assert admin.status == UserStatus.ACTIVE
    assert admin.id == 1
    assert admin.password == DEFAULT_PASSWORD

    demo = store.get_by_username("demouser")
    assert demo is not None
    assert demo.status == UserStatus.INACTIVE

    generated = [user for user in users if user.username.startswith("user")]
    assert len(generated) == 7


def test_reset_restores_seed_data(store: UserStore) -> None:
    store.create(_user("extra"))
    store.delete(1)

    store.reset()

    assert len(store.list_users()) == 10
    admin = store.get_by_username("admin")
    assert admin is not None and admin.status == UserStatus.ACTIVE
    assert store.get_by_username("extra") is None


def test_clear_removes_everything_and_restarts_ids(store: UserStore) -> None:
    store.clear()

    assert store.list_users() == []
    created = store.create(_user("first"))
    assert created.id == 1


def test_create_assigns_id_and_timestamps(empty_store: UserStore) -> None:
    original = _user("findme", full_name="Find Me", phone="555-0100")

    created = empty_store.create(original)

    assert created.id == 1
    assert created.created_at is not None
    assert created.updated_at is not None
    assert created.updated_at >= created.created_at
    assert original.id is None

    fetched = empty_store.get_by_id(created.id)
    assert fetched == created
    assert replace(fetched, id=None, created_at=None, updated_at=None) == original


def test_create_keeps_existing_created_at(empty_store: UserStore, clock) -> None:
    created_at = clock()
    created = empty_store.create(_user("old", created_at=created_at))

    assert created.created_at == created_at
    assert created.updated_at > created_at


def test_create_overwrites_existing_id(empty_store: UserStore) -> None:
    first = empty_store.create(_user("first"))
    empty_store.create(_user("second", id=first.id))

    assert len(empty_store) == 1
    stored = empty_store.get_by_id(first.id)
    assert stored is not None and stored.username == "second"


def test_duplicate_usernames_are_not_rejected(empty_store: UserStore) -> None:
    empty_store.create(_user("twin"))
    empty_store.create(_user("twin"))

    assert len(empty_store.list_users()) == 2
    assert empty_store.username_exists("twin")


def test_lookups_return_none_when_missing(empty_store: UserStore) -> None:
    assert empty_store.get_by_id(42) is None
    assert empty_store.get_by_username("nobody") is None


def test_list_users_returns_snapshot(empty_store: UserStore) -> None:
    created = empty_store.create(_user("snap"))

    users = empty_store.list_users()
    users.clear()
    fetched = empty_store.get_by_id(created.id)
    fetched.username = "mutated"

    assert len(empty_store.list_users()) == 1
    assert empty_store.get_by_id(created.id).username == "snap"


def test_list_by_status_filters(empty_store: UserStore) -> None:
    empty_store.create(_user("active"))
    empty_store.create(_user("inactive", UserStatus.INACTIVE))
    empty_store.create(_user("suspended", UserStatus.SUSPENDED))

    inactive = empty_store.list_by_status(UserStatus.INACTIVE)
    assert [user.username for user in inactive] == ["inactive"]
    assert all(user.status == UserStatus.ACTIVE for user in empty_store.list_by_status(UserStatus.ACTIVE))


def test_update_replaces_record_and_preserves_created_at(empty_store: UserStore) -> None:
    created = empty_store.create(_user("updateme", full_name="Before", phone="555-0101"))

    changed = User(
        id=created.id,
        username="updateme",
        email="new@example.com",
        password="secret",
        status=UserStatus.INACTIVE,
    )
    updated = empty_store.update(changed)

    assert updated.created_at == created.created_at
    assert updated.updated_at > created.updated_at
    stored = empty_store.get_by_id(created.id)
    assert stored == updated
    # Full overwrite: fields omitted from the update are gone.
    assert stored.full_name is None
    assert stored.phone is None
    assert stored.email == "new@example.com"


def test_update_unknown_id_raises(empty_store: UserStore) -> None:
    with pytest.raises(UserNotFoundError):
        empty_store.update(_user("ghost", id=99))

    with pytest.raises(UserNotFoundError) as excinfo:
        empty_store.update(_user("ghost"))
    assert "Mock user not found" in str(excinfo.value)
    assert empty_store.list_users() == []


def test_delete_is_terminal(empty_store: UserStore) -> None:
    created = empty_store.create(_user("bye"))

    assert empty_store.delete(created.id) is True
    assert empty_store.get_by_id(created.id) is None
    assert empty_store.delete(created.id) is False

    # Deleted ids are never handed out again.
    assert empty_store.create(_user("next")).id == created.id + 1


def test_exists_checks_are_case_sensitive(empty_store: UserStore) -> None:
    empty_store.create(_user("Alice"))

    assert empty_store.username_exists("Alice")
    assert not empty_store.username_exists("alice")
    assert empty_store.email_exists("Alice@example.com")
    assert not empty_store.email_exists("alice@example.com")


def test_validate_login(empty_store: UserStore) -> None:
    created = empty_store.create(_user("u1", password="p1"))

    assert empty_store.validate_login("u1", "p1") is True
    assert empty_store.validate_login("u1", "wrong") is False
    assert empty_store.validate_login("missing", "p1") is False

    empty_store.update(replace(created, status=UserStatus.SUSPENDED))
    assert empty_store.validate_login("u1", "p1") is False


def test_stats_sum_to_total(store: UserStore) -> None:
    store.create(_user("extra", UserStatus.SUSPENDED))

    stats = store.stats()

    assert stats.total == 11
    assert stats.total == stats.active + stats.inactive + stats.suspended
    assert stats.suspended >= 1


def test_concurrent_creates_keep_every_record(empty_store: UserStore) -> None:
    def worker(prefix: str) -> None:
        for index in range(100):
            empty_store.create(_user(f"{prefix}-{index}"))

    threads = [threading.Thread(target=worker, args=(f"t{n}",)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    users = empty_store.list_users()
    assert len(users) == 400
    assert len({user.id for user in users}) == 400


def test_update_keeps_stored_created_at_even_when_one_is_supplied(empty_store: UserStore) -> None:
    created = empty_store.create(_user("dated"))

    moved = replace(created, created_at=created.created_at + timedelta(days=30))
    updated = empty_store.update(moved)

    assert updated.created_at == created.created_at
    assert updated.updated_at >= updated.created_at
    assert empty_store.get_by_id(created.id).created_at == created.created_at


def test_clear_during_create_does_not_lose_later_records() -> None:
    calls = []
    store = None

    def clock() -> datetime:
        calls.append(None)
        # The second reading happens inside create("b").
        if len(calls) == 2:
            store.clear()
        return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=len(calls))

    store = UserStore(clock=clock, seed_defaults=False)
    store.create(_user("a"))
    b = store.create(_user("b"))
    c = store.create(_user("c"))
    d = store.create(_user("d"))

    assert len({b.id, c.id, d.id}) == 3
    assert sorted(user.username for user in store.list_users()) == ["b", "c", "d"]
    assert store.get_by_id(b.id).username == "b"
