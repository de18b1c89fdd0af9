"""Tests for failed-login accounting and temporary lockout."""

from __future__ import annotations

from datetime import timedelta

import pytest

from services.errors import InvalidCredentialsError, LockedError
from services.lockout import LockoutPolicy, minutes_until


def _fail(service, email="ann@example.com"):
    with pytest.raises((InvalidCredentialsError, LockedError)) as excinfo:
        service.login(email, "wrong-password")
    return excinfo.value


def test_attempts_left_are_reported(service, make_account, clock):
    account = make_account()

    first = _fail(service)
    second = _fail(service)

    assert isinstance(first, InvalidCredentialsError)
    assert first.extra["attempts_left"] == 2
    assert "2 attempt(s) left" in first.message
    assert second.extra["attempts_left"] == 1
    assert account.login_attempts == 2
    assert account.lock_until is None


def test_third_failure_locks_for_sixty_seconds(service, make_account, clock):
    account = make_account()
    _fail(service)
    _fail(service)

    third = _fail(service)

    assert isinstance(third, LockedError)
    assert third.status_code == 423
    assert "1 minute(s)" in third.message
    assert account.login_attempts == 3
    assert account.lock_until == clock.now + service.lockout.lockout
    assert account.is_locked_at(clock.now)


def test_attempt_during_lock_does_not_count(service, make_account, clock):
    account = make_account()
    for _ in range(3):
        _fail(service)
    lock_until = account.lock_until

    clock.advance(seconds=20)
    with pytest.raises(LockedError) as excinfo:
        service.login("ann@example.com", "Secr3t!")

    assert "Account is temporarily locked" in excinfo.value.message
    assert excinfo.value.extra["minutes_remaining"] == 1
    assert account.login_attempts == 3
    assert account.lock_until == lock_until


def test_failure_after_lock_expiry_restarts_count(service, make_account, clock):
    account = make_account()
    for _ in range(3):
        _fail(service)

    clock.advance(seconds=61)
    error = _fail(service)

    assert isinstance(error, InvalidCredentialsError)
    assert account.login_attempts == 1
    assert account.lock_until is None


def test_single_attempt_threshold_relocks_after_expiry(service, make_account, clock):
    service.lockout = LockoutPolicy(service.store, max_attempts=1, lockout=timedelta(seconds=60))
    account = make_account()

    assert isinstance(_fail(service), LockedError)

    clock.advance(seconds=61)
    error = _fail(service)

    assert isinstance(error, LockedError)
    assert error.extra["minutes_remaining"] == 1
    assert account.login_attempts == 1
    assert account.lock_until == clock.now + timedelta(seconds=60)


def test_success_resets_attempts_and_lock(service, make_account, clock):
    account = make_account()
    for _ in range(3):
        _fail(service)

    clock.advance(seconds=61)
    result = service.login("ann@example.com", "Secr3t!")

    assert result.token
    assert account.login_attempts == 0
    assert account.lock_until is None


def test_success_after_single_failure_resets_attempts(service, make_account, clock):
    account = make_account()
    _fail(service)

    service.login("ann@example.com", "Secr3t!")

    assert account.login_attempts == 0


def test_remaining_minutes_round_up(clock):
    base = clock.now

    assert minutes_until(base, base) == 1
    assert minutes_until(base + timedelta(seconds=5), base) == 1
    assert minutes_until(base + timedelta(seconds=60), base) == 1
    assert minutes_until(base + timedelta(seconds=61), base) == 2
    assert minutes_until(base + timedelta(seconds=120), base) == 2
