"""Failed-login accounting and temporary lockout."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from models.account import Account

from .store import AccountStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FailedAttempt:
    """Result of recording one failed login."""

    attempts: int
    locked: bool
    attempts_left: int
    lock_minutes: int = 0


def minutes_until(lock_until: datetime, now: datetime) -> int:
    """Whole minutes, rounded up, until ``lock_until``."""

    seconds = (lock_until - now).total_seconds()
    return max(1, math.ceil(seconds / 60))


class LockoutPolicy:
    """Track failed logins per account and lock after ``max_attempts`` failures.

    States are derived from the stored columns: an account is locked while
    ``lock_until`` lies in the future and unlocked otherwise. An expired lock
    is only cleaned up lazily, by the next login attempt.
    """

    def __init__(
        self,
        store: AccountStore,
        max_attempts: int = 3,
        lockout: timedelta = timedelta(seconds=60),
    ) -> None:
        self.store = store
        self.max_attempts = max_attempts
        self.lockout = lockout

    def remaining_minutes(self, account: Account, now: datetime) -> int:
        if not account.is_locked_at(now):
            return 0
        return minutes_until(account.lock_until, now)

    def register_failure(self, account: Account, now: datetime) -> FailedAttempt:
        """Record a failed login on an account that is not currently locked."""

        if account.lock_until is not None:
            self.store.restart_login_attempts(account, self.max_attempts, now + self.lockout)
        else:
            self.store.increment_login_attempts(
                account, self.max_attempts, now + self.lockout
            )

        locked = account.is_locked_at(now)
        attempts_left = max(0, self.max_attempts - account.login_attempts)
        if locked:
            logger.warning(
                "Account %s locked after %s failed logins", account.id, account.login_attempts
            )
            return FailedAttempt(
                attempts=account.login_attempts,
                locked=True,
                attempts_left=0,
                lock_minutes=minutes_until(account.lock_until, now),
            )

        logger.info(
            "Failed login for account %s (%s attempt(s) left)", account.id, attempts_left
        )
        return FailedAttempt(
            attempts=account.login_attempts, locked=False, attempts_left=attempts_left
        )

    def register_success(self, account: Account) -> None:
        if account.login_attempts or account.lock_until is not None:
            self.store.clear_login_attempts(account)
