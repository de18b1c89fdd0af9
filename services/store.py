"""Credential store: every read and write of account rows goes through here."""

from __future__ import annotations

from datetime import datetime

import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from models import db
from models.account import Account

from .errors import ConflictError, InternalError
from .passwords import PasswordHasher


class AccountStore:
    """Persistence operations for :class:`Account` rows."""

    def __init__(self, hasher: PasswordHasher) -> None:
        self.hasher = hasher

    # Lookups

    def get(self, account_id: int | str | None) -> Account | None:
        if account_id is None:
            return None
        try:
            account_id = int(account_id)
        except (TypeError, ValueError):
            return None
        return db.session.get(Account, account_id)

    def find_by_email(self, email: str) -> Account | None:
        return Account.query.filter_by(email=email).first()

    def find_by_verification_code(self, code: int, now: datetime) -> Account | None:
        return Account.query.filter(
            Account.verification_code == code,
            sa.or_(
                Account.verification_code_expire.is_(None),
                Account.verification_code_expire > now,
            ),
        ).first()

    def find_by_verification_token(self, token_hash: str, now: datetime) -> Account | None:
        return Account.query.filter(
            Account.verification_token == token_hash,
            Account.verification_token_expire > now,
        ).first()

    def find_by_reset_token(self, token_hash: str, now: datetime) -> Account | None:
        return Account.query.filter(
            Account.reset_password_token == token_hash,
            Account.reset_password_expire > now,
        ).first()

    # Writes

    def set_password(self, account: Account, plaintext: str) -> None:
        """Hash ``plaintext`` and store it on the account.

        Hashing happens before anything is assigned, so a hashing failure
        leaves the stored hash untouched.
        """

        account.password_hash = self.hasher.hash(plaintext)

    def verify_password(self, account: Account, plaintext: str) -> bool:
        return self.hasher.verify(plaintext, account.password_hash)

    def add(self, account: Account) -> Account:
        db.session.add(account)
        try:
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise ConflictError() from exc
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise InternalError() from exc
        return account

    def save(self, account: Account) -> Account:
        db.session.add(account)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise InternalError() from exc
        return account

    # Lockout counters

    def increment_login_attempts(
        self, account: Account, threshold: int, lock_until: datetime
    ) -> Account:
        """Atomically add one failed attempt, locking once ``threshold`` is reached."""

        stmt = (
            sa.update(Account)
            .where(Account.id == account.id)
            # lock_until is assigned first so MySQL sees the pre-increment count.
            .ordered_values(
                (
                    Account.lock_until,
                    sa.case(
                        (
                            Account.login_attempts + 1 >= threshold,
                            sa.literal(lock_until, type_=sa.DateTime),
                        ),
                        else_=Account.lock_until,
                    ),
                ),
                (Account.login_attempts, Account.login_attempts + 1),
            )
            .execution_options(synchronize_session=False)
        )
        return self._execute_counter_update(account, stmt)

    def restart_login_attempts(
        self, account: Account, threshold: int, lock_until: datetime
    ) -> Account:
        """Count one failed attempt against an account whose lock has expired.

        The count restarts at one, so the account is locked again only when
        ``threshold`` is one.
        """

        stmt = (
            sa.update(Account)
            .where(Account.id == account.id)
            .values(login_attempts=1, lock_until=lock_until if threshold <= 1 else None)
            .execution_options(synchronize_session=False)
        )
        return self._execute_counter_update(account, stmt)

    def clear_login_attempts(self, account: Account) -> Account:
        account.login_attempts = 0
        account.lock_until = None
        return self.save(account)

    def _execute_counter_update(self, account: Account, stmt) -> Account:
        try:
            db.session.execute(stmt)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            raise InternalError() from exc
        db.session.refresh(account)
        return account
