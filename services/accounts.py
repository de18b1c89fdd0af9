"""Account lifecycle: registration, verification, login and password recovery."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping

from werkzeug.datastructures import FileStorage

from config import AccountSettings
from mailers import AbstractMailer
from models.account import PROFILE_FIELDS, Account
from storage import AbstractStorage
from utils.clock import utcnow

from .errors import (
    ConflictError,
    EmailDeliveryError,
    EmailNotFoundError,
    ExpiredOrInvalidTokenError,
    ForbiddenError,
    InvalidCredentialsError,
    LockedError,
    NotFoundError,
    ValidationError,
)
from .lockout import LockoutPolicy
from .sessions import SessionClaims, SessionIssuer
from .store import AccountStore
from .tokens import (
    CODE_MAX,
    CODE_MIN,
    generate_token,
    generate_verification_code,
    hash_token,
)

logger = logging.getLogger(__name__)

ALLOWED_AVATAR_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
REQUIRED_PROFILE_FIELDS = {"first_name", "last_name", "phone_number"}


@dataclass(frozen=True)
class Registration:
    account: Account
    email_sent: bool


@dataclass(frozen=True)
class LoginResult:
    account: Account
    token: str


class AccountService:
    """Coordinate the credential store, lockout policy, sessions and mail."""

    def __init__(
        self,
        settings: AccountSettings,
        store: AccountStore,
        mailer: AbstractMailer,
        storage: AbstractStorage,
        sessions: SessionIssuer | None = None,
        lockout: LockoutPolicy | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.settings = settings
        self.store = store
        self.mailer = mailer
        self.storage = storage
        self.sessions = sessions or SessionIssuer(settings.session_ttl)
        self.lockout = lockout or LockoutPolicy(
            store, settings.max_login_attempts, settings.lockout
        )
        self.clock = clock

    def _link(self, path: str) -> str:
        return f"{self.settings.frontend_base_url}/{path}"

    # Registration and verification

    def register(
        self,
        first_name: str | None,
        last_name: str | None,
        email: str | None,
        phone_number: str | None,
        password: str | None,
    ) -> Registration:
        """Create an unverified account and mail it a verification link."""

        submitted = {
            "first_name": first_name,
            "last_name": last_name,
            "email": email,
            "phone_number": phone_number,
        }
        if not all(isinstance(value, str) for value in (*submitted.values(), password)):
            raise ValidationError()
        values = {key: value.strip() for key, value in submitted.items()}
        if not all(values.values()) or not password:
            raise ValidationError()
        if self.store.find_by_email(values["email"]) is not None:
            raise ConflictError()

        now = self.clock()
        code = generate_verification_code()
        account = Account(**values, verification_code=code, is_verified=False)
        if self.settings.verification_code_ttl is not None:
            account.verification_code_expire = now + self.settings.verification_code_ttl
        self.store.set_password(account, password)
        self.store.add(account)
        logger.info("Registered account %s", account.id)

        message = (
            "Please verify your email by clicking the link below:\n\n"
            f"{self._link(f'verify/{code}')}"
        )
        try:
            self.mailer.send(account.email, "Verify Your Email", message)
        except EmailDeliveryError:
            logger.exception("Verification email for account %s was not sent", account.id)
            return Registration(account=account, email_sent=False)
        return Registration(account=account, email_sent=True)

    def verify_by_code(self, code: int | str) -> Account:
        invalid = ExpiredOrInvalidTokenError("Invalid or expired verification code.")
        try:
            numeric_code = int(code)
        except (TypeError, ValueError):
            raise invalid from None
        if not CODE_MIN <= numeric_code <= CODE_MAX:
            raise invalid

        account = self.store.find_by_verification_code(numeric_code, self.clock())
        if account is None or account.is_verified:
            raise invalid

        account.mark_verified()
        self.store.save(account)
        logger.info("Account %s verified by code", account.id)
        return account

    def request_verification_token(self, email: str | None) -> Account:
        """Mail a one-time verification link carrying a hashed-at-rest token."""

        account = self.store.find_by_email((email or "").strip())
        if account is None:
            raise NotFoundError()

        issued = generate_token(self.clock(), self.settings.token_ttl)
        account.verification_token = issued.hashed
        account.verification_token_expire = issued.expires_at
        self.store.save(account)

        message = (
            "Please verify your email by clicking on the following link: "
            f"{self._link(f'verify/{issued.raw}')}"
        )
        try:
            self.mailer.send(account.email, "Email Verification", message)
        except EmailDeliveryError:
            logger.exception("Verification email for account %s failed; token revoked", account.id)
            account.clear_verification_token()
            self.store.save(account)
            raise
        return account

    def verify_by_token(self, raw_token: str) -> Account:
        account = self.store.find_by_verification_token(hash_token(raw_token), self.clock())
        if account is None:
            raise ExpiredOrInvalidTokenError("Invalid or expired token.")

        account.mark_verified()
        self.store.save(account)
        logger.info("Account %s verified by token", account.id)
        return account

    # Login

    def login(self, email: str | None, password: str | None) -> LoginResult:
        credentials = (email, password)
        if not all(isinstance(value, str) and value for value in credentials):
            raise ValidationError()

        account = self.store.find_by_email(email.strip())
        if account is None:
            raise EmailNotFoundError("User does not exist.")

        now = self.clock()
        if account.is_locked_at(now):
            minutes = self.lockout.remaining_minutes(account, now)
            raise LockedError(
                f"Account is temporarily locked. Try again in {minutes} minute(s).",
                minutes_remaining=minutes,
            )

        if not self.store.verify_password(account, password):
            failure = self.lockout.register_failure(account, now)
            if failure.locked:
                raise LockedError(
                    "Too many failed login attempts. "
                    f"Try again in {failure.lock_minutes} minute(s).",
                    minutes_remaining=failure.lock_minutes,
                )
            raise InvalidCredentialsError(
                f"Invalid credentials. {failure.attempts_left} attempt(s) left.",
                attempts_left=failure.attempts_left,
            )

        self.lockout.register_success(account)
        token = self.sessions.issue(account)
        logger.info("Account %s logged in", account.id)
        return LoginResult(account=account, token=token)

    # Password recovery

    def forgot_password(self, email: str | None) -> Account:
        account = self.store.find_by_email(email.strip()) if isinstance(email, str) else None
        if account is None:
            raise EmailNotFoundError("Email not found.")

        issued = generate_token(self.clock(), self.settings.token_ttl)
        account.reset_password_token = issued.hashed
        account.reset_password_expire = issued.expires_at
        self.store.save(account)

        message = (
            "Reset your password by clicking on the link below:\n\n"
            f"{self._link(f'password/reset/{issued.raw}')}"
        )
        try:
            self.mailer.send(account.email, "Reset Password", message)
        except EmailDeliveryError:
            logger.exception("Reset email for account %s failed; token revoked", account.id)
            account.clear_reset_token()
            self.store.save(account)
            raise
        logger.info("Password reset requested for account %s", account.id)
        return account

    def reset_password(self, raw_token: str, new_password: str | None) -> Account:
        if not isinstance(new_password, str) or not new_password:
            raise ValidationError("Password is required.")

        account = self.store.find_by_reset_token(hash_token(raw_token), self.clock())
        if account is None:
            raise ExpiredOrInvalidTokenError()

        self.store.set_password(account, new_password)
        account.clear_reset_token()
        self.store.save(account)
        logger.info("Password reset for account %s", account.id)
        return account

    # Profile

    def authorize(self, claims: SessionClaims, account_id: int | None) -> int:
        """Return the account id the caller may act on, defaulting to their own."""

        if account_id is None or account_id == claims.account_id:
            return claims.account_id
        if not claims.is_admin:
            raise ForbiddenError()
        return account_id

    def get_profile(self, account_id: int) -> Account:
        account = self.store.get(account_id)
        if account is None:
            raise NotFoundError()
        return account

    def update_profile(
        self,
        account_id: int,
        fields: Mapping[str, object],
        avatar_file: FileStorage | None = None,
    ) -> Account:
        account = self.get_profile(account_id)

        updates = {key: fields[key] for key in PROFILE_FIELDS if key in fields}
        for key, value in updates.items():
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{key} must be a string.")
        for key in REQUIRED_PROFILE_FIELDS & updates.keys():
            if not updates[key]:
                raise ValidationError(f"{key} must not be empty.")

        if avatar_file is not None and avatar_file.filename:
            self._validate_avatar(avatar_file)
            updates["avatar"] = self.storage.upload(
                avatar_file, avatar_file.filename, self.settings.avatar_folder
            )

        for key, value in updates.items():
            setattr(account, key, value)
        self.store.save(account)
        logger.info("Updated profile of account %s (%s)", account.id, ", ".join(sorted(updates)))
        return account

    def _validate_avatar(self, file: FileStorage) -> None:
        extension = (file.filename or "").rsplit(".", 1)[-1].lower()
        if "." not in (file.filename or "") or extension not in ALLOWED_AVATAR_EXTENSIONS:
            allowed = ", ".join(sorted(ALLOWED_AVATAR_EXTENSIONS))
            raise ValidationError(f"File type not allowed. Allowed types: {allowed}.")

        file.stream.seek(0, os.SEEK_END)
        size = file.stream.tell()
        file.stream.seek(0)
        if size > self.settings.max_avatar_size:
            raise ValidationError("Avatar exceeds the maximum upload size.")
