"""One-way password hashing built on werkzeug.security."""

from __future__ import annotations

import logging

from werkzeug.security import check_password_hash, generate_password_hash

from .errors import InternalError

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Hash and verify account passwords with a salted, work-factor based method.

    ``method`` is any werkzeug method string, e.g. ``"scrypt"`` or
    ``"pbkdf2:sha256:600000"``; the work factor is part of the string and is
    recorded in every hash, so changing it does not invalidate stored hashes.
    """

    def __init__(self, method: str = "scrypt") -> None:
        self.method = method

    def hash(self, plaintext: str) -> str:
        if not plaintext:
            raise InternalError("Refusing to hash an empty password.")
        try:
            return generate_password_hash(plaintext, method=self.method)
        except (ValueError, TypeError) as exc:
            logger.exception("Password hashing failed with method %s", self.method)
            raise InternalError("Password could not be stored.") from exc

    def verify(self, plaintext: str, hashed: str | None) -> bool:
        if not plaintext or not hashed:
            return False
        try:
            return check_password_hash(hashed, plaintext)
        except (ValueError, TypeError) as exc:
            logger.exception("Password comparison failed")
            raise InternalError("Password comparison failed.") from exc
