"""Account model definition."""

from datetime import datetime
from typing import Optional

from utils.clock import utcnow

from . import db


# Columns that may be merged into an account through a profile update.
PROFILE_FIELDS = ("first_name", "last_name", "phone_number", "address", "avatar")


class Account(db.Model):
    """A registered user and the credentials attached to it."""

    __tablename__ = "accounts"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    phone_number = db.Column(db.String(32), nullable=False)
    address = db.Column(db.String(255), nullable=True)
    avatar = db.Column(db.String(512), nullable=True)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )
    is_verified = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
    )

    verification_code = db.Column(db.Integer, nullable=True, index=True)
    verification_code_expire = db.Column(db.DateTime, nullable=True)
    verification_token = db.Column(db.String(64), nullable=True, index=True)
    verification_token_expire = db.Column(db.DateTime, nullable=True)
    reset_password_token = db.Column(db.String(64), nullable=True, index=True)
    reset_password_expire = db.Column(db.DateTime, nullable=True)

    login_attempts = db.Column(
        db.Integer,
        nullable=False,
        default=0,
        server_default=db.text("0"),
    )
    lock_until = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def is_locked_at(self, now: datetime) -> bool:
        """Return True if a lock is set and has not yet expired at ``now``."""

        return self.lock_until is not None and self.lock_until > now

    @property
    def is_locked(self) -> bool:
        return self.is_locked_at(utcnow())

    def clear_verification_token(self) -> None:
        self.verification_token = None
        self.verification_token_expire = None

    def clear_reset_token(self) -> None:
        self.reset_password_token = None
        self.reset_password_expire = None

    def mark_verified(self) -> None:
        """Mark the account verified and consume any outstanding verification secret."""

        self.is_verified = True
        self.verification_code = None
        self.verification_code_expire = None
        self.clear_verification_token()

    def to_dict(self) -> dict:
        """Serialize the public profile; secret columns are never included."""

        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone_number": self.phone_number,
            "address": self.address,
            "avatar": self.avatar,
            "is_admin": self.is_admin,
            "is_verified": self.is_verified,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Account {self.email}>"
