"""Signed, time-limited session credentials backed by flask-jwt-extended."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from flask_jwt_extended import create_access_token, decode_token
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from models.account import Account

from .errors import InvalidSessionError

ADMIN_CLAIM = "is_admin"


@dataclass(frozen=True)
class SessionClaims:
    account_id: int
    is_admin: bool


class SessionIssuer:
    """Issue and verify bearer tokens carrying the account id and admin flag.

    The signing key is ``JWT_SECRET_KEY`` of the current application, read by
    flask-jwt-extended; both functions need an application context.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=1)) -> None:
        self.ttl = ttl

    def issue(self, account: Account) -> str:
        return create_access_token(
            identity=str(account.id),
            additional_claims={ADMIN_CLAIM: bool(account.is_admin)},
            expires_delta=self.ttl,
        )

    def verify(self, token: str) -> SessionClaims:
        """Return the embedded claims; expired and tampered tokens fail alike."""

        try:
            decoded = decode_token(token)
            return claims_from_jwt(decoded)
        except (PyJWTError, JWTExtendedException, ValueError, KeyError) as exc:
            raise InvalidSessionError() from exc


def claims_from_jwt(decoded: dict) -> SessionClaims:
    return SessionClaims(
        account_id=int(decoded["sub"]),
        is_admin=bool(decoded.get(ADMIN_CLAIM, False)),
    )
