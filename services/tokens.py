"""Generation of verification codes and hashed-at-rest one-time tokens."""

from __future__ import annotations

import hashlib
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta

CODE_MIN = 10000
CODE_MAX = 99999
TOKEN_BYTES = 20


@dataclass(frozen=True)
class IssuedToken:
    """A freshly generated token.

    ``raw`` goes into the email exactly once; only ``hashed`` and
    ``expires_at`` are persisted.
    """

    raw: str
    hashed: str
    expires_at: datetime


def generate_verification_code() -> int:
    """Return a cryptographically random integer in [10000, 99999]."""

    return CODE_MIN + secrets.randbelow(CODE_MAX - CODE_MIN + 1)


def hash_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()


def generate_token(now: datetime, ttl: timedelta) -> IssuedToken:
    raw = secrets.token_hex(TOKEN_BYTES)
    return IssuedToken(raw=raw, hashed=hash_token(raw), expires_at=now + ttl)
