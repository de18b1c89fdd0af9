"""Tests for password hashing and token generation."""

from __future__ import annotations

import hashlib
import re
from datetime import timedelta

import pytest

from services.errors import InternalError
from services.passwords import PasswordHasher
from services.tokens import (
    CODE_MAX,
    CODE_MIN,
    generate_token,
    generate_verification_code,
    hash_token,
)
from utils.clock import utcnow


@pytest.fixture()
def hasher() -> PasswordHasher:
    return PasswordHasher("pbkdf2:sha256:1000")


def test_hash_then_verify_same_plaintext(hasher):
    hashed = hasher.hash("Secr3t!")

    assert hashed != "Secr3t!"
    assert hasher.verify("Secr3t!", hashed) is True
    assert hasher.verify("secr3t!", hashed) is False


def test_hashes_are_salted(hasher):
    assert hasher.hash("Secr3t!") != hasher.hash("Secr3t!")


def test_verify_rejects_missing_values(hasher):
    assert hasher.verify("", hasher.hash("x")) is False
    assert hasher.verify("x", None) is False


def test_hashing_fails_closed_on_bad_method():
    with pytest.raises(InternalError):
        PasswordHasher("not-a-method").hash("Secr3t!")


def test_empty_password_is_never_hashed(hasher):
    with pytest.raises(InternalError):
        hasher.hash("")


def test_verification_codes_are_five_digits():
    codes = {generate_verification_code() for _ in range(200)}

    assert all(CODE_MIN <= code <= CODE_MAX for code in codes)
    assert len(codes) > 1


def test_generated_token_persists_only_its_hash():
    now = utcnow()

    issued = generate_token(now, timedelta(minutes=10))

    assert re.fullmatch(r"[0-9a-f]{40}", issued.raw)
    assert issued.hashed == hashlib.sha256(issued.raw.encode()).hexdigest()
    assert issued.hashed == hash_token(issued.raw)
    assert issued.expires_at == now + timedelta(minutes=10)
