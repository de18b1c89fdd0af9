"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from mailers import MemoryMailer  # noqa: E402
from models import db  # noqa: E402
from models.account import Account  # noqa: E402
from services import AccountService  # noqa: E402
from utils.clock import utcnow  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-signing-key-0123456789abcdef0123456789"
    MAIL_BACKEND = "memory"
    FRONTEND_BASE_URL = "http://frontend.test"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    RATE_LIMIT = "1000 per minute"


class FrozenClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest.fixture()
def app(tmp_path) -> Flask:
    """Create a Flask application instance for tests."""

    upload_dir = tmp_path / "uploads"

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def service(app: Flask) -> AccountService:
    return app.extensions["account_service"]


@pytest.fixture()
def mailer(service: AccountService) -> MemoryMailer:
    return service.mailer


@pytest.fixture()
def clock(service: AccountService) -> FrozenClock:
    """Freeze the service clock at the current time."""

    frozen = FrozenClock(utcnow())
    service.clock = frozen
    return frozen


@pytest.fixture()
def make_account(service: AccountService):
    """Return a factory persisting accounts with a known password."""

    def _make(
        email: str = "ann@example.com",
        password: str = "Secr3t!",
        *,
        verified: bool = False,
        admin: bool = False,
    ) -> Account:
        account = Account(
            email=email,
            first_name="Ann",
            last_name="Lee",
            phone_number="555-0100",
            is_verified=verified,
            is_admin=admin,
        )
        service.store.set_password(account, password)
        return service.store.add(account)

    return _make


@pytest.fixture()
def auth_headers(client: FlaskClient):
    """Log in through the API and return bearer headers."""

    def _login(email: str = "ann@example.com", password: str = "Secr3t!") -> dict:
        response = client.post("/api/user/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.get_json()
        return {"Authorization": f"Bearer {response.get_json()['token']}"}

    return _login
