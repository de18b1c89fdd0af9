"""HTTP hardening around the account API: CORS, headers, throttling, error envelope."""

from __future__ import annotations

import pytest
from flask import Flask

from app import create_app
from config import Config
from models import db

LOGIN = {"email": "ann@example.com", "password": "Secr3t!"}


class _HardenedConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    JWT_SECRET_KEY = "hardening-signing-key-0123456789abcdef01234"
    MAIL_BACKEND = "memory"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"


@pytest.fixture()
def make_app(tmp_path):
    """Build an isolated app with config overrides and an empty schema."""

    def _make(**overrides) -> Flask:
        attrs = {"UPLOAD_DIR": str(tmp_path / "uploads"), **overrides}
        application = create_app(type("TestConfig", (_HardenedConfig,), attrs))
        with application.app_context():
            db.create_all()
        return application

    return _make


def test_cors_preflight_for_login_from_allowed_origin(make_app):
    client = make_app(CORS_ORIGINS=["https://client.example"]).test_client()

    response = client.options(
        "/api/user/login",
        headers={
            "Origin": "https://client.example",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert response.headers.get("Access-Control-Allow-Origin") == "https://client.example"
    assert response.headers.get("Access-Control-Allow-Credentials") == "true"


def test_cors_ignores_unlisted_origin(make_app):
    client = make_app(CORS_ORIGINS=["https://client.example"]).test_client()

    response = client.post(
        "/api/user/login", json=LOGIN, headers={"Origin": "https://evil.example"}
    )

    assert "Access-Control-Allow-Origin" not in response.headers


def test_error_responses_carry_hardening_headers(make_app):
    client = make_app().test_client()

    response = client.post("/api/user/login", json=LOGIN, headers={"X-Request-ID": "req-7"})

    assert response.status_code == 400
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["Referrer-Policy"] == "no-referrer"
    assert response.headers["X-Request-ID"] == "req-7"
    assert response.get_json()["request_id"] == "req-7"


def test_login_is_throttled_per_client(make_app):
    client = make_app(RATE_LIMIT="2 per minute").test_client()

    statuses = [client.post("/api/user/login", json=LOGIN).status_code for _ in range(2)]
    throttled = client.post("/api/user/login", json=LOGIN)

    assert statuses == [400, 400]
    assert throttled.status_code == 429
    payload = throttled.get_json()
    assert payload["error"] == "Too Many Requests"
    assert payload["request_id"] == throttled.headers["X-Request-ID"]


def test_registration_rejects_non_json_body(make_app):
    client = make_app().test_client()

    response = client.post("/api/user/create", data="first_name=Ann", content_type="text/plain")

    assert response.status_code == 400
    payload = response.get_json()
    assert payload["error"] == "Bad Request"
    assert payload["detail"] == "Request content type must be application/json."


def test_unknown_account_route_uses_json_envelope(make_app):
    client = make_app().test_client()

    response = client.get("/api/user/nope")

    assert response.status_code == 404
    assert response.get_json()["error"] == "Not Found"
