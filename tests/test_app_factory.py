"""Tests for the Flask application factory."""
from __future__ import annotations

import pytest

from app import create_app
from config import AccountSettings, Config
from mailers import MemoryMailer, SMTPMailer


def test_health_endpoint_returns_ok(client, tmp_path):
    """The health endpoint should respond with an OK payload and create uploads dir."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    # uploads dir is configured via TestConfig in conftest and created on app init
    assert (tmp_path / "uploads").is_dir()


def test_blueprints_registered(app):
    """Application factory should register the account blueprints."""
    assert {"auth", "profile"}.issubset(app.blueprints.keys())


def test_settings_are_frozen_from_config(service):
    settings = service.settings

    assert isinstance(settings, AccountSettings)
    assert settings.frontend_base_url == "http://frontend.test"
    assert settings.max_login_attempts == 3
    assert settings.lockout.total_seconds() == 60
    assert settings.token_ttl.total_seconds() == 600
    assert settings.session_ttl.total_seconds() == 3600
    assert settings.verification_code_ttl is None
    with pytest.raises(AttributeError):
        settings.max_login_attempts = 10  # type: ignore[misc]


def test_mail_backend_selection(tmp_path, service):
    assert isinstance(service.mailer, MemoryMailer)

    class SMTPConfig(Config):
        TESTING = True
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        UPLOAD_DIR = str(tmp_path / "smtp-uploads")
        MAIL_BACKEND = "smtp"
        SMTP_HOST = "relay.test"

    smtp_app = create_app(SMTPConfig)
    mailer = smtp_app.extensions["account_service"].mailer
    assert isinstance(mailer, SMTPMailer)
    assert mailer.host == "relay.test"


def test_unknown_mail_backend_is_rejected(tmp_path):
    class BadConfig(Config):
        SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
        UPLOAD_DIR = str(tmp_path / "bad-uploads")
        MAIL_BACKEND = "carrier-pigeon"

    with pytest.raises(ValueError):
        create_app(BadConfig)
