"""Application configuration module."""

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path
from typing import Any, Mapping, Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y"}


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


class Config:
    """Base configuration for the Flask application."""

    # Core
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///app.db")
    SQLALCHEMY_DATABASE_URI = DATABASE_URL
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Uploads
    UPLOAD_DIR = os.getenv("UPLOAD_DIR", str(Path("workspace") / "uploads"))
    PUBLIC_UPLOAD_URL = os.getenv("PUBLIC_UPLOAD_URL", "/uploads")
    AVATAR_FOLDER = "avatars"
    MAX_AVATAR_SIZE = _env_int("MAX_AVATAR_SIZE", 5 * 1024 * 1024)

    # CORS
    _raw_origins = os.getenv("ORIGINS", "*")
    if _raw_origins.strip() == "*":
        CORS_ORIGINS = "*"
    else:
        CORS_ORIGINS = [o.strip() for o in _raw_origins.split(",") if o.strip()]

    # Rate limiting
    RATE_LIMIT = os.getenv("RATE_LIMIT", "100 per 10 minutes")
    RATELIMIT_HEADERS_ENABLED = True
    RATELIMIT_STORAGE_URI = os.getenv("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_KEY_PREFIX = os.getenv("RATELIMIT_KEY_PREFIX", "")

    # Mail
    FRONTEND_BASE_URL = os.getenv("FRONTEND_BASE_URL", "http://localhost:3000")
    MAIL_BACKEND = os.getenv("MAIL_BACKEND", "smtp")
    MAIL_SENDER = os.getenv("MAIL_SENDER", "no-reply@localhost")
    SMTP_HOST = os.getenv("SMTP_HOST", "localhost")
    SMTP_PORT = _env_int("SMTP_PORT", 587)
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_USE_TLS = _env_bool("SMTP_USE_TLS", True)
    SMTP_TIMEOUT = _env_int("SMTP_TIMEOUT", 10)

    # Credentials and lockout
    PASSWORD_HASH_METHOD = os.getenv("PASSWORD_HASH_METHOD", "scrypt")
    MAX_LOGIN_ATTEMPTS = _env_int("MAX_LOGIN_ATTEMPTS", 3)
    LOCKOUT_SECONDS = _env_int("LOCKOUT_SECONDS", 60)
    TOKEN_TTL_SECONDS = _env_int("TOKEN_TTL_SECONDS", 10 * 60)
    VERIFICATION_CODE_TTL_SECONDS = _env_int("VERIFICATION_CODE_TTL_SECONDS", None)


@dataclass(frozen=True)
class AccountSettings:
    """Account-related settings frozen once at application start."""

    frontend_base_url: str = "http://localhost:3000"
    password_hash_method: str = "scrypt"
    max_login_attempts: int = 3
    lockout: timedelta = timedelta(seconds=60)
    token_ttl: timedelta = timedelta(minutes=10)
    verification_code_ttl: Optional[timedelta] = None
    session_ttl: timedelta = timedelta(hours=1)
    avatar_folder: str = "avatars"
    max_avatar_size: int = 5 * 1024 * 1024

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "AccountSettings":
        """Build settings from a Flask config mapping."""

        code_ttl = config.get("VERIFICATION_CODE_TTL_SECONDS")
        return cls(
            frontend_base_url=str(
                config.get("FRONTEND_BASE_URL") or cls.frontend_base_url
            ).rstrip("/"),
            password_hash_method=config.get("PASSWORD_HASH_METHOD") or cls.password_hash_method,
            max_login_attempts=int(config.get("MAX_LOGIN_ATTEMPTS") or cls.max_login_attempts),
            lockout=timedelta(seconds=int(config.get("LOCKOUT_SECONDS") or 60)),
            token_ttl=timedelta(seconds=int(config.get("TOKEN_TTL_SECONDS") or 600)),
            verification_code_ttl=timedelta(seconds=int(code_ttl)) if code_ttl else None,
            session_ttl=config.get("JWT_ACCESS_TOKEN_EXPIRES") or cls.session_ttl,
            avatar_folder=config.get("AVATAR_FOLDER") or cls.avatar_folder,
            max_avatar_size=int(config.get("MAX_AVATAR_SIZE") or cls.max_avatar_size),
        )
