"""Application factory."""

import json
import logging
import os
import uuid

from flask import Flask, abort, g, jsonify, request, send_from_directory
from flask_cors import CORS
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from werkzeug.exceptions import HTTPException

from config import AccountSettings, Config
from mailers import AbstractMailer, MemoryMailer, SMTPMailer
from models import db
from routes.auth import auth_bp
from routes.profile import profile_bp
from services import AccountService
from services.errors import AccountError, InvalidSessionError
from services.passwords import PasswordHasher
from services.store import AccountStore
from storage import LocalStorage

migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def create_app(config_class: type[Config] = Config) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
    logging.getLogger().setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # Core subsystems
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    _register_jwt_callbacks()

    # CORS
    CORS(
        app,
        resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}},
        supports_credentials=True,
    )

    # Rate limiting
    storage_uri = app.config.get("RATELIMIT_STORAGE_URI", "memory://")
    headers_enabled = app.config.get("RATELIMIT_HEADERS_ENABLED", True)
    key_prefix = app.config.get("RATELIMIT_KEY_PREFIX") or str(uuid.uuid4())

    global limiter
    limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[lambda: app.config.get("RATE_LIMIT", "100 per 10 minutes")],
        storage_uri=storage_uri,
        headers_enabled=headers_enabled,
        key_prefix=key_prefix,
    )
    limiter.init_app(app)
    app.config["RATELIMIT_KEY_PREFIX"] = key_prefix

    # Account services, built once from frozen settings
    settings = AccountSettings.from_mapping(app.config)
    storage = LocalStorage(
        app.config["UPLOAD_DIR"], app.config.get("PUBLIC_UPLOAD_URL", "/uploads")
    )
    app.extensions["account_service"] = AccountService(
        settings=settings,
        store=AccountStore(PasswordHasher(settings.password_hash_method)),
        mailer=_build_mailer(app),
        storage=storage,
    )

    # Blueprints
    app.register_blueprint(auth_bp, url_prefix="/api/user")
    app.register_blueprint(profile_bp, url_prefix="/api/user")

    # Health
    @app.route("/health", methods=["GET"])
    def health_check():
        return jsonify({"status": "ok"})

    @app.route("/uploads/<path:filename>", methods=["GET"])
    def uploaded_file(filename: str):
        if not storage.exists(filename):
            abort(404, description="File not found.")
        return send_from_directory(storage.base_directory, filename)

    # Errors
    _register_error_handlers(app)

    return app


def _build_mailer(app: Flask) -> AbstractMailer:
    backend = app.config.get("MAIL_BACKEND", "smtp")
    if backend == "memory":
        return MemoryMailer()
    if backend != "smtp":
        raise ValueError(f"Unknown MAIL_BACKEND {backend!r}; expected 'smtp' or 'memory'.")
    return SMTPMailer(
        host=app.config["SMTP_HOST"],
        port=int(app.config["SMTP_PORT"]),
        sender=app.config["MAIL_SENDER"],
        username=app.config.get("SMTP_USERNAME"),
        password=app.config.get("SMTP_PASSWORD"),
        use_tls=app.config.get("SMTP_USE_TLS", True),
        timeout=int(app.config.get("SMTP_TIMEOUT", 10)),
    )


def _error_response(payload: dict, status_code: int):
    request_id = g.get("request_id") or str(uuid.uuid4())
    payload["request_id"] = request_id
    response = jsonify(payload)
    response.status_code = status_code
    response.headers.setdefault("X-Request-ID", request_id)
    return response


def _register_jwt_callbacks() -> None:
    """Reject missing, malformed, tampered and expired sessions with the same 401 shape."""

    def _invalid_session(_reason: str = ""):
        return _error_response(InvalidSessionError().to_payload(), 401)

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return _error_response(
            InvalidSessionError("Authorization header missing.").to_payload(), 401
        )

    jwt.invalid_token_loader(_invalid_session)

    @jwt.expired_token_loader
    def _expired_token(_header: dict, _payload: dict):
        return _invalid_session()


def _register_error_handlers(app: Flask) -> None:
    """Register JSON error handlers with request IDs."""

    @app.before_request
    def _assign_request_id():  # pragma: no cover
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    @app.after_request
    def _add_response_headers(response):  # pragma: no cover
        request_id = g.get("request_id")
        if request_id:
            response.headers.setdefault("X-Request-ID", request_id)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.errorhandler(AccountError)
    def _handle_account_error(error: AccountError):
        if error.status_code >= 500:
            app.logger.error("%s: %s", type(error).__name__, error.message)
        return _error_response(error.to_payload(), int(error.status_code))

    @app.errorhandler(HTTPException)
    def _handle_http_exception(error: HTTPException):
        request_id = g.get("request_id") or str(uuid.uuid4())
        response = error.get_response()
        payload = {
            "error": getattr(error, "name", "Error"),
            "detail": error.description,
            "request_id": request_id,
        }
        response.data = json.dumps(payload)
        response.content_type = "application/json"
        response.headers.setdefault("X-Request-ID", request_id)
        return response

    @app.errorhandler(Exception)
    def _handle_unexpected(error: Exception):  # pragma: no cover
        app.logger.exception("Unhandled application error", exc_info=error)
        payload = {
            "error": "Internal Server Error",
            "detail": "An unexpected error occurred.",
        }
        return _error_response(payload, 500)


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=int(os.environ.get("PORT", 5000)))
