"""Authentication blueprint: registration, verification, login and password recovery."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, jsonify, request

from services import get_account_service
from utils.request_validation import parse_json_request

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/create", methods=["POST"])
def register() -> tuple:
    """Register a new, unverified account and send the verification email."""
    payload = parse_json_request(request)
    registration = get_account_service().register(
        first_name=payload.get("first_name"),
        last_name=payload.get("last_name"),
        email=payload.get("email"),
        phone_number=payload.get("phone_number"),
        password=payload.get("password"),
    )

    return (
        jsonify(
            {
                "success": True,
                "message": "User created successfully. Please check your email for verification.",
                "verification_email_sent": registration.email_sent,
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/verify/<code>", methods=["GET"])
def verify_email_code(code: str) -> tuple:
    """Verify an account with the numeric code from the registration email."""
    get_account_service().verify_by_code(code)
    return jsonify({"success": True, "message": "Email verified successfully."}), HTTPStatus.OK


@auth_bp.route("/send-verification-email", methods=["POST"])
def send_verification_email() -> tuple:
    """Email a time-limited verification link."""
    payload = parse_json_request(request, required_keys=("email",))
    get_account_service().request_verification_token(payload.get("email"))
    return jsonify({"success": True, "message": "Verification email sent."}), HTTPStatus.OK


@auth_bp.route("/verify-email/<token>", methods=["GET"])
def verify_email_token(token: str) -> tuple:
    """Verify an account with a token from a verification link."""
    get_account_service().verify_by_token(token)
    return jsonify({"success": True, "message": "Email successfully verified."}), HTTPStatus.OK


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate an account and return a session token."""
    payload = parse_json_request(request)
    result = get_account_service().login(payload.get("email"), payload.get("password"))
    return (
        jsonify(
            {
                "success": True,
                "message": "User logged in successfully.",
                "user_id": result.account.id,
                "token": result.token,
                "user": result.account.to_dict(),
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/forgot/password", methods=["POST"])
def forgot_password() -> tuple:
    """Email a password reset link."""
    payload = parse_json_request(request)
    account = get_account_service().forgot_password(payload.get("email"))
    return (
        jsonify({"success": True, "message": f"Email sent to {account.email}"}),
        HTTPStatus.OK,
    )


@auth_bp.route("/password/reset/<token>", methods=["PUT"])
def reset_password(token: str) -> tuple:
    """Set a new password using a reset token."""
    payload = parse_json_request(request)
    get_account_service().reset_password(token, payload.get("password"))
    return jsonify({"success": True, "message": "Password updated."}), HTTPStatus.OK
