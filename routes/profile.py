"""Profile blueprint for reading and updating accounts behind a session."""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from flask_jwt_extended import get_jwt, jwt_required
from werkzeug.datastructures import FileStorage

from services import get_account_service
from services.sessions import claims_from_jwt
from utils.request_validation import parse_json_request

profile_bp = Blueprint("profile", __name__)


def _target_account_id(account_id: int | None) -> int:
    claims = claims_from_jwt(get_jwt())
    return get_account_service().authorize(claims, account_id)


def _profile_fields() -> tuple[dict, FileStorage | None]:
    """Return submitted fields and the avatar file, from JSON or multipart form data."""

    if request.mimetype == "multipart/form-data":
        avatar = request.files.get("avatar")
        if not isinstance(avatar, FileStorage):
            avatar = None
        return request.form.to_dict(), avatar
    return parse_json_request(request, allow_empty=True), None


@profile_bp.route("/getUsers", methods=["GET"])
@profile_bp.route("/getUsers/<int:account_id>", methods=["GET"])
@jwt_required()
def get_profile(account_id: int | None = None):
    """Return the caller's profile, or any profile for administrators."""

    service = get_account_service()
    account = service.get_profile(_target_account_id(account_id))
    return jsonify(
        {"success": True, "message": "User fetched successfully.", "user": account.to_dict()}
    )


@profile_bp.route("/updateUser", methods=["PATCH"])
@profile_bp.route("/updateUser/<int:account_id>", methods=["PATCH"])
@jwt_required()
def update_profile(account_id: int | None = None):
    """Merge profile fields and an optional avatar upload into an account."""

    service = get_account_service()
    target_id = _target_account_id(account_id)
    fields, avatar = _profile_fields()
    account = service.update_profile(target_id, fields, avatar)
    return jsonify(
        {
            "success": True,
            "message": "User profile updated successfully.",
            "user": account.to_dict(),
        }
    )
