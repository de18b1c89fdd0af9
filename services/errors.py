"""Errors raised by the account services and mapped to HTTP responses."""

from __future__ import annotations

from http import HTTPStatus


class AccountError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None, **extra: object) -> None:
        self.message = message or self.default_message
        self.extra = extra
        super().__init__(self.message)

    @property
    def name(self) -> str:
        return HTTPStatus(self.status_code).phrase

    def to_payload(self) -> dict:
        payload = {"error": self.name, "detail": self.message}
        payload.update(self.extra)
        return payload


class ValidationError(AccountError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Please enter all fields."


class ConflictError(AccountError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "User already exists."


class NotFoundError(AccountError):
    status_code = HTTPStatus.NOT_FOUND
    default_message = "User not found."


class EmailNotFoundError(NotFoundError):
    """An email lookup failed on an unauthenticated entry point."""

    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Email not found."


class InvalidCredentialsError(AccountError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Invalid credentials."


class LockedError(AccountError):
    status_code = HTTPStatus.LOCKED
    default_message = "Account is temporarily locked."


class ExpiredOrInvalidTokenError(AccountError):
    status_code = HTTPStatus.BAD_REQUEST
    default_message = "Token is invalid or has expired."


class InvalidSessionError(AccountError):
    status_code = HTTPStatus.UNAUTHORIZED
    default_message = "Invalid token."


class ForbiddenError(AccountError):
    status_code = HTTPStatus.FORBIDDEN
    default_message = "You may only access your own account."


class EmailDeliveryError(AccountError):
    default_message = "Email could not be sent. Please try again later."


class UploadError(AccountError):
    default_message = "Failed to upload avatar."


class InternalError(AccountError):
    pass
