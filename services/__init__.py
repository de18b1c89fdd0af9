"""Account services: credential store, lockout, sessions and lifecycle."""

from flask import current_app

from .accounts import AccountService


def get_account_service() -> AccountService:
    """Return the service bound to the current application."""

    return current_app.extensions["account_service"]


__all__ = ["AccountService", "get_account_service"]
