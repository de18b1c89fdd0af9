"""Seed an administrator account."""

import os

from app import create_app
from models.account import Account
from services import get_account_service

ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@example.com")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "AdminPass123")


def main() -> None:
    app = create_app()
    with app.app_context():
        store = get_account_service().store
        admin = store.find_by_email(ADMIN_EMAIL)
        if admin is None:
            admin = Account(
                email=ADMIN_EMAIL,
                first_name="Site",
                last_name="Admin",
                phone_number="000-0000",
            )
            action = "created"
        else:
            action = "updated"
        admin.is_admin = True
        admin.mark_verified()
        store.set_password(admin, ADMIN_PASSWORD)
        store.save(admin)
        print(f"Admin account {action}: {ADMIN_EMAIL}")


if __name__ == "__main__":
    main()
