"""Create the accounts table."""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "4e1f7c2a9b3d"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create accounts with credential, verification and lockout columns."""

    op.create_table(
        "accounts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("phone_number", sa.String(length=32), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("avatar", sa.String(length=512), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("verification_code", sa.Integer(), nullable=True),
        sa.Column("verification_code_expire", sa.DateTime(), nullable=True),
        sa.Column("verification_token", sa.String(length=64), nullable=True),
        sa.Column("verification_token_expire", sa.DateTime(), nullable=True),
        sa.Column("reset_password_token", sa.String(length=64), nullable=True),
        sa.Column("reset_password_expire", sa.DateTime(), nullable=True),
        sa.Column("login_attempts", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("lock_until", sa.DateTime(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )
    op.create_index(op.f("ix_accounts_email"), "accounts", ["email"], unique=True)
    op.create_index(op.f("ix_accounts_verification_code"), "accounts", ["verification_code"])
    op.create_index(op.f("ix_accounts_verification_token"), "accounts", ["verification_token"])
    op.create_index(op.f("ix_accounts_reset_password_token"), "accounts", ["reset_password_token"])


def downgrade() -> None:
    """Drop the accounts table."""

    op.drop_index(op.f("ix_accounts_reset_password_token"), table_name="accounts")
    op.drop_index(op.f("ix_accounts_verification_token"), table_name="accounts")
    op.drop_index(op.f("ix_accounts_verification_code"), table_name="accounts")
    op.drop_index(op.f("ix_accounts_email"), table_name="accounts")
    op.drop_table("accounts")
