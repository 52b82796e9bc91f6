"""Add refresh token hash and reset token to user table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19

"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "002"
down_revision: str | None = "001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.add_column("user", sa.Column("refresh_token_hash", sa.String(length=256), nullable=True))
    op.add_column("user", sa.Column("reset_password_token", sa.Text(), nullable=True))


def downgrade() -> None:
    op.drop_column("user", "reset_password_token")
    op.drop_column("user", "refresh_token_hash")
