"""Password credentials and reset tokens on users

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-20 09:00:00.000000

"""

import sqlalchemy as sa

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table("users") as batch:
        batch.add_column(sa.Column("password_hash", sa.String(255)))
        batch.add_column(sa.Column("password_reset_token", sa.String(64)))
        batch.add_column(sa.Column("password_reset_expires", sa.DateTime(timezone=True)))
        batch.add_column(sa.Column("last_login_at", sa.DateTime(timezone=True)))
        batch.create_index("ix_users_password_reset_token", ["password_reset_token"])


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table("users") as batch:
        batch.drop_index("ix_users_password_reset_token")
        batch.drop_column("last_login_at")
        batch.drop_column("password_reset_expires")
        batch.drop_column("password_reset_token")
        batch.drop_column("password_hash")
