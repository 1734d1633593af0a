"""add user profile fields

Revision ID: b57d03e6c9a2
Revises: 8c41e07d2a55
Create Date: 2026-10-20 11:05:17.552310

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'b57d03e6c9a2'
down_revision: Union[str, Sequence[str], None] = '8c41e07d2a55'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("users", sa.Column("phone_number", sa.String(length=32), nullable=True))
    op.add_column("users", sa.Column("location", sa.String(), nullable=True))
    op.add_column("users", sa.Column("notification_preferences", sa.JSON(), nullable=True))
    op.add_column(
        "users",
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=True),
    )


def downgrade() -> None:
    op.drop_column("users", "updated_at")
    op.drop_column("users", "notification_preferences")
    op.drop_column("users", "location")
    op.drop_column("users", "phone_number")
