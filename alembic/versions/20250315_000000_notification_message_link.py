"""Link notifications to the message that produced them

Revision ID: 20250315_000000
Revises: 20250301_000000
Create Date: 2025-03-15 00:00:00.000000
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20250315_000000"
down_revision = "20250301_000000"
branch_labels = None
depends_on = None


def upgrade():
    op.add_column("notifications", sa.Column("message_id", sa.Integer(), nullable=True))
    op.create_foreign_key(
        "fk_notifications_message_id",
        "notifications",
        "messages",
        ["message_id"],
        ["id"],
        ondelete="CASCADE",
    )
    op.create_index("ix_notifications_message_id", "notifications", ["message_id"])


def downgrade():
    op.drop_index("ix_notifications_message_id", table_name="notifications")
    op.drop_constraint("fk_notifications_message_id", "notifications", type_="foreignkey")
    op.drop_column("notifications", "message_id")
