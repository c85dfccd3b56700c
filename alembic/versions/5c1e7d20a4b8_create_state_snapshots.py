"""Create state_snapshots table

Revision ID: 5c1e7d20a4b8
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "5c1e7d20a4b8"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """One row per storage key holding the serialised store."""
    op.create_table(
        "state_snapshots",
        sa.Column("key", sa.String(100), primary_key=True),
        sa.Column("payload_json", sa.Text, nullable=False),
        sa.Column("version", sa.Integer, nullable=False, server_default="1"),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    op.drop_table("state_snapshots")
