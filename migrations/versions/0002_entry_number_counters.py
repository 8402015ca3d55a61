"""entry number counters

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18 14:00:00
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa


revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    # Existing months are seeded lazily from journal_entries on
    # their next allocation
    op.create_table(
        "entry_number_counters",
        sa.Column("period", sa.String(length=20), nullable=False),
        sa.Column("last_value", sa.Integer(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("period"),
    )


def downgrade() -> None:
    op.drop_table("entry_number_counters")
