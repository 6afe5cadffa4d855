"""Ledger events — append-only audit trail of marketplace notifications.

Revision ID: 001_ledger_events
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_ledger_events"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "ledger_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("sequence", sa.Integer, nullable=False),
        sa.Column("event_type", sa.String(40), nullable=False),
        sa.Column("payload", sa.JSON, nullable=False),
        sa.Column("emitted_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_ledger_events_sequence", "ledger_events", ["sequence"], unique=True)
    op.create_index("ix_ledger_events_event_type", "ledger_events", ["event_type"])


def downgrade() -> None:
    op.drop_index("ix_ledger_events_event_type", table_name="ledger_events")
    op.drop_index("ix_ledger_events_sequence", table_name="ledger_events")
    op.drop_table("ledger_events")
