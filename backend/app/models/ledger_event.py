"""LedgerEventRecord ORM — durable copy of the ledger's audit trail.

Invariants:
    - One row per emitted LedgerEvent; sequence is unique
    - Rows are append-only: nothing updates or deletes them

Design Decisions:
    - JSON payload column: each event type carries different ids/amounts
    - Autoincrement int id (not UUID): rows are ordered and never merged across systems
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class LedgerEventRecord(Base):
    """Persisted ledger notification."""
    __tablename__ = "ledger_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    sequence: Mapped[int] = mapped_column(
        Integer, nullable=False, unique=True, index=True,
    )
    event_type: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    payload: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    emitted_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
