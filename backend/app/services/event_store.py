"""Event Store — outbox between the synchronous ledger and the async audit-trail DB.

Invariants:
    - EventOutbox.collect is the ledger listener: never blocks, never raises
    - drain() hands out each event exactly once; requeue() restores a failed batch
      ahead of anything collected since
    - SqlEventRepository commits one batch per call; a failed commit rolls the
      session back and raises DatabaseError

Design Decisions:
    - Outbox instead of writing from the ledger: the ledger lock is a threading lock
      and must not be held across an await (ADR: functional core, imperative shell)
"""

import logging
import threading
from collections import deque

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.domain_types import EventType
from app.core.errors import DatabaseError
from app.core.ledger_state import LedgerEvent
from app.models.ledger_event import LedgerEventRecord

logger = logging.getLogger(__name__)


class EventOutbox:
    """Thread-safe FIFO of committed ledger events awaiting persistence."""

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: deque[LedgerEvent] = deque()

    def collect(self, event: LedgerEvent) -> None:
        with self._lock:
            self._pending.append(event)

    def drain(self) -> list[LedgerEvent]:
        with self._lock:
            batch = list(self._pending)
            self._pending.clear()
            return batch

    def requeue(self, batch: list[LedgerEvent]) -> None:
        with self._lock:
            self._pending.extendleft(reversed(batch))

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)


class SqlEventRepository:
    """EventRepository backed by the ledger_events table."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def save_all(self, events: list[LedgerEvent]) -> None:
        if not events:
            return
        self._db.add_all([
            LedgerEventRecord(
                sequence=e.sequence,
                event_type=e.event_type.value,
                payload=e.payload,
                emitted_at=e.emitted_at,
            )
            for e in events
        ])
        try:
            await self._db.commit()
        except SQLAlchemyError as e:
            await self._db.rollback()
            raise DatabaseError(str(e), "commit") from e
        logger.info(
            f"Persisted {len(events)} ledger event(s) up to #{events[-1].sequence}",
            extra={"event_type": events[-1].event_type.value},
        )

    async def list_events(self, since: int = 0, limit: int = 100) -> list[LedgerEvent]:
        result = await self._db.execute(
            select(LedgerEventRecord)
            .where(LedgerEventRecord.sequence > since)
            .order_by(LedgerEventRecord.sequence)
            .limit(limit),
        )
        return [
            LedgerEvent(
                sequence=r.sequence,
                event_type=EventType(r.event_type),
                payload=r.payload,
                emitted_at=r.emitted_at,
            )
            for r in result.scalars().all()
        ]
