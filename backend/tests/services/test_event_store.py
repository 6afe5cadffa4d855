"""Event Store — outbox ordering, SQL persistence and flush failure handling.

Tests cover:
    - EventOutbox drains in FIFO order and requeues ahead of newer events
    - SqlEventRepository round-trips events and filters by sequence
    - MarketplaceService.flush requeues and returns the ledger result when persistence fails
    - A failed commit rolls the session back and surfaces as DatabaseError
"""

from datetime import datetime, timezone

import pytest

from app.core.domain_types import EventType
from app.core.errors import DatabaseError
from app.core.ledger_state import LedgerEvent
from app.services.event_store import EventOutbox, SqlEventRepository
from app.services.marketplace_service import MarketplaceService
from tests.identities import OWNER, PRICE, SELLER


def _event(sequence: int, event_type=EventType.ITEM_LISTED, **payload) -> LedgerEvent:
    return LedgerEvent(
        sequence=sequence,
        event_type=event_type,
        payload=payload or {"item_id": sequence, "seller": SELLER},
        emitted_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


class _FailingRepository:
    async def save_all(self, events):
        raise DatabaseError("database unavailable", "commit")

    async def list_events(self, since=0, limit=100):
        return []


class _RecordingRepository:
    def __init__(self):
        self.saved: list[LedgerEvent] = []

    async def save_all(self, events):
        self.saved.extend(events)

    async def list_events(self, since=0, limit=100):
        return [e for e in self.saved if e.sequence > since][:limit]


# --- EventOutbox --------------------------------------------------------------

def test_outbox_drains_in_order():
    outbox = EventOutbox()
    for seq in (1, 2, 3):
        outbox.collect(_event(seq))
    assert len(outbox) == 3
    assert [e.sequence for e in outbox.drain()] == [1, 2, 3]
    assert len(outbox) == 0
    assert outbox.drain() == []


def test_requeue_goes_ahead_of_newer_events():
    outbox = EventOutbox()
    outbox.collect(_event(1))
    outbox.collect(_event(2))
    batch = outbox.drain()
    outbox.collect(_event(3))

    outbox.requeue(batch)

    assert [e.sequence for e in outbox.drain()] == [1, 2, 3]


# --- SqlEventRepository -------------------------------------------------------

async def test_save_and_list(test_db):
    repo = SqlEventRepository(test_db)
    await repo.save_all([
        _event(1),
        _event(2, EventType.ORDER_CREATED, order_id=1, item_id=1, buyer="b", seller=SELLER),
    ])

    events = await repo.list_events()

    assert [e.sequence for e in events] == [1, 2]
    assert events[1].event_type == EventType.ORDER_CREATED
    assert events[1].payload["buyer"] == "b"


async def test_list_since_and_limit(test_db):
    repo = SqlEventRepository(test_db)
    await repo.save_all([_event(seq) for seq in range(1, 6)])

    assert [e.sequence for e in await repo.list_events(since=3)] == [4, 5]
    assert [e.sequence for e in await repo.list_events(limit=2)] == [1, 2]


async def test_save_empty_batch_is_noop(test_db):
    repo = SqlEventRepository(test_db)
    await repo.save_all([])
    assert await repo.list_events() == []


async def test_failed_commit_rolls_back_and_raises(test_db):
    repo = SqlEventRepository(test_db)
    await repo.save_all([_event(1)])

    with pytest.raises(DatabaseError) as exc_info:
        await repo.save_all([_event(1)])

    assert exc_info.value.operation == "commit"
    # session is usable again after the rollback
    await repo.save_all([_event(2)])
    assert [e.sequence for e in await repo.list_events()] == [1, 2]


# --- MarketplaceService.flush -------------------------------------------------

async def test_flush_writes_pending_events():
    service = MarketplaceService(OWNER)
    repo = _RecordingRepository()

    await service.list_item(repo, "Widget", "A widget", PRICE, SELLER)

    assert [e.event_type for e in repo.saved] == [EventType.ITEM_LISTED]
    assert len(service.outbox) == 0
    assert await service.flush(repo) == 0


async def test_failed_flush_keeps_result_and_requeues():
    service = MarketplaceService(OWNER)

    item = await service.list_item(_FailingRepository(), "Widget", "A widget", PRICE, SELLER)

    assert item.id == 1
    # ledger state stays committed; the event waits for the next flush
    assert service.ledger.get_item_count() == 1
    assert len(service.outbox) == 1

    repo = _RecordingRepository()
    assert await service.flush(repo) == 1
    assert repo.saved[0].payload == {"item_id": 1, "seller": SELLER}
