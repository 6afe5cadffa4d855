"""Marketplace Service — imperative shell around the ledger for the HTTP API.

Invariants:
    - Every mutating call runs the ledger operation first, then flushes the outbox
    - A ledger error propagates unchanged; nothing is flushed for it because the
      ledger emitted nothing
    - Once the ledger call returns, the operation has happened: a failed flush
      requeues the batch and logs, but never fails the caller. The batch is
      retried on the next flush; /health/ready reports the backlog

Design Decisions:
    - Ledger calls are synchronous and fast; they run on the event loop thread,
      so no executor hop (ADR: bounded local operations only)
    - One service per process, built in lifespan and injected via dependency
"""

import logging

from app.core.ledger_state import Item, Order
from app.core.marketplace_ledger import MarketplaceLedger
from app.core.repository_protocols import EventRepository
from app.infrastructure.wallet import InMemoryWallet
from app.services.event_store import EventOutbox

logger = logging.getLogger(__name__)


class MarketplaceService:
    """Owns the ledger, its payout wallet and its event outbox."""

    def __init__(self, seed_admin: str, wallet: InMemoryWallet | None = None):
        self.wallet = wallet or InMemoryWallet()
        self.ledger = MarketplaceLedger(seed_admin, self.wallet)
        self.outbox = EventOutbox()
        self.ledger.subscribe(self.outbox.collect)

    async def flush(self, events: EventRepository) -> int:
        """Persist every pending event. Returns how many were written (0 on failure)."""
        batch = self.outbox.drain()
        if not batch:
            return 0
        try:
            await events.save_all(batch)
        except Exception:
            self.outbox.requeue(batch)
            logger.error(
                f"Failed to persist {len(batch)} ledger event(s); requeued",
                exc_info=True,
                extra={"event_type": batch[0].event_type.value},
            )
            return 0
        return len(batch)

    # --- Mutations --------------------------------------------------------------

    async def add_admin(self, events: EventRepository, identity: str, caller: str) -> bool:
        added = self.ledger.add_admin(identity, caller)
        await self.flush(events)
        return added

    async def list_item(
        self, events: EventRepository, name: str, description: str, price: int, caller: str,
    ) -> Item:
        item = self.ledger.list_item(name, description, price, caller)
        await self.flush(events)
        return item

    async def purchase_item(
        self, events: EventRepository, item_id: int, payment: int, caller: str,
    ) -> Order:
        order = self.ledger.purchase_item(item_id, payment, caller)
        await self.flush(events)
        return order

    async def mark_as_shipped(self, events: EventRepository, order_id: int, caller: str) -> Order:
        order = self.ledger.mark_as_shipped(order_id, caller)
        await self.flush(events)
        return order

    async def confirm_receipt(self, events: EventRepository, order_id: int, caller: str) -> Order:
        order = self.ledger.confirm_receipt(order_id, caller)
        await self.flush(events)
        return order

    async def cancel_order(self, events: EventRepository, order_id: int, caller: str) -> Order:
        order = self.ledger.cancel_order(order_id, caller)
        await self.flush(events)
        return order

    async def raise_dispute(self, events: EventRepository, order_id: int, caller: str) -> Order:
        order = self.ledger.raise_dispute(order_id, caller)
        await self.flush(events)
        return order

    async def resolve_dispute(
        self, events: EventRepository, order_id: int, favor_buyer: bool, caller: str,
    ) -> Order:
        order = self.ledger.resolve_dispute(order_id, favor_buyer, caller)
        await self.flush(events)
        return order

    async def receive_funds(self, events: EventRepository, sender: str, amount: int) -> None:
        self.ledger.receive_funds(sender, amount)
        await self.flush(events)
