"""Marketplace Ledger — the single authority over items, orders and escrowed funds.

Invariants:
    - Every public method holds the ledger lock for its whole duration: operations
      are serializable and no caller observes a half-applied transition
    - Guard order for order transitions: id range -> authorization -> status
    - Status is mutated BEFORE the fund movement; a failed movement restores every
      mutated field and re-raises as FundMovementError
    - escrow_balance == sum(order.amount for orders still holding escrow) at all times
    - Events are appended only after the operation commits, in emission order

Design Decisions:
    - One RLock per ledger instance, not a process-wide singleton: tests and the API
      each own their ledger (ADR: lifecycle-scoped state)
    - Ids are list positions + 1: sequential, never reused, range-checkable in O(1)
    - Listeners are invoked synchronously after commit; the API outbox is one
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Callable

from app.core.domain_types import (
    Amount, EventType, Identity, ItemId, ItemStatus, OrderId, OrderStatus,
)
from app.core.enforce_access import (
    require_admin, require_buyer, require_party, require_seller,
)
from app.core.enforce_listing import (
    validate_admin_candidate, validate_amount, validate_listing, validate_purchase,
)
from app.core.enforce_transitions import (
    apply_transition, require_disputed, require_pending, require_shipped,
)
from app.core.errors import (
    ErrorContext, FundMovementError, InvalidItemId, InvalidOrderId,
)
from app.core.ledger_state import AdminRegistry, Item, LedgerEvent, Order
from app.core.repository_protocols import FundTransfer, LedgerEventListener

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MarketplaceLedger:
    """Escrow marketplace state machine. All amounts in the smallest currency unit."""

    def __init__(
        self, seed_admin: str, funds: FundTransfer, clock: Clock = _utcnow,
    ):
        validate_admin_candidate(seed_admin)
        self._lock = threading.RLock()
        self._funds = funds
        self._clock = clock
        self._admins = AdminRegistry(Identity(seed_admin))
        self._items: list[Item] = []
        self._orders: list[Order] = []
        self._user_items: dict[Identity, list[ItemId]] = {}
        self._escrow_balance = 0
        self._unsolicited_balance = 0
        self._events: list[LedgerEvent] = []
        self._listeners: list[LedgerEventListener] = []

    # --- Event plumbing ---------------------------------------------------------

    def subscribe(self, listener: LedgerEventListener) -> None:
        """Register a listener called synchronously for every committed event."""
        with self._lock:
            self._listeners.append(listener)

    def _emit(self, event_type: EventType, **payload) -> LedgerEvent:
        event = LedgerEvent(
            sequence=len(self._events) + 1,
            event_type=event_type,
            payload=payload,
            emitted_at=self._clock(),
        )
        self._events.append(event)
        for listener in self._listeners:
            listener(event)
        return event

    # --- Lookup helpers (caller holds the lock) ---------------------------------

    def _item(self, item_id: int) -> Item:
        if isinstance(item_id, bool) or not 1 <= item_id <= len(self._items):
            raise InvalidItemId(item_id, ErrorContext(item_id=item_id))
        return self._items[item_id - 1]

    def _order(self, order_id: int) -> Order:
        if isinstance(order_id, bool) or not 1 <= order_id <= len(self._orders):
            raise InvalidOrderId(order_id, ErrorContext(order_id=order_id))
        return self._orders[order_id - 1]

    def _pay_out(self, order: Order, recipient: Identity, rollback: Callable[[], None]) -> None:
        """Release order.amount from escrow to recipient; undo via rollback on failure."""
        try:
            self._funds.transfer(recipient, order.amount)
        except FundMovementError:
            rollback()
            logger.error(
                f"Fund movement failed for order {order.id}, rolled back",
                extra={"order_id": order.id, "amount": order.amount, "caller": recipient},
            )
            raise
        except Exception as e:
            rollback()
            logger.error(
                f"Fund movement failed for order {order.id}, rolled back: {e}",
                extra={"order_id": order.id, "amount": order.amount, "caller": recipient},
            )
            raise FundMovementError(
                f"Transfer of {order.amount} to '{recipient}' failed",
                recipient=recipient, amount=order.amount,
                context=ErrorContext(caller=recipient, order_id=order.id),
            ) from e
        self._escrow_balance -= order.amount

    # --- Admin management -------------------------------------------------------

    def add_admin(self, identity: str, caller: str) -> bool:
        """Grant admin rights. Returns False if identity already was an admin."""
        with self._lock:
            require_admin(self._admins, caller)
            validate_admin_candidate(identity)
            added = self._admins.add(Identity(identity))
            # Re-adding is accepted; the event still records the request
            self._emit(EventType.ADMIN_ADDED, admin=identity)
            logger.info(
                f"Admin {'added' if added else 're-confirmed'}: {identity}",
                extra={"caller": caller},
            )
            return added

    def is_admin(self, identity: str) -> bool:
        with self._lock:
            return self._admins.is_admin(identity)

    # --- Listing & purchase -----------------------------------------------------

    def list_item(self, name: str, description: str, price: int, caller: str) -> Item:
        with self._lock:
            validate_listing(name, description, price)
            item = Item(
                id=ItemId(len(self._items) + 1),
                name=name,
                description=description,
                price=Amount(price),
                seller=Identity(caller),
                status=ItemStatus.AVAILABLE,
                created_at=self._clock(),
            )
            self._items.append(item)
            self._user_items.setdefault(item.seller, []).append(item.id)
            self._emit(EventType.ITEM_LISTED, item_id=item.id, seller=item.seller)
            logger.info(
                f"Item {item.id} listed at {item.price}",
                extra={"item_id": item.id, "caller": caller},
            )
            return item.snapshot()

    def purchase_item(self, item_id: int, payment: int, caller: str) -> Order:
        with self._lock:
            item = self._item(item_id)
            validate_purchase(item, payment, caller)
            order = Order(
                id=OrderId(len(self._orders) + 1),
                item_id=item.id,
                buyer=Identity(caller),
                seller=item.seller,
                amount=Amount(payment),
                status=OrderStatus.PENDING,
                created_at=self._clock(),
            )
            item.status = ItemStatus.SOLD
            self._orders.append(order)
            self._escrow_balance += order.amount
            self._emit(
                EventType.ORDER_CREATED,
                order_id=order.id, item_id=item.id,
                buyer=order.buyer, seller=order.seller,
            )
            logger.info(
                f"Order {order.id} created for item {item.id}, {order.amount} in escrow",
                extra={"order_id": order.id, "item_id": item.id, "caller": caller},
            )
            return order.snapshot()

    # --- Order transitions ------------------------------------------------------

    def mark_as_shipped(self, order_id: int, caller: str) -> Order:
        with self._lock:
            order = self._order(order_id)
            require_seller(order, caller)
            require_pending(order, caller)
            apply_transition(order, OrderStatus.SHIPPED)
            self._emit(EventType.ITEM_SHIPPED, order_id=order.id)
            logger.info(
                f"Order {order.id} shipped",
                extra={"order_id": order.id, "caller": caller},
            )
            return order.snapshot()

    def confirm_receipt(self, order_id: int, caller: str) -> Order:
        with self._lock:
            order = self._order(order_id)
            require_buyer(order, caller)
            require_shipped(order, caller)
            previous = apply_transition(order, OrderStatus.DELIVERED)

            def rollback() -> None:
                order.status = previous

            self._pay_out(order, order.seller, rollback)
            self._emit(
                EventType.ORDER_COMPLETED,
                order_id=order.id, seller=order.seller, amount=order.amount,
            )
            logger.info(
                f"Order {order.id} delivered, {order.amount} released to seller",
                extra={"order_id": order.id, "caller": caller, "amount": order.amount},
            )
            return order.snapshot()

    def cancel_order(self, order_id: int, caller: str) -> Order:
        with self._lock:
            order = self._order(order_id)
            require_buyer(order, caller)
            require_pending(order, caller)
            self._refund(order)
            self._emit(
                EventType.ORDER_CANCELLED,
                order_id=order.id, buyer=order.buyer, amount=order.amount,
            )
            logger.info(
                f"Order {order.id} cancelled, {order.amount} refunded to buyer",
                extra={"order_id": order.id, "caller": caller, "amount": order.amount},
            )
            return order.snapshot()

    def raise_dispute(self, order_id: int, caller: str) -> Order:
        with self._lock:
            order = self._order(order_id)
            require_party(order, caller)
            require_shipped(order, caller)
            apply_transition(order, OrderStatus.DISPUTED)
            self._emit(EventType.DISPUTE_RAISED, order_id=order.id, raised_by=caller)
            logger.info(
                f"Dispute raised on order {order.id}",
                extra={"order_id": order.id, "caller": caller},
            )
            return order.snapshot()

    def resolve_dispute(self, order_id: int, favor_buyer: bool, caller: str) -> Order:
        with self._lock:
            order = self._order(order_id)
            require_admin(self._admins, caller)
            require_disputed(order, caller)
            if favor_buyer:
                self._refund(order)
                winner = order.buyer
            else:
                previous = apply_transition(order, OrderStatus.DELIVERED)

                def rollback() -> None:
                    order.status = previous

                self._pay_out(order, order.seller, rollback)
                winner = order.seller
            self._emit(
                EventType.DISPUTE_RESOLVED,
                order_id=order.id, winner=winner, amount=order.amount,
            )
            logger.info(
                f"Dispute on order {order.id} resolved for "
                f"{'buyer' if favor_buyer else 'seller'}",
                extra={"order_id": order.id, "caller": caller, "amount": order.amount},
            )
            return order.snapshot()

    def _refund(self, order: Order) -> None:
        """Cancel the order, re-list its item and return the amount to the buyer."""
        item = self._items[order.item_id - 1]
        previous_status = apply_transition(order, OrderStatus.CANCELLED)
        previous_item_status = item.status
        item.status = ItemStatus.AVAILABLE

        def rollback() -> None:
            order.status = previous_status
            item.status = previous_item_status

        self._pay_out(order, order.buyer, rollback)

    # --- Unsolicited funds ------------------------------------------------------

    def receive_funds(self, sender: str, amount: int) -> None:
        """Accept a payment that arrived outside any purchase."""
        with self._lock:
            validate_amount(amount)
            self._unsolicited_balance += amount
            self._emit(EventType.UNEXPECTED_FUNDS_RECEIVED, sender=sender, amount=amount)
            logger.warning(
                f"Unexpected funds received: {amount}",
                extra={"caller": sender, "amount": amount},
            )

    # --- Queries ----------------------------------------------------------------

    def get_item(self, item_id: int) -> Item:
        with self._lock:
            return self._item(item_id).snapshot()

    def get_order(self, order_id: int) -> Order:
        with self._lock:
            return self._order(order_id).snapshot()

    def get_item_count(self) -> int:
        with self._lock:
            return len(self._items)

    def get_order_count(self) -> int:
        with self._lock:
            return len(self._orders)

    def get_user_items(self, seller: str) -> list[ItemId]:
        with self._lock:
            return list(self._user_items.get(Identity(seller), []))

    @property
    def escrow_balance(self) -> int:
        with self._lock:
            return self._escrow_balance

    @property
    def unsolicited_balance(self) -> int:
        with self._lock:
            return self._unsolicited_balance

    def events(self, since: int = 0) -> list[LedgerEvent]:
        """Audit trail entries with sequence > since, in emission order."""
        with self._lock:
            return self._events[max(since, 0):]
