"""Ledger State — in-memory records owned by the marketplace ledger.

Invariants:
    - Item/Order ids are assigned by the ledger, sequentially from 1
    - Order.amount and Order.seller are fixed at creation
    - AdminRegistry only grows; there is no removal method
    - LedgerEvent is frozen — the audit trail is append-only

Design Decisions:
    - In-memory dataclasses, not ORM (ADR: ledger is the single authority; DB only
      stores the audit trail)
    - Queries hand out copies (snapshot()) so callers never mutate ledger state
"""

from dataclasses import dataclass, field, replace
from datetime import datetime

from app.core.domain_types import (
    Amount, EventType, Identity, ItemId, ItemStatus, OrderId, OrderStatus,
)


@dataclass
class Item:
    """A listed item."""

    id: ItemId
    name: str
    description: str
    price: Amount
    seller: Identity
    status: ItemStatus
    created_at: datetime

    def snapshot(self) -> "Item":
        return replace(self)


@dataclass
class Order:
    """An escrow-backed purchase of one item."""

    id: OrderId
    item_id: ItemId
    buyer: Identity
    seller: Identity
    amount: Amount
    status: OrderStatus
    created_at: datetime

    def snapshot(self) -> "Order":
        return replace(self)


@dataclass
class AdminRegistry:
    """Lifecycle-scoped admin set, seeded with one identity at construction."""

    seed_admin: Identity
    _admins: set[Identity] = field(default_factory=set, repr=False)

    def __post_init__(self) -> None:
        self._admins.add(self.seed_admin)

    def is_admin(self, identity: str) -> bool:
        return identity in self._admins

    def add(self, identity: Identity) -> bool:
        """Grant admin. Returns False when the identity already was one."""
        if identity in self._admins:
            return False
        self._admins.add(identity)
        return True

    @property
    def members(self) -> frozenset[Identity]:
        return frozenset(self._admins)


@dataclass(frozen=True)
class LedgerEvent:
    """One audit-trail notification, in emission order."""

    sequence: int
    event_type: EventType
    payload: dict
    emitted_at: datetime

    def to_dict(self) -> dict:
        return {
            "sequence": self.sequence,
            "event_type": self.event_type.value,
            "payload": dict(self.payload),
            "emitted_at": self.emitted_at.isoformat(),
        }
