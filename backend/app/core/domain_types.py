"""Domain Types — rich types that replace bare primitives across the ledger.

Invariants:
    - ItemId and OrderId are sequential ints starting at 1 — never 0
    - Identity is an opaque caller string; ZERO_IDENTITY is never a valid admin
    - Amount is an int in the smallest currency unit — no floats, no Decimal
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (API and event payloads)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

ItemId = NewType("ItemId", int)
OrderId = NewType("OrderId", int)
Identity = NewType("Identity", str)

ZERO_IDENTITY = Identity("0x0000000000000000000000000000000000000000")


# ─── Value Types ─────────────────────────────────────────────────

Amount = NewType("Amount", int)   # smallest currency unit, >= 0


# ─── Enums ───────────────────────────────────────────────────────

class ItemStatus(str, Enum):
    """Item listing states."""
    AVAILABLE = "available"
    SOLD = "sold"
    CANCELLED = "cancelled"


class OrderStatus(str, Enum):
    """Order lifecycle states. DELIVERED and CANCELLED are terminal."""
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    DISPUTED = "disputed"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)

    @property
    def holds_escrow(self) -> bool:
        """Whether an order in this state still has its amount in custody."""
        return not self.is_terminal


class EventType(str, Enum):
    """Audit-trail notifications emitted by the ledger."""
    ITEM_LISTED = "ItemListed"
    ADMIN_ADDED = "AdminAdded"
    ORDER_CREATED = "OrderCreated"
    ITEM_SHIPPED = "ItemShipped"
    ORDER_COMPLETED = "OrderCompleted"
    ORDER_CANCELLED = "OrderCancelled"
    DISPUTE_RAISED = "DisputeRaised"
    DISPUTE_RESOLVED = "DisputeResolved"
    UNEXPECTED_FUNDS_RECEIVED = "UnexpectedFundsReceived"


def is_null_identity(identity: str | None) -> bool:
    """Empty, whitespace-only and the zero address all count as null."""
    if identity is None:
        return True
    stripped = identity.strip()
    return not stripped or stripped.lower() == ZERO_IDENTITY
