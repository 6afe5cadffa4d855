"""Access Enforcement — authorization guards run at the top of every ledger operation.

Invariants:
    - All functions are PURE: no IO, no mutation
    - Raise the matching AuthorizationError on violation, return None on success
    - Called before any state check or mutation — authorization failures never
      depend on order status

Design Decisions:
    - Raise (not return error dicts): ledger operations are plain method calls and
      the API layer maps MarketplaceError to responses in one place
"""

from app.core.errors import (
    ErrorContext, NotAdmin, UnauthorizedBuyer, UnauthorizedDispute, UnauthorizedSeller,
)
from app.core.ledger_state import AdminRegistry, Order


def require_admin(admins: AdminRegistry, caller: str) -> None:
    """Rule: admin-only operations (addAdmin, resolveDispute)."""
    if not admins.is_admin(caller):
        raise NotAdmin(caller, ErrorContext(caller=caller))


def require_seller(order: Order, caller: str) -> None:
    """Rule: only the order's seller may mark it shipped."""
    if caller != order.seller:
        raise UnauthorizedSeller(
            caller, ErrorContext(caller=caller, order_id=order.id),
        )


def require_buyer(order: Order, caller: str) -> None:
    """Rule: only the order's buyer may confirm receipt or cancel."""
    if caller != order.buyer:
        raise UnauthorizedBuyer(
            caller, ErrorContext(caller=caller, order_id=order.id),
        )


def require_party(order: Order, caller: str) -> None:
    """Rule: either party to the order may raise a dispute."""
    if caller not in (order.buyer, order.seller):
        raise UnauthorizedDispute(
            caller, ErrorContext(caller=caller, order_id=order.id),
        )
