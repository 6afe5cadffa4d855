"""Order Transition Enforcement — the order state graph and its status guards.

Invariants:
    - ORDER_TRANSITIONS is the single source of truth for legal moves
    - Terminal states (DELIVERED, CANCELLED) have no outgoing edges
    - require_* guards raise the StateError named for the expected status

Design Decisions:
    - Dict-of-sets graph (ADR: same shape as the FSM tables used elsewhere in ops code)
    - apply_transition asserts graph membership: an illegal edge here is a ledger bug,
      not a user error, so it is an assertion rather than a StateError
"""

from app.core.domain_types import OrderStatus
from app.core.errors import (
    ErrorContext, ItemNotShipped, OrderNotInDispute, OrderNotPending,
)
from app.core.ledger_state import Order


ORDER_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.DISPUTED}),
    OrderStatus.DISPUTED: frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_TRANSITIONS[current]


def require_pending(order: Order, caller: str) -> None:
    if order.status != OrderStatus.PENDING:
        raise OrderNotPending(
            order.id, order.status.value,
            ErrorContext(caller=caller, order_id=order.id),
        )


def require_shipped(order: Order, caller: str) -> None:
    if order.status != OrderStatus.SHIPPED:
        raise ItemNotShipped(
            order.id, order.status.value,
            ErrorContext(caller=caller, order_id=order.id),
        )


def require_disputed(order: Order, caller: str) -> None:
    if order.status != OrderStatus.DISPUTED:
        raise OrderNotInDispute(
            order.id, order.status.value,
            ErrorContext(caller=caller, order_id=order.id),
        )


def apply_transition(order: Order, target: OrderStatus) -> OrderStatus:
    """Move order to target. Returns the previous status for rollback."""
    previous = order.status
    assert can_transition(previous, target), (
        f"illegal order transition {previous.value} -> {target.value}"
    )
    order.status = target
    return previous
