"""Listing & Purchase Enforcement — input and precondition checks for items.

Invariants:
    - All functions are PURE: no IO, no mutation
    - validate_purchase checks in a fixed order — first error wins:
      availability, self-purchase, exact payment
    - Payment must equal the price exactly

Design Decisions:
    - bool is rejected as a price/amount even though it subclasses int
"""

from app.core.domain_types import ItemStatus, is_null_identity
from app.core.errors import (
    ErrorContext, IncorrectPayment, InvalidAdmin, InvalidAmount, InvalidDescription,
    InvalidName, ItemNotAvailable, PriceTooLow, SelfPurchase,
)
from app.core.ledger_state import Item


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_listing(name: str, description: str, price: int) -> None:
    """Name and description non-empty, price a positive integer."""
    if not name or not name.strip():
        raise InvalidName()
    if not description or not description.strip():
        raise InvalidDescription()
    if not _is_positive_int(price):
        raise PriceTooLow(price)


def validate_purchase(item: Item, payment: int, caller: str) -> None:
    ctx = ErrorContext(caller=caller, item_id=item.id)
    if item.status != ItemStatus.AVAILABLE:
        raise ItemNotAvailable(item.id, item.status.value, ctx)
    if caller == item.seller:
        raise SelfPurchase(item.id, ctx)
    if isinstance(payment, bool) or payment != item.price:
        raise IncorrectPayment(payment, item.price, ctx)


def validate_admin_candidate(identity: str | None) -> None:
    if is_null_identity(identity):
        raise InvalidAdmin()


def validate_amount(amount: int) -> None:
    if not _is_positive_int(amount):
        raise InvalidAmount(amount)
