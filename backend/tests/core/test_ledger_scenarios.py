"""Ledger Scenarios — end-to-end flows through the escrow lifecycle.

Tests cover:
    - list → purchase → ship → confirm pays the seller
    - purchase → cancel refunds the buyer and re-lists the item
    - underpayment and self-purchase leave no trace
    - dispute → resolve pays exactly one party
    - the emitted event sequence for a full happy path
"""

import pytest

from app.core.domain_types import EventType, ItemStatus, OrderStatus
from app.core.errors import IncorrectPayment, SelfPurchase
from tests.identities import BUYER, OWNER, SELLER


def test_happy_path_releases_funds_to_seller(ledger, wallet):
    item = ledger.list_item("Widget", "A widget", 1000, SELLER)
    assert item.id == 1
    assert item.status == ItemStatus.AVAILABLE

    order = ledger.purchase_item(1, 1000, BUYER)
    assert order.id == 1
    assert ledger.get_item(1).status == ItemStatus.SOLD
    assert order.status == OrderStatus.PENDING

    assert ledger.mark_as_shipped(1, SELLER).status == OrderStatus.SHIPPED
    assert ledger.confirm_receipt(1, BUYER).status == OrderStatus.DELIVERED
    assert wallet.balance_of(SELLER) == 1000
    assert ledger.escrow_balance == 0


def test_cancel_before_shipping_refunds_buyer(ledger, wallet):
    ledger.list_item("Widget", "A widget", 1000, SELLER)
    ledger.purchase_item(1, 1000, BUYER)

    order = ledger.cancel_order(1, BUYER)

    assert order.status == OrderStatus.CANCELLED
    assert ledger.get_item(1).status == ItemStatus.AVAILABLE
    assert wallet.balance_of(BUYER) == 1000


def test_underpayment_creates_nothing(ledger):
    ledger.list_item("Widget", "A widget", 1000, SELLER)
    events_before = ledger.events()

    with pytest.raises(IncorrectPayment) as exc_info:
        ledger.purchase_item(1, 999, BUYER)

    assert (exc_info.value.sent, exc_info.value.required) == (999, 1000)
    assert ledger.get_order_count() == 0
    assert ledger.get_item(1).status == ItemStatus.AVAILABLE
    assert ledger.events() == events_before


def test_seller_cannot_buy_own_item(ledger):
    ledger.list_item("Widget", "A widget", 1000, SELLER)
    events_before = ledger.events()

    with pytest.raises(SelfPurchase):
        ledger.purchase_item(1, 1000, SELLER)

    assert ledger.get_order_count() == 0
    assert ledger.get_item(1).status == ItemStatus.AVAILABLE
    assert ledger.events() == events_before


@pytest.mark.parametrize("favor_buyer,winner,loser", [
    (True, BUYER, SELLER),
    (False, SELLER, BUYER),
])
def test_dispute_pays_exactly_one_party(disputed, wallet, favor_buyer, winner, loser):
    order = disputed.resolve_dispute(1, favor_buyer, OWNER)
    assert order.status.is_terminal
    assert wallet.balance_of(winner) == order.amount
    assert wallet.balance_of(loser) == 0
    assert disputed.escrow_balance == 0


def test_event_trail_for_full_lifecycle(ledger):
    ledger.list_item("Widget", "A widget", 1000, SELLER)
    ledger.purchase_item(1, 1000, BUYER)
    ledger.mark_as_shipped(1, SELLER)
    ledger.confirm_receipt(1, BUYER)

    assert [e.event_type for e in ledger.events()] == [
        EventType.ITEM_LISTED,
        EventType.ORDER_CREATED,
        EventType.ITEM_SHIPPED,
        EventType.ORDER_COMPLETED,
    ]


def test_unsolicited_funds_do_not_touch_escrow(purchased):
    purchased.receive_funds(BUYER, 500)
    assert purchased.escrow_balance == 1000
    assert purchased.unsolicited_balance == 500
    event = purchased.events()[-1]
    assert event.event_type == EventType.UNEXPECTED_FUNDS_RECEIVED
    assert event.payload == {"sender": BUYER, "amount": 500}


def test_listeners_receive_committed_events_in_order(ledger):
    seen = []
    ledger.subscribe(seen.append)
    ledger.list_item("Widget", "A widget", 1000, SELLER)
    ledger.purchase_item(1, 1000, BUYER)
    assert [e.sequence for e in seen] == [1, 2]
    assert seen == ledger.events()
