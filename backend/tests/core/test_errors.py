"""Error Hierarchy — taxonomy membership, codes, HTTP statuses and the REST envelope.

Tests:
    - Every leaf error belongs to exactly the family the taxonomy names
    - Families map to distinct categories and HTTP statuses
    - to_response() carries code, category, severity and context
"""

import pytest

from app.core.errors import (
    AuthorizationError, DatabaseError, ErrorCategory, ErrorContext, ErrorSeverity,
    FundMovementError, IncorrectPayment, InvalidAdmin, InvalidAmount,
    InvalidDescription, InvalidItemId, InvalidName, InvalidOrderId, ItemNotAvailable,
    ItemNotShipped, MarketplaceError, NotAdmin, OrderNotInDispute, OrderNotPending,
    PriceTooLow, SelfPurchase, StateError, UnauthorizedBuyer, UnauthorizedDispute,
    UnauthorizedSeller, ValidationError,
)


@pytest.mark.parametrize("error,family", [
    (NotAdmin("x"), AuthorizationError),
    (UnauthorizedSeller("x"), AuthorizationError),
    (UnauthorizedBuyer("x"), AuthorizationError),
    (UnauthorizedDispute("x"), AuthorizationError),
    (InvalidItemId(9), ValidationError),
    (InvalidOrderId(9), ValidationError),
    (InvalidName(), ValidationError),
    (InvalidDescription(), ValidationError),
    (PriceTooLow(0), ValidationError),
    (InvalidAdmin(), ValidationError),
    (InvalidAmount(0), ValidationError),
    (ItemNotAvailable(1, "sold"), StateError),
    (SelfPurchase(1), StateError),
    (IncorrectPayment(999, 1000), StateError),
    (OrderNotPending(1, "shipped"), StateError),
    (ItemNotShipped(1, "pending"), StateError),
    (OrderNotInDispute(1, "shipped"), StateError),
    (FundMovementError("boom"), FundMovementError),
])
def test_taxonomy(error, family):
    assert isinstance(error, family)
    assert isinstance(error, MarketplaceError)


def test_family_statuses():
    assert NotAdmin("x").http_status == 403
    assert InvalidName().http_status == 400
    assert InvalidItemId(1).http_status == 404
    assert SelfPurchase(1).http_status == 409
    assert FundMovementError("boom").http_status == 502
    assert DatabaseError("down", "execute").http_status == 503


def test_family_categories():
    assert NotAdmin("x").category == ErrorCategory.AUTHORIZATION
    assert InvalidName().category == ErrorCategory.VALIDATION
    assert SelfPurchase(1).category == ErrorCategory.STATE
    assert FundMovementError("boom").category == ErrorCategory.FUND_MOVEMENT
    assert FundMovementError("boom").severity == ErrorSeverity.CRITICAL


def test_to_response_envelope():
    err = OrderNotPending(3, "shipped", ErrorContext(caller="bob", order_id=3))
    body = err.to_response()["error"]
    assert body["code"] == "ORDER_NOT_PENDING"
    assert body["category"] == "state"
    assert body["severity"] == "error"
    assert body["context"]["caller"] == "bob"
    assert body["context"]["order_id"] == 3
    assert "shipped" in body["message"]


def test_incorrect_payment_response_includes_amounts():
    body = IncorrectPayment(999, 1000).to_response()["error"]
    assert body["context"]["sent"] == 999
    assert body["context"]["required"] == 1000


def test_error_codes_are_unique():
    samples = [
        NotAdmin("x"), UnauthorizedSeller("x"), UnauthorizedBuyer("x"),
        UnauthorizedDispute("x"), InvalidItemId(1), InvalidOrderId(1), InvalidName(),
        InvalidDescription(), PriceTooLow(0), InvalidAdmin(), InvalidAmount(0),
        ItemNotAvailable(1, "sold"), SelfPurchase(1), IncorrectPayment(1, 2),
        OrderNotPending(1, "x"), ItemNotShipped(1, "x"), OrderNotInDispute(1, "x"),
        FundMovementError("x"),
    ]
    codes = [e.code for e in samples]
    assert len(codes) == len(set(codes))
