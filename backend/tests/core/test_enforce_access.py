"""Access Enforcement — tests for pure authorization guards.

Tests cover:
    - require_admin accepts seed and added admins, rejects others
    - require_seller / require_buyer match exactly one party
    - require_party accepts buyer and seller only
    - raised errors carry caller and order id in their context
"""

from datetime import datetime, timezone

import pytest

from app.core.domain_types import OrderStatus
from app.core.enforce_access import (
    require_admin, require_buyer, require_party, require_seller,
)
from app.core.errors import (
    AuthorizationError, NotAdmin, UnauthorizedBuyer, UnauthorizedDispute,
    UnauthorizedSeller,
)
from app.core.ledger_state import AdminRegistry, Order


def _order() -> Order:
    return Order(
        id=7, item_id=3, buyer="buyer", seller="seller", amount=500,
        status=OrderStatus.SHIPPED, created_at=datetime.now(timezone.utc),
    )


def test_require_admin_accepts_seed():
    require_admin(AdminRegistry("owner"), "owner")


def test_require_admin_accepts_added_admin():
    admins = AdminRegistry("owner")
    admins.add("second")
    require_admin(admins, "second")


def test_require_admin_rejects_stranger():
    with pytest.raises(NotAdmin) as exc_info:
        require_admin(AdminRegistry("owner"), "stranger")
    assert exc_info.value.context.caller == "stranger"
    assert exc_info.value.code == "NOT_ADMIN"


def test_require_seller():
    require_seller(_order(), "seller")
    with pytest.raises(UnauthorizedSeller) as exc_info:
        require_seller(_order(), "buyer")
    assert exc_info.value.context.order_id == 7


def test_require_buyer():
    require_buyer(_order(), "buyer")
    with pytest.raises(UnauthorizedBuyer):
        require_buyer(_order(), "seller")


@pytest.mark.parametrize("caller", ["buyer", "seller"])
def test_require_party_accepts_both_parties(caller):
    require_party(_order(), caller)


def test_require_party_rejects_outsider():
    with pytest.raises(UnauthorizedDispute):
        require_party(_order(), "owner")


def test_all_guards_raise_authorization_errors():
    for guard in (require_seller, require_buyer, require_party):
        with pytest.raises(AuthorizationError):
            guard(_order(), "nobody")
