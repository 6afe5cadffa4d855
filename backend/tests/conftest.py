"""Root conftest — shared test configuration and identities."""

import os

# Ensure tests never touch a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SEED_ADMIN", "owner")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402

from app.core.marketplace_ledger import MarketplaceLedger  # noqa: E402
from app.infrastructure.wallet import InMemoryWallet  # noqa: E402
from tests.identities import BUYER, OWNER, PRICE, SELLER  # noqa: E402


@pytest.fixture
def wallet():
    return InMemoryWallet()


@pytest.fixture
def ledger(wallet):
    return MarketplaceLedger(OWNER, wallet)


@pytest.fixture
def listed(ledger):
    """Ledger with one Available item (id 1) from SELLER."""
    ledger.list_item("Widget", "A widget", PRICE, SELLER)
    return ledger


@pytest.fixture
def purchased(listed):
    """Ledger with order 1 Pending for BUYER."""
    listed.purchase_item(1, PRICE, BUYER)
    return listed


@pytest.fixture
def shipped(purchased):
    purchased.mark_as_shipped(1, SELLER)
    return purchased


@pytest.fixture
def disputed(shipped):
    shipped.raise_dispute(1, BUYER)
    return shipped
