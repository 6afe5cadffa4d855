"""In-Memory Wallet — payout balances and refusing recipients.

Tests cover:
    - transfer credits the recipient
    - refusing recipients raise FundMovementError and are not credited
    - accept() lifts a refusal
"""

import pytest

from app.core.errors import FundMovementError
from app.infrastructure.wallet import InMemoryWallet


def test_transfer_credits_recipient():
    wallet = InMemoryWallet()
    wallet.transfer("alice", 300)
    wallet.transfer("alice", 200)
    assert wallet.balance_of("alice") == 500
    assert wallet.balance_of("bob") == 0


def test_refusing_recipient_raises():
    wallet = InMemoryWallet(refusing={"alice"})
    with pytest.raises(FundMovementError) as exc_info:
        wallet.transfer("alice", 300)
    assert exc_info.value.recipient == "alice"
    assert exc_info.value.amount == 300
    assert wallet.balance_of("alice") == 0


def test_accept_lifts_refusal():
    wallet = InMemoryWallet()
    wallet.refuse("alice")
    wallet.accept("alice")
    wallet.transfer("alice", 1)
    assert wallet.balance_of("alice") == 1
