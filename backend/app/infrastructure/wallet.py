"""In-Memory Wallet — FundTransfer implementation used by the API process and tests.

Invariants:
    - transfer() either credits the full amount or raises FundMovementError
    - Identities in `refusing` reject every incoming transfer
    - balances only ever grow through transfer(); nothing debits them here

Design Decisions:
    - Refusing recipients model a payee that cannot accept funds (closed account,
      contract without a receive hook) so rollback paths are exercisable end-to-end
"""

import logging
import threading
from collections import defaultdict

from app.core.errors import ErrorContext, FundMovementError

logger = logging.getLogger(__name__)


class InMemoryWallet:
    """Per-identity payout balances."""

    def __init__(self, refusing: set[str] | None = None):
        self._lock = threading.Lock()
        self._balances: dict[str, int] = defaultdict(int)
        self._refusing: set[str] = set(refusing or ())

    def transfer(self, recipient: str, amount: int) -> None:
        with self._lock:
            if recipient in self._refusing:
                logger.warning(
                    f"Transfer of {amount} refused by recipient",
                    extra={"caller": recipient, "amount": amount},
                )
                raise FundMovementError(
                    f"Recipient '{recipient}' refused transfer of {amount}",
                    recipient=recipient, amount=amount,
                    context=ErrorContext(caller=recipient),
                )
            self._balances[recipient] += amount

    def balance_of(self, identity: str) -> int:
        with self._lock:
            return self._balances.get(identity, 0)

    def refuse(self, identity: str) -> None:
        with self._lock:
            self._refusing.add(identity)

    def accept(self, identity: str) -> None:
        with self._lock:
            self._refusing.discard(identity)
