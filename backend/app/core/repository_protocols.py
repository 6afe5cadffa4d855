"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - FundTransfer is synchronous: payouts are bounded local operations that
      run inside the ledger lock, so they must not await
    - EventRepository is async because its implementation does DB IO; the ledger
      never calls it — the service layer drains the outbox into it
"""

from typing import Callable, Protocol

from app.core.ledger_state import LedgerEvent


class FundTransfer(Protocol):
    """Contract for moving custodied funds out of the ledger."""
    def transfer(self, recipient: str, amount: int) -> None:
        """Deliver amount to recipient, or raise. Must not partially apply."""
        ...


LedgerEventListener = Callable[[LedgerEvent], None]


class EventRepository(Protocol):
    """Contract for audit-trail persistence — implemented by shell."""
    async def save_all(self, events: list[LedgerEvent]) -> None: ...
    async def list_events(
        self, since: int = 0, limit: int = 100,
    ) -> list[LedgerEvent]: ...
