"""Core Layer — ledger state machine, guards and error taxonomy. No async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - Guards are pure; only MarketplaceLedger holds state
    - Fund movement reaches the outside world only through the FundTransfer protocol

Design Decisions:
    - Functional core separated from imperative shell (ADR: impureim sandwich)
"""
