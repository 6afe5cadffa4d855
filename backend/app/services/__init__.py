"""Service Layer — imperative shell that wires the ledger to IO.

Invariants:
    - Services may import from core/, models/, infrastructure/
    - Services never import from api/

Design Decisions:
    - Ledger stays synchronous; async lives only here and in api/
"""
