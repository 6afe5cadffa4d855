"""ORM Models — SQLAlchemy declarative models for persisted data.

Invariants:
    - All models inherit from Base (db/base.py)
    - Only the audit trail is persisted; items and orders live in the ledger

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/alembic
"""

from app.models.ledger_event import LedgerEventRecord  # noqa: F401
