"""Infrastructure Layer — database, logging and payout wallet.

Invariants:
    - Infrastructure depends on core/ only for errors and protocols
    - Failures surface as MarketplaceError subclasses (DatabaseError, FundMovementError)

Design Decisions:
    - Thin wrappers over raw clients: one concern per module
"""
