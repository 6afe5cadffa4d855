"""API Dependencies — caller identity, marketplace service and event repository.

Invariants:
    - Every mutating route identifies its caller via the X-Caller-Identity header
    - The caller is stripped; a blank result is rejected as a validation error
    - Exactly one MarketplaceService per process (init_marketplace in lifespan)

Design Decisions:
    - Module-level service instead of app.state: mirrors db_manager, and tests swap
      it through app.dependency_overrides without running the lifespan
    - Header identity is trusted as-is; authentication belongs to the gateway
"""

from fastapi import Depends, Header
from fastapi.exceptions import RequestValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database import get_db
from app.services.event_store import SqlEventRepository
from app.services.marketplace_service import MarketplaceService

_service: MarketplaceService | None = None


def init_marketplace(seed_admin: str) -> MarketplaceService:
    global _service
    _service = MarketplaceService(seed_admin)
    return _service


def get_marketplace() -> MarketplaceService:
    if not _service:
        raise RuntimeError("Marketplace not initialized")
    return _service


async def get_event_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlEventRepository:
    return SqlEventRepository(db)


def get_caller(
    x_caller_identity: str = Header(min_length=1, max_length=100),
) -> str:
    caller = x_caller_identity.strip()
    if not caller:
        raise RequestValidationError([{
            "loc": ("header", "x-caller-identity"),
            "msg": "Caller identity cannot be blank",
            "type": "value_error",
        }])
    return caller
