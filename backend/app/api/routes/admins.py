"""Admin Routes — grant and inspect admin rights.

Invariants:
    - Only existing admins may add admins (NotAdmin → 403)
    - Re-adding an admin is accepted and returns 200 instead of 201
"""

from fastapi import APIRouter, Depends, Response, status

from app.api.dependencies import get_caller, get_event_repository, get_marketplace
from app.schemas.marketplace import AdminCreate, AdminStatusResponse
from app.services.event_store import SqlEventRepository
from app.services.marketplace_service import MarketplaceService

router = APIRouter(prefix="/api/v1/admins", tags=["admins"])


@router.post(
    "", response_model=AdminStatusResponse, status_code=status.HTTP_201_CREATED,
)
async def add_admin(
    body: AdminCreate,
    response: Response,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    added = await service.add_admin(events, body.identity, caller)
    if not added:
        response.status_code = status.HTTP_200_OK
    return AdminStatusResponse(identity=body.identity, is_admin=True)


@router.get("/{identity}", response_model=AdminStatusResponse)
async def get_admin_status(
    identity: str, service: MarketplaceService = Depends(get_marketplace),
):
    return AdminStatusResponse(
        identity=identity, is_admin=service.ledger.is_admin(identity),
    )
