"""Order Routes — one endpoint per order transition plus lookups.

Invariants:
    - Each transition endpoint maps 1:1 to a ledger operation
    - Caller identity always comes from the X-Caller-Identity header
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_caller, get_event_repository, get_marketplace
from app.schemas.marketplace import CountResponse, OrderResponse, ResolveDisputeRequest
from app.services.event_store import SqlEventRepository
from app.services.marketplace_service import MarketplaceService

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.get("/count", response_model=CountResponse)
async def get_order_count(service: MarketplaceService = Depends(get_marketplace)):
    return CountResponse(count=service.ledger.get_order_count())


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int, service: MarketplaceService = Depends(get_marketplace),
):
    return OrderResponse.model_validate(service.ledger.get_order(order_id))


@router.post("/{order_id}/ship", response_model=OrderResponse)
async def mark_as_shipped(
    order_id: int,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    order = await service.mark_as_shipped(events, order_id, caller)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/confirm", response_model=OrderResponse)
async def confirm_receipt(
    order_id: int,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    order = await service.confirm_receipt(events, order_id, caller)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: int,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    order = await service.cancel_order(events, order_id, caller)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/dispute", response_model=OrderResponse)
async def raise_dispute(
    order_id: int,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    order = await service.raise_dispute(events, order_id, caller)
    return OrderResponse.model_validate(order)


@router.post("/{order_id}/resolve", response_model=OrderResponse)
async def resolve_dispute(
    order_id: int,
    body: ResolveDisputeRequest,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    order = await service.resolve_dispute(events, order_id, body.favor_buyer, caller)
    return OrderResponse.model_validate(order)
