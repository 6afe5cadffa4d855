"""Item Routes — listing, purchase and item lookups.

Invariants:
    - Routes never contain business logic; the ledger validates everything
    - Lookups validate ids exactly like mutations (InvalidItemId → 404)
"""

from fastapi import APIRouter, Depends, status

from app.api.dependencies import get_caller, get_event_repository, get_marketplace
from app.schemas.marketplace import (
    CountResponse, ItemCreate, ItemResponse, OrderResponse, PurchaseRequest,
    SellerItemsResponse,
)
from app.services.event_store import SqlEventRepository
from app.services.marketplace_service import MarketplaceService

router = APIRouter(prefix="/api/v1", tags=["items"])


@router.post(
    "/items", response_model=ItemResponse, status_code=status.HTTP_201_CREATED,
)
async def list_item(
    body: ItemCreate,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    item = await service.list_item(
        events, body.name, body.description, body.price, caller,
    )
    return ItemResponse.model_validate(item)


@router.get("/items/count", response_model=CountResponse)
async def get_item_count(service: MarketplaceService = Depends(get_marketplace)):
    return CountResponse(count=service.ledger.get_item_count())


@router.get("/items/{item_id}", response_model=ItemResponse)
async def get_item(
    item_id: int, service: MarketplaceService = Depends(get_marketplace),
):
    return ItemResponse.model_validate(service.ledger.get_item(item_id))


@router.post(
    "/items/{item_id}/purchase", response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
async def purchase_item(
    item_id: int,
    body: PurchaseRequest,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    order = await service.purchase_item(events, item_id, body.payment, caller)
    return OrderResponse.model_validate(order)


@router.get("/sellers/{seller}/items", response_model=SellerItemsResponse)
async def get_seller_items(
    seller: str, service: MarketplaceService = Depends(get_marketplace),
):
    return SellerItemsResponse(
        seller=seller, item_ids=service.ledger.get_user_items(seller),
    )
