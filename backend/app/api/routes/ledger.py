"""Ledger Routes — custody balances, unsolicited funds and the audit trail.

Invariants:
    - GET /events reads the persisted trail, not the in-memory one
    - Unsolicited funds never change escrow_balance
"""

from fastapi import APIRouter, Depends, Query, status

from app.api.dependencies import get_caller, get_event_repository, get_marketplace
from app.schemas.events import LedgerEventResponse
from app.schemas.marketplace import EscrowResponse, FundsReceived
from app.services.event_store import SqlEventRepository
from app.services.marketplace_service import MarketplaceService

router = APIRouter(prefix="/api/v1", tags=["ledger"])


@router.get("/escrow", response_model=EscrowResponse)
async def get_escrow(service: MarketplaceService = Depends(get_marketplace)):
    return EscrowResponse(
        escrow_balance=service.ledger.escrow_balance,
        unsolicited_balance=service.ledger.unsolicited_balance,
    )


@router.post(
    "/funds/unsolicited", response_model=EscrowResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
async def receive_funds(
    body: FundsReceived,
    caller: str = Depends(get_caller),
    service: MarketplaceService = Depends(get_marketplace),
    events: SqlEventRepository = Depends(get_event_repository),
):
    await service.receive_funds(events, caller, body.amount)
    return EscrowResponse(
        escrow_balance=service.ledger.escrow_balance,
        unsolicited_balance=service.ledger.unsolicited_balance,
    )


@router.get("/events", response_model=list[LedgerEventResponse])
async def list_events(
    since: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    events: SqlEventRepository = Depends(get_event_repository),
):
    return [
        LedgerEventResponse.model_validate(e)
        for e in await events.list_events(since=since, limit=limit)
    ]
