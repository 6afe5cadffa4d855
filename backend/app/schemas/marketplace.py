"""Marketplace Schemas — Pydantic models for item, order and admin endpoints.

Invariants:
    - Request models check types only; business rules (empty name, price <= 0,
      exact payment) are enforced by the ledger so every client sees the same codes
    - Response models read ledger dataclasses via from_attributes

Design Decisions:
    - Strings are stripped of surrounding whitespace before reaching the ledger
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.domain_types import ItemStatus, OrderStatus


class ItemCreate(BaseModel):
    """Listing request. Empty name/description are rejected by the ledger."""
    name: str = Field(max_length=200)
    description: str = Field(max_length=5_000)
    price: int

    @field_validator("name", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return v.strip()


class PurchaseRequest(BaseModel):
    payment: int


class ResolveDisputeRequest(BaseModel):
    favor_buyer: bool


class AdminCreate(BaseModel):
    identity: str = Field(max_length=100)

    @field_validator("identity")
    @classmethod
    def strip_identity(cls, v: str) -> str:
        return v.strip()


class FundsReceived(BaseModel):
    amount: int


class ItemResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    price: int
    seller: str
    status: ItemStatus
    created_at: datetime


class OrderResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_id: int
    buyer: str
    seller: str
    amount: int
    status: OrderStatus
    created_at: datetime


class CountResponse(BaseModel):
    count: int


class SellerItemsResponse(BaseModel):
    seller: str
    item_ids: list[int]


class AdminStatusResponse(BaseModel):
    identity: str
    is_admin: bool


class EscrowResponse(BaseModel):
    """Custodied funds. escrow_balance covers open orders only."""
    escrow_balance: int
    unsolicited_balance: int
