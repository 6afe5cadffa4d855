"""Event Schemas — public shape of the persisted audit trail."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from app.core.domain_types import EventType


class LedgerEventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    sequence: int
    event_type: EventType
    payload: dict
    emitted_at: datetime
