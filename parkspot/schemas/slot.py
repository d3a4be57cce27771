"""Slot schemas."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class TimeIntervalResponse(BaseModel):
    """Schema for a ledger entry."""

    id: UUID
    start: datetime
    end: datetime
    is_reserved: bool
    reserved_by: Optional[UUID]

    model_config = {"from_attributes": True}


class SlotSummary(BaseModel):
    """Slot fields embedded in parking and reservation responses."""

    id: UUID
    position: int
    is_available: bool

    model_config = {"from_attributes": True}


class SlotResponse(SlotSummary):
    """Slot with its timing ledger."""

    parking_id: UUID
    timing: List[TimeIntervalResponse]
    updated_at: datetime


class SlotAvailability(BaseModel):
    """Whether a window is free on a slot."""

    slot_id: UUID
    start: datetime
    end: datetime
    available: bool
    conflict: Optional[TimeIntervalResponse] = None
