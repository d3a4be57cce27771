"""Reservation schemas."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from parkspot.schemas.parking import ParkingSummary
from parkspot.schemas.slot import SlotSummary


class ReservationCreate(BaseModel):
    """Booking request.

    Range and price are checked by the booking service so that they come back
    as 400 with a message rather than a schema error.
    """

    model_config = ConfigDict(populate_by_name=True)

    slot_id: UUID = Field(..., alias="slotId")
    parking_id: UUID = Field(..., alias="parkingId")
    start: datetime
    end: datetime
    price: Decimal


class ReservationResponse(BaseModel):
    """Schema for reservation response."""

    id: UUID
    user_id: UUID
    slot_id: UUID
    parking_id: UUID
    start: datetime
    end: datetime
    status: str
    price: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ReservationDetail(ReservationResponse):
    """Reservation with slot and parking summaries."""

    slot: Optional[SlotSummary] = None
    parking: Optional[ParkingSummary] = None


class MessageResponse(BaseModel):
    message: str
