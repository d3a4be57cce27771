"""Parking schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from parkspot.schemas.slot import SlotSummary


class OpeningHours(BaseModel):
    """Opening hours as HH:MM strings."""

    start: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")
    end: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$")


class ParkingCreate(BaseModel):
    """Schema for creating a parking location with its slots."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1, max_length=512)
    description: str = ""
    banner: Optional[str] = Field(None, max_length=512)
    hours: OpeningHours
    rate_per_hour: Decimal = Field(..., gt=0, alias="ratePerHour")
    total_spots: int = Field(..., gt=0, le=1000, alias="totalSpots")
    tags: List[str] = Field(default_factory=list)


class ParkingSummary(BaseModel):
    """Parking fields embedded in reservation responses."""

    id: UUID
    name: str
    address: str
    rate_per_hour: float

    model_config = {"from_attributes": True}


class ParkingResponse(BaseModel):
    """Schema for parking response."""

    id: UUID
    name: str
    address: str
    description: str
    banner: Optional[str]
    hours_start: str
    hours_end: str
    rate_per_hour: float
    total_spots: int
    available_spots: int
    tags: List[str]
    rating: float
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ParkingDetail(ParkingResponse):
    """Parking with its slots."""

    slots: List[SlotSummary] = []
