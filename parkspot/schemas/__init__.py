"""Schemas package."""

from parkspot.schemas.parking import ParkingCreate, ParkingDetail, ParkingResponse, ParkingSummary
from parkspot.schemas.reservation import (
    MessageResponse,
    ReservationCreate,
    ReservationDetail,
    ReservationResponse,
)
from parkspot.schemas.slot import SlotAvailability, SlotResponse, SlotSummary, TimeIntervalResponse

__all__ = [
    "MessageResponse",
    "ParkingCreate",
    "ParkingDetail",
    "ParkingResponse",
    "ParkingSummary",
    "ReservationCreate",
    "ReservationDetail",
    "ReservationResponse",
    "SlotAvailability",
    "SlotResponse",
    "SlotSummary",
    "TimeIntervalResponse",
]
