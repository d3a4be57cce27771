"""Database models package."""

from parkspot.db.base import Base
from parkspot.db.models.parking import Parking
from parkspot.db.models.reservation import Reservation, ReservationStatus
from parkspot.db.models.slot import Slot, TimeInterval

__all__ = [
    "Base",
    "Parking",
    "Reservation",
    "ReservationStatus",
    "Slot",
    "TimeInterval",
]
