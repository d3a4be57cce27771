"""Domain exceptions.

Every error raised by the booking core derives from ``ReservationError`` and
carries the HTTP status it maps to, so the API layer can translate it without
knowing each case.
"""

from enum import Enum
from typing import Optional


class RejectionReason(str, Enum):
    """Why the overlap validator refused a window."""

    OVERLAP = "overlap"
    INVALID_RANGE = "invalid_range"
    SLOT_NOT_FOUND = "slot_not_found"


class ReservationError(Exception):
    """Base exception for the booking core."""

    status_code: int = 400
    default_message: str = "Reservation request failed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ReservationError):
    """Raised when inputs fail validation."""

    default_message = "Invalid request"


class InvalidRangeError(ValidationError):
    """Raised when a window does not satisfy start < end."""

    reason = RejectionReason.INVALID_RANGE
    default_message = "Start time must be before end time"


class InvalidPriceError(ValidationError):
    """Raised when a price is missing or not positive."""

    default_message = "Price must be a valid number greater than zero"


class OverlapError(ReservationError):
    """Raised when a reserved ledger entry overlaps the requested window."""

    reason = RejectionReason.OVERLAP
    default_message = "This time slot is already reserved"

    def __init__(self, message: Optional[str] = None, conflict=None):
        super().__init__(message)
        self.conflict = conflict


class NotFoundError(ReservationError):
    """Raised when a referenced record does not exist."""

    status_code = 404
    default_message = "Not found"


class SlotNotFoundError(NotFoundError):
    reason = RejectionReason.SLOT_NOT_FOUND
    default_message = "Slot not found"


class ReservationNotFoundError(NotFoundError):
    default_message = "Reservation not found"


class ForbiddenError(ReservationError):
    """Raised when the requester may not act on a record."""

    status_code = 403
    default_message = "Forbidden"


class AlreadyCompletedError(ReservationError):
    """Raised when cancelling a reservation that has already completed."""

    default_message = "This reservation has already been completed"


class LedgerConflictError(ReservationError):
    """Raised when a slot kept changing underneath a write."""

    status_code = 409
    default_message = "Slot was modified concurrently, please retry"
