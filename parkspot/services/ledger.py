"""Slot timing ledger and the overlap validator.

The ledger is the list of ``TimeInterval`` rows on a slot. Reserved entries
never overlap; released entries stay behind as history.
"""

import logging
from datetime import datetime
from typing import Iterable, List, Optional
from uuid import UUID

from parkspot.db.models import Slot, TimeInterval
from parkspot.exceptions import InvalidRangeError, OverlapError, SlotNotFoundError
from parkspot.timeutils import utcnow

logger = logging.getLogger(__name__)


def validate_window(start: datetime, end: datetime) -> None:
    if start >= end:
        raise InvalidRangeError()


def overlaps(start: datetime, end: datetime, entry: TimeInterval) -> bool:
    """Half-open overlap test; windows that only touch do not overlap."""
    return start < entry.end and end > entry.start


def find_conflict(
    timing: Iterable[TimeInterval], start: datetime, end: datetime
) -> Optional[TimeInterval]:
    for entry in timing:
        if entry.is_reserved and overlaps(start, end, entry):
            return entry
    return None


def touch(slot: Slot, now: Optional[datetime] = None) -> None:
    """Force an UPDATE of the slot row so its version is checked and bumped."""
    slot.updated_at = now or utcnow()


def try_reserve(
    slot: Optional[Slot], start: datetime, end: datetime, user_id: UUID
) -> TimeInterval:
    """Append a reserved entry for ``[start, end)`` or raise.

    Raises ``SlotNotFoundError``, ``InvalidRangeError`` or ``OverlapError``;
    the slot is left untouched on every rejection.
    """
    if slot is None:
        raise SlotNotFoundError()
    validate_window(start, end)

    conflict = find_conflict(slot.timing, start, end)
    if conflict is not None:
        logger.info(
            "Rejected %s - %s on slot %s: overlaps %s - %s",
            start,
            end,
            slot.id,
            conflict.start,
            conflict.end,
        )
        raise OverlapError(conflict=conflict)

    entry = TimeInterval(start=start, end=end, is_reserved=True, reserved_by=user_id)
    slot.timing.append(entry)
    touch(slot)
    return entry


def find_matching(slot: Slot, start: datetime, end: datetime) -> Optional[TimeInterval]:
    """Entry with exactly these bounds, preferring a reserved one."""
    matches = [entry for entry in slot.timing if entry.start == start and entry.end == end]
    for entry in matches:
        if entry.is_reserved:
            return entry
    return matches[0] if matches else None


def release(entry: TimeInterval) -> bool:
    if not entry.is_reserved:
        return False
    entry.is_reserved = False
    entry.reserved_by = None
    return True


def release_matching(slot: Slot, start: datetime, end: datetime) -> Optional[TimeInterval]:
    """Free the entry booked for exactly ``[start, end)``; return it if one changed."""
    entry = find_matching(slot, start, end)
    if entry is None:
        logger.warning("No ledger entry %s - %s on slot %s", start, end, slot.id)
        return None
    return entry if release(entry) else None


def release_elapsed(slot: Slot, now: datetime) -> List[TimeInterval]:
    released = [entry for entry in slot.timing if entry.end <= now and release(entry)]
    return released


def is_occupied(slot: Slot, now: datetime) -> bool:
    return any(entry.is_reserved and entry.contains(now) for entry in slot.timing)


def sync_availability(slot: Slot, now: datetime) -> bool:
    """Set ``is_available`` from the ledger; return whether it changed."""
    available = not is_occupied(slot, now)
    if slot.is_available == available:
        return False
    slot.is_available = available
    return True
