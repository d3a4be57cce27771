"""Cross-checks between reservation windows and slot ledgers.

Both records describe the same booking, so any divergence points at a lost
write somewhere.
"""

from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from parkspot.db.models import Reservation, ReservationStatus, Slot
from parkspot.services import ledger

LIVE_STATUSES = (ReservationStatus.UPCOMING.value, ReservationStatus.ACTIVE.value)


@dataclass(frozen=True)
class LedgerDrift:
    kind: str  # 'missing_entry', 'orphan_entry', 'overlap'
    slot_id: UUID
    detail: str
    reservation_id: Optional[UUID] = None


async def find_ledger_drift(session: AsyncSession) -> List[LedgerDrift]:
    result = await session.execute(
        select(Slot).options(selectinload(Slot.timing)).execution_options(populate_existing=True)
    )
    slots = result.scalars().all()
    result = await session.execute(
        select(Reservation)
        .where(Reservation.status.in_(LIVE_STATUSES))
        .execution_options(populate_existing=True)
    )
    live = result.scalars().all()

    drift: List[LedgerDrift] = []
    booked = {(r.slot_id, r.start, r.end, r.user_id) for r in live}
    slots_by_id = {slot.id: slot for slot in slots}

    for reservation in live:
        slot = slots_by_id.get(reservation.slot_id)
        entry = ledger.find_matching(slot, reservation.start, reservation.end) if slot else None
        if entry is None or not entry.is_reserved:
            drift.append(
                LedgerDrift(
                    kind="missing_entry",
                    slot_id=reservation.slot_id,
                    reservation_id=reservation.id,
                    detail=f"{reservation.start} - {reservation.end} not reserved in ledger",
                )
            )

    for slot in slots:
        reserved = [entry for entry in slot.timing if entry.is_reserved]
        for entry in reserved:
            if (slot.id, entry.start, entry.end, entry.reserved_by) not in booked:
                drift.append(
                    LedgerDrift(
                        kind="orphan_entry",
                        slot_id=slot.id,
                        detail=f"{entry.start} - {entry.end} reserved without a live reservation",
                    )
                )
        for index, entry in enumerate(reserved):
            for other in reserved[index + 1 :]:
                if ledger.overlaps(entry.start, entry.end, other):
                    drift.append(
                        LedgerDrift(
                            kind="overlap",
                            slot_id=slot.id,
                            detail=f"{entry.start} - {entry.end} overlaps {other.start} - {other.end}",
                        )
                    )
    return drift
