"""Status reconciliation loop.

A fixed-interval sweep that moves reservations through
``upcoming -> active -> completed`` and keeps slot ledgers and availability
flags in line with the current time. Every tick recomputes from persisted
state, so a restart needs no recovery step.
"""

import asyncio
import logging
from collections import defaultdict, deque
from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import selectinload

from parkspot.db.models import Reservation, ReservationStatus, Slot
from parkspot.services import ledger
from parkspot.services.locks import SlotLockRegistry
from parkspot.timeutils import Clock, utcnow

logger = logging.getLogger(__name__)


@dataclass
class TickReport:
    """Counters for one reconciliation tick."""

    now: datetime
    activated: int = 0
    completed: int = 0
    slots_updated: int = 0
    skipped: int = 0

    def as_dict(self) -> dict:
        data = asdict(self)
        data["now"] = self.now.isoformat()
        return data


@dataclass
class SlotOutcome:
    activated: int = 0
    completed: int = 0
    slot_changed: bool = False

    @property
    def changed(self) -> bool:
        return self.slot_changed or self.activated > 0 or self.completed > 0


def reconcile_slot(slot: Slot, reservations: Iterable[Reservation], now: datetime) -> SlotOutcome:
    """Advance the reservations of one slot to ``now`` in memory.

    Completed and cancelled reservations are left alone, so running this twice
    with the same ``now`` changes nothing the second time.
    """
    outcome = SlotOutcome()

    for reservation in reservations:
        if reservation.status == ReservationStatus.UPCOMING.value and reservation.start <= now:
            reservation.status = ReservationStatus.ACTIVE.value
            outcome.activated += 1
            logger.debug("Reservation %s is now active", reservation.id)
            if now < reservation.end:
                entry = ledger.find_matching(slot, reservation.start, reservation.end)
                if entry is None:
                    logger.warning(
                        "Reservation %s has no ledger entry on slot %s", reservation.id, slot.id
                    )
                elif not entry.is_reserved or entry.reserved_by != reservation.user_id:
                    entry.is_reserved = True
                    entry.reserved_by = reservation.user_id
                    outcome.slot_changed = True

        if reservation.status == ReservationStatus.ACTIVE.value and now >= reservation.end:
            reservation.status = ReservationStatus.COMPLETED.value
            outcome.completed += 1
            logger.debug("Reservation %s is now completed", reservation.id)
            if ledger.release_elapsed(slot, now):
                outcome.slot_changed = True

    if ledger.sync_availability(slot, now):
        outcome.slot_changed = True
    if outcome.slot_changed:
        ledger.touch(slot, now)
    return outcome


class ReservationReconciler:
    """Owns the recurring sweep.

    ``clock`` is injectable so tests can step time; ``start``/``stop`` manage
    the background task explicitly.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker,
        locks: Optional[SlotLockRegistry] = None,
        clock: Clock = utcnow,
        interval: float = 15.0,
    ):
        self._session_factory = session_factory
        self._locks = locks or SlotLockRegistry()
        self._clock = clock
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self.last_report: Optional[TickReport] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.is_running:
            return
        logger.info("Starting reservation reconciler (every %ss)", self.interval)
        self._task = asyncio.create_task(self._run(), name="reservation-reconciler")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Reservation reconciler stopped")

    async def _run(self) -> None:
        while True:
            try:
                await self.tick()
            except Exception:
                logger.exception("Reconciliation tick failed; retrying next tick")
            await asyncio.sleep(self.interval)

    async def _load(
        self, session: AsyncSession, slot_ids: Optional[Iterable[UUID]] = None
    ) -> Tuple[Dict[UUID, List[Reservation]], Dict[UUID, Slot]]:
        query = select(Reservation).order_by(Reservation.start)
        if slot_ids is not None:
            query = query.where(Reservation.slot_id.in_(list(slot_ids)))
        result = await session.execute(query.execution_options(populate_existing=True))
        by_slot: Dict[UUID, List[Reservation]] = defaultdict(list)
        for reservation in result.scalars().all():
            by_slot[reservation.slot_id].append(reservation)

        slots: Dict[UUID, Slot] = {}
        if by_slot:
            result = await session.execute(
                select(Slot)
                .where(Slot.id.in_(list(by_slot)))
                .options(selectinload(Slot.timing))
                .execution_options(populate_existing=True)
            )
            slots = {slot.id: slot for slot in result.scalars().all()}
        return by_slot, slots

    async def tick(self) -> TickReport:
        """Run one sweep over every reservation."""
        now = self._clock()
        report = TickReport(now=now)

        async with self._session_factory() as session:
            by_slot, slots = await self._load(session)
            pending = deque(by_slot)

            while pending:
                slot_id = pending.popleft()
                group = by_slot.get(slot_id, [])
                slot = slots.get(slot_id)
                if slot is None:
                    for reservation in group:
                        logger.error(
                            "Slot %s not found for reservation %s", slot_id, reservation.id
                        )
                    report.skipped += len(group)
                    continue

                async with self._locks.hold(slot_id):
                    try:
                        outcome = reconcile_slot(slot, group, now)
                        if outcome.changed:
                            await session.commit()
                    except Exception:
                        logger.exception("Failed to reconcile slot %s; skipping", slot_id)
                        await session.rollback()
                        report.skipped += len(group)
                        if pending:
                            by_slot, slots = await self._load(session, pending)
                        continue

                report.activated += outcome.activated
                report.completed += outcome.completed
                if outcome.slot_changed:
                    report.slots_updated += 1

        self.last_report = report
        logger.info(
            "Reconciled at %s: %d activated, %d completed, %d slots updated, %d skipped",
            now.isoformat(),
            report.activated,
            report.completed,
            report.slots_updated,
            report.skipped,
        )
        return report
