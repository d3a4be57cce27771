"""Reservation lifecycle: booking, cancellation and lookups."""

import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Awaitable, Callable, List, Optional, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.orm.exc import StaleDataError

from parkspot.config import settings
from parkspot.db.models import Reservation, ReservationStatus, Slot
from parkspot.exceptions import (
    AlreadyCompletedError,
    ForbiddenError,
    InvalidPriceError,
    LedgerConflictError,
    ReservationNotFoundError,
    SlotNotFoundError,
    ValidationError,
)
from parkspot.services import ledger
from parkspot.services.locks import SlotLockRegistry
from parkspot.timeutils import Clock, utcnow

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Matches the Numeric(10, 2) price column
PRICE_STEP = Decimal("0.01")
PRICE_LIMIT = Decimal("100000000")


def validate_price(price) -> Decimal:
    try:
        value = Decimal(str(price))
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidPriceError() from exc
    if not value.is_finite() or value <= 0:
        raise InvalidPriceError()
    if value >= PRICE_LIMIT or value != value.quantize(PRICE_STEP):
        raise InvalidPriceError("Price must have at most 2 decimal places and be below 100000000")
    return value.quantize(PRICE_STEP)


async def load_slot(session: AsyncSession, slot_id: UUID) -> Optional[Slot]:
    """Fetch a slot with its ledger, discarding any stale identity-map copy."""
    result = await session.execute(
        select(Slot)
        .where(Slot.id == slot_id)
        .options(selectinload(Slot.timing))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def _write_slot(
    session: AsyncSession,
    locks: SlotLockRegistry,
    slot_id: UUID,
    mutate: Callable[[], Awaitable[T]],
    max_attempts: Optional[int] = None,
) -> T:
    """Run ``mutate`` and commit under the slot lock, retrying stale writes.

    ``mutate`` must re-read whatever it needs; a retry starts from a rolled
    back session.
    """
    attempts = max_attempts or settings.BOOKING_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        async with locks.hold(slot_id):
            try:
                result = await mutate()
                await session.commit()
                return result
            except StaleDataError:
                await session.rollback()
                logger.warning(
                    "Stale write on slot %s (attempt %d/%d)", slot_id, attempt, attempts
                )
            except Exception:
                await session.rollback()
                raise
    raise LedgerConflictError()


async def create_reservation(
    session: AsyncSession,
    locks: SlotLockRegistry,
    *,
    user_id: UUID,
    slot_id: UUID,
    parking_id: UUID,
    start: datetime,
    end: datetime,
    price,
) -> Reservation:
    """Book ``[start, end)`` on a slot and record the reservation.

    The ledger append and the reservation insert are committed together, so a
    failure leaves neither behind.
    """
    amount = validate_price(price)
    ledger.validate_window(start, end)

    async def book() -> Reservation:
        slot = await load_slot(session, slot_id)
        if slot is None:
            raise SlotNotFoundError()
        if slot.parking_id != parking_id:
            raise ValidationError("Slot does not belong to this parking")

        ledger.try_reserve(slot, start, end, user_id)
        reservation = Reservation(
            user_id=user_id,
            slot_id=slot.id,
            parking_id=parking_id,
            start=start,
            end=end,
            price=amount,
            status=ReservationStatus.UPCOMING.value,
        )
        session.add(reservation)
        return reservation

    reservation = await _write_slot(session, locks, slot_id, book)
    logger.info(
        "Reservation %s booked slot %s for %s - %s",
        reservation.id,
        slot_id,
        start,
        end,
    )
    return reservation


async def get_reservation(
    session: AsyncSession, reservation_id: UUID, *, populate: bool = False
) -> Optional[Reservation]:
    query = select(Reservation).where(Reservation.id == reservation_id)
    if populate:
        query = query.options(selectinload(Reservation.slot), selectinload(Reservation.parking))
    result = await session.execute(query.execution_options(populate_existing=True))
    return result.scalar_one_or_none()


async def get_reservation_for(
    session: AsyncSession, reservation_id: UUID, user_id: UUID, is_admin: bool = False
) -> Reservation:
    reservation = await get_reservation(session, reservation_id, populate=True)
    if reservation is None:
        raise ReservationNotFoundError()
    if reservation.user_id != user_id and not is_admin:
        raise ForbiddenError()
    return reservation


async def list_user_reservations(session: AsyncSession, user_id: UUID) -> List[Reservation]:
    result = await session.execute(
        select(Reservation)
        .where(Reservation.user_id == user_id)
        .options(selectinload(Reservation.slot), selectinload(Reservation.parking))
        .order_by(Reservation.start.desc())
    )
    return list(result.scalars().all())


async def cancel_reservation(
    session: AsyncSession,
    locks: SlotLockRegistry,
    reservation_id: UUID,
    user_id: UUID,
    clock: Clock = utcnow,
) -> Reservation:
    """Cancel a reservation and free its ledger entry.

    Allowed before or during the window. Cancelling twice is a no-op.
    """
    reservation = await get_reservation(session, reservation_id)
    if reservation is None:
        raise ReservationNotFoundError()
    if reservation.user_id != user_id:
        raise ForbiddenError()
    slot_id = reservation.slot_id

    async def cancel() -> Reservation:
        current = await get_reservation(session, reservation_id)
        if current is None:
            raise ReservationNotFoundError()
        if current.status == ReservationStatus.COMPLETED.value:
            raise AlreadyCompletedError()
        if current.status == ReservationStatus.CANCELLED.value:
            return current

        slot = await load_slot(session, slot_id)
        if slot is None:
            raise SlotNotFoundError()

        now = clock()
        released = ledger.release_matching(slot, current.start, current.end)
        availability_changed = ledger.sync_availability(slot, now)
        if released is not None or availability_changed:
            ledger.touch(slot, now)
        current.status = ReservationStatus.CANCELLED.value
        return current

    reservation = await _write_slot(session, locks, slot_id, cancel)
    logger.info("Reservation %s cancelled by %s", reservation_id, user_id)
    return reservation
