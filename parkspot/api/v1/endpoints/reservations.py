"""Reservation endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from parkspot.api.deps import get_current_user, get_db_session, get_slot_locks
from parkspot.config import settings
from parkspot.schemas.reservation import (
    MessageResponse,
    ReservationCreate,
    ReservationDetail,
    ReservationResponse,
)
from parkspot.security import CurrentUser
from parkspot.services import reservations as reservation_service
from parkspot.services.locks import SlotLockRegistry
from parkspot.timeutils import to_utc

router = APIRouter()


@router.post("/", response_model=ReservationResponse, status_code=status.HTTP_201_CREATED)
async def create_reservation(
    data: ReservationCreate,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    locks: SlotLockRegistry = Depends(get_slot_locks),
):
    """Book a slot for a time window."""
    return await reservation_service.create_reservation(
        db,
        locks,
        user_id=user.id,
        slot_id=data.slot_id,
        parking_id=data.parking_id,
        start=to_utc(data.start, settings.NAIVE_INPUT_TIMEZONE),
        end=to_utc(data.end, settings.NAIVE_INPUT_TIMEZONE),
        price=data.price,
    )


@router.get("/user", response_model=List[ReservationDetail])
async def list_my_reservations(
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """List the caller's reservations, newest window first."""
    return await reservation_service.list_user_reservations(db, user.id)


@router.get("/{reservation_id}", response_model=ReservationDetail)
async def get_reservation(
    reservation_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Get a reservation owned by the caller (admins may read any)."""
    return await reservation_service.get_reservation_for(
        db, reservation_id, user.id, is_admin=user.is_admin
    )


@router.delete("/{reservation_id}", response_model=MessageResponse)
async def cancel_reservation(
    reservation_id: UUID,
    user: CurrentUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
    locks: SlotLockRegistry = Depends(get_slot_locks),
):
    """Cancel a reservation and free its window on the slot."""
    await reservation_service.cancel_reservation(db, locks, reservation_id, user.id)
    return MessageResponse(message="Reservation cancelled")
