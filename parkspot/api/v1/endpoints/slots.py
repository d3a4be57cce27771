"""Slot endpoints."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from parkspot.api.deps import get_db_session
from parkspot.config import settings
from parkspot.db.models import Slot
from parkspot.schemas.slot import SlotAvailability, SlotResponse
from parkspot.services import ledger
from parkspot.timeutils import to_utc

router = APIRouter()


async def _get_slot_or_404(db: AsyncSession, slot_id: UUID) -> Slot:
    result = await db.execute(
        select(Slot).where(Slot.id == slot_id).execution_options(populate_existing=True)
    )
    slot = result.scalar_one_or_none()

    if not slot:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Slot with id {slot_id} not found",
        )
    return slot


@router.get("/", response_model=List[SlotResponse])
async def list_slots(
    parking_id: Optional[UUID] = Query(None, description="Filter by parking ID"),
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db_session),
):
    """List slots, optionally filtered by parking."""
    query = select(Slot).offset(skip).limit(limit).order_by(Slot.parking_id, Slot.position)

    if parking_id:
        query = query.where(Slot.parking_id == parking_id)

    result = await db.execute(query.execution_options(populate_existing=True))
    return result.scalars().all()


@router.get("/{slot_id}", response_model=SlotResponse)
async def get_slot(
    slot_id: UUID,
    db: AsyncSession = Depends(get_db_session),
):
    """Get a slot with its timing ledger."""
    return await _get_slot_or_404(db, slot_id)


@router.get("/{slot_id}/availability", response_model=SlotAvailability)
async def check_availability(
    slot_id: UUID,
    start: datetime = Query(..., description="Window start"),
    end: datetime = Query(..., description="Window end"),
    db: AsyncSession = Depends(get_db_session),
):
    """Check whether a window is free on a slot without booking it."""
    slot = await _get_slot_or_404(db, slot_id)
    start = to_utc(start, settings.NAIVE_INPUT_TIMEZONE)
    end = to_utc(end, settings.NAIVE_INPUT_TIMEZONE)
    ledger.validate_window(start, end)

    conflict = ledger.find_conflict(slot.timing, start, end)
    return SlotAvailability(
        slot_id=slot.id,
        start=start,
        end=end,
        available=conflict is None,
        conflict=conflict,
    )
