"""Parking endpoints."""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from parkspot.api.deps import get_admin_user, get_db_session
from parkspot.db.models import Parking, Slot
from parkspot.schemas.parking import ParkingCreate, ParkingDetail, ParkingResponse
from parkspot.schemas.reservation import MessageResponse
from parkspot.security import CurrentUser

router = APIRouter()


async def _get_parking_or_404(db: AsyncSession, parking_id: UUID, with_slots: bool = False):
    query = select(Parking).where(Parking.id == parking_id)
    if with_slots:
        query = query.options(selectinload(Parking.slots))
    result = await db.execute(query)
    parking = result.scalar_one_or_none()

    if not parking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Parking with id {parking_id} not found",
        )
    return parking


@router.post("/", response_model=ParkingDetail, status_code=status.HTTP_201_CREATED)
async def create_parking(
    parking_data: ParkingCreate,
    admin: CurrentUser = Depends(get_admin_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Create a parking location with one slot per spot."""
    parking = Parking(
        name=parking_data.name,
        address=parking_data.address,
        description=parking_data.description,
        banner=parking_data.banner,
        hours_start=parking_data.hours.start,
        hours_end=parking_data.hours.end,
        rate_per_hour=parking_data.rate_per_hour,
        total_spots=parking_data.total_spots,
        available_spots=parking_data.total_spots,
        tags=parking_data.tags,
    )
    parking.slots = [
        Slot(position=position, is_available=True)
        for position in range(1, parking_data.total_spots + 1)
    ]
    db.add(parking)
    await db.commit()
    return await _get_parking_or_404(db, parking.id, with_slots=True)


@router.get("/", response_model=List[ParkingResponse])
async def list_parkings(
    skip: int = 0,
    limit: int = 100,
    db: AsyncSession = Depends(get_db_session),
):
    """List parking locations."""
    query = select(Parking).offset(skip).limit(limit).order_by(Parking.created_at.desc())
    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{parking_id}", response_model=ParkingDetail)
async def get_parking(
    parking_id: UUID,
    db: AsyncSession = Depends(get_db_session),
):
    """Get a parking location with its slots."""
    return await _get_parking_or_404(db, parking_id, with_slots=True)


@router.delete("/{parking_id}", response_model=MessageResponse)
async def delete_parking(
    parking_id: UUID,
    admin: CurrentUser = Depends(get_admin_user),
    db: AsyncSession = Depends(get_db_session),
):
    """Delete a parking location with its slots, ledgers and reservations."""
    parking = await _get_parking_or_404(db, parking_id)
    await db.delete(parking)
    await db.commit()
    return MessageResponse(message="Parking deleted successfully")
