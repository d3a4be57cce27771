"""API v1 router."""

from fastapi import APIRouter

from parkspot.api.v1.endpoints import parkings, reservations, slots

api_router = APIRouter()

api_router.include_router(parkings.router, prefix="/parking", tags=["parking"])
api_router.include_router(slots.router, prefix="/slots", tags=["slots"])
api_router.include_router(reservations.router, prefix="/reservation", tags=["reservation"])
