"""Tests for parking endpoints."""

from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from parkspot.db.models import Reservation, Slot, TimeInterval
from parkspot.schemas.parking import ParkingCreate

from conftest import auth_header

PARKING_PAYLOAD = {
    "name": "Riverside Lot",
    "address": "12 River Road",
    "description": "Open air",
    "hours": {"start": "07:00", "end": "22:00"},
    "ratePerHour": 40,
    "totalSpots": 3,
    "tags": ["ev", "open"],
}


@pytest.mark.asyncio
async def test_create_parking_with_slots(async_client: AsyncClient, user_id):
    """Test an admin creating a parking gets one slot per spot."""
    response = await async_client.post(
        "/api/v1/parking/", json=PARKING_PAYLOAD, headers=auth_header(user_id, is_admin=True)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["name"] == "Riverside Lot"
    assert data["total_spots"] == 3
    assert data["available_spots"] == 3
    assert data["rate_per_hour"] == 40.0
    assert data["hours_start"] == "07:00"
    assert data["tags"] == ["ev", "open"]
    assert [slot["position"] for slot in data["slots"]] == [1, 2, 3]
    assert all(slot["is_available"] for slot in data["slots"])


@pytest.mark.asyncio
async def test_create_parking_requires_admin(async_client: AsyncClient, user_id):
    response = await async_client.post(
        "/api/v1/parking/", json=PARKING_PAYLOAD, headers=auth_header(user_id)
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_create_parking_requires_auth(async_client: AsyncClient):
    response = await async_client.post("/api/v1/parking/", json=PARKING_PAYLOAD)
    assert response.status_code == 401
    assert response.json()["message"] == "You are not authenticated!"


@pytest.mark.asyncio
async def test_create_parking_invalid_hours(async_client: AsyncClient, user_id):
    payload = {**PARKING_PAYLOAD, "hours": {"start": "25:00", "end": "22:00"}}

    response = await async_client.post(
        "/api/v1/parking/", json=payload, headers=auth_header(user_id, is_admin=True)
    )
    assert response.status_code == 400
    assert "hours.start" in response.json()["message"]


@pytest.mark.asyncio
async def test_list_parkings(async_client: AsyncClient, make_parking):
    await make_parking(name="North")
    await make_parking(name="South")

    response = await async_client.get("/api/v1/parking/")
    assert response.status_code == 200
    assert sorted(item["name"] for item in response.json()) == ["North", "South"]


@pytest.mark.asyncio
async def test_get_parking(async_client: AsyncClient, make_parking):
    parking = await make_parking(total_spots=2)

    response = await async_client.get(f"/api/v1/parking/{parking.id}")
    assert response.status_code == 200
    data = response.json()
    assert data["id"] == str(parking.id)
    assert len(data["slots"]) == 2


@pytest.mark.asyncio
async def test_get_parking_not_found(async_client: AsyncClient):
    response = await async_client.get(f"/api/v1/parking/{uuid4()}")
    assert response.status_code == 404
    assert "not found" in response.json()["message"]


@pytest.mark.asyncio
async def test_delete_parking_cascades(
    async_client: AsyncClient, db_session: AsyncSession, make_parking, user_id
):
    """Test deleting a parking removes its slots, ledgers and reservations."""
    parking = await make_parking(total_spots=2)
    slot = parking.slots[0]
    response = await async_client.post(
        "/api/v1/reservation/",
        json={
            "slotId": str(slot.id),
            "parkingId": str(parking.id),
            "price": 80,
            "start": "2026-10-19T10:00:00+00:00",
            "end": "2026-10-19T11:00:00+00:00",
        },
        headers=auth_header(user_id),
    )
    assert response.status_code == 201

    response = await async_client.delete(
        f"/api/v1/parking/{parking.id}", headers=auth_header(user_id, is_admin=True)
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Parking deleted successfully"

    for model in (Slot, TimeInterval, Reservation):
        count = await db_session.scalar(select(func.count()).select_from(model))
        assert count == 0


@pytest.mark.asyncio
async def test_delete_parking_requires_admin(async_client: AsyncClient, make_parking, user_id):
    parking = await make_parking()

    response = await async_client.delete(
        f"/api/v1/parking/{parking.id}", headers=auth_header(user_id)
    )
    assert response.status_code == 403


def test_parking_payload_accepts_snake_case():
    payload = {**PARKING_PAYLOAD}
    payload["rate_per_hour"] = payload.pop("ratePerHour")
    payload["total_spots"] = payload.pop("totalSpots")

    parsed = ParkingCreate(**payload)
    assert parsed.rate_per_hour == Decimal("40")
    assert parsed.total_spots == 3
