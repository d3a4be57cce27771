"""Tests for slot endpoints."""

from uuid import uuid4

import pytest
from httpx import AsyncClient

from conftest import auth_header


async def book(async_client: AsyncClient, parking, slot, user_id, start: str, end: str):
    response = await async_client.post(
        "/api/v1/reservation/",
        json={
            "slotId": str(slot.id),
            "parkingId": str(parking.id),
            "price": 60,
            "start": start,
            "end": end,
        },
        headers=auth_header(user_id),
    )
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_list_slots_by_parking(async_client: AsyncClient, make_parking):
    north = await make_parking(total_spots=2, name="North")
    await make_parking(total_spots=3, name="South")

    response = await async_client.get("/api/v1/slots/", params={"parking_id": str(north.id)})
    assert response.status_code == 200
    data = response.json()
    assert [slot["position"] for slot in data] == [1, 2]
    assert all(slot["parking_id"] == str(north.id) for slot in data)

    response = await async_client.get("/api/v1/slots/")
    assert len(response.json()) == 5


@pytest.mark.asyncio
async def test_get_slot_shows_ledger(async_client: AsyncClient, make_parking, user_id):
    parking = await make_parking()
    slot = parking.slots[0]
    await book(
        async_client, parking, slot, user_id, "2026-10-19T12:00:00+00:00", "2026-10-19T13:00:00+00:00"
    )
    await book(
        async_client, parking, slot, user_id, "2026-10-19T10:00:00+00:00", "2026-10-19T11:00:00+00:00"
    )

    response = await async_client.get(f"/api/v1/slots/{slot.id}")
    assert response.status_code == 200
    timing = response.json()["timing"]
    assert [entry["start"][:16] for entry in timing] == ["2026-10-19T10:00", "2026-10-19T12:00"]
    assert all(entry["is_reserved"] for entry in timing)
    assert all(entry["reserved_by"] == str(user_id) for entry in timing)


@pytest.mark.asyncio
async def test_get_slot_not_found(async_client: AsyncClient):
    response = await async_client.get(f"/api/v1/slots/{uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_availability_reports_conflict(async_client: AsyncClient, make_parking, user_id):
    parking = await make_parking()
    slot = parking.slots[0]
    await book(
        async_client, parking, slot, user_id, "2026-10-19T10:00:00+00:00", "2026-10-19T11:00:00+00:00"
    )

    response = await async_client.get(
        f"/api/v1/slots/{slot.id}/availability",
        params={"start": "2026-10-19T10:30:00+00:00", "end": "2026-10-19T11:30:00+00:00"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["available"] is False
    assert data["conflict"]["start"].startswith("2026-10-19T10:00")


@pytest.mark.asyncio
async def test_availability_back_to_back_is_free(async_client: AsyncClient, make_parking, user_id):
    parking = await make_parking()
    slot = parking.slots[0]
    await book(
        async_client, parking, slot, user_id, "2026-10-19T10:00:00+00:00", "2026-10-19T11:00:00+00:00"
    )

    response = await async_client.get(
        f"/api/v1/slots/{slot.id}/availability",
        params={"start": "2026-10-19T11:00:00+00:00", "end": "2026-10-19T12:00:00+00:00"},
    )
    assert response.status_code == 200
    assert response.json()["available"] is True
    assert response.json()["conflict"] is None


@pytest.mark.asyncio
async def test_availability_rejects_empty_range(async_client: AsyncClient, make_parking):
    parking = await make_parking()
    slot = parking.slots[0]

    response = await async_client.get(
        f"/api/v1/slots/{slot.id}/availability",
        params={"start": "2026-10-19T11:00:00+00:00", "end": "2026-10-19T11:00:00+00:00"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_availability_requires_window(async_client: AsyncClient, make_parking):
    parking = await make_parking()

    response = await async_client.get(f"/api/v1/slots/{parking.slots[0].id}/availability")
    assert response.status_code == 400
