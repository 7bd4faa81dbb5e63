from __future__ import annotations

import uuid

import pytest
from fastapi import status
from httpx import AsyncClient
from tests.utils import auth_headers


@pytest.mark.asyncio
async def test_list_events_is_empty(async_client: AsyncClient) -> None:
    response = await async_client.get("/events")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == []


@pytest.mark.asyncio
async def test_get_event_echoes_id(async_client: AsyncClient) -> None:
    event_id = uuid.uuid4()

    response = await async_client.get(f"/events/{event_id}", headers=auth_headers())

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == str(event_id)
    assert data["name"] == "Tasting night"
    assert data["priority"] == "standard"
    assert "startAt" in data


@pytest.mark.asyncio
async def test_get_nil_event_is_not_found(async_client: AsyncClient) -> None:
    response = await async_client.get(f"/events/{uuid.UUID(int=0)}", headers=auth_headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.asyncio
async def test_get_event_with_non_guid_id_is_not_found(async_client: AsyncClient) -> None:
    response = await async_client.get("/events/not-a-guid", headers=auth_headers())

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.content == b""


@pytest.mark.asyncio
async def test_get_event_requires_authentication(async_client: AsyncClient) -> None:
    response = await async_client.get(f"/events/{uuid.uuid4()}")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.asyncio
async def test_save_event(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/events",
        json={
            "id": str(uuid.uuid4()),
            "name": "Wine pairing",
            "startAt": "2026-11-02T19:30:00Z",
            "priority": "high",
        },
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert response.content == b""


@pytest.mark.asyncio
async def test_save_event_rejects_unknown_priority(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/events",
        json={
            "id": str(uuid.uuid4()),
            "name": "Wine pairing",
            "startAt": "2026-11-02T19:30:00Z",
            "priority": "urgent",
        },
        headers=auth_headers(),
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
