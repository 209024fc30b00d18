"""Volunteer profile and volunteer directory endpoint tests."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest
from conftest import VOLUNTEER_PAYLOAD, VOLUNTEER_USER, auth_headers
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from carelink.db.models import VolunteerProfile


@pytest.mark.asyncio
async def test_save_profile(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/volunteer-profile", json=VOLUNTEER_PAYLOAD, headers=auth_headers(VOLUNTEER_USER)
    )

    assert response.status_code == 200, response.text
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Profile saved successfully"
    profile = body["profile"]
    assert profile["userId"] == VOLUNTEER_USER
    assert profile["phoneNumber"] == "5551234567"
    assert profile["emergencyContactPhone"] == "5559876543"
    assert profile["zipCode"] == "97205"
    assert profile["dateOfBirth"].startswith("1992-06-15")
    assert profile["skills"] == ["Tutoring", "Music"]
    assert profile["profileComplete"] is True


@pytest.mark.asyncio
async def test_save_twice_keeps_one_row(client: AsyncClient, db_session: AsyncSession) -> None:
    headers = auth_headers(VOLUNTEER_USER)
    first = (await client.post("/api/v1/volunteer-profile", json=VOLUNTEER_PAYLOAD, headers=headers)).json()
    second = (await client.post("/api/v1/volunteer-profile", json=VOLUNTEER_PAYLOAD, headers=headers)).json()

    assert second["profile"]["id"] == first["profile"]["id"]
    assert datetime.fromisoformat(second["profile"]["updatedAt"]) >= datetime.fromisoformat(
        first["profile"]["updatedAt"]
    )
    assert await db_session.scalar(select(func.count(VolunteerProfile.id))) == 1


@pytest.mark.asyncio
async def test_resave_replaces_fields(client: AsyncClient) -> None:
    headers = auth_headers(VOLUNTEER_USER)
    await client.post("/api/v1/volunteer-profile", json=VOLUNTEER_PAYLOAD, headers=headers)
    response = await client.post(
        "/api/v1/volunteer-profile",
        json={**VOLUNTEER_PAYLOAD, "city": "Salem", "skills": ["Cooking"]},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["profile"]["city"] == "Salem"
    assert response.json()["profile"]["skills"] == ["Cooking"]


@pytest.mark.parametrize(
    ("overrides", "field"),
    [
        ({"skills": []}, "skills"),
        ({"skills": "Tutoring"}, "skills"),
        ({"availability": []}, "availability"),
        ({"about": "Short bio"}, "about"),
        ({"zipCode": "123"}, "zipCode"),
        ({"phoneNumber": "555-1234"}, "phoneNumber"),
        ({"dateOfBirth": "2015-01-01"}, "dateOfBirth"),
        ({"dateOfBirth": "15/06/1992"}, "dateOfBirth"),
    ],
)
@pytest.mark.asyncio
async def test_invalid_profile_rejected(
    client: AsyncClient, db_session: AsyncSession, overrides: dict[str, Any], field: str
) -> None:
    response = await client.post(
        "/api/v1/volunteer-profile",
        json={**VOLUNTEER_PAYLOAD, **overrides},
        headers=auth_headers(VOLUNTEER_USER),
    )
    assert response.status_code == 400
    assert field in response.json()["errors"]
    assert await db_session.scalar(select(func.count(VolunteerProfile.id))) == 0


@pytest.mark.asyncio
async def test_missing_about_rejected(client: AsyncClient) -> None:
    payload = {k: v for k, v in VOLUNTEER_PAYLOAD.items() if k != "about"}
    response = await client.post("/api/v1/volunteer-profile", json=payload, headers=auth_headers(VOLUNTEER_USER))
    assert response.status_code == 400
    assert "about" in response.json()["errors"]


@pytest.mark.asyncio
async def test_get_profile(client: AsyncClient, volunteer: dict[str, Any]) -> None:
    response = await client.get("/api/v1/volunteer-profile", headers=volunteer["headers"])
    assert response.status_code == 200
    body = response.json()
    assert body["profile"]["id"] == volunteer["profile"]["id"]
    assert body["user"]["email"] == f"{VOLUNTEER_USER}@example.com"
    assert body["user"]["profileImageUrl"] == "https://img.example.com/maya.png"


@pytest.mark.asyncio
async def test_get_profile_none_yet(client: AsyncClient, orphanage_headers: dict[str, str]) -> None:
    response = await client.get("/api/v1/volunteer-profile", headers=orphanage_headers)
    assert response.status_code == 200
    assert response.json()["profile"] is None
    assert response.json()["user"]["firstName"] == "Grace"


@pytest.mark.asyncio
async def test_get_profile_unknown_user(client: AsyncClient) -> None:
    response = await client.get("/api/v1/volunteer-profile", headers=auth_headers("user_never_seen"))
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_profile_requires_auth(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/volunteer-profile")).status_code == 401
    assert (await client.post("/api/v1/volunteer-profile", json=VOLUNTEER_PAYLOAD)).status_code == 401


@pytest.mark.asyncio
async def test_directory_lists_complete_profiles(
    client: AsyncClient, orphanage_headers: dict[str, str], volunteer: dict[str, Any]
) -> None:
    incomplete = auth_headers("user_volunteer_2")
    saved = await client.post(
        "/api/v1/volunteer-profile",
        json={**VOLUNTEER_PAYLOAD, "firstName": "Ben", "profileComplete": False},
        headers=incomplete,
    )
    assert saved.status_code == 200

    response = await client.get("/api/v1/orphanage/volunteers", headers=orphanage_headers)
    assert response.status_code == 200
    listed = response.json()
    assert [v["id"] for v in listed] == [volunteer["profile"]["id"]]
    entry = listed[0]
    assert entry["firstName"] == "Maya"
    assert entry["email"] == f"{VOLUNTEER_USER}@example.com"
    assert entry["profileImage"] == "https://img.example.com/maya.png"
    assert entry["bio"] == VOLUNTEER_PAYLOAD["about"]
    assert entry["location"] == "Portland"
    assert "lastActive" in entry


@pytest.mark.asyncio
async def test_directory_requires_auth(client: AsyncClient) -> None:
    assert (await client.get("/api/v1/orphanage/volunteers")).status_code == 401
