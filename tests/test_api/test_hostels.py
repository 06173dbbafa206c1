"""Tests for the hostel listing endpoints."""

import uuid

import pytest
from httpx import AsyncClient

from hostelconnect.models.hostel import Hostel

pytestmark = pytest.mark.asyncio


def _listing(**overrides) -> dict:
    body = {
        "name": "Mwea Heights Hostel",
        "location": "Kutus, opposite the stage",
        "price": "5200.00",
        "rooms": 18,
        "description": "Bedsitters with borehole water.",
        "amenities": ["water", "Security"],
        "images": ["https://img.test/mwea-1.jpg", "https://img.test/mwea-2.jpg"],
    }
    body.update(overrides)
    return body


# ---------------------------------------------------------------------------
# POST /api/v1/hostels
# ---------------------------------------------------------------------------


class TestCreateHostel:
    async def test_owner_creates_listing(self, client: AsyncClient, owner_headers: dict, owner) -> None:
        response = await client.post("/api/v1/hostels", json=_listing(), headers=owner_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["owner_id"] == str(owner.id)
        assert float(data["price"]) == 5200.00
        assert data["amenities"]["water"] is True
        assert data["amenities"]["security"] is True
        assert data["amenities"]["wifi"] is False
        assert [img["image_url"] for img in data["images"]] == [
            "https://img.test/mwea-1.jpg",
            "https://img.test/mwea-2.jpg",
        ]
        assert data["images"][0]["is_primary"] is True
        assert data["images"][1]["is_primary"] is False

    async def test_student_cannot_create(self, client: AsyncClient, student_headers: dict) -> None:
        response = await client.post("/api/v1/hostels", json=_listing(), headers=student_headers)
        assert response.status_code == 403
        assert response.json()["code"] == "not_authorized"

    async def test_requires_auth(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/hostels", json=_listing())
        assert response.status_code in (401, 403)

    async def test_invalid_fields_reported_together(self, client: AsyncClient, owner_headers: dict) -> None:
        response = await client.post(
            "/api/v1/hostels",
            json=_listing(price="0", rooms=0, amenities=["pool"]),
            headers=owner_headers,
        )
        assert response.status_code == 422
        body = response.json()
        assert body["code"] == "validation_error"
        assert {"price", "rooms", "amenities"} <= set(body["errors"])


# ---------------------------------------------------------------------------
# GET /api/v1/hostels
# ---------------------------------------------------------------------------


class TestSearchHostels:
    async def test_public_search_returns_everything(
        self, client: AsyncClient, hostel: Hostel, other_hostel: Hostel
    ) -> None:
        response = await client.get("/api/v1/hostels")
        assert response.status_code == 200
        assert response.json()["total"] == 2

    async def test_filters_combine(self, client: AsyncClient, hostel: Hostel, other_hostel: Hostel) -> None:
        response = await client.get(
            "/api/v1/hostels",
            params={"location": "kutus", "max_price": "7000", "amenities": ["wifi", "security"]},
        )
        assert response.status_code == 200
        names = [item["name"] for item in response.json()["items"]]
        assert names == ["Kutus Comfort Hostel"]

    async def test_price_range_excludes(self, client: AsyncClient, hostel: Hostel, other_hostel: Hostel) -> None:
        response = await client.get("/api/v1/hostels", params={"min_price": "5000"})
        assert [item["name"] for item in response.json()["items"]] == ["Kutus Comfort Hostel"]

    async def test_unknown_amenity(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/hostels", params={"amenities": ["jacuzzi"]})
        assert response.status_code == 422
        assert "amenities" in response.json()["errors"]


# ---------------------------------------------------------------------------
# GET/PUT/DELETE /api/v1/hostels/{id}
# ---------------------------------------------------------------------------


class TestHostelDetail:
    async def test_get_public(self, client: AsyncClient, hostel: Hostel) -> None:
        response = await client.get(f"/api/v1/hostels/{hostel.id}")
        assert response.status_code == 200
        assert response.json()["name"] == "Kutus Comfort Hostel"
        assert len(response.json()["images"]) == 2

    async def test_get_missing(self, client: AsyncClient) -> None:
        response = await client.get(f"/api/v1/hostels/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    async def test_mine_lists_only_own(
        self, client: AsyncClient, owner_headers: dict, hostel: Hostel, other_hostel: Hostel
    ) -> None:
        response = await client.get("/api/v1/hostels/mine", headers=owner_headers)
        assert response.status_code == 200
        assert [item["id"] for item in response.json()["items"]] == [str(hostel.id)]

    async def test_owner_updates(self, client: AsyncClient, owner_headers: dict, hostel: Hostel) -> None:
        response = await client.put(
            f"/api/v1/hostels/{hostel.id}",
            json={"price": "7000", "amenities": ["wifi"]},
            headers=owner_headers,
        )
        assert response.status_code == 200
        data = response.json()
        assert float(data["price"]) == 7000.00
        assert data["amenities"]["wifi"] is True
        assert data["amenities"]["water"] is False
        assert data["name"] == "Kutus Comfort Hostel"

    async def test_other_owner_cannot_update(
        self, client: AsyncClient, other_owner_headers: dict, hostel: Hostel
    ) -> None:
        response = await client.put(
            f"/api/v1/hostels/{hostel.id}",
            json={"name": "Taken Over"},
            headers=other_owner_headers,
        )
        assert response.status_code == 403

    async def test_admin_can_update(self, client: AsyncClient, admin_headers: dict, hostel: Hostel) -> None:
        response = await client.put(
            f"/api/v1/hostels/{hostel.id}",
            json={"rooms": 20},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["rooms"] == 20

    async def test_delete(self, client: AsyncClient, owner_headers: dict, hostel: Hostel) -> None:
        hostel_id = hostel.id
        response = await client.delete(f"/api/v1/hostels/{hostel_id}", headers=owner_headers)
        assert response.status_code == 200
        assert response.json()["message"] == "Hostel deleted"

        response = await client.get(f"/api/v1/hostels/{hostel_id}")
        assert response.status_code == 404

    async def test_other_owner_cannot_delete(
        self, client: AsyncClient, other_owner_headers: dict, hostel: Hostel
    ) -> None:
        response = await client.delete(f"/api/v1/hostels/{hostel.id}", headers=other_owner_headers)
        assert response.status_code == 403
