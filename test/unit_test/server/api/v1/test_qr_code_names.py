"""Tests for the QR code name endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _create_name(client: AsyncClient, headers, theater_id: int, qr_name: str = "YQ S-1", **extra):
    body = {"theater_id": theater_id, "qr_name": qr_name, "seat_class": "Premium", **extra}
    return await client.post("/api/v1/qrcodenames/", json=body, headers=headers)


class TestQRCodeNames:
    async def test_create_trims_name(self, client: AsyncClient, theater, theater_headers):
        response = await _create_name(client, theater_headers, theater.id, qr_name="  YQ S-1  ")

        assert response.status_code == 201
        assert response.json()["qr_name"] == "YQ S-1"
        assert response.json()["seat_class"] == "Premium"

    async def test_duplicate_is_case_insensitive(self, client: AsyncClient, theater, theater_headers):
        await _create_name(client, theater_headers, theater.id)

        response = await _create_name(client, theater_headers, theater.id, qr_name="yq s-1")

        assert response.status_code == 409
        assert response.json()["code"] == "QR_NAME_EXISTS"

    async def test_same_name_allowed_in_other_theater(
        self, client: AsyncClient, theater, other_theater, admin_headers
    ):
        await _create_name(client, admin_headers, theater.id)
        response = await _create_name(client, admin_headers, other_theater.id)

        assert response.status_code == 201

    async def test_list_ordered_and_filtered(self, client: AsyncClient, theater, theater_headers):
        await _create_name(client, theater_headers, theater.id, qr_name="Balcony", sort_order=2)
        await _create_name(client, theater_headers, theater.id, qr_name="Screen 1", sort_order=1)
        await _create_name(client, theater_headers, theater.id, qr_name="Old Hall", is_active=False)

        everything = await client.get(
            "/api/v1/qrcodenames/", params={"theater_id": theater.id}, headers=theater_headers
        )
        active = await client.get(
            "/api/v1/qrcodenames/", params={"theater_id": theater.id, "is_active": True}, headers=theater_headers
        )

        assert [row["qr_name"] for row in everything.json()] == ["Old Hall", "Screen 1", "Balcony"]
        assert [row["qr_name"] for row in active.json()] == ["Screen 1", "Balcony"]

    async def test_rename_checks_conflicts(self, client: AsyncClient, theater, theater_headers):
        await _create_name(client, theater_headers, theater.id, qr_name="Balcony")
        name_id = (await _create_name(client, theater_headers, theater.id)).json()["id"]

        conflict = await client.put(
            f"/api/v1/qrcodenames/{name_id}", json={"qr_name": "BALCONY"}, headers=theater_headers
        )
        renamed = await client.put(
            f"/api/v1/qrcodenames/{name_id}", json={"qr_name": " YQ S-2 ", "seat_class": "Gold"}, headers=theater_headers
        )

        assert conflict.status_code == 409
        assert renamed.json()["qr_name"] == "YQ S-2"
        assert renamed.json()["seat_class"] == "Gold"

    async def test_other_theater_cannot_edit(self, client: AsyncClient, other_theater, admin_headers, theater_headers):
        name_id = (await _create_name(client, admin_headers, other_theater.id)).json()["id"]

        response = await client.delete(f"/api/v1/qrcodenames/{name_id}", headers=theater_headers)

        assert response.status_code == 403

    async def test_delete_and_missing(self, client: AsyncClient, theater, theater_headers):
        name_id = (await _create_name(client, theater_headers, theater.id)).json()["id"]

        deleted = await client.delete(f"/api/v1/qrcodenames/{name_id}", headers=theater_headers)
        again = await client.delete(f"/api/v1/qrcodenames/{name_id}", headers=theater_headers)

        assert deleted.json()["message"] == "QR code name deleted successfully"
        assert again.status_code == 404
