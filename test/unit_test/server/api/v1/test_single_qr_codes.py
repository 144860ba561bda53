"""
Unit tests for QR code generation and management endpoints.

Images are rendered for real and written to the temporary upload storage.
"""

import io
from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import AsyncClient
from PIL import Image

from yqpaynow.core.database.repositories import QRCodeRepository, QRSeatRepository
from yqpaynow.core.models.io.qr_codes import QRCodeCreate, SeatSelection
from yqpaynow.qr import QRCodeGenerator
from yqpaynow.server.services.qr_codes import QRCodeService

pytestmark = pytest.mark.asyncio

QR_NAME = "YQ S-1"


@pytest_asyncio.fixture
async def qr_name(client: AsyncClient, theater, theater_headers):
    body = {"theater_id": theater.id, "qr_name": QR_NAME, "seat_class": "Premium"}
    response = await client.post("/api/v1/qrcodenames/", json=body, headers=theater_headers)
    return response.json()


async def _generate(client: AsyncClient, headers, theater_id: int, **extra):
    body = {"theater_id": theater_id, "qr_type": "single", "qr_name": QR_NAME, "seat_class": "Premium"}
    body.update(extra)
    return await client.post("/api/v1/single-qrcodes/", json=body, headers=headers)


class TestGenerate:
    async def test_single_code(self, client: AsyncClient, storage, theater, theater_headers, qr_name):
        response = await _generate(client, theater_headers, theater.id)

        assert response.status_code == 201
        body = response.json()
        assert body["qr_type"] == "single"
        assert body["seats"] == []
        assert body["generated_by"] == "galaxy"
        assert body["qr_code_data"] == f"http://mock-frontend/menu/{theater.id}?qrName=YQ%20S-1&type=single"
        assert body["qr_code_url"].startswith(f"/uploads/qr-codes/{theater.id}/yq-s-1-")
        assert storage.exists(body["qr_code_url"])

    async def test_screen_code_from_range(self, client: AsyncClient, storage, theater, theater_headers, qr_name):
        response = await _generate(client, theater_headers, theater.id, qr_type="screen", seat_start="A1", seat_end="B2")

        assert response.status_code == 201
        body = response.json()
        assert body["qr_code_url"] is None
        assert [seat["seat"] for seat in body["seats"]] == ["A1", "A2", "B1", "B2"]
        assert body["seats"][0]["qr_code_data"].endswith("&seat=A1&type=screen")
        assert all(storage.exists(seat["qr_code_url"]) for seat in body["seats"])

    async def test_screen_code_from_labels_sorted(self, client: AsyncClient, theater, theater_headers, qr_name):
        response = await _generate(
            client, theater_headers, theater.id, qr_type="screen", seats=["b2", "A10", "A2", "A2"]
        )

        assert [seat["seat"] for seat in response.json()["seats"]] == ["A2", "A10", "B2"]

    async def test_screen_code_needs_seats(self, client: AsyncClient, theater, theater_headers, qr_name):
        response = await _generate(client, theater_headers, theater.id, qr_type="screen")
        assert response.status_code == 422

    async def test_too_many_seats(self, client: AsyncClient, theater, theater_headers, qr_name):
        response = await _generate(
            client, theater_headers, theater.id, qr_type="screen", seat_start="A1", seat_end="F20"
        )

        assert response.status_code == 400
        assert response.json()["code"] == "TOO_MANY_SEATS"
        assert response.json()["details"] == {"requested": 120, "max": 100}

    async def test_bad_seat_label(self, client: AsyncClient, theater, theater_headers, qr_name):
        response = await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1", "12"])
        assert response.json()["code"] == "INVALID_SEAT"

    async def test_reversed_range_selects_nothing(self, client: AsyncClient, theater, theater_headers, qr_name):
        response = await _generate(client, theater_headers, theater.id, qr_type="screen", seat_start="C1", seat_end="A5")
        assert response.json()["code"] == "NO_SEATS"

    async def test_unknown_qr_name(self, client: AsyncClient, theater, theater_headers):
        response = await _generate(client, theater_headers, theater.id)

        assert response.status_code == 400
        assert response.json()["code"] == "QR_NAME_NOT_FOUND"

    async def test_duplicate_single_code(self, client: AsyncClient, theater, theater_headers, qr_name):
        await _generate(client, theater_headers, theater.id)

        response = await _generate(client, theater_headers, theater.id, qr_name="yq s-1")

        assert response.status_code == 409
        assert response.json()["code"] == "QR_CODE_EXISTS"

    async def test_other_theater_denied(self, client: AsyncClient, other_theater, theater_headers):
        response = await _generate(client, theater_headers, other_theater.id)
        assert response.status_code == 403


class TestReadAndManage:
    async def test_list_defaults_to_own_theater(self, client: AsyncClient, theater, theater_headers, qr_name):
        await _generate(client, theater_headers, theater.id)

        response = await client.get("/api/v1/single-qrcodes/", headers=theater_headers)

        assert [code["qr_name"] for code in response.json()] == [QR_NAME]

    async def test_grouped_by_name(self, client: AsyncClient, theater, theater_headers, qr_name):
        await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1", "A2"])
        await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["B1"])

        response = await client.get(f"/api/v1/single-qrcodes/theater/{theater.id}", headers=theater_headers)

        groups = response.json()
        assert len(groups) == 1
        assert groups[0]["total_seats"] == 3
        assert len(groups[0]["codes"]) == 2

    async def test_update_regenerates_image(self, client: AsyncClient, storage, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id)).json()

        response = await client.put(
            f"/api/v1/single-qrcodes/{code['id']}", json={"orientation": "portrait"}, headers=theater_headers
        )

        updated = response.json()
        assert updated["orientation"] == "portrait"
        assert updated["qr_code_url"] != code["qr_code_url"]
        assert not storage.exists(code["qr_code_url"])
        assert storage.exists(updated["qr_code_url"])

    async def test_seat_class_change_keeps_image(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id)).json()

        response = await client.put(
            f"/api/v1/single-qrcodes/{code['id']}", json={"seat_class": "Gold"}, headers=theater_headers
        )

        assert response.json()["qr_code_url"] == code["qr_code_url"]

    async def test_delete_removes_images(self, client: AsyncClient, storage, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1"])).json()

        response = await client.delete(f"/api/v1/single-qrcodes/{code['id']}", headers=theater_headers)
        missing = await client.get(f"/api/v1/single-qrcodes/{code['id']}", headers=theater_headers)

        assert response.json()["message"] == "QR code deleted successfully"
        assert not storage.exists(code["seats"][0]["qr_code_url"])
        assert missing.json()["code"] == "QR_CODE_NOT_FOUND"

    async def test_download_png(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id)).json()

        response = await client.get(f"/api/v1/single-qrcodes/{code['id']}/download", headers=theater_headers)

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.headers["content-disposition"] == 'attachment; filename="YQ_S-1.png"'
        assert Image.open(io.BytesIO(response.content)).format == "PNG"


class TestSeats:
    async def test_add_seats_rejects_duplicates(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1"])).json()

        added = await client.post(
            f"/api/v1/single-qrcodes/{code['id']}/seats", json={"seats": ["A2", "A3"]}, headers=theater_headers
        )
        duplicate = await client.post(
            f"/api/v1/single-qrcodes/{code['id']}/seats", json={"seats": ["A3"]}, headers=theater_headers
        )

        assert [seat["seat"] for seat in added.json()["seats"]] == ["A1", "A2", "A3"]
        assert duplicate.status_code == 409
        assert duplicate.json()["details"] == {"seats": ["A3"]}

    async def test_seats_only_on_screen_codes(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id)).json()

        response = await client.post(
            f"/api/v1/single-qrcodes/{code['id']}/seats", json={"seats": ["A1"]}, headers=theater_headers
        )

        assert response.json()["code"] == "NOT_SCREEN_QR"

    async def test_relabel_seat(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1", "A2"])).json()
        seat = code["seats"][0]

        relabeled = await client.put(
            f"/api/v1/single-qrcodes/{code['id']}/seats/{seat['id']}", json={"seat": "c7"}, headers=theater_headers
        )
        clash = await client.put(
            f"/api/v1/single-qrcodes/{code['id']}/seats/{seat['id']}", json={"seat": "A2"}, headers=theater_headers
        )

        changed = next(s for s in relabeled.json()["seats"] if s["id"] == seat["id"])
        assert changed["seat"] == "C7"
        assert changed["qr_code_data"].endswith("&seat=C7&type=screen")
        assert clash.status_code == 409

    async def test_delete_seat(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1", "A2"])).json()

        response = await client.delete(
            f"/api/v1/single-qrcodes/{code['id']}/seats/{code['seats'][0]['id']}", headers=theater_headers
        )
        missing = await client.delete(f"/api/v1/single-qrcodes/{code['id']}/seats/9999", headers=theater_headers)

        assert [seat["seat"] for seat in response.json()["seats"]] == ["A2"]
        assert missing.json()["code"] == "SEAT_NOT_FOUND"


class TestPublicEndpoints:
    async def test_scan_code_and_seat(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id, qr_type="screen", seats=["A1"])).json()

        code_scan = await client.post(f"/api/v1/single-qrcodes/{code['id']}/scan")
        seat_scan = await client.post(f"/api/v1/single-qrcodes/{code['id']}/scan", json={"seat": "a1"})
        stats = await client.get(
            "/api/v1/single-qrcodes/stats/summary", params={"theater_id": theater.id}, headers=theater_headers
        )

        assert code_scan.json()["scan_count"] == 1
        assert seat_scan.json()["seat"] == "A1"
        assert seat_scan.json()["scan_count"] == 1
        assert stats.json() == {
            "total_codes": 1,
            "single_codes": 0,
            "screen_codes": 1,
            "total_seats": 1,
            "active_codes": 1,
            "total_scans": 2,
        }

    async def test_scan_inactive_code(self, client: AsyncClient, theater, theater_headers, qr_name):
        code = (await _generate(client, theater_headers, theater.id)).json()
        await client.put(f"/api/v1/single-qrcodes/{code['id']}", json={"is_active": False}, headers=theater_headers)

        response = await client.post(f"/api/v1/single-qrcodes/{code['id']}/scan")

        assert response.json()["code"] == "QR_CODE_INACTIVE"

    async def test_verify(self, client: AsyncClient, theater, theater_headers, qr_name):
        await _generate(client, theater_headers, theater.id)

        valid = await client.get("/api/v1/single-qrcodes/verify-qr/yq s-1", params={"theater_id": theater.id})
        invalid = await client.get("/api/v1/single-qrcodes/verify-qr/Nope", params={"theater_id": theater.id})

        assert valid.json()["is_valid"] is True
        assert valid.json()["qr_name"] == QR_NAME
        assert invalid.json() == {
            "is_valid": False,
            "qr_name": "Nope",
            "qr_type": None,
            "seat_class": None,
            "theater_id": theater.id,
        }


class TestFailedPersistence:
    """Images rendered for rows that never reach the database are removed again."""

    @staticmethod
    def _service(session, storage) -> QRCodeService:
        return QRCodeService(session, QRCodeGenerator(storage, "http://mock-frontend"))

    async def test_failed_seat_insert_leaves_no_images(self, session, storage, theater, qr_name):
        service = self._service(session, storage)
        theater_id = theater.id
        data = QRCodeCreate(
            theater_id=theater_id, qr_type="screen", qr_name=QR_NAME, seat_class="Premium", seat_start="A1", seat_end="A3"
        )

        with patch.object(QRSeatRepository, "add_all", AsyncMock(side_effect=RuntimeError("seat already taken"))):
            with pytest.raises(RuntimeError, match="seat already taken"):
                await service.create(data)

        assert list(storage.root.rglob("*.png")) == []
        assert await QRCodeRepository(session).list_for_theater(theater_id) == []

    async def test_failed_seat_append_keeps_existing_images(self, session, storage, theater, qr_name):
        service = self._service(session, storage)
        created = await service.create(
            QRCodeCreate(theater_id=theater.id, qr_type="screen", qr_name=QR_NAME, seat_class="Premium", seats=["A1"])
        )

        with patch.object(QRSeatRepository, "add_all", AsyncMock(side_effect=RuntimeError("seat already taken"))):
            with pytest.raises(RuntimeError):
                await service.add_seats(created.id, SeatSelection(seats=["A2", "A3"]))

        assert [path.name for path in storage.root.rglob("*.png")] == [created.seats[0].qr_code_url.rsplit("/", 1)[-1]]
