"""Tests for the theater banner endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def _upload(client: AsyncClient, headers, theater_id: int, image: bytes, **form):
    files = {"image": ("banner.png", image, "image/png")}
    return await client.post(f"/api/v1/theater-banners/{theater_id}", files=files, data=form, headers=headers)


class TestBanners:
    async def test_create_stores_image(self, client: AsyncClient, storage, theater, theater_headers, png_image):
        response = await _upload(client, theater_headers, theater.id, png_image)

        assert response.status_code == 201
        body = response.json()
        assert body["image_url"].startswith(f"/uploads/banners/{theater.id}/banner-")
        assert body["image_url"].endswith(".png")
        assert body["sort_order"] == 0
        assert storage.read(body["image_url"]) == png_image

    async def test_sort_order_defaults_to_count(self, client: AsyncClient, theater, theater_headers, png_image):
        await _upload(client, theater_headers, theater.id, png_image)
        await _upload(client, theater_headers, theater.id, png_image)

        response = await _upload(client, theater_headers, theater.id, png_image)

        assert response.json()["sort_order"] == 2

    async def test_rejects_non_images(self, client: AsyncClient, theater, theater_headers):
        files = {"image": ("notes.txt", b"hello", "text/plain")}

        response = await client.post(f"/api/v1/theater-banners/{theater.id}", files=files, headers=theater_headers)

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"

    async def test_listing_is_public(self, client: AsyncClient, theater, theater_headers, png_image):
        await _upload(client, theater_headers, theater.id, png_image, sort_order="5")
        await _upload(client, theater_headers, theater.id, png_image, sort_order="1", is_active="false")

        everything = await client.get(f"/api/v1/theater-banners/{theater.id}")
        active = await client.get(f"/api/v1/theater-banners/{theater.id}", params={"is_active": True})

        assert [banner["sort_order"] for banner in everything.json()] == [1, 5]
        assert [banner["sort_order"] for banner in active.json()] == [5]

    async def test_update_replaces_image(self, client: AsyncClient, storage, theater, theater_headers, png_image):
        banner = (await _upload(client, theater_headers, theater.id, png_image)).json()

        response = await client.put(
            f"/api/v1/theater-banners/{theater.id}/{banner['id']}",
            files={"image": ("new.png", png_image, "image/png")},
            data={"is_active": "false"},
            headers=theater_headers,
        )

        updated = response.json()
        assert updated["is_active"] is False
        assert updated["image_url"] != banner["image_url"]
        assert not storage.exists(banner["image_url"])

    async def test_delete_removes_file(self, client: AsyncClient, storage, theater, theater_headers, png_image):
        banner = (await _upload(client, theater_headers, theater.id, png_image)).json()

        response = await client.delete(f"/api/v1/theater-banners/{theater.id}/{banner['id']}", headers=theater_headers)
        missing = await client.delete(f"/api/v1/theater-banners/{theater.id}/{banner['id']}", headers=theater_headers)

        assert response.json()["message"] == "Banner deleted successfully"
        assert not storage.exists(banner["image_url"])
        assert missing.status_code == 404

    async def test_changes_need_theater_access(self, client: AsyncClient, other_theater, theater_headers, png_image):
        response = await _upload(client, theater_headers, other_theater.id, png_image)
        assert response.status_code == 403
