"""Tests for the upload endpoints."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


class TestUploadImage:
    async def test_upload_to_default_folder(self, client: AsyncClient, storage, png_image):
        response = await client.post("/api/v1/upload/image", files={"image": ("Logo.PNG", png_image, "image/png")})

        assert response.status_code == 201
        body = response.json()
        assert body["url"].startswith("/uploads/images/image-")
        assert body["url"].endswith(".png")
        assert body["size"] == len(png_image)
        assert body["content_type"] == "image/png"
        assert storage.read(body["url"]) == png_image

    async def test_custom_folder(self, client: AsyncClient, png_image):
        response = await client.post(
            "/api/v1/upload/image",
            files={"image": ("logo.png", png_image, "image/png")},
            data={"folder": "theater-logos/7"},
        )

        assert response.json()["url"].startswith("/uploads/theater-logos/7/")

    async def test_folder_traversal_rejected(self, client: AsyncClient, png_image):
        response = await client.post(
            "/api/v1/upload/image",
            files={"image": ("logo.png", png_image, "image/png")},
            data={"folder": "../etc"},
        )
        assert response.status_code == 422

    async def test_pdf_is_not_an_image(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/upload/image", files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_FILE_TYPE"

    async def test_size_limit(self, client: AsyncClient):
        oversized = b"\x89PNG" + b"0" * (1024 * 1024)

        response = await client.post("/api/v1/upload/image", files={"image": ("big.png", oversized, "image/png")})

        assert response.status_code == 400
        assert response.json()["code"] == "FILE_TOO_LARGE"

    async def test_empty_file(self, client: AsyncClient):
        response = await client.post("/api/v1/upload/image", files={"image": ("empty.png", b"", "image/png")})
        assert response.json()["code"] == "EMPTY_FILE"


class TestTheaterDocument:
    async def test_pdf_document(self, client: AsyncClient, theater_headers):
        response = await client.post(
            "/api/v1/upload/theater-document",
            files={"document": ("agreement.pdf", b"%PDF-1.4 body", "application/pdf")},
            data={"document_type": "agreement"},
            headers=theater_headers,
        )

        assert response.status_code == 201
        assert response.json()["url"].startswith("/uploads/theater-documents/agreement-")
        assert response.json()["filename"].endswith(".pdf")

    async def test_requires_login(self, client: AsyncClient):
        response = await client.post(
            "/api/v1/upload/theater-document", files={"document": ("a.pdf", b"%PDF", "application/pdf")}
        )
        assert response.status_code == 401


class TestDeleteUpload:
    async def test_delete_by_filename(self, client: AsyncClient, storage, png_image, theater_headers):
        uploaded = (
            await client.post("/api/v1/upload/image", files={"image": ("logo.png", png_image, "image/png")})
        ).json()

        response = await client.delete(f"/api/v1/upload/{uploaded['filename']}", headers=theater_headers)
        again = await client.delete(f"/api/v1/upload/{uploaded['filename']}", headers=theater_headers)

        assert response.json()["message"] == "File deleted successfully"
        assert not storage.exists(uploaded["url"])
        assert again.status_code == 404
        assert again.json()["code"] == "FILE_NOT_FOUND"
