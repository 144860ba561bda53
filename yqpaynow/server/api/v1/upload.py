"""
Upload API Endpoints.

Images (logos, product pictures) and theater documents stored through the
local file storage and served back under the uploads URL prefix.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, UploadFile, status

from yqpaynow.core.errors import NotFoundError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.core.models.io.uploads import UploadResponse
from yqpaynow.server.services.deps import CurrentUserDep, StorageDep
from yqpaynow.server.services.uploads import store_upload
from yqpaynow.storage import DOCUMENT_CONTENT_TYPES, IMAGE_CONTENT_TYPES, StoredFile

logger = get_logger(__name__)

router = APIRouter(tags=["upload"])

FOLDER_PATTERN = r"^[A-Za-z0-9_\-]+(/[A-Za-z0-9_\-]+)*$"


def _response(stored: StoredFile) -> UploadResponse:
    return UploadResponse(url=stored.url, filename=stored.filename, size=stored.size, content_type=stored.content_type)


@router.post(
    "/image",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Image",
    description="JPEG, PNG, GIF or WebP up to the configured size limit.",
)
async def upload_image(
    storage: StorageDep,
    image: UploadFile = File(...),
    folder: Optional[str] = Form(None, pattern=FOLDER_PATTERN, max_length=100),
) -> UploadResponse:
    stored = await store_upload(storage, image, folder=folder or "images", allowed=IMAGE_CONTENT_TYPES)
    return _response(stored)


@router.post(
    "/theater-document",
    response_model=UploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Theater Document",
    description="Agreement copies, licences and ID proofs as images or PDF.",
)
async def upload_theater_document(
    storage: StorageDep,
    user: CurrentUserDep,
    document: UploadFile = File(...),
    document_type: str = Form("document", pattern=r"^[a-z_]+$", max_length=50),
) -> UploadResponse:
    stored = await store_upload(
        storage, document, folder="theater-documents", prefix=document_type, allowed=DOCUMENT_CONTENT_TYPES
    )
    logger.info(f"{user.username} uploaded {document_type} {stored.key}")
    return _response(stored)


@router.delete(
    "/{filename}",
    response_model=MessageResponse,
    summary="Delete Uploaded File",
    responses={404: {"description": "No stored file with this name"}},
)
async def delete_upload(filename: str, storage: StorageDep, user: CurrentUserDep) -> MessageResponse:
    key = storage.find(filename)
    if key is None or not storage.delete(key):
        raise NotFoundError(f"File not found: {filename}", code="FILE_NOT_FOUND")
    logger.info(f"{user.username} deleted upload {key}")
    return MessageResponse(message="File deleted successfully")
