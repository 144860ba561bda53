"""Multipart upload handling shared by the upload and catalog endpoints."""

from __future__ import annotations

from typing import Iterable, Optional

from fastapi import UploadFile

from yqpaynow.core.errors import ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.storage import IMAGE_CONTENT_TYPES, LocalFileStorage, StoredFile

logger = get_logger(__name__)


async def store_upload(
    storage: LocalFileStorage,
    upload: UploadFile,
    *,
    folder: str,
    prefix: str = "image",
    allowed: Iterable[str] = IMAGE_CONTENT_TYPES,
) -> StoredFile:
    """
    Validate the content type of an uploaded file and store it under ``folder``.

    Raises:
        ValidationFailedError: ``INVALID_FILE_TYPE`` for a disallowed content
            type, or the storage size checks
    """
    content_type = (upload.content_type or "").lower()
    allowed = set(allowed)
    if content_type not in allowed:
        raise ValidationFailedError(
            f"Unsupported file type: {content_type or 'unknown'}",
            code="INVALID_FILE_TYPE",
            details={"allowed": sorted(allowed)},
        )
    data = await upload.read()
    name = storage.generate_name(prefix, upload.filename, content_type)
    stored = storage.save(data, folder=folder, filename=name, content_type=content_type)
    logger.info(f"Stored upload {stored.key} ({stored.size} bytes)")
    return stored


def replace_stored(storage: LocalFileStorage, old_url: Optional[str]) -> None:
    """Drop a previously stored file once its row points at a new one."""
    if old_url and storage.delete(old_url):
        logger.debug(f"Removed replaced file {old_url}")
