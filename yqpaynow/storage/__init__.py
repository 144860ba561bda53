"""File storage used for uploads and generated QR images."""

from .local import DOCUMENT_CONTENT_TYPES, IMAGE_CONTENT_TYPES, LocalFileStorage, StoredFile

__all__ = ["DOCUMENT_CONTENT_TYPES", "IMAGE_CONTENT_TYPES", "LocalFileStorage", "StoredFile"]
