"""
Local file storage for uploads and generated QR images.

Files live under a root directory and are addressed by a relative key
(``folder/name.ext``). Their public URL is the key under the configured
URL prefix, which the server mounts as static files.
"""

from __future__ import annotations

import mimetypes
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Optional

from yqpaynow.core.errors import NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger

logger = get_logger(__name__)

IMAGE_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
DOCUMENT_CONTENT_TYPES = IMAGE_CONTENT_TYPES | {"application/pdf"}


@dataclass(frozen=True)
class StoredFile:
    key: str
    url: str
    size: int
    content_type: str

    @property
    def filename(self) -> str:
        return PurePosixPath(self.key).name


class LocalFileStorage:
    """Stores files on the local filesystem."""

    def __init__(self, root: str | Path, public_prefix: str = "/uploads", max_bytes: Optional[int] = None) -> None:
        self.root = Path(root)
        self.public_prefix = "/" + public_prefix.strip("/")
        self.max_bytes = max_bytes

    def _safe_key(self, key: str) -> str:
        """Normalize a key and reject anything escaping the storage root."""
        candidate = PurePosixPath(key.replace("\\", "/").lstrip("/"))
        if not candidate.parts or any(part in ("..", "") for part in candidate.parts):
            raise ValidationFailedError(f"Invalid file name: {key}", code="INVALID_FILENAME")
        return str(candidate)

    def key_from_url(self, url_or_key: str) -> str:
        """Accept either a public URL produced by :meth:`url_for` or a raw key."""
        value = url_or_key.split("?", 1)[0]
        marker = self.public_prefix + "/"
        if marker in value:
            value = value.split(marker, 1)[1]
        return self._safe_key(value)

    def url_for(self, key: str) -> str:
        return f"{self.public_prefix}/{self._safe_key(key)}"

    def path_for(self, key: str) -> Path:
        return self.root / self._safe_key(key)

    @staticmethod
    def generate_name(prefix: str, original_name: Optional[str] = None, content_type: Optional[str] = None) -> str:
        """``{prefix}-{timestamp}-{uuid8}{ext}`` with the extension taken from the name or content type."""
        ext = PurePosixPath(original_name).suffix.lower() if original_name else ""
        if not ext and content_type:
            ext = mimetypes.guess_extension(content_type) or ""
        stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
        return f"{prefix}-{stamp}-{uuid.uuid4().hex[:8]}{ext}"

    def save(
        self,
        data: bytes,
        *,
        folder: str,
        filename: Optional[str] = None,
        content_type: str = "application/octet-stream",
        prefix: str = "file",
    ) -> StoredFile:
        """
        Write ``data`` under ``folder``.

        Raises:
            ValidationFailedError: The payload is empty or larger than ``max_bytes``
        """
        if not data:
            raise ValidationFailedError("Uploaded file is empty", code="EMPTY_FILE")
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise ValidationFailedError(
                f"File exceeds the {self.max_bytes} byte limit",
                code="FILE_TOO_LARGE",
                details={"size": len(data), "max_bytes": self.max_bytes},
            )
        name = filename or self.generate_name(prefix, content_type=content_type)
        key = self._safe_key(f"{folder.strip('/')}/{name}")
        path = self.root / key
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.debug(f"Stored {len(data)} bytes at {key}")
        return StoredFile(key=key, url=self.url_for(key), size=len(data), content_type=content_type)

    def read(self, url_or_key: str) -> bytes:
        path = self.root / self.key_from_url(url_or_key)
        if not path.is_file():
            raise NotFoundError(f"File not found: {url_or_key}", code="FILE_NOT_FOUND")
        return path.read_bytes()

    def exists(self, url_or_key: str) -> bool:
        return (self.root / self.key_from_url(url_or_key)).is_file()

    def delete(self, url_or_key: str) -> bool:
        """Remove a stored file; returns False when it did not exist."""
        path = self.root / self.key_from_url(url_or_key)
        if not path.is_file():
            return False
        path.unlink()
        logger.debug(f"Deleted stored file {path}")
        return True

    def find(self, filename: str) -> Optional[str]:
        """Key of the first stored file named ``filename`` in any folder."""
        safe = self._safe_key(filename)
        direct = self.root / safe
        if direct.is_file():
            return safe
        if "/" in safe or not self.root.exists():
            return None
        for match in self.root.rglob(safe):
            if match.is_file():
                return match.relative_to(self.root).as_posix()
        return None
