"""Schema models for file uploads."""

from __future__ import annotations

from pydantic import BaseModel


class UploadResponse(BaseModel):
    success: bool = True
    url: str
    filename: str
    size: int
    content_type: str
