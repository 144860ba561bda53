"""Schema models for QR code names."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class QRCodeNameCreate(BaseModel):
    theater_id: int
    qr_name: str = Field(min_length=1, max_length=100)
    seat_class: str = Field(min_length=1, max_length=50)
    description: str = Field(default="", max_length=500)
    is_active: bool = True
    sort_order: int = 0


class QRCodeNameUpdate(BaseModel):
    qr_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    seat_class: Optional[str] = Field(default=None, min_length=1, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class QRCodeNameRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    qr_name: str
    seat_class: str
    description: str
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime
