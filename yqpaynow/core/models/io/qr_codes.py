"""
Schema models for generated (single and screen) QR codes.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from yqpaynow.core.models.domain.enums import LogoType, Orientation, QRType


class SeatSelection(BaseModel):
    """Seats given either as explicit labels or as a ``seat_start``..``seat_end`` range."""

    seats: Optional[List[str]] = Field(default=None, description="Explicit seat labels, e.g. ['A1', 'A2']")
    seat_start: Optional[str] = Field(default=None, max_length=10, examples=["A1"])
    seat_end: Optional[str] = Field(default=None, max_length=10, examples=["C20"])


class QRCodeCreate(SeatSelection):
    theater_id: int
    qr_type: QRType
    qr_name: str = Field(min_length=1, max_length=100)
    seat_class: str = Field(min_length=1, max_length=50)
    logo_url: str = Field(default="", max_length=500)
    logo_type: LogoType = LogoType.DEFAULT
    orientation: Orientation = Orientation.LANDSCAPE

    @model_validator(mode="after")
    def _screen_needs_seats(self) -> "QRCodeCreate":
        if self.qr_type == QRType.SCREEN and not self.seats and not (self.seat_start and self.seat_end):
            raise ValueError("screen QR codes need seats or a seat_start/seat_end range")
        return self


class QRCodeUpdate(BaseModel):
    qr_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    seat_class: Optional[str] = Field(default=None, min_length=1, max_length=50)
    logo_url: Optional[str] = Field(default=None, max_length=500)
    logo_type: Optional[LogoType] = None
    orientation: Optional[Orientation] = None
    is_active: Optional[bool] = None


class QRSeatsAdd(SeatSelection):
    pass


class QRSeatUpdate(BaseModel):
    seat: Optional[str] = Field(default=None, min_length=1, max_length=10)
    is_active: Optional[bool] = None


class ScanRequest(BaseModel):
    seat: Optional[str] = Field(default=None, max_length=10)


class QRSeatRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    seat: str
    qr_code_url: str
    qr_code_data: str
    logo_url: str
    logo_type: str
    orientation: str
    scan_count: int
    last_scanned_at: Optional[datetime] = None
    is_active: bool


class QRCodeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    qr_type: str
    qr_name: str
    seat_class: str
    qr_code_url: Optional[str] = None
    qr_code_data: Optional[str] = None
    logo_url: str
    logo_type: str
    orientation: str
    scan_count: int
    last_scanned_at: Optional[datetime] = None
    generated_by: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    seats: List[QRSeatRead] = Field(default_factory=list)


class QRCodeGroup(BaseModel):
    """Codes sharing a QR name."""

    qr_name: str
    seat_class: str
    qr_type: str
    total_seats: int
    codes: List[QRCodeRead]


class QRStatsSummary(BaseModel):
    total_codes: int = 0
    single_codes: int = 0
    screen_codes: int = 0
    total_seats: int = 0
    active_codes: int = 0
    total_scans: int = 0


class QRVerifyResponse(BaseModel):
    is_valid: bool
    qr_name: str
    qr_type: Optional[str] = None
    seat_class: Optional[str] = None
    theater_id: Optional[int] = None


class ScanResponse(BaseModel):
    qr_code_id: int
    seat: Optional[str] = None
    scan_count: int
    last_scanned_at: datetime
