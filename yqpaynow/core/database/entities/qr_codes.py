"""
Generated QR code entities.

A ``QRCode`` row is either a single code (one image for a counter or zone)
or a screen code whose per-seat images live in ``QRSeat`` rows.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import TimestampedTable, UTCTimestamp


class QRCode(TimestampedTable, table=True):
    """Table: qr_codes"""

    __tablename__ = "qr_codes"
    __table_args__ = ({"extend_existing": True},)

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    qr_type: str = Field(max_length=16, description="single or screen")
    qr_name: str = Field(max_length=100, index=True)
    seat_class: str = Field(max_length=50)
    qr_code_url: Optional[str] = Field(default=None, max_length=500, description="Stored image, single codes only")
    qr_code_data: Optional[str] = Field(default=None, max_length=1000, description="Encoded URL, single codes only")
    logo_url: str = Field(default="", max_length=500)
    logo_type: str = Field(default="default", max_length=16)
    orientation: str = Field(default="landscape", max_length=16)
    scan_count: int = Field(default=0)
    last_scanned_at: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)
    generated_by: Optional[str] = Field(default=None, max_length=100)
    is_active: bool = Field(default=True)


class QRSeat(TimestampedTable, table=True):
    """Per-seat code of a screen QR code.

    Table: qr_seats
    """

    __tablename__ = "qr_seats"
    __table_args__ = (
        UniqueConstraint("qr_code_id", "seat", name="uq_qr_seats_code_seat"),
        {"extend_existing": True},
    )

    qr_code_id: int = Field(foreign_key="qr_codes.id", index=True)
    seat: str = Field(max_length=10)
    qr_code_url: str = Field(max_length=500)
    qr_code_data: str = Field(max_length=1000)
    logo_url: str = Field(default="", max_length=500)
    logo_type: str = Field(default="default", max_length=16)
    orientation: str = Field(default="landscape", max_length=16)
    scan_count: int = Field(default=0)
    last_scanned_at: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)
    is_active: bool = Field(default=True)
