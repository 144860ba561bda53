"""
QR code name entity.

A QR code name is the label (and seat class) printed under a theater's QR
codes, e.g. ``"Screen 1"`` / ``"Gold"``.
"""

from __future__ import annotations

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import TimestampedTable


class QRCodeName(TimestampedTable, table=True):
    """Table: qr_code_names"""

    __tablename__ = "qr_code_names"
    __table_args__ = (
        UniqueConstraint("theater_id", "normalized_name", name="uq_qr_code_names_theater_name"),
        {"extend_existing": True},
    )

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    qr_name: str = Field(max_length=100)
    normalized_name: str = Field(max_length=100)
    seat_class: str = Field(max_length=50)
    description: str = Field(default="", max_length=500)
    is_active: bool = Field(default=True)
    sort_order: int = Field(default=0)
