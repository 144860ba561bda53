"""Theater banner entity."""

from __future__ import annotations

from sqlmodel import Field

from ..base import TimestampedTable


class Banner(TimestampedTable, table=True):
    """Promotional image shown on a theater's menu and kiosk screens.

    Table: banners
    """

    __tablename__ = "banners"
    __table_args__ = ({"extend_existing": True},)

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    image_url: str = Field(max_length=500)
    is_active: bool = Field(default=True)
    sort_order: int = Field(default=0)
