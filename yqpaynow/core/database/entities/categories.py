"""Product category entity."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from ..base import TimestampedTable


class Category(TimestampedTable, table=True):
    """Table: categories"""

    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("theater_id", "normalized_name", name="uq_categories_theater_name"),
        {"extend_existing": True},
    )

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    name: str = Field(max_length=100)
    normalized_name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    image_url: Optional[str] = Field(default=None, max_length=500)
    color: str = Field(default="#6B8E98", max_length=16)
    sort_order: int = Field(default=0)
    is_active: bool = Field(default=True)
