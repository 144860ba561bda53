"""Schemas shared by several resources."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
PHONE_PATTERN = r"^\+?[1-9]\d{0,15}$"


def to_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Aware UTC copy of ``value``; naive values are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class PaginationInfo(BaseModel):
    """Pagination block attached to list responses."""

    current_page: int = Field(description="1-based page number")
    total_pages: int
    total_items: int
    items_per_page: int
    has_next: bool = False
    has_prev: bool = False

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationInfo":
        total_pages = math.ceil(total / limit) if limit else 0
        return cls(
            current_page=page,
            total_pages=total_pages,
            total_items=total,
            items_per_page=limit,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class MessageResponse(BaseModel):
    success: bool = True
    message: str
