"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.

Every timestamp column is declared with :class:`UTCTimestamp`: values are
timezone-aware UTC datetimes in Python, whatever the backend returns.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import ConfigDict
from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator
from sqlmodel import Field, SQLModel

from yqpaynow.core.models.io.common import to_utc


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


class UTCTimestamp(TypeDecorator):
    """``TIMESTAMP WITH TIME ZONE`` that always binds and loads aware UTC values.

    SQLite keeps no offset, so loaded values are re-tagged as UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        return to_utc(value)

    def process_result_value(self, value: Optional[datetime], dialect: Any) -> Optional[datetime]:
        return to_utc(value)


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


class TimestampedTable(Base):
    """Integer primary key plus creation and modification timestamps."""

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=UTCTimestamp)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=UTCTimestamp)
