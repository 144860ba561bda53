"""
Theater staff user entity.

Staff log in with username and password and then confirm with their PIN.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import TimestampedTable, UTCTimestamp


class TheaterUser(TimestampedTable, table=True):
    """Staff account belonging to a theater.

    Table: theater_users
    """

    __tablename__ = "theater_users"
    __table_args__ = ({"extend_existing": True},)

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    username: str = Field(max_length=50, unique=True, index=True)
    email: str = Field(max_length=255)
    password_hash: str = Field(max_length=255)
    full_name: str = Field(max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    pin: str = Field(max_length=4, unique=True, description="4-digit second factor, unique across all staff")
    role_id: Optional[int] = Field(default=None, foreign_key="roles.id", index=True)
    is_active: bool = Field(default=True)
    is_email_verified: bool = Field(default=False)
    profile_image: Optional[str] = Field(default=None, max_length=500)
    last_login: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)

    def __repr__(self) -> str:
        return f"TheaterUser(id={self.id}, username={self.username}, theater_id={self.theater_id})"
