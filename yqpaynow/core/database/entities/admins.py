"""
Platform administrator entity.

Admins log in with their e-mail address and manage every theater.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import TimestampedTable, UTCTimestamp


class Admin(TimestampedTable, table=True):
    """Super admin or admin account.

    Table: admins
    """

    __tablename__ = "admins"
    __table_args__ = ({"extend_existing": True},)

    email: str = Field(max_length=255, unique=True, index=True, description="Lower-cased login e-mail")
    password_hash: str = Field(max_length=255)
    name: str = Field(max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    role: str = Field(default="admin", max_length=32, description="super_admin or admin")
    is_active: bool = Field(default=True)
    last_login: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)

    def __repr__(self) -> str:
        return f"Admin(email={self.email}, role={self.role})"
