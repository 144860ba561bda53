"""
Theater entity.

A theater is the tenant: every role, staff user, QR code, banner, catalog
entry and order belongs to exactly one theater.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON
from sqlmodel import Field

from ..base import TimestampedTable, UTCTimestamp


def default_address() -> Dict[str, Any]:
    return {"street": "", "city": "", "state": "", "zip_code": "", "country": "India"}


def default_settings() -> Dict[str, Any]:
    return {
        "currency": "INR",
        "timezone": "Asia/Kolkata",
        "language": "en",
        "tax_rate": 0.0,
        "service_charge_rate": 0.0,
    }


def default_branding() -> Dict[str, Any]:
    return {"logo_url": None, "primary_color": "#6B0E9B", "secondary_color": "#F3F4F6", "banner_url": None}


class Theater(TimestampedTable, table=True):
    """Registered theater and its owner credentials.

    Table: theaters
    """

    __tablename__ = "theaters"
    __table_args__ = ({"extend_existing": True},)

    name: str = Field(max_length=100, index=True)
    username: str = Field(max_length=50, unique=True, index=True, description="Lower-cased owner login")
    password_hash: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)

    address: Dict[str, Any] = Field(default_factory=default_address, sa_type=JSON)
    settings: Dict[str, Any] = Field(default_factory=default_settings, sa_type=JSON)
    branding: Dict[str, Any] = Field(default_factory=default_branding, sa_type=JSON)
    owner_details: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)

    agreement_start: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)
    agreement_end: Optional[datetime] = Field(default=None, index=True, sa_type=UTCTimestamp)

    status: str = Field(default="active", max_length=16, description="active, inactive or suspended")
    is_active: bool = Field(default=True, index=True)
    last_login: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)

    @property
    def full_address(self) -> str:
        """Non-empty address parts joined with commas."""
        parts = [self.address.get(key) for key in ("street", "city", "state", "zip_code", "country")]
        return ", ".join(str(part) for part in parts if part)

    def __repr__(self) -> str:
        return f"Theater(id={self.id}, username={self.username}, status={self.status})"
