"""Schema models for theater staff users."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import EMAIL_PATTERN, PaginationInfo


class TheaterUserCreate(BaseModel):
    theater_id: int
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(min_length=6, max_length=128)
    full_name: str = Field(min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    role_id: Optional[int] = None
    is_active: bool = True

    @field_validator("username", "email")
    @classmethod
    def _lower(cls, value: str) -> str:
        return value.strip().lower()


class TheaterUserUpdate(BaseModel):
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    password: Optional[str] = Field(default=None, min_length=6, max_length=128)
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    phone_number: Optional[str] = Field(default=None, max_length=20)
    role_id: Optional[int] = None
    is_active: Optional[bool] = None
    is_email_verified: Optional[bool] = None
    profile_image: Optional[str] = None
    regenerate_pin: bool = False


class TheaterUserRead(BaseModel):
    """Staff user as returned by the API; the PIN is shown to theater admins."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    username: str
    email: str
    full_name: str
    phone_number: Optional[str] = None
    pin: str
    role_id: Optional[int] = None
    is_active: bool
    is_email_verified: bool
    profile_image: Optional[str] = None
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TheaterUserListResponse(BaseModel):
    data: List[TheaterUserRead]
    pagination: PaginationInfo
