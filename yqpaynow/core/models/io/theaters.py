"""
Schema models for theater API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from yqpaynow.core.models.domain.enums import TheaterStatus

from .common import EMAIL_PATTERN, PHONE_PATTERN, PaginationInfo, to_utc


class AddressSchema(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "India"


class TheaterSettingsSchema(BaseModel):
    currency: str = "INR"
    timezone: str = "Asia/Kolkata"
    language: str = "en"
    tax_rate: float = Field(default=0.0, ge=0, le=100)
    service_charge_rate: float = Field(default=0.0, ge=0, le=100)


class BrandingSchema(BaseModel):
    logo_url: Optional[str] = None
    primary_color: str = "#6B0E9B"
    secondary_color: str = "#F3F4F6"
    banner_url: Optional[str] = None


class TheaterBase(BaseModel):
    """Fields shared by create and read schemas."""

    name: str = Field(min_length=1, max_length=100, description="Theater display name")
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    address: AddressSchema = Field(default_factory=AddressSchema)
    settings: TheaterSettingsSchema = Field(default_factory=TheaterSettingsSchema)
    branding: BrandingSchema = Field(default_factory=BrandingSchema)
    owner_details: Dict[str, Any] = Field(default_factory=dict)
    agreement_start: Optional[datetime] = None
    agreement_end: Optional[datetime] = None

    @field_validator("agreement_start", "agreement_end")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)


class TheaterCreate(TheaterBase):
    """Schema for registering a theater."""

    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(min_length=6, max_length=128)

    @field_validator("username")
    @classmethod
    def _lower_username(cls, value: str) -> str:
        return value.strip().lower()

    @model_validator(mode="after")
    def _check_agreement_window(self) -> "TheaterCreate":
        if self.agreement_start and self.agreement_end and self.agreement_end <= self.agreement_start:
            raise ValueError("agreement_end must be after agreement_start")
        return self


class TheaterUpdate(BaseModel):
    """Schema for partially updating a theater."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    username: Optional[str] = Field(default=None, min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN)
    phone: Optional[str] = Field(default=None, pattern=PHONE_PATTERN)
    address: Optional[AddressSchema] = None
    settings: Optional[TheaterSettingsSchema] = None
    branding: Optional[BrandingSchema] = None
    owner_details: Optional[Dict[str, Any]] = None
    agreement_start: Optional[datetime] = None
    agreement_end: Optional[datetime] = None
    status: Optional[TheaterStatus] = None

    @field_validator("agreement_start", "agreement_end")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    @field_validator("username")
    @classmethod
    def _lower_username(cls, value: Optional[str]) -> Optional[str]:
        return value.strip().lower() if value else value


class TheaterRead(TheaterBase):
    """Schema for reading a theater. Never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    status: str
    is_active: bool
    full_address: str = ""
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class TheaterListResponse(BaseModel):
    data: List[TheaterRead]
    pagination: PaginationInfo


class TheaterStatusUpdate(BaseModel):
    is_active: bool


class TheaterPasswordUpdate(BaseModel):
    current_password: Optional[str] = Field(default=None, description="Required when the caller is the theater itself")
    new_password: str = Field(min_length=6, max_length=128)


class AgreementStatus(BaseModel):
    theater_id: int
    agreement_start: Optional[datetime] = None
    agreement_end: Optional[datetime] = None
    days_remaining: Optional[int] = None
    expired: bool = False
    expiring_soon: bool = False


class ExpiringAgreement(BaseModel):
    theater_id: int
    name: str
    agreement_end: datetime
    days_remaining: int


class TheaterSettingsPatch(BaseModel):
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    timezone: Optional[str] = Field(default=None, max_length=64)
    language: Optional[str] = Field(default=None, max_length=8)
    tax_rate: Optional[float] = Field(default=None, ge=0, le=100)
    service_charge_rate: Optional[float] = Field(default=None, ge=0, le=100)


class BrandingPatch(BaseModel):
    logo_url: Optional[str] = None
    primary_color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    secondary_color: Optional[str] = Field(default=None, pattern=r"^#[0-9A-Fa-f]{6}$")
    banner_url: Optional[str] = None


class TheaterSettingsUpdate(BaseModel):
    """Keys sent are merged into the stored settings; keys left out keep their value."""

    settings: Optional[TheaterSettingsPatch] = None
    branding: Optional[BrandingPatch] = None


class TheaterSettingsRead(BaseModel):
    success: bool = True
    theater_id: int
    settings: TheaterSettingsSchema
    branding: BrandingSchema
