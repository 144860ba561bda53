"""Schema models for authentication."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from .roles import PermissionEntry


class LoginRequest(BaseModel):
    """Admins log in by e-mail; theater owners and staff by username."""

    email: Optional[str] = Field(default=None, max_length=255)
    username: Optional[str] = Field(default=None, max_length=255)
    password: str = Field(min_length=1)

    @property
    def identifier(self) -> str:
        return (self.email or self.username or "").strip()


class PinValidationRequest(BaseModel):
    user_id: int
    theater_id: int
    pin: str = Field(pattern=r"^\d{4}$")


class RefreshRequest(BaseModel):
    refresh_token: str = Field(min_length=1)


class UserSummary(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str
    user_type: str
    theater_id: Optional[int] = None
    theater_name: Optional[str] = None


class PendingAuth(BaseModel):
    user_id: int
    username: str
    theater_id: int


class AuthResponse(BaseModel):
    """Login/PIN response.

    Either tokens and a user, or ``is_pin_required`` with ``pending_auth``.
    """

    success: bool = True
    token: Optional[str] = None
    refresh_token: Optional[str] = None
    user: Optional[UserSummary] = None
    role_permissions: List[PermissionEntry] = Field(default_factory=list)
    is_pin_required: bool = False
    pending_auth: Optional[PendingAuth] = None

    @model_validator(mode="after")
    def _one_outcome(self) -> "AuthResponse":
        if self.is_pin_required and self.pending_auth is None:
            raise ValueError("pending_auth is required when is_pin_required is set")
        return self


class TokenRefreshResponse(BaseModel):
    success: bool = True
    token: str
