"""Schema models for SMS OTP endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class SendOTPRequest(BaseModel):
    phone_number: str = Field(min_length=6, max_length=25)
    purpose: str = Field(default="order_verification", max_length=50)


class VerifyOTPRequest(BaseModel):
    phone_number: str = Field(min_length=6, max_length=25)
    otp: str = Field(pattern=r"^\d{4,8}$")


class TestSMSRequest(BaseModel):
    phone_number: str = Field(min_length=6, max_length=25)
    message: str = Field(min_length=1, max_length=500)


class OTPSendResponse(BaseModel):
    success: bool = True
    message: str
    phone_number: str
    expires_in: int
    request_id: Optional[str] = None


class OTPVerifyResponse(BaseModel):
    success: bool = True
    verified: bool
    message: str
