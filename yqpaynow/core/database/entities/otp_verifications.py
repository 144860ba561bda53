"""Pending SMS one-time password entity."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field

from ..base import TimestampedTable, UTCTimestamp


class OTPVerification(TimestampedTable, table=True):
    """One outstanding OTP per phone number.

    Table: otp_verifications
    """

    __tablename__ = "otp_verifications"
    __table_args__ = ({"extend_existing": True},)

    phone_number: str = Field(max_length=20, unique=True, index=True)
    otp: str = Field(max_length=8)
    purpose: str = Field(default="order_verification", max_length=50)
    expires_at: datetime = Field(sa_type=UTCTimestamp)
    attempts: int = Field(default=0)
