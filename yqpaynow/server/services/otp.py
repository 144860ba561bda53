"""
Phone number verification with one-time codes sent by SMS.

One pending code per phone number. A code is consumed when it matches, and
discarded when it expires or after too many wrong attempts.
"""

from __future__ import annotations

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import OTPVerification
from yqpaynow.core.database.repositories import OTPVerificationRepository
from yqpaynow.core.errors import ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.io.common import to_utc
from yqpaynow.core.models.io.sms import OTPSendResponse, OTPVerifyResponse
from yqpaynow.core.security import generate_otp
from yqpaynow.notifications import Msg91Client, clean_phone_number
from yqpaynow.server.core.config import SMSConfig

logger = get_logger(__name__)


class OTPService:
    def __init__(self, session: AsyncSession, config: SMSConfig, sms: Msg91Client):
        self.session = session
        self.config = config
        self.sms = sms
        self.otps = OTPVerificationRepository(session)

    def _ensure_enabled(self) -> None:
        if not self.config.enabled:
            raise ValidationFailedError("SMS service is disabled", code="SMS_DISABLED")

    async def send(self, phone_number: str, purpose: str = "order_verification") -> OTPSendResponse:
        """Store a fresh code for the number (replacing any pending one) and text it."""
        self._ensure_enabled()
        phone = clean_phone_number(phone_number)
        otp = generate_otp(self.config.otp_length)
        expires_at = utc_now() + timedelta(seconds=self.config.otp_expiry_seconds)

        record = await self.otps.get_by_phone(phone)
        if record is None:
            await self.otps.create(OTPVerification(phone_number=phone, otp=otp, purpose=purpose, expires_at=expires_at))
        else:
            record.otp, record.purpose, record.expires_at, record.attempts = otp, purpose, expires_at, 0
            await self.otps.update(record)

        result = await self.sms.send_otp(phone, otp)
        logger.info(f"OTP for {purpose} sent to ***{phone[-4:]}")
        return OTPSendResponse(
            message="OTP sent successfully",
            phone_number=phone,
            expires_in=self.config.otp_expiry_seconds,
            request_id=result.request_id,
        )

    async def verify(self, phone_number: str, otp: str) -> OTPVerifyResponse:
        """
        Check a code.

        Raises:
            ValidationFailedError: ``OTP_NOT_FOUND``, ``OTP_EXPIRED``,
                ``OTP_ATTEMPTS_EXCEEDED`` or ``INVALID_OTP``
        """
        phone = clean_phone_number(phone_number)
        record = await self.otps.get_by_phone(phone)
        if record is None:
            raise ValidationFailedError("No OTP was requested for this number", code="OTP_NOT_FOUND")

        if to_utc(record.expires_at) <= utc_now():
            await self.otps.delete(record.id)
            raise ValidationFailedError("OTP has expired", code="OTP_EXPIRED")

        if record.attempts >= self.config.otp_max_attempts:
            await self.otps.delete(record.id)
            raise ValidationFailedError("Too many failed attempts, request a new OTP", code="OTP_ATTEMPTS_EXCEEDED")

        if record.otp != otp:
            record.attempts += 1
            await self.otps.update(record)
            remaining = max(self.config.otp_max_attempts - record.attempts, 0)
            raise ValidationFailedError(
                f"Invalid OTP, {remaining} attempt(s) remaining",
                code="INVALID_OTP",
                details={"remaining_attempts": remaining},
            )

        await self.otps.delete(record.id)
        logger.info(f"OTP verified for ***{phone[-4:]}")
        return OTPVerifyResponse(verified=True, message="OTP verified successfully")
