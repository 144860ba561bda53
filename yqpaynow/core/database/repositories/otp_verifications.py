"""OTP verification repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.otp_verifications import OTPVerification
from .base import SqlModelRepository


class OTPVerificationRepository(SqlModelRepository[OTPVerification]):
    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, OTPVerification)

    async def get_by_phone(self, phone_number: str) -> Optional[OTPVerification]:
        stmt = select(OTPVerification).where(OTPVerification.phone_number == phone_number)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
