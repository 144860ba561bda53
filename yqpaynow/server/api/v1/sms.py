"""
SMS API Endpoints.

One-time passwords for customer phone verification, delivered through MSG91.
"""

from fastapi import APIRouter

from yqpaynow.core.errors import ValidationFailedError
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.core.models.io.sms import (
    OTPSendResponse,
    OTPVerifyResponse,
    SendOTPRequest,
    TestSMSRequest,
    VerifyOTPRequest,
)
from yqpaynow.notifications import clean_phone_number
from yqpaynow.server.services.deps import AdminUserDep, SessionDep, SmsClientDep, SmsConfigDep
from yqpaynow.server.services.otp import OTPService

router = APIRouter(tags=["sms"])


@router.post(
    "/send-otp",
    response_model=OTPSendResponse,
    summary="Send OTP",
    responses={400: {"description": "SMS is disabled"}, 502: {"description": "SMS provider error"}},
)
async def send_otp(
    data: SendOTPRequest, session: SessionDep, config: SmsConfigDep, sms: SmsClientDep
) -> OTPSendResponse:
    return await OTPService(session, config, sms).send(data.phone_number, data.purpose)


@router.post(
    "/verify-otp",
    response_model=OTPVerifyResponse,
    summary="Verify OTP",
    description="A code can be tried a limited number of times before it is discarded.",
)
async def verify_otp(
    data: VerifyOTPRequest, session: SessionDep, config: SmsConfigDep, sms: SmsClientDep
) -> OTPVerifyResponse:
    return await OTPService(session, config, sms).verify(data.phone_number, data.otp)


@router.post("/test-sms", response_model=MessageResponse, summary="Send Test SMS")
async def test_sms(data: TestSMSRequest, config: SmsConfigDep, sms: SmsClientDep, _: AdminUserDep) -> MessageResponse:
    if not config.enabled:
        raise ValidationFailedError("SMS service is disabled", code="SMS_DISABLED")
    phone = clean_phone_number(data.phone_number)
    await sms.send_message(phone, data.message)
    return MessageResponse(message=f"Test SMS sent to {phone}")
