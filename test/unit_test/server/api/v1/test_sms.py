"""Tests for the OTP and test SMS endpoints against a fake MSG91 gateway."""

from datetime import timedelta

import pytest
from httpx import AsyncClient

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.repositories import OTPVerificationRepository

pytestmark = pytest.mark.asyncio

PHONE = "+91 98765 43210"
CLEAN_PHONE = "+919876543210"


async def _send(client: AsyncClient, phone: str = PHONE):
    return await client.post("/api/v1/sms/send-otp", json={"phone_number": phone})


async def _verify(client: AsyncClient, otp: str, phone: str = PHONE):
    return await client.post("/api/v1/sms/verify-otp", json={"phone_number": phone, "otp": otp})


class TestSendOtp:
    async def test_send(self, client: AsyncClient, sms_gateway):
        response = await _send(client)

        assert response.status_code == 200
        body = response.json()
        assert body["phone_number"] == CLEAN_PHONE
        assert body["expires_in"] == 300
        assert body["request_id"] == "req-1"
        sent = sms_gateway.requests[0]["json"]
        assert sent["mobiles"] == "919876543210"
        assert sent["template_id"] == "tpl-1"
        assert len(sent["OTP"]) == 4

    async def test_resend_replaces_pending_code(self, client: AsyncClient, session, sms_gateway):
        await _send(client)
        await _send(client)

        first, second = (request["json"]["OTP"] for request in sms_gateway.requests)
        record = await OTPVerificationRepository(session).get_by_phone(CLEAN_PHONE)
        assert record.otp == second
        assert record.attempts == 0

    async def test_disabled(self, client: AsyncClient, sms_config, sms_gateway):
        sms_config.enabled = False

        response = await _send(client)

        assert response.status_code == 400
        assert response.json()["code"] == "SMS_DISABLED"
        assert sms_gateway.requests == []

    async def test_provider_failure(self, client: AsyncClient, sms_gateway):
        sms_gateway.reply = {"type": "error", "message": "Invalid template"}

        response = await _send(client)

        assert response.status_code == 502
        assert response.json()["code"] == "SMS_DELIVERY_FAILED"


class TestVerifyOtp:
    async def test_correct_code_is_consumed(self, client: AsyncClient, sms_gateway):
        await _send(client)
        otp = sms_gateway.requests[0]["json"]["OTP"]

        verified = await _verify(client, otp)
        again = await _verify(client, otp)

        assert verified.json() == {"success": True, "verified": True, "message": "OTP verified successfully"}
        assert again.json()["code"] == "OTP_NOT_FOUND"

    async def test_wrong_code_counts_attempts(self, client: AsyncClient, sms_gateway):
        await _send(client)
        otp = sms_gateway.requests[0]["json"]["OTP"]
        wrong = "0000" if otp != "0000" else "1111"

        responses = [await _verify(client, wrong) for _ in range(3)]
        locked = await _verify(client, otp)

        assert [r.json()["details"]["remaining_attempts"] for r in responses] == [2, 1, 0]
        assert locked.json()["code"] == "OTP_ATTEMPTS_EXCEEDED"

    async def test_expired_code(self, client: AsyncClient, session, sms_gateway):
        await _send(client)
        record = await OTPVerificationRepository(session).get_by_phone(CLEAN_PHONE)
        record.expires_at = utc_now() - timedelta(seconds=1)
        session.add(record)
        await session.commit()

        response = await _verify(client, record.otp)

        assert response.json()["code"] == "OTP_EXPIRED"

    async def test_malformed_code(self, client: AsyncClient):
        response = await _verify(client, "12ab")
        assert response.status_code == 422


class TestTestSms:
    async def test_admin_sends_message(self, client: AsyncClient, admin_headers, sms_gateway):
        response = await client.post(
            "/api/v1/sms/test-sms", json={"phone_number": PHONE, "message": "Hello"}, headers=admin_headers
        )

        assert response.json()["message"] == f"Test SMS sent to {CLEAN_PHONE}"
        assert sms_gateway.requests[0]["json"]["message"] == "Hello"

    async def test_requires_admin(self, client: AsyncClient, theater_headers):
        response = await client.post(
            "/api/v1/sms/test-sms", json={"phone_number": PHONE, "message": "Hello"}, headers=theater_headers
        )
        assert response.status_code == 403
