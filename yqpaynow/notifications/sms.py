"""MSG91 SMS client

Overview
--------
Thin async HTTP client for the MSG91 flow API used to deliver OTP codes
and ad-hoc text messages to Indian mobile numbers.

Errors
------
Transport failures, non-2xx responses and responses whose ``type`` is not
``"success"`` are raised as ``SmsDeliveryError`` carrying the status code
and the provider payload.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from yqpaynow.core.errors import ExternalServiceError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.server.core.config import SMSConfig

logger = get_logger(__name__)

_PHONE_NOISE = re.compile(r"[\s\-()]")


class SmsDeliveryError(ExternalServiceError):
    """The SMS provider rejected or failed the request."""

    default_code = "SMS_DELIVERY_FAILED"


def clean_phone_number(raw: str) -> str:
    """Strip spaces, dashes and parentheses and make sure the number starts with ``+``."""
    cleaned = _PHONE_NOISE.sub("", raw or "")
    if cleaned and not cleaned.startswith("+"):
        cleaned = f"+{cleaned}"
    return cleaned


@dataclass(frozen=True)
class SmsResult:
    success: bool
    request_id: Optional[str] = None
    raw: Optional[Dict[str, Any]] = None


class Msg91Client:
    """Async MSG91 client.

    Args:
        config: Gateway credentials and template settings
        client: Optional preconfigured ``httpx.AsyncClient`` (tests inject a mock transport)
        timeout: Default HTTP timeout for the internal client
    """

    def __init__(self, config: SMSConfig, *, client: Optional[httpx.AsyncClient] = None, timeout: float = 10.0) -> None:
        self.config = config
        self.base_url = config.base_url.rstrip("/")
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._owns_client = client is None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> Dict[str, str]:
        return {"authkey": self.config.api_key or "", "Content-Type": "application/json", "accept": "application/json"}

    def _ensure_configured(self) -> None:
        missing = [
            name
            for name, value in (
                ("MSG91_API_KEY", self.config.api_key),
                ("MSG91_TEMPLATE_ID", self.config.template_id),
                ("MSG91_SENDER_ID", self.config.sender_id),
            )
            if not value
        ]
        if missing:
            raise SmsDeliveryError("SMS gateway is not configured", details={"missing": missing})

    async def _post(self, path: str, payload: Dict[str, Any]) -> SmsResult:
        url = f"{self.base_url}{path}"
        try:
            response = await self._client.post(url, json=payload, headers=self._headers())
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SmsDeliveryError(
                f"MSG91 request failed: {e.response.status_code}",
                details={"status_code": e.response.status_code, "body": e.response.text},
            ) from e
        except httpx.HTTPError as e:
            raise SmsDeliveryError(f"MSG91 request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {"type": "error", "message": response.text}

        if body.get("type") != "success":
            logger.warning(f"MSG91 rejected request to {path}: {body}")
            raise SmsDeliveryError(body.get("message") or "SMS provider rejected the request", details={"response": body})
        return SmsResult(success=True, request_id=body.get("request_id") or body.get("message"), raw=body)

    async def send_otp(self, phone_number: str, otp: str) -> SmsResult:
        """Send an OTP through the configured flow template.

        API
        ---
        - Method/Path: ``POST /flow/``
        - Body: ``{template_id, sender, short_url, mobiles, <template_variable>: otp}``
        """
        self._ensure_configured()
        mobiles = clean_phone_number(phone_number).lstrip("+")
        payload = {
            "template_id": self.config.template_id,
            "sender": self.config.sender_id,
            "short_url": "0",
            "mobiles": mobiles,
            self.config.template_variable: otp,
        }
        logger.info(f"Sending OTP SMS to ***{mobiles[-4:]}")
        return await self._post("/flow/", payload)

    async def send_message(self, phone_number: str, message: str) -> SmsResult:
        """Send a plain message through the flow template's ``message`` variable."""
        self._ensure_configured()
        mobiles = clean_phone_number(phone_number).lstrip("+")
        payload = {
            "template_id": self.config.template_id,
            "sender": self.config.sender_id,
            "short_url": "0",
            "mobiles": mobiles,
            "message": message,
        }
        return await self._post("/flow/", payload)
