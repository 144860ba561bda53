"""Menu URLs encoded into QR codes."""

from __future__ import annotations

from typing import Optional
from urllib.parse import quote

from yqpaynow.core.models.domain.enums import QRType


def build_qr_payload(
    base_url: str,
    theater_id: int,
    qr_name: str,
    *,
    seat: Optional[str] = None,
    qr_type: QRType | str = QRType.SINGLE,
) -> str:
    """
    URL a customer lands on after scanning.

    Screen codes: ``{base}/menu/{theater}?qrName=..&seat=..&type=screen``.
    Single codes: ``{base}/menu/{theater}?qrName=..&type=single``.
    """
    kind = QRType(qr_type)
    url = f"{base_url.rstrip('/')}/menu/{theater_id}?qrName={quote(qr_name, safe='')}"
    if kind is QRType.SCREEN:
        if not seat:
            raise ValueError("screen QR payloads need a seat")
        url += f"&seat={quote(seat, safe='')}"
    return f"{url}&type={kind.value}"
