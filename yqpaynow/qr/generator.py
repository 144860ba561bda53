"""
QR code generation: payload, image and storage in one step.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence

from yqpaynow.core.errors import YQPayError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import Orientation, QRType
from yqpaynow.storage import LocalFileStorage

from .payload import build_qr_payload
from .render import render_qr_png

logger = get_logger(__name__)


@dataclass(frozen=True)
class GeneratedQR:
    data: str
    url: str
    seat: Optional[str] = None


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.lower()).strip("-") or "qr"


class QRCodeGenerator:
    """Renders QR codes and stores the images."""

    def __init__(self, storage: LocalFileStorage, base_url: str) -> None:
        self.storage = storage
        self.base_url = base_url

    def load_logo(self, logo_url: Optional[str]) -> Optional[bytes]:
        """Logo bytes from storage, or None when absent or unreadable."""
        if not logo_url:
            return None
        try:
            return self.storage.read(logo_url)
        except YQPayError as e:
            logger.warning(f"QR logo {logo_url} unavailable, rendering without it: {e.message}")
            return None

    def render(
        self,
        theater_id: int,
        qr_name: str,
        qr_type: QRType | str,
        *,
        seat: Optional[str] = None,
        orientation: Orientation | str = Orientation.LANDSCAPE,
        logo: Optional[bytes] = None,
    ) -> tuple[str, bytes]:
        """Payload and PNG for one code, without storing it."""
        data = build_qr_payload(self.base_url, theater_id, qr_name, seat=seat, qr_type=qr_type)
        label = f"{qr_name} - {seat}" if seat else qr_name
        return data, render_qr_png(data, logo=logo, orientation=orientation, label=label)

    def generate(
        self,
        theater_id: int,
        qr_name: str,
        qr_type: QRType | str,
        *,
        seat: Optional[str] = None,
        orientation: Orientation | str = Orientation.LANDSCAPE,
        logo_url: Optional[str] = None,
        logo: Optional[bytes] = None,
    ) -> GeneratedQR:
        if logo is None:
            logo = self.load_logo(logo_url)
        data, png = self.render(theater_id, qr_name, qr_type, seat=seat, orientation=orientation, logo=logo)
        prefix = _slug(f"{qr_name}-{seat}" if seat else qr_name)
        stored = self.storage.save(png, folder=f"qr-codes/{theater_id}", content_type="image/png", prefix=prefix)
        return GeneratedQR(data=data, url=stored.url, seat=seat)

    def generate_single(
        self,
        theater_id: int,
        qr_name: str,
        *,
        orientation: Orientation | str = Orientation.LANDSCAPE,
        logo_url: Optional[str] = None,
        logo: Optional[bytes] = None,
    ) -> GeneratedQR:
        return self.generate(
            theater_id, qr_name, QRType.SINGLE, orientation=orientation, logo_url=logo_url, logo=logo
        )

    def generate_screen(
        self,
        theater_id: int,
        qr_name: str,
        seats: Sequence[str],
        *,
        orientation: Orientation | str = Orientation.LANDSCAPE,
        logo_url: Optional[str] = None,
    ) -> List[GeneratedQR]:
        """One stored code per seat; the logo is loaded once for the batch."""
        logo = self.load_logo(logo_url)
        return [
            self.generate(theater_id, qr_name, QRType.SCREEN, seat=seat, orientation=orientation, logo=logo)
            for seat in seats
        ]
