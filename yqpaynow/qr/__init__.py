"""QR payloads, rendering and generation."""

from .generator import GeneratedQR, QRCodeGenerator
from .payload import build_qr_payload
from .render import render_qr_png

__all__ = ["GeneratedQR", "QRCodeGenerator", "build_qr_payload", "render_qr_png"]
