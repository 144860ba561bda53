"""
QR image rendering with qrcode and Pillow.
"""

from __future__ import annotations

import io
from typing import Optional

import qrcode
from PIL import Image, ImageDraw, ImageFont

from yqpaynow.core.models.domain.enums import Orientation

LOGO_MAX_RATIO = 0.25
BOX_SIZE = 10
BORDER = 4


def _qr_image(data: str) -> Image.Image:
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=BOX_SIZE,
        border=BORDER,
    )
    qr.add_data(data)
    qr.make(fit=True)
    return qr.make_image(fill_color="black", back_color="white").convert("RGB")


def _paste_logo(image: Image.Image, logo_bytes: bytes) -> Image.Image:
    """Center a logo covering at most a quarter of the QR side."""
    logo = Image.open(io.BytesIO(logo_bytes)).convert("RGBA")
    limit = int(image.width * LOGO_MAX_RATIO)
    logo.thumbnail((limit, limit))
    offset = ((image.width - logo.width) // 2, (image.height - logo.height) // 2)
    padded = Image.new("RGB", (logo.width + 8, logo.height + 8), "white")
    image.paste(padded, (offset[0] - 4, offset[1] - 4))
    image.paste(logo, offset, mask=logo)
    return image


def _draw_caption(canvas: Image.Image, text: str, box: tuple[int, int, int, int]) -> None:
    draw = ImageDraw.Draw(canvas)
    font = ImageFont.load_default()
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = box[0] + (box[2] - box[0] - (right - left)) // 2
    y = box[1] + (box[3] - box[1] - (bottom - top)) // 2
    draw.text((x, y), text, fill="black", font=font)


def render_qr_png(
    data: str,
    *,
    logo: Optional[bytes] = None,
    orientation: Orientation | str = Orientation.LANDSCAPE,
    label: Optional[str] = None,
) -> bytes:
    """
    Render ``data`` as a PNG.

    Args:
        data: Text to encode
        logo: Optional image bytes centered over the code
        orientation: Landscape puts the caption beside the code, portrait below it
        label: Optional caption (QR name and seat)

    Returns:
        PNG bytes
    """
    image = _qr_image(data)
    if logo:
        image = _paste_logo(image, logo)

    side = image.width
    if Orientation(orientation) is Orientation.PORTRAIT:
        band = side // 5
        canvas = Image.new("RGB", (side, side + band), "white")
        canvas.paste(image, (0, 0))
        caption_box = (0, side, side, side + band)
    else:
        band = side // 2
        canvas = Image.new("RGB", (side + band, side), "white")
        canvas.paste(image, (0, 0))
        caption_box = (side, 0, side + band, side)

    if label:
        _draw_caption(canvas, label, caption_box)

    buffer = io.BytesIO()
    canvas.save(buffer, format="PNG")
    return buffer.getvalue()
