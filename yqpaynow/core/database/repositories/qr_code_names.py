"""QR code name repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.qr_code_names import QRCodeName
from .base import TheaterScopedRepository


class QRCodeNameRepository(TheaterScopedRepository[QRCodeName]):
    search_fields = ("qr_name", "seat_class")
    default_order = ("sort_order", "qr_name")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, QRCodeName)
