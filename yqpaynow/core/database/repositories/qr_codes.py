"""
Generated QR code repositories.

``QRCodeRepository`` handles the code rows; ``QRSeatRepository`` the
per-seat rows of screen codes.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.qr_codes import QRCode, QRSeat
from .base import SqlModelRepository, TheaterScopedRepository


class QRCodeRepository(TheaterScopedRepository[QRCode]):
    """Repository for QR code rows."""

    search_fields = ("qr_name", "seat_class")
    default_order = ("qr_name", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, QRCode)

    async def find_by_name(self, theater_id: int, qr_name: str, qr_type: Optional[str] = None) -> List[QRCode]:
        """Codes of a theater carrying ``qr_name`` (case-insensitive)."""
        stmt = select(QRCode).where(
            QRCode.theater_id == theater_id, func.lower(QRCode.qr_name) == qr_name.strip().lower()
        )
        if qr_type:
            stmt = stmt.where(QRCode.qr_type == qr_type)
        result = await self.session.execute(stmt.order_by(QRCode.id))
        return list(result.scalars().all())


class QRSeatRepository(SqlModelRepository[QRSeat]):
    """Repository for per-seat QR rows."""

    default_order = ("id",)

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, QRSeat)

    async def list_for_code(self, qr_code_id: int) -> List[QRSeat]:
        stmt = select(QRSeat).where(QRSeat.qr_code_id == qr_code_id).order_by(QRSeat.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_for_codes(self, qr_code_ids: Sequence[int]) -> Dict[int, List[QRSeat]]:
        """Seats grouped by code id; every requested id is present in the result."""
        grouped: Dict[int, List[QRSeat]] = {code_id: [] for code_id in qr_code_ids}
        if not qr_code_ids:
            return grouped
        stmt = select(QRSeat).where(QRSeat.qr_code_id.in_(list(qr_code_ids))).order_by(QRSeat.id)
        result = await self.session.execute(stmt)
        for seat in result.scalars().all():
            grouped[seat.qr_code_id].append(seat)
        return grouped

    async def get_for_code(self, qr_code_id: int, seat_id: int) -> Optional[QRSeat]:
        stmt = select(QRSeat).where(QRSeat.qr_code_id == qr_code_id, QRSeat.id == seat_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_label(self, qr_code_id: int, seat: str) -> Optional[QRSeat]:
        stmt = select(QRSeat).where(QRSeat.qr_code_id == qr_code_id, QRSeat.seat == seat)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def add_all(self, seats: Sequence[QRSeat]) -> List[QRSeat]:
        self.session.add_all(list(seats))
        await self.session.commit()
        for seat in seats:
            await self.session.refresh(seat)
        return list(seats)
