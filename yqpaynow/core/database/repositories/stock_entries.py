"""Stock ledger repository."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Sequence

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.stock_entries import StockEntry
from .base import TheaterScopedRepository


class StockEntryRepository(TheaterScopedRepository[StockEntry]):
    default_order = ("entry_date", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, StockEntry)

    async def list_for_product(
        self,
        theater_id: int,
        product_id: int,
        *,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
    ) -> List[StockEntry]:
        """Ledger of one product in replay order, optionally limited to ``[date_from, date_to)``."""
        stmt = select(StockEntry).where(StockEntry.theater_id == theater_id, StockEntry.product_id == product_id)
        if date_from is not None:
            stmt = stmt.where(StockEntry.entry_date >= date_from)
        if date_to is not None:
            stmt = stmt.where(StockEntry.entry_date < date_to)
        result = await self.session.execute(self._ordered(stmt))
        return list(result.scalars().all())

    async def list_for_order(self, order_id: int) -> List[StockEntry]:
        result = await self.session.execute(self._ordered(select(StockEntry).where(StockEntry.order_id == order_id)))
        return list(result.scalars().all())

    async def add_all(self, entries: Sequence[StockEntry]) -> List[StockEntry]:
        self.session.add_all(list(entries))
        await self.session.commit()
        for entry in entries:
            await self.session.refresh(entry)
        return list(entries)

    async def delete_manual_between(self, theater_id: int, product_id: int, start: datetime, end: datetime) -> int:
        """Remove the entries in ``[start, end)`` that were not written by an order."""
        stmt = delete(StockEntry).where(
            StockEntry.theater_id == theater_id,
            StockEntry.product_id == product_id,
            StockEntry.entry_date >= start,
            StockEntry.entry_date < end,
            StockEntry.order_id.is_(None),
        )
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0
