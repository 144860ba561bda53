"""
Order repository.

Adds the date-window, summary and per-status aggregates used by order
listings and dashboards.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.orders import Order
from .base import QueryBuilder, TheaterScopedRepository


class OrderRepository(TheaterScopedRepository[Order]):
    """Repository for orders."""

    default_order = ("created_at", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Order)

    def _window(
        self,
        stmt,
        theater_id: Optional[int],
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        search: Optional[str] = None,
    ):
        if theater_id is not None:
            stmt = stmt.where(Order.theater_id == theater_id)
        stmt = QueryBuilder.apply_filters(stmt, Order, {"status": status, "payment_status": payment_status})
        if date_from is not None:
            stmt = stmt.where(Order.created_at >= date_from)
        if date_to is not None:
            stmt = stmt.where(Order.created_at < date_to)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                Order.order_number.ilike(pattern) | Order.customer_info["name"].as_string().ilike(pattern)
            )
        return stmt

    async def search(
        self,
        theater_id: int,
        *,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Tuple[List[Order], int]:
        """Newest-first page of a theater's orders plus the total match count."""
        window = dict(
            status=status, payment_status=payment_status, date_from=date_from, date_to=date_to, search=search
        )
        stmt = self._window(select(Order), theater_id, **window).order_by(Order.created_at.desc(), Order.id.desc())
        stmt = QueryBuilder.apply_pagination(stmt, limit, offset)
        rows = list((await self.session.execute(stmt)).scalars().all())
        count_stmt = self._window(select(func.count()).select_from(Order), theater_id, **window)
        total = int((await self.session.execute(count_stmt)).scalar_one())
        return rows, total

    async def count_created_between(self, theater_id: Optional[int], start: datetime, end: datetime) -> int:
        stmt = self._window(select(func.count()).select_from(Order), theater_id, date_from=start, date_to=end)
        return int((await self.session.execute(stmt)).scalar_one())

    async def revenue(
        self,
        theater_id: Optional[int] = None,
        *,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        search: Optional[str] = None,
        statuses: Optional[Sequence[str]] = None,
    ) -> float:
        """Sum of order totals in the window, excluding cancelled orders; ``statuses`` narrows it further."""
        stmt = self._window(
            select(func.coalesce(func.sum(Order.total), 0.0)),
            theater_id,
            status=status,
            payment_status=payment_status,
            date_from=date_from,
            date_to=date_to,
            search=search,
        ).where(Order.status != "cancelled")
        if statuses:
            stmt = stmt.where(Order.status.in_(list(statuses)))
        return round(float((await self.session.execute(stmt)).scalar_one()), 2)

    async def count_by_status(self, theater_id: Optional[int] = None) -> Dict[str, int]:
        stmt = self._window(select(Order.status, func.count()), theater_id).group_by(Order.status)
        result = await self.session.execute(stmt)
        return {status: int(count) for status, count in result.all()}

    async def list_in_window(
        self,
        theater_id: int,
        *,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        created_by: Optional[str] = None,
    ) -> List[Order]:
        """Every order of a theater in the window, newest first, optionally only one creator's."""
        stmt = self._window(select(Order), theater_id, date_from=date_from, date_to=date_to)
        if created_by is not None:
            stmt = stmt.where(Order.created_by == created_by)
        result = await self.session.execute(stmt.order_by(Order.created_at.desc(), Order.id.desc()))
        return list(result.scalars().all())
