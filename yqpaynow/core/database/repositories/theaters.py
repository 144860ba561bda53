"""
Theater repository.

Besides CRUD, provides the agreement-window query used by the expiring
agreements report.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.theaters import Theater
from .base import QueryBuilder, SqlModelRepository


class TheaterRepository(SqlModelRepository[Theater]):
    """Repository for theaters."""

    search_fields = ("name", "username")
    default_order = ("name", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Theater)

    async def get_by_username(self, username: str) -> Optional[Theater]:
        """Look up a theater by its (case-insensitive) owner username."""
        stmt = select(Theater).where(Theater.username == username.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_agreements_ending_between(self, start: datetime, end: datetime) -> List[Theater]:
        """Theaters whose agreement ends inside ``[start, end]``, soonest first."""
        stmt = (
            select(Theater)
            .where(Theater.agreement_end.is_not(None))
            .where(Theater.agreement_end >= start)
            .where(Theater.agreement_end <= end)
            .order_by(Theater.agreement_end)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_recent(self, limit: int = 5) -> List[Theater]:
        stmt = select(Theater).order_by(Theater.created_at.desc(), Theater.id.desc()).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    def _filtered(self, stmt, filters: Optional[Dict[str, Any]], search: Optional[str] = None):
        """Search also matches the city stored in the address document."""
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, Theater, filters)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(
                Theater.name.ilike(pattern)
                | Theater.username.ilike(pattern)
                | Theater.address["city"].as_string().ilike(pattern)
            )
        return stmt

