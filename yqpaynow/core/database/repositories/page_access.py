"""Page access registry repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.page_access import PageAccess
from .base import SqlModelRepository


class PageAccessRepository(SqlModelRepository[PageAccess]):
    search_fields = ("page", "page_name", "route")
    default_order = ("sort_order", "page")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, PageAccess)

    async def get_by_page(self, page: str) -> Optional[PageAccess]:
        stmt = select(PageAccess).where(PageAccess.page == page)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
