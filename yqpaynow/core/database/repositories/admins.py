"""Admin repository."""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.admins import Admin
from .base import SqlModelRepository


class AdminRepository(SqlModelRepository[Admin]):
    """Repository for platform administrators."""

    search_fields = ("email", "name")
    default_order = ("email",)

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Admin)

    async def get_by_email(self, email: str) -> Optional[Admin]:
        stmt = select(Admin).where(Admin.email == email.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
