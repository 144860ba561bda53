"""Role repository."""

from __future__ import annotations

from typing import List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.roles import Role
from .base import TheaterScopedRepository


class RoleRepository(TheaterScopedRepository[Role]):
    """Repository for theater roles."""

    search_fields = ("name", "description")
    default_order = ("priority", "sort_order", "name")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Role)

    async def list_default_roles(self, theater_id: int) -> List[Role]:
        stmt = select(Role).where(Role.theater_id == theater_id, Role.is_default == True)  # noqa: E712
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
