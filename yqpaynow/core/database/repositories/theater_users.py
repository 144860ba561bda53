"""Theater staff user repository."""

from __future__ import annotations

from typing import Optional, Set

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.theater_users import TheaterUser
from .base import TheaterScopedRepository


class TheaterUserRepository(TheaterScopedRepository[TheaterUser]):
    """Repository for theater staff accounts."""

    search_fields = ("username", "full_name", "email")
    default_order = ("full_name", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, TheaterUser)

    async def get_by_username(self, username: str) -> Optional[TheaterUser]:
        stmt = select(TheaterUser).where(TheaterUser.username == username.strip().lower())
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def all_pins(self) -> Set[str]:
        """Every PIN in use across all theaters."""
        result = await self.session.execute(select(TheaterUser.pin))
        return set(result.scalars().all())

    async def clear_role(self, role_id: int) -> None:
        """Unassign a role from every user holding it."""
        stmt = update(TheaterUser).where(TheaterUser.role_id == role_id).values(role_id=None)
        await self.session.execute(stmt)
        await self.session.commit()
