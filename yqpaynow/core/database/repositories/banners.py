"""Banner repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.banners import Banner
from .base import TheaterScopedRepository


class BannerRepository(TheaterScopedRepository[Banner]):
    default_order = ("sort_order", "id")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Banner)
