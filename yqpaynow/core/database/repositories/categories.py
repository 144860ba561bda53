"""Category repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.categories import Category
from .base import TheaterScopedRepository


class CategoryRepository(TheaterScopedRepository[Category]):
    search_fields = ("name", "description")
    default_order = ("sort_order", "name")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Category)
