"""Product type repository."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from ..entities.product_types import ProductType
from .base import TheaterScopedRepository


class ProductTypeRepository(TheaterScopedRepository[ProductType]):
    search_fields = ("name", "description")
    default_order = ("sort_order", "name")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, ProductType)
