"""Product repository."""

from __future__ import annotations

from typing import Dict, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from ..entities.products import Product
from .base import TheaterScopedRepository


class ProductRepository(TheaterScopedRepository[Product]):
    search_fields = ("name", "description", "sku")
    default_order = ("sort_order", "name")

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Product)

    async def get_many(self, theater_id: int, product_ids: Sequence[int]) -> Dict[int, Product]:
        """Products of a theater keyed by id; unknown ids are absent from the result."""
        if not product_ids:
            return {}
        stmt = select(Product).where(Product.theater_id == theater_id, Product.id.in_(list(set(product_ids))))
        result = await self.session.execute(stmt)
        return {product.id: product for product in result.scalars().all()}
