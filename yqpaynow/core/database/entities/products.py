"""Product entity."""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from yqpaynow.core.models.domain.enums import StockStatus

from ..base import TimestampedTable


class Product(TimestampedTable, table=True):
    """Menu item sold by a theater.

    ``gst_type`` records whether ``price`` already includes tax (INCLUDE)
    or tax is added on top (EXCLUDE). ``current_stock`` mirrors the closing
    balance of the product's stock ledger; it only limits orders when
    ``track_stock`` is on.

    Table: products
    """

    __tablename__ = "products"
    __table_args__ = ({"extend_existing": True},)

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    name: str = Field(max_length=100)
    description: str = Field(default="", max_length=1000)
    category_id: Optional[int] = Field(default=None, foreign_key="categories.id", index=True)
    product_type_id: Optional[int] = Field(default=None, foreign_key="product_types.id", index=True)
    sku: Optional[str] = Field(default=None, max_length=64)
    price: float = Field(default=0.0)
    tax_rate: float = Field(default=0.0)
    gst_type: str = Field(default="EXCLUDE", max_length=16)
    discount_percentage: float = Field(default=0.0)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = Field(default=True)
    is_available: bool = Field(default=True)
    sort_order: int = Field(default=0)
    track_stock: bool = Field(default=False)
    current_stock: int = Field(default=0)
    min_stock: int = Field(default=0)

    @property
    def stock_status(self) -> str:
        if not self.track_stock:
            return StockStatus.UNLIMITED.value
        if self.current_stock <= 0:
            return StockStatus.OUT_OF_STOCK.value
        if self.current_stock <= self.min_stock:
            return StockStatus.LOW_STOCK.value
        return StockStatus.IN_STOCK.value
