"""
Stock ledger entity.

One row per stock movement of a product. Balances are not stored: they are
replayed from the entries in ``(entry_date, id)`` order, so editing or
deleting an entry never leaves stale running totals behind.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from ..base import TimestampedTable, UTCTimestamp


class StockEntry(TimestampedTable, table=True):
    """Table: stock_entries"""

    __tablename__ = "stock_entries"
    __table_args__ = ({"extend_existing": True},)

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    product_id: int = Field(foreign_key="products.id", index=True)
    entry_date: datetime = Field(index=True, sa_type=UTCTimestamp)
    entry_type: str = Field(max_length=16, description="ADDED, SOLD, EXPIRED, DAMAGED, RETURNED or ADJUSTMENT")
    quantity: int = Field(description="Units moved; only ADJUSTMENT may be negative")
    expire_date: Optional[datetime] = Field(default=None, sa_type=UTCTimestamp)
    batch_number: Optional[str] = Field(default=None, max_length=64)
    notes: str = Field(default="", max_length=500)
    order_id: Optional[int] = Field(default=None, foreign_key="orders.id", index=True)
    created_by: Optional[str] = Field(default=None, max_length=100)

    def __repr__(self) -> str:
        return f"StockEntry(product_id={self.product_id}, type={self.entry_type}, quantity={self.quantity})"
