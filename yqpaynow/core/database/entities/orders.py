"""
Order entity.

Line items are snapshotted at placement time so later catalog edits do
not change historical orders.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field

from ..base import TimestampedTable


class Order(TimestampedTable, table=True):
    """Table: orders"""

    __tablename__ = "orders"
    __table_args__ = (
        UniqueConstraint("theater_id", "order_number", name="uq_orders_theater_order_number"),
        {"extend_existing": True},
    )

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    order_number: str = Field(max_length=32, index=True)
    customer_info: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    items: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)

    subtotal: float = Field(default=0.0)
    tax_amount: float = Field(default=0.0)
    discount_amount: float = Field(default=0.0)
    total: float = Field(default=0.0)
    currency: str = Field(default="INR", max_length=8)

    payment_method: str = Field(default="cash", max_length=32)
    payment_status: str = Field(default="pending", max_length=32, index=True)
    status: str = Field(default="pending", max_length=32, index=True)
    order_type: str = Field(default="dine_in", max_length=32)
    source: str = Field(default="qr_code", max_length=32)

    qr_name: Optional[str] = Field(default=None, max_length=100)
    seat: Optional[str] = Field(default=None, max_length=10)
    special_instructions: Optional[str] = Field(default=None, max_length=500)
    status_timestamps: Dict[str, Any] = Field(default_factory=dict, sa_type=JSON)
    created_by: Optional[str] = Field(default=None, max_length=100)

    def __repr__(self) -> str:
        return f"Order(order_number={self.order_number}, status={self.status}, total={self.total})"
