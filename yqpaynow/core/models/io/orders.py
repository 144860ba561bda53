"""
Schema models for order placement, listing and status management.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from yqpaynow.core.models.domain.enums import (
    OrderSource,
    OrderStatus,
    OrderType,
    PaymentMethod,
    PaymentStatus,
)

from .common import PaginationInfo

WALK_IN_CUSTOMER = "Walk-in Customer"


class CustomerInfo(BaseModel):
    name: str = Field(default=WALK_IN_CUSTOMER, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    email: Optional[str] = Field(default=None, max_length=255)
    table_number: Optional[str] = Field(default=None, max_length=20)


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(ge=1)
    special_instructions: Optional[str] = Field(default=None, max_length=200)


class OrderCreate(BaseModel):
    """Order placement request.

    ``customer_name``/``table_number`` and ``order_notes`` are accepted as
    shorthands for ``customer_info`` and ``special_instructions``.
    """

    theater_id: int
    items: List[OrderItemCreate] = Field(min_length=1)
    customer_info: Optional[CustomerInfo] = None
    customer_name: Optional[str] = Field(default=None, max_length=100)
    table_number: Optional[str] = Field(default=None, max_length=20)
    special_instructions: Optional[str] = Field(default=None, max_length=500)
    order_notes: Optional[str] = Field(default=None, max_length=500)
    payment_method: PaymentMethod = PaymentMethod.CASH
    order_type: OrderType = OrderType.DINE_IN
    source: OrderSource = OrderSource.QR_CODE
    qr_name: Optional[str] = Field(default=None, max_length=100)
    seat: Optional[str] = Field(default=None, max_length=10)


class OrderItemRead(BaseModel):
    product_id: int
    name: str
    category_id: Optional[int] = None
    quantity: int
    unit_price: float
    tax_rate: float
    gst_type: str
    discount_percentage: float
    total_price: float
    special_instructions: Optional[str] = None


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    order_number: str
    customer_info: CustomerInfo
    items: List[OrderItemRead]
    subtotal: float
    tax_amount: float
    discount_amount: float
    total: float
    currency: str
    payment_method: str
    payment_status: str
    status: str
    order_type: str
    source: str
    qr_name: Optional[str] = None
    seat: Optional[str] = None
    special_instructions: Optional[str] = None
    status_timestamps: Dict[str, Optional[datetime]] = Field(default_factory=dict)
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class OrderSummary(BaseModel):
    total_orders: int
    total_revenue: float


class OrderListResponse(BaseModel):
    data: List[OrderRead]
    pagination: PaginationInfo
    summary: OrderSummary


class OrderStatusUpdate(BaseModel):
    status: OrderStatus


class OrderPaymentUpdate(BaseModel):
    payment_status: PaymentStatus
    payment_method: Optional[PaymentMethod] = None


class OrderStats(BaseModel):
    theater_id: int
    total_orders: int
    status_counts: Dict[str, int]
    today_orders: int
    today_revenue: float
    total_revenue: float
