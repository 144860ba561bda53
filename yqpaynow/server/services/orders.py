"""
Order placement and lifecycle.

Prices, tax rates, GST type and discounts are copied from the products when
the order is placed, so later catalog edits never change an existing order.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import Order
from yqpaynow.core.database.repositories import OrderRepository, ProductRepository, TheaterRepository
from yqpaynow.core.errors import NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import GSTType, OrderStatus, can_transition
from yqpaynow.core.models.io.orders import (
    CustomerInfo,
    OrderCreate,
    OrderPaymentUpdate,
    OrderStats,
    OrderSummary,
)
from yqpaynow.core.monitoring import log_order_event
from yqpaynow.ordering import LineItem, calculate_line_item_total, calculate_order_totals

from .stock import StockService, sold_quantities

logger = get_logger(__name__)


def day_bounds(moment: Optional[datetime] = None) -> Tuple[datetime, datetime]:
    """Start and end of the UTC day containing ``moment``."""
    start = (moment or utc_now()).replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def format_order_number(moment: datetime, sequence: int) -> str:
    """``ORD-YYYYMMDD-NNNN``."""
    return f"ORD-{moment:%Y%m%d}-{sequence:04d}"


class OrderService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.orders = OrderRepository(session)
        self.products = ProductRepository(session)
        self.theaters = TheaterRepository(session)

    async def get(self, order_id: int) -> Order:
        order = await self.orders.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order {order_id} not found", code="ORDER_NOT_FOUND")
        return order

    async def next_order_number(self, theater_id: int, now: Optional[datetime] = None) -> str:
        now = now or utc_now()
        start, end = day_bounds(now)
        count = await self.orders.count_created_between(theater_id, start, end)
        return format_order_number(now, count + 1)

    @staticmethod
    def _customer(data: OrderCreate) -> CustomerInfo:
        customer = data.customer_info.model_copy() if data.customer_info else CustomerInfo()
        if data.customer_name:
            customer.name = data.customer_name
        if data.table_number:
            customer.table_number = data.table_number
        return customer

    async def create(self, data: OrderCreate, created_by: Optional[str] = None) -> Order:
        """
        Price and store a new order.

        Raises:
            NotFoundError: The theater does not exist
            ValidationFailedError: ``THEATER_INACTIVE``, ``INVALID_PRODUCT``, ``PRODUCT_UNAVAILABLE``
                or ``INSUFFICIENT_STOCK``
        """
        theater = await self.theaters.get_by_id(data.theater_id)
        if theater is None:
            raise NotFoundError(f"Theater {data.theater_id} not found", code="THEATER_NOT_FOUND")
        if not theater.is_active:
            raise ValidationFailedError("Theater is not accepting orders", code="THEATER_INACTIVE")

        products = await self.products.get_many(data.theater_id, [item.product_id for item in data.items])
        items: List[Dict] = []
        lines: List[LineItem] = []
        for requested in data.items:
            product = products.get(requested.product_id)
            if product is None:
                raise ValidationFailedError(
                    f"Product {requested.product_id} does not belong to this theater",
                    code="INVALID_PRODUCT",
                    details={"product_id": requested.product_id},
                )
            if not product.is_active or not product.is_available:
                raise ValidationFailedError(
                    f"Product '{product.name}' is not available",
                    code="PRODUCT_UNAVAILABLE",
                    details={"product_id": product.id},
                )
            line = LineItem(
                unit_price=product.price,
                quantity=requested.quantity,
                tax_rate=product.tax_rate,
                gst_type=GSTType.parse(product.gst_type).value,
                discount_percentage=product.discount_percentage,
            )
            lines.append(line)
            items.append(
                {
                    "product_id": product.id,
                    "name": product.name,
                    "category_id": product.category_id,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "tax_rate": line.tax_rate,
                    "gst_type": line.gst_type,
                    "discount_percentage": line.discount_percentage,
                    "total_price": calculate_line_item_total(line),
                    "special_instructions": requested.special_instructions,
                }
            )

        tracked = {pid: product for pid, product in products.items() if product.track_stock}
        sold = sold_quantities(items, tracked)
        for product_id, quantity in sold.items():
            product = tracked[product_id]
            if product.current_stock < quantity:
                raise ValidationFailedError(
                    f"Insufficient stock for {product.name}",
                    code="INSUFFICIENT_STOCK",
                    details={"product_id": product_id, "available": product.current_stock, "requested": quantity},
                )

        totals = calculate_order_totals(lines)
        now = utc_now()
        order = Order(
            theater_id=data.theater_id,
            order_number=await self.next_order_number(data.theater_id, now),
            customer_info=self._customer(data).model_dump(),
            items=items,
            subtotal=totals.subtotal,
            tax_amount=totals.tax,
            discount_amount=totals.total_discount,
            total=totals.total,
            currency=theater.settings.get("currency", "INR"),
            payment_method=data.payment_method.value,
            order_type=data.order_type.value,
            source=data.source.value,
            qr_name=data.qr_name,
            seat=data.seat,
            special_instructions=data.special_instructions or data.order_notes,
            status_timestamps={"placed_at": now.isoformat()},
            created_by=created_by,
            created_at=now,
            updated_at=now,
        )
        order = await self.orders.create(order)
        await StockService(self.session).record_sales(order, sold, tracked)
        log_order_event(order.order_number, order.theater_id, "placed", order.total)
        return order

    async def list(
        self,
        theater_id: int,
        *,
        page: int,
        limit: int,
        status: Optional[str] = None,
        payment_status: Optional[str] = None,
        date_from: Optional[datetime] = None,
        date_to: Optional[datetime] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[Order], int, OrderSummary]:
        window = dict(
            status=status, payment_status=payment_status, date_from=date_from, date_to=date_to, search=search
        )
        rows, total = await self.orders.search(theater_id, limit=limit, offset=(page - 1) * limit, **window)
        revenue = await self.orders.revenue(theater_id, **window)
        return rows, total, OrderSummary(total_orders=total, total_revenue=revenue)

    async def update_status(self, order_id: int, status: OrderStatus) -> Order:
        """
        Move an order along its lifecycle and stamp ``<status>_at``.

        Cancelling puts the order's tracked stock back.

        Raises:
            ValidationFailedError: ``INVALID_STATUS_TRANSITION``
        """
        order = await self.get(order_id)
        current = OrderStatus(order.status)
        if not can_transition(current, status):
            raise ValidationFailedError(
                f"Cannot change order status from {current.value} to {status.value}",
                code="INVALID_STATUS_TRANSITION",
                details={"current": current.value, "requested": status.value},
            )
        order.status = status.value
        order.status_timestamps = {**order.status_timestamps, f"{status.value}_at": utc_now().isoformat()}
        order = await self.orders.update(order, json_fields=("status_timestamps",))
        if status == OrderStatus.CANCELLED:
            await StockService(self.session).record_returns(order)
        log_order_event(order.order_number, order.theater_id, status.value, order.total)
        return order

    async def update_payment(self, order_id: int, data: OrderPaymentUpdate) -> Order:
        order = await self.get(order_id)
        order.payment_status = data.payment_status.value
        if data.payment_method is not None:
            order.payment_method = data.payment_method.value
        order = await self.orders.update(order)
        log_order_event(order.order_number, order.theater_id, f"payment_{order.payment_status}", order.total)
        return order

    async def stats(self, theater_id: int) -> OrderStats:
        start, end = day_bounds()
        counts = await self.orders.count_by_status(theater_id)
        return OrderStats(
            theater_id=theater_id,
            total_orders=sum(counts.values()),
            status_counts={status.value: counts.get(status.value, 0) for status in OrderStatus},
            today_orders=await self.orders.count_created_between(theater_id, start, end),
            today_revenue=await self.orders.revenue(theater_id, date_from=start, date_to=end),
            total_revenue=await self.orders.revenue(theater_id),
        )
