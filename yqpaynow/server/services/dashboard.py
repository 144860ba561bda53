"""
Dashboard figures.

:class:`DashboardService` serves the platform-wide super admin console;
:class:`TheaterDashboardService` a single theater's home page.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import Order
from yqpaynow.core.database.repositories import (
    OrderRepository,
    ProductRepository,
    QRCodeRepository,
    TheaterRepository,
    TheaterUserRepository,
)
from yqpaynow.core.errors import NotFoundError
from yqpaynow.core.models.domain.enums import OrderStatus, StockStatus
from yqpaynow.core.models.io.dashboard import (
    DailyTrend,
    DashboardTrends,
    QuickStats,
    RecentOrder,
    SuperAdminStats,
    TheaterDashboard,
    TheaterDashboardStats,
    TheaterSummary,
    TopProduct,
)
from yqpaynow.core.models.io.orders import WALK_IN_CUSTOMER
from yqpaynow.core.models.io.stock import StockProductInfo
from yqpaynow.core.models.io.theaters import TheaterRead
from yqpaynow.ordering import round2

from .orders import day_bounds

RECENT_THEATERS = 5
RECENT_ORDERS = 10
TOP_PRODUCTS = 5
TREND_DAYS = 7
REALIZED_STATUSES = (OrderStatus.SERVED.value, OrderStatus.COMPLETED.value)


class DashboardService:
    def __init__(self, session: AsyncSession):
        self.theaters = TheaterRepository(session)
        self.users = TheaterUserRepository(session)
        self.orders = OrderRepository(session)
        self.qr_codes = QRCodeRepository(session)

    async def super_admin_stats(self) -> SuperAdminStats:
        start, end = day_bounds()
        total = await self.theaters.count()
        active = await self.theaters.count({"is_active": True})
        status_counts = await self.orders.count_by_status()
        return SuperAdminStats(
            total_theaters=total,
            active_theaters=active,
            inactive_theaters=total - active,
            total_theater_users=await self.users.count(),
            total_orders=sum(status_counts.values()),
            today_orders=await self.orders.count_created_between(None, start, end),
            total_revenue=await self.orders.revenue(),
            today_revenue=await self.orders.revenue(date_from=start, date_to=end),
            total_qr_codes=await self.qr_codes.count(),
            recent_theaters=[
                TheaterRead.model_validate(theater) for theater in await self.theaters.list_recent(RECENT_THEATERS)
            ],
        )

    async def quick_stats(self) -> QuickStats:
        start, end = day_bounds()
        return QuickStats(
            total_theaters=await self.theaters.count(),
            active_theaters=await self.theaters.count({"is_active": True}),
            today_orders=await self.orders.count_created_between(None, start, end),
            today_revenue=await self.orders.revenue(date_from=start, date_to=end),
        )


def count_customers(orders: Iterable[Order]) -> int:
    """Distinct customer phone numbers; orders without a phone are not counted."""
    return len({order.customer_info.get("phone") for order in orders if order.customer_info.get("phone")})


def top_products(orders: Iterable[Order], limit: int = TOP_PRODUCTS) -> List[TopProduct]:
    """Best sellers by units across non-cancelled orders, grouped by line item name."""
    sales: Dict[str, Dict[str, float]] = {}
    for order in orders:
        if order.status == OrderStatus.CANCELLED.value:
            continue
        for item in order.items:
            row = sales.setdefault(item.get("name") or "Unknown", {"quantity": 0, "revenue": 0.0})
            row["quantity"] += int(item.get("quantity") or 0)
            row["revenue"] += float(item.get("total_price") or 0.0)
    ranked = sorted(sales.items(), key=lambda pair: (-pair[1]["quantity"], pair[0]))
    return [
        TopProduct(name=name, quantity=int(row["quantity"]), revenue=round2(row["revenue"]))
        for name, row in ranked[:limit]
    ]


def recent_order(order: Order) -> RecentOrder:
    customer = order.customer_info or {}
    return RecentOrder(
        id=order.id,
        order_number=order.order_number,
        customer_name=customer.get("name") or customer.get("phone") or WALK_IN_CUSTOMER,
        amount=order.total,
        status=order.status,
        source=order.source,
        created_at=order.created_at,
    )


class TheaterDashboardService:
    def __init__(self, session: AsyncSession):
        self.theaters = TheaterRepository(session)
        self.orders = OrderRepository(session)
        self.products = ProductRepository(session)

    async def _realized(
        self, theater_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None
    ) -> float:
        return await self.orders.revenue(theater_id, date_from=start, date_to=end, statuses=REALIZED_STATUSES)

    async def _trend(self, theater_id: int, today: datetime) -> List[DailyTrend]:
        trend = []
        for offset in range(TREND_DAYS - 1, -1, -1):
            start = today - timedelta(days=offset)
            end = start + timedelta(days=1)
            trend.append(
                DailyTrend(
                    date=f"{start:%Y-%m-%d}",
                    revenue=await self._realized(theater_id, start, end),
                    orders=await self.orders.count_created_between(theater_id, start, end),
                )
            )
        return trend

    async def overview(self, theater_id: int) -> TheaterDashboard:
        """
        Home page figures of one theater.

        Order counts include every status; revenue counts served and
        completed orders only. Days, months and years are UTC.

        Raises:
            NotFoundError: ``THEATER_NOT_FOUND``
        """
        theater = await self.theaters.get_by_id(theater_id)
        if theater is None:
            raise NotFoundError(f"Theater {theater_id} not found", code="THEATER_NOT_FOUND")

        now = utc_now()
        today, tomorrow = day_bounds(now)
        month_start = today.replace(day=1)
        year_start = month_start.replace(month=1)

        counts = await self.orders.count_by_status(theater_id)
        total_orders = sum(counts.values())
        total_revenue = await self._realized(theater_id)
        orders = await self.orders.list_in_window(theater_id)
        tracked = await self.products.list_for_theater(theater_id, filters={"track_stock": True, "is_active": True})

        stats = TheaterDashboardStats(
            total_orders=total_orders,
            today_orders=await self.orders.count_created_between(theater_id, today, tomorrow),
            today_revenue=await self._realized(theater_id, today, tomorrow),
            monthly_revenue=await self._realized(theater_id, month_start),
            yearly_revenue=await self._realized(theater_id, year_start),
            total_revenue=total_revenue,
            active_products=await self.products.count_for_theater(theater_id, {"is_active": True}),
            total_customers=count_customers(orders),
            order_status_counts={status.value: counts.get(status.value, 0) for status in OrderStatus},
            average_order_value=round2(total_revenue / total_orders) if total_orders else 0.0,
        )
        return TheaterDashboard(
            stats=stats,
            recent_orders=[recent_order(order) for order in orders[:RECENT_ORDERS]],
            theater=TheaterSummary.model_validate(theater),
            trends=DashboardTrends(last_7_days=await self._trend(theater_id, today), top_products=top_products(orders)),
            low_stock_products=[
                StockProductInfo.model_validate(product)
                for product in tracked
                if product.stock_status in (StockStatus.LOW_STOCK.value, StockStatus.OUT_OF_STOCK.value)
            ],
            generated_at=now,
        )
