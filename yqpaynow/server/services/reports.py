"""
Theater sales reports.

Theater admins and platform admins see every order of the theater. Staff
accounts see only the orders they placed themselves.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import Order
from yqpaynow.core.database.repositories import CategoryRepository, OrderRepository
from yqpaynow.core.errors import ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import OrderStatus, UserType
from yqpaynow.core.models.io.orders import OrderRead
from yqpaynow.core.models.io.reports import CategorySales, DateRange, MyStats, SalesReport, SalesSummary
from yqpaynow.ordering import round2

from .deps import CurrentUser

logger = get_logger(__name__)

UNCATEGORIZED = "Uncategorized"


def _start_of(day: Optional[date]) -> Optional[datetime]:
    return datetime.combine(day, time.min, tzinfo=timezone.utc) if day else None


def revenue_of(orders: Iterable[Order]) -> float:
    """Total of the non-cancelled orders."""
    return round2(sum(order.total for order in orders if order.status != OrderStatus.CANCELLED.value))


def category_breakdown(orders: Iterable[Order], names: Dict[int, str]) -> Dict[str, CategorySales]:
    breakdown: Dict[str, CategorySales] = {}
    for order in orders:
        if order.status == OrderStatus.CANCELLED.value:
            continue
        for item in order.items:
            label = names.get(item.get("category_id"), UNCATEGORIZED)
            row = breakdown.setdefault(label, CategorySales())
            row.count += 1
            row.revenue = round2(row.revenue + float(item.get("total_price") or 0.0))
            row.items += int(item.get("quantity") or 0)
    return breakdown


class ReportService:
    def __init__(self, session: AsyncSession):
        self.orders = OrderRepository(session)
        self.categories = CategoryRepository(session)

    @staticmethod
    def is_user_specific(user: CurrentUser) -> bool:
        return user.user_type == UserType.THEATER_USER.value

    async def _orders(self, theater_id: int, user: CurrentUser, date_range: DateRange) -> List[Order]:
        end = date_range.end_date + timedelta(days=1) if date_range.end_date else None
        return await self.orders.list_in_window(
            theater_id,
            date_from=_start_of(date_range.start_date),
            date_to=_start_of(end),
            created_by=user.username if self.is_user_specific(user) else None,
        )

    async def _category_names(self, theater_id: int) -> Dict[int, str]:
        return {category.id: category.name for category in await self.categories.list_for_theater(theater_id)}

    async def my_sales(self, theater_id: int, user: CurrentUser, date_range: DateRange) -> SalesReport:
        """
        Orders in the date range (UTC days, both ends inclusive) with totals per category.

        Raises:
            ValidationFailedError: ``INVALID_DATE_RANGE`` when the range ends before it starts
        """
        if date_range.start_date and date_range.end_date and date_range.end_date < date_range.start_date:
            raise ValidationFailedError("end_date must not be before start_date", code="INVALID_DATE_RANGE")
        orders = await self._orders(theater_id, user, date_range)
        user_specific = self.is_user_specific(user)
        total_orders = len(orders)
        total_revenue = revenue_of(orders)
        report = SalesReport(
            report_type="USER_SPECIFIC_REPORT" if user_specific else "FULL_REPORT",
            data_access_type="user_specific" if user_specific else "full",
            generated_by=user.username or str(user.id),
            generated_at=utc_now(),
            theater_id=theater_id,
            user_id=user.id if user_specific else None,
            date_range=date_range,
            summary=SalesSummary(
                total_orders=total_orders,
                total_revenue=total_revenue,
                avg_order_value=round2(total_revenue / total_orders) if total_orders else 0.0,
                completed_orders=sum(1 for order in orders if order.status == OrderStatus.COMPLETED.value),
                pending_orders=sum(1 for order in orders if order.status == OrderStatus.PENDING.value),
                category_breakdown=category_breakdown(orders, await self._category_names(theater_id)),
            ),
            orders=[OrderRead.model_validate(order) for order in orders],
        )
        logger.info(
            f"{report.report_type} for theater {theater_id} by {report.generated_by}: "
            f"{total_orders} orders, revenue {total_revenue}"
        )
        return report

    async def my_stats(self, theater_id: int, user: CurrentUser) -> MyStats:
        orders = await self._orders(theater_id, user, DateRange())
        names = await self._category_names(theater_id)
        categories = {
            names.get(item.get("category_id"), UNCATEGORIZED)
            for order in orders
            for item in order.items
            if item.get("category_id") in names
        }
        return MyStats(my_orders=len(orders), my_revenue=revenue_of(orders), my_categories=sorted(categories))
