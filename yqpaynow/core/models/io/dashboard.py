"""Schema models for the super admin and theater dashboards."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .stock import StockProductInfo
from .theaters import TheaterRead


class SuperAdminStats(BaseModel):
    total_theaters: int
    active_theaters: int
    inactive_theaters: int
    total_theater_users: int
    total_orders: int
    today_orders: int
    total_revenue: float
    today_revenue: float
    total_qr_codes: int
    recent_theaters: List[TheaterRead]


class QuickStats(BaseModel):
    total_theaters: int
    active_theaters: int
    today_orders: int
    today_revenue: float


class TheaterDashboardStats(BaseModel):
    """Revenue figures count served and completed orders only."""

    total_orders: int
    today_orders: int
    today_revenue: float
    monthly_revenue: float
    yearly_revenue: float
    total_revenue: float
    active_products: int
    total_customers: int
    order_status_counts: Dict[str, int]
    average_order_value: float


class RecentOrder(BaseModel):
    id: int
    order_number: str
    customer_name: str
    amount: float
    status: str
    source: str
    created_at: datetime


class TheaterSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Dict[str, Any] = Field(default_factory=dict)
    is_active: bool


class DailyTrend(BaseModel):
    date: str = Field(description="YYYY-MM-DD, UTC")
    revenue: float
    orders: int


class TopProduct(BaseModel):
    name: str
    quantity: int
    revenue: float


class DashboardTrends(BaseModel):
    last_7_days: List[DailyTrend]
    top_products: List[TopProduct]


class TheaterDashboard(BaseModel):
    success: bool = True
    stats: TheaterDashboardStats
    recent_orders: List[RecentOrder]
    theater: TheaterSummary
    trends: DashboardTrends
    low_stock_products: List[StockProductInfo]
    generated_at: datetime
