"""Schema models for the theater sales reports."""

from __future__ import annotations

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .orders import OrderRead


class DateRange(BaseModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = Field(default=None, description="Inclusive")


class CategorySales(BaseModel):
    count: int = Field(default=0, description="Order lines")
    revenue: float = 0.0
    items: int = Field(default=0, description="Units sold")


class SalesSummary(BaseModel):
    total_orders: int
    total_revenue: float
    avg_order_value: float
    completed_orders: int
    pending_orders: int
    category_breakdown: Dict[str, CategorySales]


class SalesReport(BaseModel):
    report_type: str = Field(description="FULL_REPORT or USER_SPECIFIC_REPORT")
    data_access_type: str = Field(description="full or user_specific")
    generated_by: str
    generated_at: datetime
    theater_id: int
    user_id: Optional[int] = None
    date_range: DateRange
    summary: SalesSummary
    orders: List[OrderRead]


class SalesReportResponse(BaseModel):
    success: bool = True
    data: SalesReport


class MyStats(BaseModel):
    my_orders: int
    my_revenue: float
    my_categories: List[str]


class MyStatsResponse(BaseModel):
    success: bool = True
    stats: MyStats
