"""
Reports API Endpoints.

JSON sales reports for the theater console. Staff accounts only see the
orders they placed.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter

from yqpaynow.core.models.io.reports import DateRange, MyStatsResponse, SalesReportResponse
from yqpaynow.server.services.deps import SessionDep, TheaterAccessDep
from yqpaynow.server.services.reports import ReportService

router = APIRouter(tags=["reports"])


@router.get(
    "/my-sales/{theater_id}",
    response_model=SalesReportResponse,
    summary="Sales Report",
    description="Orders between `start_date` and `end_date` (UTC days, inclusive) with a per-category summary. "
    "Revenue excludes cancelled orders.",
    responses={400: {"description": "end_date is before start_date"}},
)
async def my_sales(
    theater_id: int,
    session: SessionDep,
    user: TheaterAccessDep,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> SalesReportResponse:
    report = await ReportService(session).my_sales(
        theater_id, user, DateRange(start_date=start_date, end_date=end_date)
    )
    return SalesReportResponse(data=report)


@router.get("/my-stats/{theater_id}", response_model=MyStatsResponse, summary="Sales Statistics")
async def my_stats(theater_id: int, session: SessionDep, user: TheaterAccessDep) -> MyStatsResponse:
    return MyStatsResponse(stats=await ReportService(session).my_stats(theater_id, user))
