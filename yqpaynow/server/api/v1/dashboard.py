"""
Dashboard API Endpoints.

Platform-wide figures for the super admin console, and each theater's own
home page figures.
"""

from fastapi import APIRouter

from yqpaynow.core.models.io.dashboard import QuickStats, SuperAdminStats, TheaterDashboard
from yqpaynow.server.services.dashboard import DashboardService, TheaterDashboardService
from yqpaynow.server.services.deps import SessionDep, SuperAdminDep, TheaterAccessDep

router = APIRouter(tags=["dashboard"])


@router.get(
    "/super-admin-stats",
    response_model=SuperAdminStats,
    summary="Super Admin Statistics",
    description="Theater, staff, order, revenue and QR code totals plus the five newest theaters. "
    "Revenue excludes cancelled orders.",
)
async def super_admin_stats(session: SessionDep, _: SuperAdminDep) -> SuperAdminStats:
    return await DashboardService(session).super_admin_stats()


@router.get("/quick-stats", response_model=QuickStats, summary="Quick Statistics")
async def quick_stats(session: SessionDep, _: SuperAdminDep) -> QuickStats:
    return await DashboardService(session).quick_stats()


theater_router = APIRouter(tags=["dashboard"])


@theater_router.get(
    "/{theater_id}",
    response_model=TheaterDashboard,
    summary="Theater Dashboard",
    description="Order and revenue figures, recent orders, 7-day trend, best sellers and low stock products. "
    "Revenue counts served and completed orders.",
)
async def theater_dashboard(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> TheaterDashboard:
    return await TheaterDashboardService(session).overview(theater_id)
