"""Tests for the super admin dashboard endpoints."""

import pytest
from httpx import AsyncClient

from yqpaynow.core.database.entities import Order
from yqpaynow.core.database.repositories import OrderRepository
from yqpaynow.core.security import create_access_token

pytestmark = pytest.mark.asyncio


async def _order(session, theater_id: int, number: str, total: float, status: str = "pending") -> Order:
    return await OrderRepository(session).create(
        Order(theater_id=theater_id, order_number=number, total=total, status=status)
    )


class TestSuperAdminStats:
    async def test_platform_totals(
        self, client: AsyncClient, session, admin_headers, theater, other_theater, staff_user
    ):
        other_theater.is_active = False
        session.add(other_theater)
        await session.commit()
        await _order(session, theater.id, "ORD-1", 200)
        await _order(session, theater.id, "ORD-2", 50, status="cancelled")

        response = await client.get("/api/v1/dashboard/super-admin-stats", headers=admin_headers)

        assert response.status_code == 200
        stats = response.json()
        assert stats["total_theaters"] == 2
        assert stats["active_theaters"] == 1
        assert stats["inactive_theaters"] == 1
        assert stats["total_theater_users"] == 1
        assert stats["total_orders"] == 2
        assert stats["today_orders"] == 2
        assert stats["total_revenue"] == 200
        assert stats["today_revenue"] == 200
        assert stats["total_qr_codes"] == 0
        assert [row["username"] for row in stats["recent_theaters"]] == ["orion", "galaxy"]

    async def test_empty_platform(self, client: AsyncClient, admin_headers):
        stats = (await client.get("/api/v1/dashboard/super-admin-stats", headers=admin_headers)).json()

        assert stats["total_theaters"] == 0
        assert stats["total_revenue"] == 0
        assert stats["recent_theaters"] == []

    async def test_plain_admin_denied(self, client: AsyncClient):
        token = create_access_token({"sub": 7, "username": "ops", "role": "admin", "user_type": "admin"})

        response = await client.get(
            "/api/v1/dashboard/super-admin-stats", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.status_code == 403
        assert response.json()["details"] == {"required_roles": ["super_admin"]}

    async def test_theater_denied(self, client: AsyncClient, theater_headers):
        response = await client.get("/api/v1/dashboard/quick-stats", headers=theater_headers)
        assert response.status_code == 403


class TestQuickStats:
    async def test_quick_stats(self, client: AsyncClient, session, admin_headers, theater):
        await _order(session, theater.id, "ORD-1", 120.5)

        response = await client.get("/api/v1/dashboard/quick-stats", headers=admin_headers)

        assert response.json() == {
            "total_theaters": 1,
            "active_theaters": 1,
            "today_orders": 1,
            "today_revenue": 120.5,
        }
