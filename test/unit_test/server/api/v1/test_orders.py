"""
Unit tests for the order endpoints.

Orders are priced server-side from the product rows; the line and order math
itself is covered in the ordering tests.
"""

from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient

from yqpaynow.core.database.entities import Product, StockEntry
from yqpaynow.core.database.repositories import ProductRepository, StockEntryRepository

pytestmark = pytest.mark.asyncio


@pytest_asyncio.fixture
async def popcorn(session, theater) -> Product:
    return await ProductRepository(session).create(
        Product(theater_id=theater.id, name="Popcorn", price=150, tax_rate=5, gst_type="EXCLUDE")
    )


@pytest_asyncio.fixture
async def cola(session, theater) -> Product:
    return await ProductRepository(session).create(
        Product(theater_id=theater.id, name="Cola", price=118, tax_rate=18, gst_type="include", discount_percentage=10)
    )


def _order(theater_id: int, *items, **extra):
    body = {"theater_id": theater_id, "items": [{"product_id": pid, "quantity": qty} for pid, qty in items]}
    body.update(extra)
    return body


async def _place(client: AsyncClient, body, headers=None):
    return await client.post("/api/v1/orders/theater", json=body, headers=headers or {})


class TestPlaceOrder:
    async def test_anonymous_qr_order(self, client: AsyncClient, theater, popcorn):
        response = await _place(
            client, _order(theater.id, (popcorn.id, 2), customer_name="Priya", qr_name="YQ S-1", seat="A4")
        )

        assert response.status_code == 201
        body = response.json()
        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        assert body["order_number"] == f"ORD-{today}-0001"
        assert body["subtotal"] == 300
        assert body["tax_amount"] == 15
        assert body["total"] == 315
        assert body["currency"] == "INR"
        assert body["status"] == "pending"
        assert body["customer_info"]["name"] == "Priya"
        assert body["seat"] == "A4"
        assert body["created_by"] is None
        assert body["items"][0]["total_price"] == 315
        assert "placed_at" in body["status_timestamps"]

    async def test_inclusive_gst_with_discount(self, client: AsyncClient, theater, cola):
        response = await _place(client, _order(theater.id, (cola.id, 1)))

        body = response.json()
        assert body["subtotal"] == 118
        assert body["discount_amount"] == 11.8
        assert body["tax_amount"] == 16.2
        assert body["total"] == 106.2
        assert body["items"][0]["gst_type"] == "INCLUDE"

    async def test_order_numbers_increase(self, client: AsyncClient, theater, popcorn):
        await _place(client, _order(theater.id, (popcorn.id, 1)))
        second = await _place(client, _order(theater.id, (popcorn.id, 1)))

        assert second.json()["order_number"].endswith("-0002")

    async def test_each_theater_numbers_its_own_orders(
        self, client: AsyncClient, session, theater, other_theater, popcorn
    ):
        nachos = await ProductRepository(session).create(Product(theater_id=other_theater.id, name="Nachos", price=90))

        first = await _place(client, _order(theater.id, (popcorn.id, 1)))
        second = await _place(client, _order(other_theater.id, (nachos.id, 1)))

        assert first.status_code == 201
        assert second.status_code == 201
        today = datetime.now(timezone.utc).strftime("%Y%m%d")
        assert first.json()["order_number"] == f"ORD-{today}-0001"
        assert second.json()["order_number"] == f"ORD-{today}-0001"

    async def test_default_customer(self, client: AsyncClient, theater, popcorn):
        response = await _place(client, _order(theater.id, (popcorn.id, 1), order_notes="no salt"))

        assert response.json()["customer_info"]["name"] == "Walk-in Customer"
        assert response.json()["special_instructions"] == "no salt"

    async def test_staff_order_records_creator(self, client: AsyncClient, theater, popcorn, staff_headers):
        response = await _place(client, _order(theater.id, (popcorn.id, 1), source="pos"), headers=staff_headers)

        assert response.json()["created_by"] == "cashier1"
        assert response.json()["source"] == "pos"

    async def test_product_from_other_theater(self, client: AsyncClient, other_theater, popcorn):
        response = await _place(client, _order(other_theater.id, (popcorn.id, 1)))

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_PRODUCT"
        assert response.json()["details"] == {"product_id": popcorn.id}

    async def test_unavailable_product(self, client: AsyncClient, session, theater, popcorn):
        popcorn.is_available = False
        session.add(popcorn)
        await session.commit()

        response = await _place(client, _order(theater.id, (popcorn.id, 1)))

        assert response.json()["code"] == "PRODUCT_UNAVAILABLE"

    async def test_inactive_theater(self, client: AsyncClient, session, theater, popcorn):
        theater.is_active = False
        session.add(theater)
        await session.commit()

        response = await _place(client, _order(theater.id, (popcorn.id, 1)))

        assert response.json()["code"] == "THEATER_INACTIVE"

    async def test_empty_order_rejected(self, client: AsyncClient, theater):
        response = await _place(client, _order(theater.id))
        assert response.status_code == 422

    async def test_zero_quantity_rejected(self, client: AsyncClient, theater, popcorn):
        response = await _place(client, _order(theater.id, (popcorn.id, 0)))
        assert response.status_code == 422

    async def test_prices_are_snapshotted(self, client: AsyncClient, session, theater, popcorn, theater_headers):
        order = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()
        popcorn.price = 999
        session.add(popcorn)
        await session.commit()

        response = await client.get(f"/api/v1/orders/{order['id']}", headers=theater_headers)

        assert response.json()["items"][0]["unit_price"] == 150


class TestListOrders:
    async def test_newest_first_with_summary(self, client: AsyncClient, theater, popcorn, theater_headers):
        first = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()
        second = (await _place(client, _order(theater.id, (popcorn.id, 2)))).json()

        response = await client.get(f"/api/v1/orders/theater/{theater.id}", headers=theater_headers)

        body = response.json()
        assert [row["id"] for row in body["data"]] == [second["id"], first["id"]]
        assert body["summary"] == {"total_orders": 2, "total_revenue": 472.5}

    async def test_search_and_status_filter(self, client: AsyncClient, theater, popcorn, theater_headers):
        await _place(client, _order(theater.id, (popcorn.id, 1), customer_name="Priya"))
        other = (await _place(client, _order(theater.id, (popcorn.id, 1), customer_name="Arun"))).json()
        await client.put(f"/api/v1/orders/{other['id']}/status", json={"status": "confirmed"}, headers=theater_headers)

        by_name = await client.get(
            f"/api/v1/orders/theater/{theater.id}", params={"search": "pri"}, headers=theater_headers
        )
        confirmed = await client.get(
            f"/api/v1/orders/theater/{theater.id}", params={"status": "confirmed"}, headers=theater_headers
        )

        assert [row["customer_info"]["name"] for row in by_name.json()["data"]] == ["Priya"]
        assert [row["id"] for row in confirmed.json()["data"]] == [other["id"]]

    async def test_listing_needs_access(self, client: AsyncClient, other_theater, theater_headers):
        response = await client.get(f"/api/v1/orders/theater/{other_theater.id}", headers=theater_headers)
        assert response.status_code == 403


class TestOrderLifecycle:
    async def test_walks_through_statuses(self, client: AsyncClient, theater, popcorn, staff_headers):
        order = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()

        for status in ("confirmed", "preparing", "ready", "served", "completed"):
            response = await client.put(
                f"/api/v1/orders/{order['id']}/status", json={"status": status}, headers=staff_headers
            )
            assert response.status_code == 200

        timestamps = response.json()["status_timestamps"]
        assert {"placed_at", "confirmed_at", "preparing_at", "ready_at", "served_at", "completed_at"} <= set(timestamps)

    async def test_invalid_transition(self, client: AsyncClient, theater, popcorn, theater_headers):
        order = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()

        response = await client.put(
            f"/api/v1/orders/{order['id']}/status", json={"status": "ready"}, headers=theater_headers
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_STATUS_TRANSITION"
        assert response.json()["details"] == {"current": "pending", "requested": "ready"}

    async def test_cancelled_is_final(self, client: AsyncClient, theater, popcorn, theater_headers):
        order = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()
        await client.put(f"/api/v1/orders/{order['id']}/status", json={"status": "cancelled"}, headers=theater_headers)

        response = await client.put(
            f"/api/v1/orders/{order['id']}/status", json={"status": "confirmed"}, headers=theater_headers
        )

        assert response.status_code == 400

    async def test_payment_update(self, client: AsyncClient, theater, popcorn, theater_headers):
        order = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()

        response = await client.put(
            f"/api/v1/orders/{order['id']}/payment",
            json={"payment_status": "paid", "payment_method": "upi"},
            headers=theater_headers,
        )

        assert response.json()["payment_status"] == "paid"
        assert response.json()["payment_method"] == "upi"

    async def test_unknown_order(self, client: AsyncClient, admin_headers):
        response = await client.get("/api/v1/orders/999", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["code"] == "ORDER_NOT_FOUND"


class TestOrderStats:
    async def test_stats_exclude_cancelled_revenue(self, client: AsyncClient, theater, popcorn, theater_headers):
        await _place(client, _order(theater.id, (popcorn.id, 2)))
        cancelled = (await _place(client, _order(theater.id, (popcorn.id, 1)))).json()
        await client.put(
            f"/api/v1/orders/{cancelled['id']}/status", json={"status": "cancelled"}, headers=theater_headers
        )

        response = await client.get(
            "/api/v1/orders/theater-stats", params={"theater_id": theater.id}, headers=theater_headers
        )

        stats = response.json()
        assert stats["total_orders"] == 2
        assert stats["today_orders"] == 2
        assert stats["status_counts"]["pending"] == 1
        assert stats["status_counts"]["cancelled"] == 1
        assert stats["status_counts"]["completed"] == 0
        assert stats["total_revenue"] == 315
        assert stats["today_revenue"] == 315


@pytest_asyncio.fixture
async def stocked_samosa(session, theater) -> Product:
    product = await ProductRepository(session).create(
        Product(theater_id=theater.id, name="Samosa", price=40, track_stock=True, current_stock=5)
    )
    await StockEntryRepository(session).create(
        StockEntry(
            theater_id=theater.id,
            product_id=product.id,
            entry_date=product.created_at,
            entry_type="ADDED",
            quantity=5,
            batch_number="B-9",
        )
    )
    return product


class TestStockTracking:
    async def test_sale_books_a_fifo_entry(self, client: AsyncClient, session, theater, stocked_samosa):
        product_id = stocked_samosa.id

        response = await _place(client, _order(theater.id, (product_id, 2), (product_id, 1)))

        assert response.status_code == 201
        [sale] = await StockEntryRepository(session).list_for_order(response.json()["id"])
        assert sale.entry_type == "SOLD"
        assert sale.quantity == 3
        assert "(B-9)" in sale.notes
        product = await ProductRepository(session).get_by_id(product_id)
        assert product.current_stock == 2

    async def test_insufficient_stock(self, client: AsyncClient, session, theater, stocked_samosa):
        product_id = stocked_samosa.id

        response = await _place(client, _order(theater.id, (product_id, 6)))

        assert response.status_code == 400
        assert response.json()["code"] == "INSUFFICIENT_STOCK"
        assert response.json()["details"] == {"product_id": product_id, "available": 5, "requested": 6}
        assert await StockEntryRepository(session).count({"entry_type": "SOLD"}) == 0

    async def test_untracked_products_are_unlimited(self, client: AsyncClient, session, theater, popcorn):
        response = await _place(client, _order(theater.id, (popcorn.id, 50)))

        assert response.status_code == 201
        assert await StockEntryRepository(session).count() == 0

    async def test_cancel_returns_stock(self, client: AsyncClient, session, theater, stocked_samosa, theater_headers):
        product_id = stocked_samosa.id
        order = (await _place(client, _order(theater.id, (product_id, 4)))).json()

        await client.put(f"/api/v1/orders/{order['id']}/status", json={"status": "cancelled"}, headers=theater_headers)

        entries = await StockEntryRepository(session).list_for_order(order["id"])
        assert sorted(entry.entry_type for entry in entries) == ["RETURNED", "SOLD"]
        product = await ProductRepository(session).get_by_id(product_id)
        assert product.current_stock == 5

    async def test_items_record_their_category(self, client: AsyncClient, theater, popcorn):
        response = await _place(client, _order(theater.id, (popcorn.id, 1)))

        assert response.json()["items"][0]["category_id"] is None
