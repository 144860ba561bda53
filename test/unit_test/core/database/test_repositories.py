"""Unit tests for the repository layer against an in-memory SQLite database."""

from datetime import datetime, timedelta, timezone

import pytest_asyncio

from yqpaynow.core.database import UTCTimestamp, utc_now
from yqpaynow.core.database.entities import Order, QRCode, QRSeat, Role, Theater, TheaterUser
from yqpaynow.core.database.repositories import (
    OrderRepository,
    QRCodeRepository,
    QRSeatRepository,
    RoleRepository,
    TheaterRepository,
    TheaterUserRepository,
    normalize_name,
)


async def _theater(session, username: str, city: str = "", **fields) -> Theater:
    theater = Theater(
        name=fields.pop("name", username.title()),
        username=username,
        password_hash="hash",
        address={"street": "", "city": city, "state": "", "zip_code": "", "country": "India"},
        **fields,
    )
    return await TheaterRepository(session).create(theater)


class TestSqlModelRepository:
    async def test_create_get_update_delete(self, session):
        repo = TheaterRepository(session)
        theater = await _theater(session, "galaxy")
        assert theater.id is not None

        fetched = await repo.get_by_id(theater.id)
        assert fetched is not None
        before = fetched.updated_at

        fetched.name = "Galaxy Renamed"
        updated = await repo.update(fetched)
        assert updated.name == "Galaxy Renamed"
        assert updated.updated_at >= before

        assert await repo.delete(theater.id) is True
        assert await repo.get_by_id(theater.id) is None
        assert await repo.delete(theater.id) is False

    async def test_update_json_field_in_place(self, session):
        repo = TheaterRepository(session)
        theater = await _theater(session, "galaxy")

        theater.settings["currency"] = "USD"
        await repo.update(theater, json_fields=("settings",))

        session.expire_all()
        reloaded = await repo.get_by_id(theater.id)
        assert reloaded.settings["currency"] == "USD"

    async def test_list_filters_and_pagination(self, session):
        repo = TheaterRepository(session)
        await _theater(session, "alpha", name="Alpha")
        await _theater(session, "bravo", name="Bravo", is_active=False)
        await _theater(session, "charlie", name="Charlie")

        assert [t.name for t in await repo.list()] == ["Alpha", "Bravo", "Charlie"]
        assert [t.name for t in await repo.list(limit=1, offset=1)] == ["Bravo"]
        assert [t.name for t in await repo.list(filters={"is_active": True})] == ["Alpha", "Charlie"]
        assert await repo.count(filters={"is_active": False}) == 1
        # None filters are ignored
        assert await repo.count(filters={"is_active": None}) == 3

    async def test_delete_where(self, session, theater_pair):
        first, second = theater_pair
        repo = RoleRepository(session)
        for name in ("Cashier", "Manager"):
            await repo.create(Role(theater_id=first.id, name=name, normalized_name=normalize_name(name)))
        await repo.create(Role(theater_id=second.id, name="Cashier", normalized_name="cashier"))

        assert await repo.delete_where(theater_id=first.id) == 2
        assert await repo.count() == 1


@pytest_asyncio.fixture
async def theater_pair(session):
    return await _theater(session, "galaxy", city="Chennai"), await _theater(session, "orion", city="Madurai")


class TestTheaterRepository:
    async def test_get_by_username_is_case_insensitive(self, session, theater_pair):
        repo = TheaterRepository(session)
        found = await repo.get_by_username("  GALAXY ")
        assert found is not None
        assert found.id == theater_pair[0].id
        assert await repo.get_by_username("nobody") is None

    async def test_search_matches_city(self, session, theater_pair):
        repo = TheaterRepository(session)
        results = await repo.list(search="madu")
        assert [t.username for t in results] == ["orion"]
        assert await repo.count(search="galax") == 1

    async def test_agreements_ending_between(self, session):
        now = utc_now()
        await _theater(session, "soon", agreement_end=now + timedelta(days=5))
        await _theater(session, "later", agreement_end=now + timedelta(days=90))
        await _theater(session, "sooner", agreement_end=now + timedelta(days=2))
        await _theater(session, "open")

        results = await TheaterRepository(session).list_agreements_ending_between(now, now + timedelta(days=30))
        assert [t.username for t in results] == ["sooner", "soon"]

    async def test_list_recent(self, session, theater_pair):
        recent = await TheaterRepository(session).list_recent(limit=1)
        assert len(recent) == 1


class TestTheaterScopedRepository:
    async def test_get_for_theater_respects_tenant(self, session, theater_pair):
        first, second = theater_pair
        repo = RoleRepository(session)
        role = await repo.create(Role(theater_id=first.id, name="Cashier", normalized_name="cashier"))

        assert await repo.get_for_theater(first.id, role.id) is not None
        assert await repo.get_for_theater(second.id, role.id) is None

    async def test_normalized_name_lookup(self, session, theater_pair):
        first, _ = theater_pair
        repo = RoleRepository(session)
        await repo.create(Role(theater_id=first.id, name="Floor Manager", normalized_name="floor manager"))

        found = await repo.get_by_normalized_name(first.id, "  FLOOR manager ")
        assert found is not None
        assert found.name == "Floor Manager"

    async def test_list_and_count_for_theater(self, session, theater_pair):
        first, second = theater_pair
        repo = RoleRepository(session)
        await repo.create(Role(theater_id=first.id, name="A", normalized_name="a", priority=2))
        await repo.create(Role(theater_id=first.id, name="B", normalized_name="b", priority=1, is_default=True))
        await repo.create(Role(theater_id=second.id, name="C", normalized_name="c"))

        roles = await repo.list_for_theater(first.id)
        assert [r.name for r in roles] == ["B", "A"]
        assert await repo.count_for_theater(first.id) == 2
        assert [r.name for r in await repo.list_default_roles(first.id)] == ["B"]


class TestTheaterUserRepository:
    async def test_pins_and_role_clearing(self, session, theater_pair):
        first, _ = theater_pair
        role = await RoleRepository(session).create(Role(theater_id=first.id, name="Cashier", normalized_name="cashier"))
        repo = TheaterUserRepository(session)
        user = await repo.create(
            TheaterUser(
                theater_id=first.id,
                username="cashier1",
                email="c@galaxy.test",
                password_hash="hash",
                full_name="Cashier",
                pin="1234",
                role_id=role.id,
            )
        )

        assert await repo.all_pins() == {"1234"}
        assert (await repo.get_by_username("Cashier1")).id == user.id

        await repo.clear_role(role.id)
        session.expire_all()
        assert (await repo.get_by_id(user.id)).role_id is None


class TestQRRepositories:
    async def test_find_by_name_and_seats(self, session, theater_pair):
        first, _ = theater_pair
        codes = QRCodeRepository(session)
        seats = QRSeatRepository(session)
        single = await codes.create(QRCode(theater_id=first.id, qr_type="single", qr_name="Counter", seat_class="GEN"))
        screen = await codes.create(QRCode(theater_id=first.id, qr_type="screen", qr_name="Screen 1", seat_class="GOLD"))
        await seats.add_all(
            [
                QRSeat(qr_code_id=screen.id, seat=label, qr_code_url=f"/uploads/{label}.png", qr_code_data=label)
                for label in ("A1", "A2")
            ]
        )

        assert [c.id for c in await codes.find_by_name(first.id, "counter")] == [single.id]
        assert await codes.find_by_name(first.id, "Counter", "screen") == []

        grouped = await seats.list_for_codes([single.id, screen.id])
        assert grouped[single.id] == []
        assert [s.seat for s in grouped[screen.id]] == ["A1", "A2"]
        assert (await seats.get_by_label(screen.id, "A2")).seat == "A2"
        assert await seats.get_by_label(single.id, "A2") is None
        assert await seats.list_for_codes([]) == {}


class TestOrderRepository:
    async def test_search_revenue_and_status_counts(self, session, theater_pair):
        first, second = theater_pair
        repo = OrderRepository(session)
        now = utc_now()
        rows = [
            ("ORD-1", "pending", 100.0, "Asha", now - timedelta(days=2)),
            ("ORD-2", "completed", 50.5, "Ravi", now),
            ("ORD-3", "cancelled", 999.0, "Asha", now),
        ]
        for number, status, total, name, created in rows:
            await repo.create(
                Order(
                    theater_id=first.id,
                    order_number=number,
                    status=status,
                    total=total,
                    customer_info={"name": name},
                    created_at=created,
                )
            )
        await repo.create(Order(theater_id=second.id, order_number="ORD-X", total=10.0))

        found, total = await repo.search(first.id)
        assert total == 3
        assert [o.order_number for o in found][0] in {"ORD-2", "ORD-3"}

        found, total = await repo.search(first.id, search="asha")
        assert total == 2

        found, total = await repo.search(first.id, date_from=now - timedelta(hours=1))
        assert {o.order_number for o in found} == {"ORD-2", "ORD-3"}

        assert await repo.revenue(first.id) == 150.5
        assert await repo.revenue() == 160.5
        assert await repo.count_by_status(first.id) == {"pending": 1, "completed": 1, "cancelled": 1}
        assert await repo.count_created_between(first.id, now - timedelta(hours=1), now + timedelta(hours=1)) == 2


class TestUTCTimestamps:
    def test_bind_converts_offsets_to_utc(self):
        column_type = UTCTimestamp()
        ist = timezone(timedelta(hours=5, minutes=30))

        bound = column_type.process_bind_param(datetime(2026, 3, 1, 10, 0, tzinfo=ist), None)
        assert bound == datetime(2026, 3, 1, 4, 30, tzinfo=timezone.utc)
        assert bound.tzinfo is timezone.utc
        assert column_type.process_bind_param(None, None) is None

    def test_naive_values_are_read_as_utc(self):
        loaded = UTCTimestamp().process_result_value(datetime(2026, 3, 1, 4, 30), None)
        assert loaded == datetime(2026, 3, 1, 4, 30, tzinfo=timezone.utc)

    async def test_reloaded_rows_carry_utc_timestamps(self, session):
        theater = await _theater(session, "galaxy", agreement_end=datetime(2027, 1, 1, 12, 0))
        await session.refresh(theater)

        assert theater.created_at.tzinfo is not None
        assert theater.created_at.utcoffset() == timedelta(0)
        assert theater.agreement_end == datetime(2027, 1, 1, 12, 0, tzinfo=timezone.utc)


class TestOrderNumbersPerTheater:
    async def test_same_number_in_two_theaters(self, session, theater_pair):
        first, second = theater_pair
        repo = OrderRepository(session)

        await repo.create(Order(theater_id=first.id, order_number="ORD-20260101-0001"))
        await repo.create(Order(theater_id=second.id, order_number="ORD-20260101-0001"))

        assert await repo.count_created_between(None, utc_now() - timedelta(hours=1), utc_now()) == 2
