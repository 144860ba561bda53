import io
import json
from typing import Any, AsyncGenerator, Dict, List
from unittest.mock import patch

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.bootstrap import ensure_super_admin
from yqpaynow.core.database.entities import Admin, Theater, TheaterUser
from yqpaynow.core.models.io.theater_users import TheaterUserCreate
from yqpaynow.core.models.io.theaters import AddressSchema, TheaterCreate
from yqpaynow.core.security import create_access_token
from yqpaynow.notifications import Msg91Client
from yqpaynow.server.core.config import SMSConfig
from yqpaynow.server.services.auth import AuthService
from yqpaynow.server.services.theater_users import TheaterUserService
from yqpaynow.server.services.theaters import TheaterService
from yqpaynow.storage import LocalFileStorage

SUPER_ADMIN_EMAIL = "root@yqpay.test"
SUPER_ADMIN_PASSWORD = "rootpass123"
THEATER_PASSWORD = "galaxy123"
STAFF_PASSWORD = "cashier123"


def bearer(claims: Dict[str, Any]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(claims)}"}


def png_bytes(size: int = 8, color: str = "red") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (size, size), color).save(buffer, format="PNG")
    return buffer.getvalue()


class FakeSmsGateway:
    """Records MSG91 calls and answers with a canned response."""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.status_code = 200
        self.reply: Dict[str, Any] = {"type": "success", "request_id": "req-1"}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(
            {"url": str(request.url), "headers": dict(request.headers), "json": json.loads(request.content)}
        )
        return httpx.Response(self.status_code, json=self.reply)


@pytest.fixture
def png_image() -> bytes:
    return png_bytes()


@pytest.fixture
def storage(tmp_path) -> LocalFileStorage:
    return LocalFileStorage(tmp_path / "uploads", public_prefix="/uploads", max_bytes=1024 * 1024)


@pytest.fixture
def sms_config() -> SMSConfig:
    return SMSConfig(
        enabled=True,
        api_key="test-key",
        sender_id="YQPAY",
        template_id="tpl-1",
        base_url="http://mock-msg91",
    )


@pytest.fixture
def sms_gateway() -> FakeSmsGateway:
    return FakeSmsGateway()


@pytest_asyncio.fixture(name="client")
async def client_fixture(
    session: AsyncSession, storage: LocalFileStorage, sms_config: SMSConfig, sms_gateway: FakeSmsGateway
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client with mocked lifespan and overridden dependencies."""
    from yqpaynow.core.database import get_session
    from yqpaynow.server.main import app
    from yqpaynow.server.services.deps import get_sms_client, get_sms_config, get_storage

    async def get_session_override() -> AsyncGenerator[AsyncSession, None]:
        yield session

    async def get_sms_client_override() -> AsyncGenerator[Msg91Client, None]:
        http = httpx.AsyncClient(transport=httpx.MockTransport(sms_gateway.handler))
        try:
            yield Msg91Client(sms_config, client=http)
        finally:
            await http.aclose()

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_sms_config] = lambda: sms_config
    app.dependency_overrides[get_sms_client] = get_sms_client_override

    # Mock the lifespan to prevent database initialization during tests
    async def mock_lifespan(app):
        yield

    with patch("yqpaynow.server.main.lifespan", mock_lifespan):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://localhost") as client:
            yield client

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Principals
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def super_admin(session: AsyncSession) -> Admin:
    return await ensure_super_admin(session, SUPER_ADMIN_EMAIL, SUPER_ADMIN_PASSWORD)


@pytest.fixture
def admin_headers(super_admin: Admin) -> Dict[str, str]:
    claims, _ = AuthService._admin_claims(super_admin)
    return bearer(claims)


@pytest_asyncio.fixture
async def theater(session: AsyncSession) -> Theater:
    data = TheaterCreate(
        name="Galaxy Cinemas",
        username="galaxy",
        password=THEATER_PASSWORD,
        email="owner@galaxy.test",
        address=AddressSchema(street="1 Mount Road", city="Chennai", state="TN"),
    )
    return await TheaterService(session).create(data)


@pytest_asyncio.fixture
async def other_theater(session: AsyncSession) -> Theater:
    data = TheaterCreate(name="Orion Multiplex", username="orion", password="orion123")
    return await TheaterService(session).create(data)


@pytest.fixture
def theater_headers(theater: Theater) -> Dict[str, str]:
    claims, _ = AuthService._theater_claims(theater)
    return bearer(claims)


@pytest_asyncio.fixture
async def staff_user(session: AsyncSession, theater: Theater) -> TheaterUser:
    data = TheaterUserCreate(
        theater_id=theater.id,
        username="cashier1",
        email="cashier1@galaxy.test",
        password=STAFF_PASSWORD,
        full_name="Counter Cashier",
    )
    return await TheaterUserService(session).create(data)


@pytest.fixture
def staff_headers(staff_user: TheaterUser, theater: Theater) -> Dict[str, str]:
    claims, _ = AuthService._staff_claims(staff_user, theater, None)
    return bearer(claims)
