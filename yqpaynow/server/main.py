"""
Main Application Entry Point.

This module initializes the FastAPI application, configures middleware (CORS,
request logging), registers the exception handlers, mounts the uploads
directory and includes all API routers. It serves as the root of the web server.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from yqpaynow.core.bootstrap import ensure_default_pages, ensure_super_admin
from yqpaynow.core.database import async_session_maker, init_db
from yqpaynow.core.logging_config import get_logger, setup_logging
from yqpaynow.core.monitoring import initialize_logfire

from .api.v1 import (
    auth,
    banners,
    categories,
    dashboard,
    health,
    orders,
    page_access,
    product_types,
    products,
    qr_code_names,
    reports,
    roles,
    settings as theater_settings,
    single_qr_codes,
    sms,
    stock,
    theater_users,
    theaters,
    upload,
)
from .core import constant
from .core.config import settings
from .exception_handlers import setup_exception_handlers
from .middleware import RequestLoggingMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


async def bootstrap() -> None:
    """Seed the page registry and, when configured, the first super admin."""
    async with async_session_maker() as session:
        await ensure_default_pages(session)
        if settings.super_admin_email and settings.super_admin_password:
            await ensure_super_admin(
                session, settings.super_admin_email, settings.super_admin_password, settings.super_admin_name
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Initializes the database and seed data on startup. Failures are logged
    and the server still comes up.
    """
    # Startup
    try:
        logger.info(f"Starting up {constant.PROJECT_NAME} Server...")
        await init_db()
        await bootstrap()
        logger.info("Database initialized successfully")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)

    initialize_logfire(app)

    yield

    # Shutdown
    logger.info(f"Shutting down {constant.PROJECT_NAME} Server...")


ROUTERS = (
    (auth.router, "/auth"),
    (theaters.router, "/theaters"),
    (roles.router, "/roles"),
    (page_access.router, "/page-access"),
    (theater_users.router, "/theater-users"),
    (qr_code_names.router, "/qrcodenames"),
    (single_qr_codes.router, "/single-qrcodes"),
    (banners.router, "/theater-banners"),
    (product_types.router, "/theater-kiosk-types"),
    (categories.router, "/theater-categories"),
    (products.router, "/products"),
    (orders.router, "/orders"),
    (sms.router, "/sms"),
    (upload.router, "/upload"),
    (dashboard.router, "/dashboard"),
    (dashboard.theater_router, "/theater-dashboard"),
    (stock.router, "/stock"),
    (reports.router, "/reports"),
    (theater_settings.router, "/settings"),
)


def create_app() -> FastAPI:
    app = FastAPI(
        title=constant.PROJECT_NAME,
        description="""
    YQPayNow Server API

    Backend of the YQPayNow theater canteen platform. It manages theaters, their roles and staff,
    QR code names and generated QR codes, the product catalog and its stock ledger, orders, dashboards,
    sales reports and SMS OTP verification.
    """,
        version=constant.API_VERSION,
        openapi_url=f"{constant.API_V1_STR}/openapi.json",
        docs_url=f"{constant.API_V1_STR}/docs",
        redoc_url=f"{constant.API_V1_STR}/redoc",
        lifespan=lifespan,
    )

    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    app.add_middleware(RequestLoggingMiddleware)

    setup_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    for router, prefix in ROUTERS:
        app.include_router(router, prefix=f"{constant.API_V1_STR}{prefix}")

    upload_config = settings.upload
    upload_dir = Path(upload_config.directory)
    upload_dir.mkdir(parents=True, exist_ok=True)
    app.mount(upload_config.public_prefix, StaticFiles(directory=upload_dir), name="uploads")

    return app


app = create_app()
