"""Initial schema and seed data for YQPayNow

Revision ID: 20260101_000000
Revises: None
Create Date: 2026-01-01 00:00:00.000000

This is the initial migration that creates all tables of the platform and
seeds the global page access registry:
- Platform admins and theaters
- Per-theater roles, staff users, QR code names and generated QR codes
- Catalog tables (banners, product types, categories, products)
- Orders and OTP verifications

Revision format: YYYYMMDD_HHMMSS_description

"""

from datetime import datetime, timezone
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op
from yqpaynow.core.models.domain.permissions import ALL_PAGES

# revision identifiers, used by Alembic.
revision: str = "20260101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables and seed initial data."""

    # Create admins table
    op.create_table(
        "admins",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("role", sa.String(32), nullable=False, server_default="admin"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_admins_email", "email", unique=True),
    )

    # Create theaters table
    op.create_table(
        "theaters",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("address", sa.JSON(), nullable=False),
        sa.Column("settings", sa.JSON(), nullable=False),
        sa.Column("branding", sa.JSON(), nullable=False),
        sa.Column("owner_details", sa.JSON(), nullable=False),
        sa.Column("agreement_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("agreement_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.String(16), nullable=False, server_default="active"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_theaters_name", "name"),
        sa.Index("ix_theaters_username", "username", unique=True),
        sa.Index("ix_theaters_agreement_end", "agreement_end"),
        sa.Index("ix_theaters_is_active", "is_active"),
    )

    # Create page_access table
    op.create_table(
        "page_access",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("page", sa.String(100), nullable=False),
        sa.Column("page_name", sa.String(100), nullable=False),
        sa.Column("route", sa.String(255), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="theater"),
        sa.Column("description", sa.String(500), nullable=True),
        sa.Column("required_role", sa.String(50), nullable=True),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_page_access_page", "page", unique=True),
        sa.Index("ix_page_access_category", "category"),
    )

    # Create roles table
    op.create_table(
        "roles",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("normalized_name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        sa.Column("permissions", sa.JSON(), nullable=False),
        sa.Column("is_global", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("priority", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("can_delete", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("can_edit", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.UniqueConstraint("theater_id", "normalized_name", name="uq_roles_theater_name"),
        sa.Index("ix_roles_theater_id", "theater_id"),
    )

    # Create theater_users table
    op.create_table(
        "theater_users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("username", sa.String(50), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(100), nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=True),
        sa.Column("pin", sa.String(4), nullable=False),
        sa.Column("role_id", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_email_verified", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("profile_image", sa.String(500), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.ForeignKeyConstraint(["role_id"], ["roles.id"]),
        sa.UniqueConstraint("pin"),
        sa.Index("ix_theater_users_theater_id", "theater_id"),
        sa.Index("ix_theater_users_username", "username", unique=True),
        sa.Index("ix_theater_users_role_id", "role_id"),
    )

    # Create qr_code_names table
    op.create_table(
        "qr_code_names",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("qr_name", sa.String(100), nullable=False),
        sa.Column("normalized_name", sa.String(100), nullable=False),
        sa.Column("seat_class", sa.String(50), nullable=False),
        sa.Column("description", sa.String(500), nullable=False, server_default=""),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.UniqueConstraint("theater_id", "normalized_name", name="uq_qr_code_names_theater_name"),
        sa.Index("ix_qr_code_names_theater_id", "theater_id"),
    )

    # Create qr_codes table
    op.create_table(
        "qr_codes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("qr_type", sa.String(16), nullable=False),
        sa.Column("qr_name", sa.String(100), nullable=False),
        sa.Column("seat_class", sa.String(50), nullable=False),
        sa.Column("qr_code_url", sa.String(500), nullable=True),
        sa.Column("qr_code_data", sa.String(1000), nullable=True),
        sa.Column("logo_url", sa.String(500), nullable=False, server_default=""),
        sa.Column("logo_type", sa.String(16), nullable=False, server_default="default"),
        sa.Column("orientation", sa.String(16), nullable=False, server_default="landscape"),
        sa.Column("scan_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_scanned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("generated_by", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.Index("ix_qr_codes_theater_id", "theater_id"),
        sa.Index("ix_qr_codes_qr_name", "qr_name"),
    )

    # Create qr_seats table
    op.create_table(
        "qr_seats",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("qr_code_id", sa.Integer(), nullable=False),
        sa.Column("seat", sa.String(10), nullable=False),
        sa.Column("qr_code_url", sa.String(500), nullable=False),
        sa.Column("qr_code_data", sa.String(1000), nullable=False),
        sa.Column("logo_url", sa.String(500), nullable=False, server_default=""),
        sa.Column("logo_type", sa.String(16), nullable=False, server_default="default"),
        sa.Column("orientation", sa.String(16), nullable=False, server_default="landscape"),
        sa.Column("scan_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_scanned_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["qr_code_id"], ["qr_codes.id"]),
        sa.UniqueConstraint("qr_code_id", "seat", name="uq_qr_seats_code_seat"),
        sa.Index("ix_qr_seats_qr_code_id", "qr_code_id"),
    )

    # Create banners table
    op.create_table(
        "banners",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("image_url", sa.String(500), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.Index("ix_banners_theater_id", "theater_id"),
    )

    # Create product_types and categories tables
    category_color = sa.Column("color", sa.String(16), nullable=False, server_default="#6B8E98")
    for table, extra in (("product_types", []), ("categories", [category_color])):
        op.create_table(
            table,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("theater_id", sa.Integer(), nullable=False),
            sa.Column("name", sa.String(100), nullable=False),
            sa.Column("normalized_name", sa.String(100), nullable=False),
            sa.Column("description", sa.String(500), nullable=False, server_default=""),
            sa.Column("image_url", sa.String(500), nullable=True),
            *extra,
            sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
            sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
            *_timestamps(),
            sa.PrimaryKeyConstraint("id"),
            sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
            sa.UniqueConstraint("theater_id", "normalized_name", name=f"uq_{table}_theater_name"),
            sa.Index(f"ix_{table}_theater_id", "theater_id"),
        )

    # Create products table
    op.create_table(
        "products",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.String(1000), nullable=False, server_default=""),
        sa.Column("category_id", sa.Integer(), nullable=True),
        sa.Column("product_type_id", sa.Integer(), nullable=True),
        sa.Column("sku", sa.String(64), nullable=True),
        sa.Column("price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("tax_rate", sa.Float(), nullable=False, server_default="0"),
        sa.Column("gst_type", sa.String(16), nullable=False, server_default="EXCLUDE"),
        sa.Column("discount_percentage", sa.Float(), nullable=False, server_default="0"),
        sa.Column("image_url", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("is_available", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("sort_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("track_stock", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("current_stock", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("min_stock", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.ForeignKeyConstraint(["category_id"], ["categories.id"]),
        sa.ForeignKeyConstraint(["product_type_id"], ["product_types.id"]),
        sa.Index("ix_products_theater_id", "theater_id"),
        sa.Index("ix_products_category_id", "category_id"),
        sa.Index("ix_products_product_type_id", "product_type_id"),
    )

    # Create orders table
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("order_number", sa.String(32), nullable=False),
        sa.Column("customer_info", sa.JSON(), nullable=False),
        sa.Column("items", sa.JSON(), nullable=False),
        sa.Column("subtotal", sa.Float(), nullable=False, server_default="0"),
        sa.Column("tax_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("discount_amount", sa.Float(), nullable=False, server_default="0"),
        sa.Column("total", sa.Float(), nullable=False, server_default="0"),
        sa.Column("currency", sa.String(8), nullable=False, server_default="INR"),
        sa.Column("payment_method", sa.String(32), nullable=False, server_default="cash"),
        sa.Column("payment_status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("order_type", sa.String(32), nullable=False, server_default="dine_in"),
        sa.Column("source", sa.String(32), nullable=False, server_default="qr_code"),
        sa.Column("qr_name", sa.String(100), nullable=True),
        sa.Column("seat", sa.String(10), nullable=True),
        sa.Column("special_instructions", sa.String(500), nullable=True),
        sa.Column("status_timestamps", sa.JSON(), nullable=False),
        sa.Column("created_by", sa.String(100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.Index("ix_orders_theater_id", "theater_id"),
        sa.Index("ix_orders_order_number", "order_number"),
        sa.UniqueConstraint("theater_id", "order_number", name="uq_orders_theater_order_number"),
        sa.Index("ix_orders_payment_status", "payment_status"),
        sa.Index("ix_orders_status", "status"),
    )

    # Create stock_entries table
    op.create_table(
        "stock_entries",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("theater_id", sa.Integer(), nullable=False),
        sa.Column("product_id", sa.Integer(), nullable=False),
        sa.Column("entry_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("entry_type", sa.String(16), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("expire_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("batch_number", sa.String(64), nullable=True),
        sa.Column("notes", sa.String(500), nullable=False, server_default=""),
        sa.Column("order_id", sa.Integer(), nullable=True),
        sa.Column("created_by", sa.String(100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["theater_id"], ["theaters.id"]),
        sa.ForeignKeyConstraint(["product_id"], ["products.id"]),
        sa.ForeignKeyConstraint(["order_id"], ["orders.id"]),
        sa.Index("ix_stock_entries_theater_id", "theater_id"),
        sa.Index("ix_stock_entries_product_id", "product_id"),
        sa.Index("ix_stock_entries_entry_date", "entry_date"),
        sa.Index("ix_stock_entries_order_id", "order_id"),
    )

    # Create otp_verifications table
    op.create_table(
        "otp_verifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("phone_number", sa.String(20), nullable=False),
        sa.Column("otp", sa.String(8), nullable=False),
        sa.Column("purpose", sa.String(50), nullable=False, server_default="order_verification"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("attempts", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_otp_verifications_phone_number", "phone_number", unique=True),
    )

    # Seed the page access registry
    now = datetime.now(timezone.utc)
    page_access = sa.table(
        "page_access",
        sa.column("page", sa.String),
        sa.column("page_name", sa.String),
        sa.column("route", sa.String),
        sa.column("category", sa.String),
        sa.column("description", sa.String),
        sa.column("sort_order", sa.Integer),
        sa.column("is_active", sa.Boolean),
        sa.column("created_at", sa.DateTime(timezone=True)),
        sa.column("updated_at", sa.DateTime(timezone=True)),
    )
    op.bulk_insert(
        page_access,
        [
            {
                "page": page.page,
                "page_name": page.page_name,
                "route": page.route,
                "category": page.category,
                "description": page.description or None,
                "sort_order": order,
                "is_active": True,
                "created_at": now,
                "updated_at": now,
            }
            for order, page in enumerate(ALL_PAGES)
        ],
    )


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table("otp_verifications")
    op.drop_table("stock_entries")
    op.drop_table("orders")
    op.drop_table("products")
    op.drop_table("categories")
    op.drop_table("product_types")
    op.drop_table("banners")
    op.drop_table("qr_seats")
    op.drop_table("qr_codes")
    op.drop_table("qr_code_names")
    op.drop_table("theater_users")
    op.drop_table("roles")
    op.drop_table("page_access")
    op.drop_table("theaters")
    op.drop_table("admins")
