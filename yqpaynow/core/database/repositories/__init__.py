"""Repositories, one per table."""

from .admins import AdminRepository
from .banners import BannerRepository
from .base import AsyncBaseRepository, QueryBuilder, SqlModelRepository, TheaterScopedRepository, normalize_name
from .categories import CategoryRepository
from .orders import OrderRepository
from .otp_verifications import OTPVerificationRepository
from .page_access import PageAccessRepository
from .product_types import ProductTypeRepository
from .products import ProductRepository
from .qr_code_names import QRCodeNameRepository
from .qr_codes import QRCodeRepository, QRSeatRepository
from .roles import RoleRepository
from .stock_entries import StockEntryRepository
from .theater_users import TheaterUserRepository
from .theaters import TheaterRepository

__all__ = [
    "AdminRepository",
    "AsyncBaseRepository",
    "BannerRepository",
    "CategoryRepository",
    "OTPVerificationRepository",
    "OrderRepository",
    "PageAccessRepository",
    "ProductRepository",
    "ProductTypeRepository",
    "QRCodeNameRepository",
    "QRCodeRepository",
    "QRSeatRepository",
    "QueryBuilder",
    "RoleRepository",
    "SqlModelRepository",
    "StockEntryRepository",
    "TheaterRepository",
    "TheaterScopedRepository",
    "TheaterUserRepository",
    "normalize_name",
]
