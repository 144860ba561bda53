"""
Database entities, one module per table family.

Importing this package registers every table with the shared metadata.
"""

from .admins import Admin
from .banners import Banner
from .categories import Category
from .orders import Order
from .otp_verifications import OTPVerification
from .page_access import PageAccess
from .product_types import ProductType
from .products import Product
from .qr_code_names import QRCodeName
from .qr_codes import QRCode, QRSeat
from .roles import Role
from .stock_entries import StockEntry
from .theater_users import TheaterUser
from .theaters import Theater

__all__ = [
    "Admin",
    "Banner",
    "Category",
    "OTPVerification",
    "Order",
    "PageAccess",
    "Product",
    "ProductType",
    "QRCode",
    "QRCodeName",
    "QRSeat",
    "Role",
    "StockEntry",
    "Theater",
    "TheaterUser",
]
