"""
Enumerations shared by entities, schemas and services.
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, FrozenSet


class AdminRole(str, Enum):
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"


class UserType(str, Enum):
    """Kind of principal a token was issued to."""

    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    THEATER_ADMIN = "theater_admin"
    THEATER_USER = "theater_user"


class TheaterStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class QRType(str, Enum):
    SINGLE = "single"
    SCREEN = "screen"


class LogoType(str, Enum):
    DEFAULT = "default"
    THEATER = "theater"
    CUSTOM = "custom"
    NONE = ""


class Orientation(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


class GSTType(str, Enum):
    INCLUDE = "INCLUDE"
    EXCLUDE = "EXCLUDE"

    @classmethod
    def parse(cls, raw: object) -> "GSTType":
        """Any value whose upper-cased text contains INCLUDE is INCLUDE; everything else is EXCLUDE."""
        return cls.INCLUDE if "INCLUDE" in str(raw or "").upper() else cls.EXCLUDE


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"
    WALLET = "wallet"
    BANK_TRANSFER = "bank_transfer"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"


class OrderType(str, Enum):
    DINE_IN = "dine_in"
    TAKEAWAY = "takeaway"
    DELIVERY = "delivery"


class OrderSource(str, Enum):
    QR_CODE = "qr_code"
    STAFF = "staff"
    ONLINE = "online"
    APP = "app"
    POS = "pos"
    KIOSK = "kiosk"


ORDER_STATUS_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY}),
    OrderStatus.READY: frozenset({OrderStatus.SERVED, OrderStatus.COMPLETED}),
    OrderStatus.SERVED: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.COMPLETED: frozenset(),
}


def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
    return target in ORDER_STATUS_TRANSITIONS.get(current, frozenset())


class StockEntryType(str, Enum):
    """Kinds of stock ledger entries. ADJUSTMENT is the only signed one."""

    ADDED = "ADDED"
    SOLD = "SOLD"
    EXPIRED = "EXPIRED"
    DAMAGED = "DAMAGED"
    RETURNED = "RETURNED"
    ADJUSTMENT = "ADJUSTMENT"


class StockStatus(str, Enum):
    UNLIMITED = "unlimited"
    OUT_OF_STOCK = "out_of_stock"
    LOW_STOCK = "low_stock"
    IN_STOCK = "in_stock"
