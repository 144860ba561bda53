"""
Console pages and the permission sets of the roles every theater starts with.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

THEATER_ADMIN_ROLE = "Theater Admin"
KIOSK_SCREEN_ROLE = "Kiosk Screen"


@dataclass(frozen=True)
class PageDefinition:
    page: str
    page_name: str
    route: str
    category: str = "theater"
    description: str = ""

    def as_permission(self, theater_id: int | None = None, has_access: bool = True) -> Dict[str, Any]:
        """Permission entry with ``:theaterId`` resolved when a theater is given."""
        route = self.route if theater_id is None else self.route.replace(":theaterId", str(theater_id))
        return {"page": self.page, "page_name": self.page_name, "has_access": has_access, "route": route}


THEATER_PAGES: Tuple[PageDefinition, ...] = (
    PageDefinition("TheaterDashboardWithId", "Dashboard", "/theater-dashboard/:theaterId"),
    PageDefinition("TheaterProductList", "Products", "/theater-products/:theaterId"),
    PageDefinition("TheaterCategories", "Categories", "/theater-categories/:theaterId"),
    PageDefinition("TheaterKioskTypes", "Kiosk Types", "/theater-kiosk-types/:theaterId"),
    PageDefinition("TheaterProductTypes", "Product Types", "/theater-product-types/:theaterId"),
    PageDefinition("TheaterOrderHistory", "Order History", "/theater-order-history/:theaterId"),
    PageDefinition("OnlinePOSInterface", "POS", "/pos/:theaterId"),
    PageDefinition("TheaterBanner", "Banners", "/theater-banner/:theaterId"),
    PageDefinition("TheaterQRCodeNames", "QR Code Names", "/theater-qr-code-names/:theaterId"),
    PageDefinition("TheaterGenerateQR", "Generate QR", "/theater-generate-qr/:theaterId"),
    PageDefinition("TheaterQRManagement", "QR Management", "/theater-qr-management/:theaterId"),
    PageDefinition("TheaterUserManagement", "Theater Users", "/theater-user-management/:theaterId"),
    PageDefinition("TheaterRoles", "Roles", "/theater-roles/:theaterId"),
    PageDefinition("TheaterRoleAccess", "Role Access", "/theater-role-access/:theaterId"),
    PageDefinition("TheaterReports", "Reports", "/theater-reports/:theaterId"),
    PageDefinition("TheaterSettings", "Settings", "/theater-settings/:theaterId"),
)

KIOSK_PAGES: Tuple[PageDefinition, ...] = (
    PageDefinition("KioskProductList", "Kiosk Product List", "/kiosk-products/:theaterId", category="kiosk"),
    PageDefinition("KioskCart", "Kiosk Cart", "/kiosk-cart/:theaterId", category="kiosk"),
    PageDefinition("KioskCheckout", "Kiosk Checkout", "/kiosk-checkout/:theaterId", category="kiosk"),
    PageDefinition("KioskPayment", "Kiosk Payment", "/kiosk-payment/:theaterId", category="kiosk"),
    PageDefinition("KioskViewCart", "Kiosk View Cart", "/kiosk-view-cart/:theaterId", category="kiosk"),
)

ALL_PAGES: Tuple[PageDefinition, ...] = THEATER_PAGES + KIOSK_PAGES


@dataclass(frozen=True)
class DefaultRoleTemplate:
    name: str
    description: str
    pages: Tuple[PageDefinition, ...]
    priority: int
    can_edit: bool
    sort_order: int

    def permissions(self, theater_id: int) -> List[Dict[str, Any]]:
        return [page.as_permission(theater_id) for page in self.pages]


DEFAULT_ROLE_TEMPLATES: Tuple[DefaultRoleTemplate, ...] = (
    DefaultRoleTemplate(
        name=THEATER_ADMIN_ROLE,
        description="Full access to every theater console page",
        pages=THEATER_PAGES,
        priority=1,
        can_edit=True,
        sort_order=0,
    ),
    DefaultRoleTemplate(
        name=KIOSK_SCREEN_ROLE,
        description="Self-service kiosk screens",
        pages=KIOSK_PAGES,
        priority=10,
        can_edit=False,
        sort_order=1,
    ),
)
