"""
Page access registry entity.

The registry lists every console page a role permission can point at.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Field

from ..base import TimestampedTable


class PageAccess(TimestampedTable, table=True):
    """A console page that can be granted through roles.

    Table: page_access
    """

    __tablename__ = "page_access"
    __table_args__ = ({"extend_existing": True},)

    page: str = Field(max_length=100, unique=True, index=True, description="Stable page key, e.g. 'Orders'")
    page_name: str = Field(max_length=100)
    route: str = Field(max_length=255)
    category: str = Field(default="theater", max_length=50, index=True)
    description: Optional[str] = Field(default=None, max_length=500)
    required_role: Optional[str] = Field(default=None, max_length=50)
    sort_order: int = Field(default=0)
    is_active: bool = Field(default=True)
