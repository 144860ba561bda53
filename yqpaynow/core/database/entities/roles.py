"""
Role entity.

Roles are scoped to a theater and carry the list of pages a staff member
holding the role may open.
"""

from __future__ import annotations

from typing import Any, Dict, List

from sqlalchemy import JSON, UniqueConstraint
from sqlmodel import Field

from ..base import TimestampedTable


class Role(TimestampedTable, table=True):
    """Theater role with page permissions.

    ``permissions`` is a list of ``{page, page_name, has_access, route}`` dicts.

    Table: roles
    """

    __tablename__ = "roles"
    __table_args__ = (
        UniqueConstraint("theater_id", "normalized_name", name="uq_roles_theater_name"),
        {"extend_existing": True},
    )

    theater_id: int = Field(foreign_key="theaters.id", index=True)
    name: str = Field(max_length=100)
    normalized_name: str = Field(max_length=100)
    description: str = Field(default="", max_length=500)
    permissions: List[Dict[str, Any]] = Field(default_factory=list, sa_type=JSON)
    is_global: bool = Field(default=False)
    priority: int = Field(default=1)
    is_active: bool = Field(default=True)
    is_default: bool = Field(default=False)
    can_delete: bool = Field(default=True)
    can_edit: bool = Field(default=True)
    sort_order: int = Field(default=0)

    def granted_permissions(self) -> List[Dict[str, Any]]:
        """Permissions the role actually grants."""
        return [perm for perm in self.permissions if perm.get("has_access")]

    def __repr__(self) -> str:
        return f"Role(id={self.id}, theater_id={self.theater_id}, name={self.name})"
