"""
Schema models for role API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import PaginationInfo


class PermissionEntry(BaseModel):
    """Access to one console page."""

    page: str = Field(min_length=1, max_length=100)
    page_name: str = Field(default="", max_length=100)
    has_access: bool = False
    route: str = Field(default="", max_length=255)


class RoleCreate(BaseModel):
    theater_id: int
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=500)
    permissions: List[PermissionEntry] = Field(default_factory=list)
    is_global: bool = False
    priority: int = Field(default=1, ge=1, le=10)
    is_active: bool = True
    sort_order: int = 0


class RoleUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    permissions: Optional[List[PermissionEntry]] = None
    is_global: Optional[bool] = None
    priority: Optional[int] = Field(default=None, ge=1, le=10)
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class RoleRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    name: str
    description: str
    permissions: List[PermissionEntry]
    is_global: bool
    priority: int
    is_active: bool
    is_default: bool
    can_delete: bool
    can_edit: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class RoleSummary(BaseModel):
    total_roles: int = 0
    active_roles: int = 0
    inactive_roles: int = 0
    default_roles: int = 0


class RoleListResponse(BaseModel):
    data: List[RoleRead]
    pagination: PaginationInfo
    summary: RoleSummary


class RolePermissionsReplace(BaseModel):
    permissions: List[PermissionEntry]


class PagePermissionUpdate(BaseModel):
    has_access: bool
