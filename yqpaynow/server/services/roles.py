"""
Role management.

Every theater starts with two default roles built from
``DEFAULT_ROLE_TEMPLATES``. Default roles cannot be deleted and only their
permissions (and active flag) may change; roles a theater creates itself are
fully editable.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database.entities import Role
from yqpaynow.core.database.repositories import (
    RoleRepository,
    TheaterRepository,
    TheaterUserRepository,
    normalize_name,
)
from yqpaynow.core.errors import ConflictError, NotFoundError, PermissionDeniedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.permissions import DEFAULT_ROLE_TEMPLATES
from yqpaynow.core.models.io.roles import (
    PermissionEntry,
    RoleCreate,
    RoleSummary,
    RoleUpdate,
)

logger = get_logger(__name__)

DEFAULT_ROLE_EDITABLE_FIELDS = frozenset({"permissions", "is_active"})


class RoleService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.roles = RoleRepository(session)
        self.theaters = TheaterRepository(session)
        self.users = TheaterUserRepository(session)

    async def create_default_roles(self, theater_id: int) -> List[Role]:
        """Create the roles every new theater starts with."""
        created = []
        for template in DEFAULT_ROLE_TEMPLATES:
            role = Role(
                theater_id=theater_id,
                name=template.name,
                normalized_name=normalize_name(template.name),
                description=template.description,
                permissions=template.permissions(theater_id),
                priority=template.priority,
                is_default=True,
                can_delete=False,
                can_edit=template.can_edit,
                sort_order=template.sort_order,
            )
            created.append(await self.roles.create(role))
        logger.info(f"Created {len(created)} default roles for theater {theater_id}")
        return created

    async def get(self, role_id: int) -> Role:
        role = await self.roles.get_by_id(role_id)
        if role is None:
            raise NotFoundError(f"Role {role_id} not found", code="ROLE_NOT_FOUND")
        return role

    async def list(
        self,
        theater_id: int,
        *,
        page: int,
        limit: int,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[Role], int, RoleSummary]:
        filters = {"is_active": is_active}
        rows = await self.roles.list_for_theater(
            theater_id, limit=limit, offset=(page - 1) * limit, filters=filters, search=search
        )
        total = await self.roles.count_for_theater(theater_id, filters, search)
        all_roles = await self.roles.count_for_theater(theater_id)
        active = await self.roles.count_for_theater(theater_id, {"is_active": True})
        defaults = await self.roles.count_for_theater(theater_id, {"is_default": True})
        summary = RoleSummary(
            total_roles=all_roles, active_roles=active, inactive_roles=all_roles - active, default_roles=defaults
        )
        return rows, total, summary

    async def create(self, data: RoleCreate) -> Role:
        if await self.theaters.get_by_id(data.theater_id) is None:
            raise NotFoundError(f"Theater {data.theater_id} not found", code="THEATER_NOT_FOUND")
        if await self.roles.get_by_normalized_name(data.theater_id, data.name):
            raise ConflictError(f"Role '{data.name}' already exists in this theater", code="ROLE_EXISTS")
        role = Role(
            **data.model_dump(exclude={"permissions"}),
            normalized_name=normalize_name(data.name),
            permissions=[perm.model_dump() for perm in data.permissions],
        )
        role = await self.roles.create(role)
        logger.info(f"Created role {role.name!r} for theater {role.theater_id}")
        return role

    async def update(self, role_id: int, data: RoleUpdate) -> Role:
        """
        Apply a partial update.

        Raises:
            PermissionDeniedError: ``ROLE_PROTECTED`` when a default role is
                sent fields other than ``permissions``/``is_active``, or a
                non-editable default role is sent anything but permissions
            ConflictError: The new name is taken in the theater
        """
        role = await self.get(role_id)
        changes = data.model_dump(exclude_unset=True)

        if role.is_default:
            fields = set(changes)
            if not fields <= DEFAULT_ROLE_EDITABLE_FIELDS:
                raise PermissionDeniedError(
                    "Default roles only accept permission changes",
                    code="ROLE_PROTECTED",
                    details={"rejected_fields": sorted(fields - DEFAULT_ROLE_EDITABLE_FIELDS)},
                )
            if not role.can_edit and "permissions" not in changes:
                raise PermissionDeniedError("This default role cannot be edited", code="ROLE_PROTECTED")

        if "name" in changes and normalize_name(changes["name"]) != role.normalized_name:
            if await self.roles.get_by_normalized_name(role.theater_id, changes["name"]):
                raise ConflictError(f"Role '{changes['name']}' already exists in this theater", code="ROLE_EXISTS")
            role.normalized_name = normalize_name(changes["name"])

        for key, value in changes.items():
            setattr(role, key, value)
        return await self.roles.update(role, json_fields=("permissions",) if "permissions" in changes else ())

    async def delete(self, role_id: int) -> None:
        role = await self.get(role_id)
        if role.is_default and not role.can_delete:
            raise PermissionDeniedError("Default roles cannot be deleted", code="ROLE_PROTECTED")
        await self.users.clear_role(role_id)
        await self.roles.delete(role_id)
        logger.info(f"Deleted role {role.name!r} of theater {role.theater_id}")

    async def replace_permissions(self, role_id: int, permissions: List[PermissionEntry]) -> Role:
        role = await self.get(role_id)
        role.permissions = [perm.model_dump() for perm in permissions]
        return await self.roles.update(role, json_fields=("permissions",))

    async def set_page_access(self, role_id: int, page: str, has_access: bool) -> Role:
        role = await self.get(role_id)
        permissions = [dict(perm) for perm in role.permissions]
        for perm in permissions:
            if perm.get("page") == page:
                perm["has_access"] = has_access
                break
        else:
            raise NotFoundError(f"Page '{page}' is not part of this role", code="PAGE_NOT_FOUND")
        role.permissions = permissions
        return await self.roles.update(role, json_fields=("permissions",))
