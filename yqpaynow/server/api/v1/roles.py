"""
Roles API Endpoints.

Per-theater roles and their page permissions. Each theater owns two default
roles (Theater Admin and Kiosk Screen) that cannot be deleted and whose
fields other than permissions are locked.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from yqpaynow.core.models.io.common import MessageResponse, PaginationInfo
from yqpaynow.core.models.io.roles import (
    PagePermissionUpdate,
    RoleCreate,
    RoleListResponse,
    RolePermissionsReplace,
    RoleRead,
    RoleUpdate,
)
from yqpaynow.server.services.deps import (
    CurrentUserDep,
    SessionDep,
    TheaterAccessDep,
    check_theater_access,
)
from yqpaynow.server.services.roles import RoleService

router = APIRouter(tags=["roles"])


@router.get(
    "/",
    response_model=RoleListResponse,
    summary="List Roles",
    description="Roles of a theater with pagination and a summary of active, inactive and default roles.",
)
async def list_roles(
    theater_id: int,
    session: SessionDep,
    _: TheaterAccessDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = None,
) -> RoleListResponse:
    rows, total, summary = await RoleService(session).list(
        theater_id, page=page, limit=limit, search=search, is_active=is_active
    )
    return RoleListResponse(
        data=[RoleRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
        summary=summary,
    )


@router.post(
    "/",
    response_model=RoleRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Role",
    responses={409: {"description": "A role with this name already exists in the theater"}},
)
async def create_role(data: RoleCreate, session: SessionDep, user: CurrentUserDep) -> RoleRead:
    await check_theater_access(session, user, data.theater_id)
    return RoleRead.model_validate(await RoleService(session).create(data))


async def _accessible_role(role_id: int, session, user):
    service = RoleService(session)
    role = await service.get(role_id)
    await check_theater_access(session, user, role.theater_id)
    return service, role


@router.get("/{role_id}", response_model=RoleRead, summary="Get Role")
async def get_role(role_id: int, session: SessionDep, user: CurrentUserDep) -> RoleRead:
    _, role = await _accessible_role(role_id, session, user)
    return RoleRead.model_validate(role)


@router.put(
    "/{role_id}",
    response_model=RoleRead,
    summary="Update Role",
    description="Partial update. Default roles accept only `permissions` and `is_active`.",
    responses={403: {"description": "Default role fields are protected"}, 409: {"description": "Name taken"}},
)
async def update_role(role_id: int, data: RoleUpdate, session: SessionDep, user: CurrentUserDep) -> RoleRead:
    service, _ = await _accessible_role(role_id, session, user)
    return RoleRead.model_validate(await service.update(role_id, data))


@router.delete(
    "/{role_id}",
    response_model=MessageResponse,
    summary="Delete Role",
    description="Users holding the role are left without a role.",
    responses={403: {"description": "Default roles cannot be deleted"}},
)
async def delete_role(role_id: int, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    service, _ = await _accessible_role(role_id, session, user)
    await service.delete(role_id)
    return MessageResponse(message="Role deleted successfully")


@router.post("/{role_id}/permissions", response_model=RoleRead, summary="Replace Role Permissions")
async def replace_permissions(
    role_id: int, data: RolePermissionsReplace, session: SessionDep, user: CurrentUserDep
) -> RoleRead:
    service, _ = await _accessible_role(role_id, session, user)
    return RoleRead.model_validate(await service.replace_permissions(role_id, data.permissions))


@router.put(
    "/{role_id}/permissions/{page}",
    response_model=RoleRead,
    summary="Set Page Access",
    responses={404: {"description": "The page is not part of the role's permission list"}},
)
async def set_page_access(
    role_id: int, page: str, data: PagePermissionUpdate, session: SessionDep, user: CurrentUserDep
) -> RoleRead:
    service, _ = await _accessible_role(role_id, session, user)
    return RoleRead.model_validate(await service.set_page_access(role_id, page, data.has_access))
