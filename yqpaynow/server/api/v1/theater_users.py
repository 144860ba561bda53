"""
Theater Users API Endpoints.

Staff accounts of a theater. Each account gets a unique 4-digit PIN used as
the second login factor; the PIN is returned so theater admins can hand it out.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from yqpaynow.core.models.io.common import MessageResponse, PaginationInfo
from yqpaynow.core.models.io.theater_users import (
    TheaterUserCreate,
    TheaterUserListResponse,
    TheaterUserRead,
    TheaterUserUpdate,
)
from yqpaynow.server.services.deps import (
    CurrentUserDep,
    SessionDep,
    TheaterAccessDep,
    check_theater_access,
)
from yqpaynow.server.services.theater_users import TheaterUserService

router = APIRouter(tags=["theater-users"])


@router.get("/", response_model=TheaterUserListResponse, summary="List Theater Users")
async def list_theater_users(
    theater_id: int,
    session: SessionDep,
    _: TheaterAccessDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = None,
) -> TheaterUserListResponse:
    rows, total = await TheaterUserService(session).list(
        theater_id, page=page, limit=limit, search=search, is_active=is_active
    )
    return TheaterUserListResponse(
        data=[TheaterUserRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.post(
    "/",
    response_model=TheaterUserRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Theater User",
    responses={
        400: {"description": "Role does not belong to the theater"},
        409: {"description": "Username already taken"},
    },
)
async def create_theater_user(data: TheaterUserCreate, session: SessionDep, user: CurrentUserDep) -> TheaterUserRead:
    await check_theater_access(session, user, data.theater_id)
    return TheaterUserRead.model_validate(await TheaterUserService(session).create(data))


async def _accessible_user(user_id: int, session, user):
    service = TheaterUserService(session)
    staff = await service.get(user_id)
    await check_theater_access(session, user, staff.theater_id)
    return service, staff


@router.get("/{user_id}", response_model=TheaterUserRead, summary="Get Theater User")
async def get_theater_user(user_id: int, session: SessionDep, user: CurrentUserDep) -> TheaterUserRead:
    _, staff = await _accessible_user(user_id, session, user)
    return TheaterUserRead.model_validate(staff)


@router.put(
    "/{user_id}",
    response_model=TheaterUserRead,
    summary="Update Theater User",
    description="Partial update; a new `password` is re-hashed and `regenerate_pin` issues a fresh PIN.",
)
async def update_theater_user(
    user_id: int, data: TheaterUserUpdate, session: SessionDep, user: CurrentUserDep
) -> TheaterUserRead:
    service, _ = await _accessible_user(user_id, session, user)
    return TheaterUserRead.model_validate(await service.update(user_id, data))


@router.delete("/{user_id}", response_model=MessageResponse, summary="Delete Theater User")
async def delete_theater_user(user_id: int, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    service, _ = await _accessible_user(user_id, session, user)
    await service.delete(user_id)
    return MessageResponse(message="Theater user deleted successfully")
