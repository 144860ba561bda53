"""
Theater API Endpoints.

Registration and lifecycle of theaters (the tenants of the platform):
listing, profile updates, activation, owner password changes, deletion and
the agreement expiry reports.
"""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from yqpaynow.core.models.domain.enums import TheaterStatus
from yqpaynow.core.models.io.common import MessageResponse, PaginationInfo
from yqpaynow.core.models.io.theaters import (
    AgreementStatus,
    ExpiringAgreement,
    TheaterCreate,
    TheaterListResponse,
    TheaterPasswordUpdate,
    TheaterRead,
    TheaterStatusUpdate,
    TheaterUpdate,
)
from yqpaynow.server.services.deps import AdminUserDep, SessionDep, TheaterAccessDep
from yqpaynow.server.services.theaters import EXPIRING_SOON_DAYS, TheaterService

router = APIRouter(tags=["theaters"])


@router.get(
    "/",
    response_model=TheaterListResponse,
    summary="List Theaters",
    description="Paginated theaters, optionally filtered by status and searched by name, username or city.",
)
async def list_theaters(
    session: SessionDep,
    _: AdminUserDep,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    status: Optional[TheaterStatus] = None,
    is_active: Optional[bool] = None,
) -> TheaterListResponse:
    rows, total = await TheaterService(session).list(
        page=page, limit=limit, search=search, status=status.value if status else None, is_active=is_active
    )
    return TheaterListResponse(
        data=[TheaterRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.post(
    "/",
    response_model=TheaterRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register Theater",
    description="Create a theater with its owner login and the default Theater Admin and Kiosk Screen roles.",
    responses={409: {"description": "Username already taken"}},
)
async def create_theater(data: TheaterCreate, session: SessionDep, _: AdminUserDep) -> TheaterRead:
    theater = await TheaterService(session).create(data)
    return TheaterRead.model_validate(theater)


@router.get(
    "/expiring-agreements",
    response_model=List[ExpiringAgreement],
    summary="Expiring Agreements",
    description="Theaters whose agreement ends within the next `days` days, soonest first.",
)
async def expiring_agreements(
    session: SessionDep,
    _: AdminUserDep,
    days: int = Query(EXPIRING_SOON_DAYS, ge=1, le=365),
) -> List[ExpiringAgreement]:
    return await TheaterService(session).expiring_agreements(days)


@router.get("/{theater_id}", response_model=TheaterRead, summary="Get Theater")
async def get_theater(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> TheaterRead:
    return TheaterRead.model_validate(await TheaterService(session).get(theater_id))


@router.put(
    "/{theater_id}",
    response_model=TheaterRead,
    summary="Update Theater",
    description="Partial update; only the fields present in the body change.",
    responses={409: {"description": "New username already taken"}},
)
async def update_theater(
    theater_id: int, data: TheaterUpdate, session: SessionDep, _: TheaterAccessDep
) -> TheaterRead:
    return TheaterRead.model_validate(await TheaterService(session).update(theater_id, data))


@router.patch("/{theater_id}/status", response_model=TheaterRead, summary="Activate or Deactivate Theater")
async def set_theater_status(
    theater_id: int, data: TheaterStatusUpdate, session: SessionDep, _: AdminUserDep
) -> TheaterRead:
    return TheaterRead.model_validate(await TheaterService(session).set_active(theater_id, data.is_active))


@router.put(
    "/{theater_id}/password",
    response_model=MessageResponse,
    summary="Change Theater Password",
    description="Admins reset the password directly; theater users must also send the current password.",
)
async def change_theater_password(
    theater_id: int, data: TheaterPasswordUpdate, session: SessionDep, user: TheaterAccessDep
) -> MessageResponse:
    await TheaterService(session).change_password(theater_id, data, require_current=not user.is_admin)
    return MessageResponse(message="Password updated successfully")


@router.delete("/{theater_id}", response_model=MessageResponse, summary="Delete Theater")
async def delete_theater(theater_id: int, session: SessionDep, _: AdminUserDep) -> MessageResponse:
    """Delete the theater and every role, user, QR code, catalog entry and order it owns."""
    await TheaterService(session).delete(theater_id)
    return MessageResponse(message="Theater deleted successfully")


@router.get("/{theater_id}/agreement-status", response_model=AgreementStatus, summary="Agreement Status")
async def agreement_status(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> AgreementStatus:
    return await TheaterService(session).agreement_status(theater_id)
