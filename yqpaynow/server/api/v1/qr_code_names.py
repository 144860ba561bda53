"""
QR Code Names API Endpoints.

Per-theater labels (for example "YQ S-1") bound to a seat class. Generated
QR codes must use one of the theater's active names.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from yqpaynow.core.database.entities import QRCodeName
from yqpaynow.core.database.repositories import QRCodeNameRepository, normalize_name
from yqpaynow.core.errors import ConflictError
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.core.models.io.qr_code_names import QRCodeNameCreate, QRCodeNameRead, QRCodeNameUpdate
from yqpaynow.server.services.deps import (
    CurrentUserDep,
    SessionDep,
    TheaterAccessDep,
    check_theater_access,
)

router = APIRouter(tags=["qrcodenames"])


async def _ensure_name_free(repo: QRCodeNameRepository, theater_id: int, qr_name: str) -> None:
    if await repo.get_by_normalized_name(theater_id, qr_name):
        raise ConflictError(f"QR name '{qr_name}' already exists in this theater", code="QR_NAME_EXISTS")


async def _accessible_name(name_id: int, session, user) -> QRCodeName:
    name = await QRCodeNameRepository(session).get_by_id(name_id)
    if name is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"QR code name {name_id} not found")
    await check_theater_access(session, user, name.theater_id)
    return name


@router.get("/", response_model=List[QRCodeNameRead], summary="List QR Code Names")
async def list_qr_code_names(
    theater_id: int, session: SessionDep, _: TheaterAccessDep, is_active: Optional[bool] = None
) -> List[QRCodeNameRead]:
    """Names of a theater ordered by ``sort_order`` then name."""
    rows = await QRCodeNameRepository(session).list_for_theater(theater_id, filters={"is_active": is_active})
    return [QRCodeNameRead.model_validate(row) for row in rows]


@router.post(
    "/",
    response_model=QRCodeNameRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create QR Code Name",
    responses={409: {"description": "Name already exists in the theater (case-insensitive)"}},
)
async def create_qr_code_name(data: QRCodeNameCreate, session: SessionDep, user: CurrentUserDep) -> QRCodeNameRead:
    await check_theater_access(session, user, data.theater_id)
    repo = QRCodeNameRepository(session)
    await _ensure_name_free(repo, data.theater_id, data.qr_name)
    name = QRCodeName(
        **data.model_dump(exclude={"qr_name"}),
        qr_name=data.qr_name.strip(),
        normalized_name=normalize_name(data.qr_name),
    )
    return QRCodeNameRead.model_validate(await repo.create(name))


@router.put("/{name_id}", response_model=QRCodeNameRead, summary="Update QR Code Name")
async def update_qr_code_name(
    name_id: int, data: QRCodeNameUpdate, session: SessionDep, user: CurrentUserDep
) -> QRCodeNameRead:
    repo = QRCodeNameRepository(session)
    name = await _accessible_name(name_id, session, user)
    changes = data.model_dump(exclude_unset=True)
    if changes.get("qr_name") and normalize_name(changes["qr_name"]) != name.normalized_name:
        await _ensure_name_free(repo, name.theater_id, changes["qr_name"])
        changes["qr_name"] = changes["qr_name"].strip()
        name.normalized_name = normalize_name(changes["qr_name"])
    for key, value in changes.items():
        if value is not None:
            setattr(name, key, value)
    return QRCodeNameRead.model_validate(await repo.update(name))


@router.delete("/{name_id}", response_model=MessageResponse, summary="Delete QR Code Name")
async def delete_qr_code_name(name_id: int, session: SessionDep, user: CurrentUserDep) -> MessageResponse:
    name = await _accessible_name(name_id, session, user)
    await QRCodeNameRepository(session).delete(name.id)
    return MessageResponse(message="QR code name deleted successfully")
