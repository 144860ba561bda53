"""
Single QR Codes API Endpoints.

Generation and management of single (counter, table or zone) and screen
(per-seat) QR codes. Scanning and verification are public since customers
hit them from the menu page.
"""

from typing import List, Optional

from fastapi import APIRouter, Response, status

from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.core.models.io.qr_codes import (
    QRCodeCreate,
    QRCodeGroup,
    QRCodeRead,
    QRCodeUpdate,
    QRSeatsAdd,
    QRSeatUpdate,
    QRStatsSummary,
    QRVerifyResponse,
    ScanRequest,
    ScanResponse,
)
from yqpaynow.server.services.deps import (
    CurrentUserDep,
    QRGeneratorDep,
    SessionDep,
    TheaterAccessDep,
    check_theater_access,
)
from yqpaynow.server.services.qr_codes import QRCodeService

router = APIRouter(tags=["single-qrcodes"])


@router.get("/stats/summary", response_model=QRStatsSummary, summary="QR Code Statistics")
async def qr_stats(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> QRStatsSummary:
    return await QRCodeService(session).stats(theater_id)


@router.get(
    "/verify-qr/{qr_name}",
    response_model=QRVerifyResponse,
    summary="Verify QR Name",
    description="Public check used by the menu page that a scanned QR name is active in the theater.",
)
async def verify_qr(qr_name: str, theater_id: int, session: SessionDep) -> QRVerifyResponse:
    return await QRCodeService(session).verify(theater_id, qr_name)


@router.get("/theater/{theater_id}", response_model=List[QRCodeGroup], summary="QR Codes Grouped by Name")
async def qr_codes_by_name(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> List[QRCodeGroup]:
    return await QRCodeService(session).grouped(theater_id)


@router.post(
    "/",
    response_model=QRCodeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Generate QR Code",
    description=(
        "Generate a single QR code or a screen QR code with one image per seat. Seats come from `seats` "
        "or from the `seat_start`..`seat_end` range (at most 100)."
    ),
    responses={
        400: {"description": "Unknown QR name, bad seat labels or too many seats"},
        409: {"description": "A single QR code with this name already exists"},
    },
)
async def create_qr_code(
    data: QRCodeCreate, session: SessionDep, user: CurrentUserDep, generator: QRGeneratorDep
) -> QRCodeRead:
    await check_theater_access(session, user, data.theater_id)
    return await QRCodeService(session, generator).create(data, generated_by=user.username)


@router.get("/", response_model=List[QRCodeRead], summary="List QR Codes")
async def list_qr_codes(
    session: SessionDep, user: CurrentUserDep, theater_id: Optional[int] = None
) -> List[QRCodeRead]:
    """Codes with their seats; theater users only ever see their own theater."""
    if theater_id is None and not user.is_admin:
        theater_id = user.theater_id
    if theater_id is not None:
        await check_theater_access(session, user, theater_id)
    return await QRCodeService(session).list(theater_id)


async def _accessible_code(code_id: int, session, user, generator=None) -> QRCodeService:
    service = QRCodeService(session, generator)
    code = await service.get(code_id)
    await check_theater_access(session, user, code.theater_id)
    return service


@router.get("/{code_id}", response_model=QRCodeRead, summary="Get QR Code")
async def get_qr_code(code_id: int, session: SessionDep, user: CurrentUserDep) -> QRCodeRead:
    service = await _accessible_code(code_id, session, user)
    return await service.read(code_id)


@router.put(
    "/{code_id}",
    response_model=QRCodeRead,
    summary="Update QR Code",
    description="Changing the name, orientation or logo re-renders every image of the code.",
)
async def update_qr_code(
    code_id: int, data: QRCodeUpdate, session: SessionDep, user: CurrentUserDep, generator: QRGeneratorDep
) -> QRCodeRead:
    service = await _accessible_code(code_id, session, user, generator)
    return await service.update(code_id, data)


@router.delete("/{code_id}", response_model=MessageResponse, summary="Delete QR Code")
async def delete_qr_code(
    code_id: int, session: SessionDep, user: CurrentUserDep, generator: QRGeneratorDep
) -> MessageResponse:
    service = await _accessible_code(code_id, session, user, generator)
    await service.delete(code_id)
    return MessageResponse(message="QR code deleted successfully")


@router.post(
    "/{code_id}/seats",
    response_model=QRCodeRead,
    summary="Add Seats",
    responses={409: {"description": "One of the seats already exists on this code"}},
)
async def add_seats(
    code_id: int, data: QRSeatsAdd, session: SessionDep, user: CurrentUserDep, generator: QRGeneratorDep
) -> QRCodeRead:
    service = await _accessible_code(code_id, session, user, generator)
    return await service.add_seats(code_id, data)


@router.put("/{code_id}/seats/{seat_id}", response_model=QRCodeRead, summary="Update Seat")
async def update_seat(
    code_id: int,
    seat_id: int,
    data: QRSeatUpdate,
    session: SessionDep,
    user: CurrentUserDep,
    generator: QRGeneratorDep,
) -> QRCodeRead:
    service = await _accessible_code(code_id, session, user, generator)
    return await service.update_seat(code_id, seat_id, data)


@router.delete("/{code_id}/seats/{seat_id}", response_model=QRCodeRead, summary="Delete Seat")
async def delete_seat(
    code_id: int, seat_id: int, session: SessionDep, user: CurrentUserDep, generator: QRGeneratorDep
) -> QRCodeRead:
    service = await _accessible_code(code_id, session, user, generator)
    return await service.delete_seat(code_id, seat_id)


@router.post("/{code_id}/scan", response_model=ScanResponse, summary="Record Scan")
async def scan_qr_code(code_id: int, session: SessionDep, data: Optional[ScanRequest] = None) -> ScanResponse:
    """Count a customer scan; with ``seat`` the seat's own counter moves too."""
    return await QRCodeService(session).scan(code_id, data.seat if data else None)


@router.get(
    "/{code_id}/download",
    summary="Download QR Image",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def download_qr_code(
    code_id: int, session: SessionDep, user: CurrentUserDep, generator: QRGeneratorDep
) -> Response:
    service = await _accessible_code(code_id, session, user, generator)
    filename, png = await service.download(code_id)
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
