"""
Generated QR codes.

A *single* code is one image for a counter, table or zone. A *screen* code
is a container for one image per seat. Both are bound to one of the
theater's active QR names, and every payload change (name, orientation,
logo, seat label) re-renders the affected images.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import QRCode, QRSeat
from yqpaynow.core.database.repositories import (
    QRCodeNameRepository,
    QRCodeRepository,
    QRSeatRepository,
    TheaterRepository,
)
from yqpaynow.core.errors import ConflictError, NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import QRType
from yqpaynow.core.models.io.qr_codes import (
    QRCodeCreate,
    QRCodeGroup,
    QRCodeRead,
    QRCodeUpdate,
    QRSeatRead,
    QRSeatUpdate,
    QRStatsSummary,
    QRVerifyResponse,
    ScanResponse,
    SeatSelection,
)
from yqpaynow.core.monitoring import log_qr_generation
from yqpaynow.qr import QRCodeGenerator
from yqpaynow.seating import MAX_SEATS_PER_BATCH, expand_seat_range, parse_seat, sort_seats

logger = get_logger(__name__)

REGENERATING_FIELDS = frozenset({"qr_name", "orientation", "logo_url", "logo_type"})


def resolve_seats(selection: SeatSelection) -> List[str]:
    """
    Seat labels of a request, normalized, de-duplicated and sorted.

    Raises:
        ValidationFailedError: A label is malformed, nothing was selected or
            more than ``MAX_SEATS_PER_BATCH`` seats were requested
    """
    if selection.seats:
        try:
            seats = sort_seats(selection.seats)
        except ValueError as e:
            raise ValidationFailedError(str(e), code="INVALID_SEAT") from e
    elif selection.seat_start and selection.seat_end:
        seats = expand_seat_range(selection.seat_start, selection.seat_end)
    else:
        seats = []

    if not seats:
        raise ValidationFailedError("No seats selected", code="NO_SEATS")
    if len(seats) > MAX_SEATS_PER_BATCH:
        raise ValidationFailedError(
            f"At most {MAX_SEATS_PER_BATCH} seats can be generated at once",
            code="TOO_MANY_SEATS",
            details={"requested": len(seats), "max": MAX_SEATS_PER_BATCH},
        )
    return seats


def to_read(code: QRCode, seats: Iterable[QRSeat] = ()) -> QRCodeRead:
    return QRCodeRead.model_validate(
        {**code.model_dump(), "seats": [QRSeatRead.model_validate(seat) for seat in seats]}
    )


class QRCodeService:
    def __init__(self, session: AsyncSession, generator: Optional[QRCodeGenerator] = None):
        self.session = session
        self.generator = generator
        self.codes = QRCodeRepository(session)
        self.seats = QRSeatRepository(session)
        self.names = QRCodeNameRepository(session)
        self.theaters = TheaterRepository(session)

    def _require_generator(self) -> QRCodeGenerator:
        if self.generator is None:
            raise RuntimeError("QRCodeService needs a generator for this operation")
        return self.generator

    async def _discard_images(self, urls: Iterable[Optional[str]]) -> None:
        if self.generator is None:
            return
        storage = self.generator.storage
        for url in urls:
            if url and await asyncio.to_thread(storage.delete, url):
                logger.debug(f"Removed QR image {url}")

    async def _require_active_name(self, theater_id: int, qr_name: str):
        name = await self.names.get_by_normalized_name(theater_id, qr_name)
        if name is None or not name.is_active:
            raise ValidationFailedError(
                f"QR name '{qr_name}' is not an active QR name of this theater", code="QR_NAME_NOT_FOUND"
            )
        return name

    async def _ensure_single_name_free(self, theater_id: int, qr_name: str, exclude_id: Optional[int] = None) -> None:
        clashes = await self.codes.find_by_name(theater_id, qr_name, QRType.SINGLE.value)
        if any(code.id != exclude_id for code in clashes):
            raise ConflictError(f"A single QR code named '{qr_name}' already exists", code="QR_CODE_EXISTS")

    async def get(self, code_id: int) -> QRCode:
        code = await self.codes.get_by_id(code_id)
        if code is None:
            raise NotFoundError(f"QR code {code_id} not found", code="QR_CODE_NOT_FOUND")
        return code

    async def read(self, code_id: int) -> QRCodeRead:
        code = await self.get(code_id)
        return to_read(code, await self.seats.list_for_code(code.id))

    async def _seat_rows(self, code: QRCode, labels: Sequence[str]) -> List[QRSeat]:
        generated = await asyncio.to_thread(
            self._require_generator().generate_screen,
            code.theater_id,
            code.qr_name,
            labels,
            orientation=code.orientation,
            logo_url=code.logo_url,
        )
        return [
            QRSeat(
                qr_code_id=code.id,
                seat=item.seat,
                qr_code_url=item.url,
                qr_code_data=item.data,
                logo_url=code.logo_url,
                logo_type=code.logo_type,
                orientation=code.orientation,
            )
            for item in generated
        ]

    async def _add_seat_rows(self, rows: List[QRSeat]) -> List[QRSeat]:
        """Insert rendered seats; their images are removed again when the insert fails."""
        urls = [row.qr_code_url for row in rows]
        try:
            return await self.seats.add_all(rows)
        except Exception:
            await self.session.rollback()
            await self._discard_images(urls)
            raise

    async def create(self, data: QRCodeCreate, generated_by: Optional[str] = None) -> QRCodeRead:
        """Validate the request, render the images and store the code with its seats."""
        generator = self._require_generator()
        theater = await self.theaters.get_by_id(data.theater_id)
        if theater is None:
            raise NotFoundError(f"Theater {data.theater_id} not found", code="THEATER_NOT_FOUND")
        await self._require_active_name(data.theater_id, data.qr_name)

        qr_type = QRType(data.qr_type)
        labels: List[str] = []
        if qr_type is QRType.SCREEN:
            labels = resolve_seats(data)
        else:
            await self._ensure_single_name_free(data.theater_id, data.qr_name)

        code = QRCode(
            theater_id=data.theater_id,
            qr_type=qr_type.value,
            qr_name=data.qr_name.strip(),
            seat_class=data.seat_class,
            logo_url=data.logo_url,
            logo_type=data.logo_type.value,
            orientation=data.orientation.value,
            generated_by=generated_by,
        )
        if qr_type is QRType.SINGLE:
            single = await asyncio.to_thread(
                generator.generate_single,
                code.theater_id,
                code.qr_name,
                orientation=code.orientation,
                logo_url=code.logo_url,
            )
            code.qr_code_url, code.qr_code_data = single.url, single.data
            try:
                code = await self.codes.create(code)
            except Exception:
                await self.session.rollback()
                await self._discard_images([single.url])
                raise
        else:
            code = await self.codes.create(code)

        seats: List[QRSeat] = []
        if labels:
            code_id = code.id
            try:
                seats = await self._add_seat_rows(await self._seat_rows(code, labels))
            except Exception:
                await self.codes.delete(code_id)
                raise

        log_qr_generation(code.theater_id, code.qr_name, code.qr_type, len(seats) or 1)
        return to_read(code, seats)

    async def list(self, theater_id: Optional[int] = None) -> List[QRCodeRead]:
        codes = await (self.codes.list_for_theater(theater_id) if theater_id is not None else self.codes.list())
        seats = await self.seats.list_for_codes([code.id for code in codes])
        return [to_read(code, seats[code.id]) for code in codes]

    async def grouped(self, theater_id: int) -> List[QRCodeGroup]:
        """Codes of a theater grouped by QR name, in name order."""
        groups: "OrderedDict[str, List[QRCodeRead]]" = OrderedDict()
        for read in await self.list(theater_id):
            groups.setdefault(read.qr_name, []).append(read)
        return [
            QRCodeGroup(
                qr_name=name,
                seat_class=codes[0].seat_class,
                qr_type=codes[0].qr_type,
                total_seats=sum(len(code.seats) for code in codes),
                codes=codes,
            )
            for name, codes in groups.items()
        ]

    async def _regenerate(self, code: QRCode, seats: Sequence[QRSeat]) -> None:
        generator = self._require_generator()
        logo = await asyncio.to_thread(generator.load_logo, code.logo_url)
        if code.qr_type == QRType.SINGLE.value:
            await self._discard_images([code.qr_code_url])
            single = await asyncio.to_thread(
                generator.generate_single, code.theater_id, code.qr_name, orientation=code.orientation, logo=logo
            )
            code.qr_code_url, code.qr_code_data = single.url, single.data
            return
        for seat in seats:
            await self._discard_images([seat.qr_code_url])
            item = await asyncio.to_thread(
                generator.generate,
                code.theater_id,
                code.qr_name,
                QRType.SCREEN,
                seat=seat.seat,
                orientation=code.orientation,
                logo=logo,
            )
            seat.qr_code_url, seat.qr_code_data = item.url, item.data
            seat.orientation, seat.logo_url, seat.logo_type = code.orientation, code.logo_url, code.logo_type
            await self.seats.update(seat)

    async def update(self, code_id: int, data: QRCodeUpdate) -> QRCodeRead:
        code = await self.get(code_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if "qr_name" in changes and changes["qr_name"].strip().lower() != code.qr_name.lower():
            await self._require_active_name(code.theater_id, changes["qr_name"])
            if code.qr_type == QRType.SINGLE.value:
                await self._ensure_single_name_free(code.theater_id, changes["qr_name"], exclude_id=code.id)

        regenerate = any(
            key in REGENERATING_FIELDS and getattr(code, key) != getattr(value, "value", value)
            for key, value in changes.items()
        )
        for key, value in changes.items():
            setattr(code, key, value.strip() if key == "qr_name" else getattr(value, "value", value))

        seats = await self.seats.list_for_code(code.id)
        if regenerate:
            await self._regenerate(code, seats)
        code = await self.codes.update(code)
        return to_read(code, await self.seats.list_for_code(code.id))

    async def _get_screen(self, code_id: int) -> QRCode:
        code = await self.get(code_id)
        if code.qr_type != QRType.SCREEN.value:
            raise ValidationFailedError("Seats can only be managed on screen QR codes", code="NOT_SCREEN_QR")
        return code

    async def add_seats(self, code_id: int, selection: SeatSelection) -> QRCodeRead:
        code = await self._get_screen(code_id)
        labels = resolve_seats(selection)
        existing = {seat.seat for seat in await self.seats.list_for_code(code.id)}
        duplicates = [label for label in labels if label in existing]
        if duplicates:
            raise ConflictError("Some seats already have QR codes", code="SEAT_EXISTS", details={"seats": duplicates})
        await self._add_seat_rows(await self._seat_rows(code, labels))
        log_qr_generation(code.theater_id, code.qr_name, code.qr_type, len(labels))
        return await self.read(code.id)

    async def _get_seat(self, code: QRCode, seat_id: int) -> QRSeat:
        seat = await self.seats.get_for_code(code.id, seat_id)
        if seat is None:
            raise NotFoundError(f"Seat {seat_id} not found on QR code {code.id}", code="SEAT_NOT_FOUND")
        return seat

    async def update_seat(self, code_id: int, seat_id: int, data: QRSeatUpdate) -> QRCodeRead:
        code = await self._get_screen(code_id)
        seat = await self._get_seat(code, seat_id)
        if data.seat is not None:
            try:
                label = parse_seat(data.seat).label
            except ValueError as e:
                raise ValidationFailedError(str(e), code="INVALID_SEAT") from e
            if label != seat.seat:
                if await self.seats.get_by_label(code.id, label):
                    raise ConflictError(f"Seat {label} already has a QR code", code="SEAT_EXISTS")
                seat.seat = label
                await self._regenerate(code, [seat])
        if data.is_active is not None:
            seat.is_active = data.is_active
        await self.seats.update(seat)
        return await self.read(code.id)

    async def delete_seat(self, code_id: int, seat_id: int) -> QRCodeRead:
        code = await self._get_screen(code_id)
        seat = await self._get_seat(code, seat_id)
        await self._discard_images([seat.qr_code_url])
        await self.seats.delete(seat.id)
        return await self.read(code.id)

    async def delete(self, code_id: int) -> None:
        code = await self.get(code_id)
        seats = await self.seats.list_for_code(code.id)
        await self.seats.delete_where(qr_code_id=code.id)
        await self._discard_images([seat.qr_code_url for seat in seats] + [code.qr_code_url])
        await self.codes.delete(code.id)
        logger.info(f"Deleted {code.qr_type} QR code {code.qr_name!r} of theater {code.theater_id}")

    async def scan(self, code_id: int, seat_label: Optional[str] = None) -> ScanResponse:
        """Count a scan on the code, or on one of its seats when a seat is given."""
        code = await self.get(code_id)
        if not code.is_active:
            raise ValidationFailedError("QR code is inactive", code="QR_CODE_INACTIVE")
        now = utc_now()
        if seat_label:
            try:
                label = parse_seat(seat_label).label
            except ValueError as e:
                raise ValidationFailedError(str(e), code="INVALID_SEAT") from e
            seat = await self.seats.get_by_label(code.id, label)
            if seat is None:
                raise NotFoundError(f"Seat {label} not found on QR code {code.id}", code="SEAT_NOT_FOUND")
            seat.scan_count += 1
            seat.last_scanned_at = now
            seat = await self.seats.update(seat)
            return ScanResponse(qr_code_id=code.id, seat=seat.seat, scan_count=seat.scan_count, last_scanned_at=now)

        code.scan_count += 1
        code.last_scanned_at = now
        code = await self.codes.update(code)
        return ScanResponse(qr_code_id=code.id, scan_count=code.scan_count, last_scanned_at=now)

    async def stats(self, theater_id: Optional[int] = None) -> QRStatsSummary:
        codes = await (self.codes.list_for_theater(theater_id) if theater_id is not None else self.codes.list())
        seats: Dict[int, List[QRSeat]] = await self.seats.list_for_codes([code.id for code in codes])
        all_seats = [seat for group in seats.values() for seat in group]
        return QRStatsSummary(
            total_codes=len(codes),
            single_codes=sum(1 for code in codes if code.qr_type == QRType.SINGLE.value),
            screen_codes=sum(1 for code in codes if code.qr_type == QRType.SCREEN.value),
            total_seats=len(all_seats),
            active_codes=sum(1 for code in codes if code.is_active),
            total_scans=sum(code.scan_count for code in codes) + sum(seat.scan_count for seat in all_seats),
        )

    async def verify(self, theater_id: int, qr_name: str) -> QRVerifyResponse:
        """Whether an active code with this name exists in the theater."""
        for code in await self.codes.find_by_name(theater_id, qr_name):
            if code.is_active:
                return QRVerifyResponse(
                    is_valid=True,
                    qr_name=code.qr_name,
                    qr_type=code.qr_type,
                    seat_class=code.seat_class,
                    theater_id=theater_id,
                )
        return QRVerifyResponse(is_valid=False, qr_name=qr_name, theater_id=theater_id)

    async def download(self, code_id: int) -> Tuple[str, bytes]:
        """Filename and PNG of a single code, or of the first seat of a screen code."""
        generator = self._require_generator()
        code = await self.get(code_id)
        seat: Optional[str] = None
        if code.qr_type == QRType.SCREEN.value:
            seats = await self.seats.list_for_code(code.id)
            if not seats:
                raise NotFoundError("Screen QR code has no seats", code="SEAT_NOT_FOUND")
            seat = seats[0].seat
        logo = await asyncio.to_thread(generator.load_logo, code.logo_url)
        _, png = await asyncio.to_thread(
            generator.render,
            code.theater_id,
            code.qr_name,
            code.qr_type,
            seat=seat,
            orientation=code.orientation,
            logo=logo,
        )
        stem = f"{code.qr_name}-{seat}" if seat else code.qr_name
        return f"{stem.replace(' ', '_')}.png", png
